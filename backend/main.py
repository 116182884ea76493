"""
DocDiff Backend - FastAPI Application Entry Point
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from routers import compare, config, documents, history, summarize
from routers.deps import get_session
from services.config_manager import ConfigManager


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - startup and shutdown logic"""
    print("[Backend] Starting DocDiff Backend...")
    config_manager = ConfigManager.get_instance()
    print(f"[Backend] ConfigManager initialized ({config_manager.config_dir})")

    session = get_session()
    print(f"[Backend] History loaded with {len(session.history_store)} entries")

    yield
    print("[Backend] Shutting down DocDiff Backend...")


app = FastAPI(
    title="DocDiff Backend",
    description="Document comparison with line-level diffs and AI change summaries",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(compare.router, prefix="/api/compare", tags=["compare"])
app.include_router(history.router, prefix="/api/history", tags=["history"])
app.include_router(documents.router, prefix="/api/documents", tags=["documents"])
app.include_router(summarize.router, prefix="/api/summarize", tags=["summarize"])
app.include_router(config.router, prefix="/api/config", tags=["config"])


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "docdiff-backend"}


if __name__ == "__main__":
    import uvicorn

    server = ConfigManager.get_instance().get("server", {})
    uvicorn.run(app, host=server.get("host", "0.0.0.0"), port=server.get("port", 8000))
