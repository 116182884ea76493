"""Document upload API endpoints"""

from __future__ import annotations

from fastapi import APIRouter, File, HTTPException, UploadFile

from models.compare import ParseResponse
from services.document_parser import extract_text, resolve_media_type
from services.errors import ExtractionError

router = APIRouter()


@router.post("/parse", response_model=ParseResponse)
async def parse_document(file: UploadFile = File(...)) -> ParseResponse:
    """Extract plain text from an uploaded .txt, .pdf or .docx file"""
    media_type = resolve_media_type(file.content_type, file.filename)
    data = await file.read()

    try:
        text = extract_text(data, media_type)
    except ExtractionError as e:
        print(f"[Documents] Error parsing {file.filename}: {e.message}")
        raise HTTPException(status_code=415 if e.unsupported else 400, detail=e.message)

    return ParseResponse(text=text, file_name=file.filename, media_type=media_type)
