"""
LLM Service - Summarize document changes with the configured LLM provider
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import Any

import aiohttp

from models.compare import SummarizeRequest
from services.errors import ProviderNotConfiguredError, SummarizationError

IDENTICAL_SUMMARY = "Documents are identical."

SUMMARY_PROMPT = """You are an expert document analyst. Compare two versions of a document using the line diff below.

Lines starting with "+ " were added, lines starting with "- " were removed and lines
starting with two spaces are unchanged.
The diff contains {additions} added block(s) and {deletions} removed block(s).

DIFF:
\"\"\"
{diff}
\"\"\"

Instructions:
1. If the two versions share almost nothing (most of A removed, most of B added), say
   "These appear to be two completely different documents." and briefly describe each one.
2. Otherwise describe the edits, telling replacements apart from insertions and deletions.
   Do not call unrelated paragraphs a replacement; say a section was removed and another added.
3. Answer with concise bullet points, bold the important terms, no introduction or closing."""


class LLMService:
    """Service for interacting with various LLM providers"""

    def __init__(self, config: dict[str, Any]):
        self.config = config
        self.provider = config.get("provider", "gemini")

    # ========== Config Helpers ==========

    def _get_gemini_config(self) -> tuple[str, str, str]:
        """Get Gemini config: (api_key, model, base_url). Raises if api_key missing."""
        cfg = self.config.get("gemini", {})
        api_key = cfg.get("apiKey")
        if not api_key:
            raise ProviderNotConfiguredError("Gemini API key not configured")
        model = cfg.get("model", "gemini-2.0-flash")
        base_url = f"https://generativelanguage.googleapis.com/v1beta/models/{model}"
        return api_key, model, base_url

    def _get_openai_config(self) -> tuple[str, str, dict[str, str]]:
        """Get OpenAI config: (model, url, headers). Raises if api_key missing."""
        cfg = self.config.get("openai", {})
        api_key = cfg.get("apiKey")
        if not api_key:
            raise ProviderNotConfiguredError("OpenAI API key not configured")
        model = cfg.get("model", "gpt-4o-mini")
        url = "https://api.openai.com/v1/chat/completions"
        headers = {"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"}
        return model, url, headers

    def _get_vllm_config(self) -> tuple[str, str, dict[str, str]]:
        """Get vLLM config: (model, url, headers)."""
        cfg = self.config.get("vllm", {})
        endpoint = cfg.get("endpoint", "http://localhost:8000")
        model = cfg.get("model", "default")
        url = f"{endpoint}/v1/chat/completions"
        headers = {"Content-Type": "application/json"}
        if cfg.get("apiKey"):
            headers["Authorization"] = f"Bearer {cfg['apiKey']}"
        return model, url, headers

    # ========== Prompt/Payload Builders ==========

    def build_summary_prompt(self, request: SummarizeRequest) -> str:
        """Build the change summary prompt"""
        return SUMMARY_PROMPT.format(
            additions=request.additions,
            deletions=request.deletions,
            diff=request.change_description,
        )

    def _build_openai_payload(
        self,
        model: str,
        messages: list,
        max_tokens: int = 2000,
        temperature: float = 0.0,
    ) -> dict[str, Any]:
        """Build OpenAI-compatible request payload"""
        return {
            "model": model,
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "stream": False,
        }

    def _build_gemini_payload(
        self,
        prompt: str,
        max_output_tokens: int = 8192,
        temperature: float | None = None,
    ) -> dict[str, Any]:
        """Build Gemini API request payload"""
        cfg = self.config.get("gemini", {})
        temp = temperature if temperature is not None else cfg.get("temperature", 0.0)

        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": temp,
                "topK": 1,
                "topP": 0.95,
                "maxOutputTokens": max_output_tokens,
            },
        }

    # ========== Transport ==========

    async def _retry_with_backoff(self, operation, max_retries: int = 3, provider: str = "API"):
        """Execute operation with exponential backoff retry logic"""
        for attempt in range(max_retries):
            try:
                return await operation()
            except asyncio.TimeoutError:
                if attempt < max_retries - 1:
                    wait_time = (2**attempt) * 3
                    print(
                        f"[LLMService] {provider} request timeout. Retrying in {wait_time}s... "
                        f"(attempt {attempt + 1}/{max_retries})"
                    )
                    await asyncio.sleep(wait_time)
                    continue
                raise SummarizationError(f"{provider} request timeout after {max_retries} retries")
            except SummarizationError as e:
                error_msg = str(e)
                # Rate limit (429)
                if "rate limit" in error_msg.lower() or "(429)" in error_msg:
                    if attempt < max_retries - 1:
                        wait_time = 40 + (attempt * 20)
                        print(
                            f"[LLMService] Rate limit hit. Waiting {wait_time}s before retry... "
                            f"(attempt {attempt + 1}/{max_retries})"
                        )
                        await asyncio.sleep(wait_time)
                        continue
                    raise SummarizationError(
                        f"Rate limit exceeded after {max_retries} retries. "
                        "Please wait a minute and try again."
                    ) from e
                # Server overloaded (503)
                if "overloaded" in error_msg.lower() or "(503)" in error_msg:
                    if attempt < max_retries - 1:
                        wait_time = (2**attempt) * 5
                        print(
                            f"[LLMService] Server overloaded. Retrying in {wait_time}s... "
                            f"(attempt {attempt + 1}/{max_retries})"
                        )
                        await asyncio.sleep(wait_time)
                        continue
                # Other API errors - fail immediately
                raise
            except aiohttp.ClientError as e:
                # Network errors - retry
                if attempt < max_retries - 1:
                    wait_time = (2**attempt) * 2
                    print(
                        f"[LLMService] Network error: {e}. Retrying in {wait_time}s... "
                        f"(attempt {attempt + 1}/{max_retries})"
                    )
                    await asyncio.sleep(wait_time)
                    continue
                raise SummarizationError(f"{provider} network error: {e}") from e

    @asynccontextmanager
    async def _request(
        self,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str] | None = None,
        timeout_seconds: int = 60,
        provider: str = "API",
    ):
        """Context manager for HTTP POST requests with automatic session cleanup"""
        timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.post(url, json=payload, headers=headers) as response:
                if response.status != 200:
                    error_text = await response.text()
                    print(f"[LLMService] {provider} API Error ({response.status}): {error_text}")
                    if response.status == 503:
                        raise SummarizationError(f"{provider} API overloaded (503): {error_text}")
                    raise SummarizationError(f"{provider} API error ({response.status}): {error_text}")
                yield response

    async def _request_json(
        self,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str] | None = None,
        timeout_seconds: int = 60,
        provider: str = "API",
    ) -> dict[str, Any]:
        """Make request and return JSON response"""
        async with self._request(url, payload, headers, timeout_seconds, provider) as response:
            return await response.json()

    # ========== Response Parsers ==========

    def _parse_openai_response(self, data: dict[str, Any]) -> str:
        """Parse OpenAI-compatible response format"""
        if "choices" in data and len(data["choices"]) > 0:
            choice = data["choices"][0]
            if "message" in choice and "content" in choice["message"]:
                return choice["message"]["content"]
            elif "text" in choice:
                return choice["text"]
        raise SummarizationError("No valid response from API")

    def _parse_gemini_response(self, data: dict[str, Any]) -> str:
        """Parse Gemini API response format"""
        if "candidates" in data and len(data["candidates"]) > 0:
            candidate = data["candidates"][0]
            if "content" in candidate and "parts" in candidate["content"]:
                parts = candidate["content"]["parts"]
                if len(parts) > 0 and "text" in parts[0]:
                    return parts[0]["text"]
        raise SummarizationError("No valid response from Gemini API")

    # ========== Providers ==========

    async def generate_response(self, prompt: str) -> str:
        """Generate a response from the configured LLM provider"""
        if self.provider == "gemini":
            return await self._call_gemini(prompt)
        elif self.provider == "vllm":
            return await self._call_vllm(prompt)
        elif self.provider == "openai":
            return await self._call_openai(prompt)
        else:
            raise ProviderNotConfiguredError(f"Unsupported provider: {self.provider}")

    async def _call_gemini(self, prompt: str, max_retries: int = 3) -> str:
        """Call Google Gemini API with retry logic"""
        api_key, model, base_url = self._get_gemini_config()
        print(f"[LLMService] Calling Gemini API with model: {model}")

        url = f"{base_url}:generateContent?key={api_key}"
        payload = self._build_gemini_payload(prompt)

        async def _execute_request():
            data = await self._request_json(url, payload, provider="Gemini")
            return self._parse_gemini_response(data)

        response_text = await self._retry_with_backoff(_execute_request, max_retries, "Gemini")
        print(f"[LLMService] Received response from {model} (length: {len(response_text)} chars)")
        return response_text

    async def _call_vllm(self, prompt: str) -> str:
        """Call vLLM endpoint with OpenAI Compatible API"""
        model, url, headers = self._get_vllm_config()
        messages = [{"role": "user", "content": prompt}]
        payload = self._build_openai_payload(model, messages)

        data = await self._request_json(url, payload, headers, provider="vLLM")
        return self._parse_openai_response(data)

    async def _call_openai(self, prompt: str) -> str:
        """Call OpenAI API"""
        model, url, headers = self._get_openai_config()
        messages = [
            {"role": "system", "content": "You summarize differences between document versions."},
            {"role": "user", "content": prompt},
        ]
        payload = self._build_openai_payload(model, messages)

        data = await self._request_json(url, payload, headers, provider="OpenAI")
        return self._parse_openai_response(data)

    async def summarize_changes(self, request: SummarizeRequest) -> str:
        """Summarize a change description; identical documents skip the provider"""
        if request.additions == 0 and request.deletions == 0:
            return IDENTICAL_SUMMARY
        return await self.generate_response(self.build_summary_prompt(request))


# ═══════════════════════════════════════════════════════════════════════════
# Module-level helper functions
# ═══════════════════════════════════════════════════════════════════════════


async def summarize_changes(request: SummarizeRequest, config: dict[str, Any]) -> str:
    """Convenience function to summarize changes with the given config."""
    service = LLMService(config)
    return await service.summarize_changes(request)
