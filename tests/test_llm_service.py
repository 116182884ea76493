from unittest.mock import AsyncMock

import pytest

from models.compare import SummarizeRequest
from services.errors import ProviderNotConfiguredError, SummarizationError
from services.llm_service import IDENTICAL_SUMMARY, LLMService, summarize_changes


def _request(**overrides) -> SummarizeRequest:
    data = {"change_description": "- old\n+ new", "additions": 1, "deletions": 1}
    data.update(overrides)
    return SummarizeRequest(**data)


def _gemini_config(api_key: str = "AIza-test-key") -> dict:
    return {"provider": "gemini", "gemini": {"apiKey": api_key, "model": "gemini-2.0-flash"}}


def test_summary_prompt_includes_diff_and_counts():
    service = LLMService(_gemini_config())

    prompt = service.build_summary_prompt(_request(additions=3, deletions=2))

    assert "- old\n+ new" in prompt
    assert "3 added block(s)" in prompt
    assert "2 removed block(s)" in prompt


@pytest.mark.asyncio
async def test_gemini_summary(monkeypatch):
    service = LLMService(_gemini_config())
    request_json = AsyncMock(
        return_value={"candidates": [{"content": {"parts": [{"text": "- **old** became **new**"}]}}]}
    )
    monkeypatch.setattr(service, "_request_json", request_json)

    summary = await service.summarize_changes(_request())

    assert summary == "- **old** became **new**"
    url, payload = request_json.call_args.args[:2]
    assert url.endswith("gemini-2.0-flash:generateContent?key=AIza-test-key")
    assert "- old\n+ new" in payload["contents"][0]["parts"][0]["text"]


@pytest.mark.asyncio
async def test_openai_summary(monkeypatch):
    service = LLMService({"provider": "openai", "openai": {"apiKey": "sk-test", "model": "gpt-4o-mini"}})
    request_json = AsyncMock(return_value={"choices": [{"message": {"content": "summary"}}]})
    monkeypatch.setattr(service, "_request_json", request_json)

    assert await service.summarize_changes(_request()) == "summary"
    headers = request_json.call_args.args[2]
    assert headers["Authorization"] == "Bearer sk-test"


@pytest.mark.asyncio
async def test_vllm_summary_without_key(monkeypatch):
    service = LLMService({"provider": "vllm", "vllm": {"endpoint": "http://llm:9000", "model": "m"}})
    request_json = AsyncMock(return_value={"choices": [{"text": "plain"}]})
    monkeypatch.setattr(service, "_request_json", request_json)

    assert await service.summarize_changes(_request()) == "plain"
    url, payload, headers = request_json.call_args.args[:3]
    assert url == "http://llm:9000/v1/chat/completions"
    assert "Authorization" not in headers
    assert payload["stream"] is False


@pytest.mark.asyncio
async def test_identical_documents_do_not_call_provider(monkeypatch):
    service = LLMService(_gemini_config(api_key=""))
    request_json = AsyncMock()
    monkeypatch.setattr(service, "_request_json", request_json)

    summary = await service.summarize_changes(_request(additions=0, deletions=0))

    assert summary == IDENTICAL_SUMMARY
    request_json.assert_not_called()


@pytest.mark.asyncio
async def test_missing_gemini_key_raises():
    with pytest.raises(ProviderNotConfiguredError):
        await summarize_changes(_request(), _gemini_config(api_key=""))


@pytest.mark.asyncio
async def test_unsupported_provider_raises():
    with pytest.raises(ProviderNotConfiguredError):
        await summarize_changes(_request(), {"provider": "nope"})


@pytest.mark.asyncio
async def test_api_error_is_not_retried(monkeypatch):
    service = LLMService(_gemini_config())
    request_json = AsyncMock(side_effect=SummarizationError("Gemini API error (400): bad request"))
    monkeypatch.setattr(service, "_request_json", request_json)

    with pytest.raises(SummarizationError, match="400"):
        await service.summarize_changes(_request())

    assert request_json.await_count == 1


@pytest.mark.asyncio
async def test_overloaded_provider_is_retried(monkeypatch):
    service = LLMService(_gemini_config())
    request_json = AsyncMock(
        side_effect=[
            SummarizationError("Gemini API overloaded (503): busy"),
            {"candidates": [{"content": {"parts": [{"text": "ok"}]}}]},
        ]
    )
    monkeypatch.setattr(service, "_request_json", request_json)
    monkeypatch.setattr("services.llm_service.asyncio.sleep", AsyncMock())

    assert await service.summarize_changes(_request()) == "ok"
    assert request_json.await_count == 2


def test_malformed_response_raises():
    service = LLMService(_gemini_config())

    with pytest.raises(SummarizationError):
        service._parse_gemini_response({"candidates": []})
    with pytest.raises(SummarizationError):
        service._parse_openai_response({})
