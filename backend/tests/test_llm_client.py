"""Tests for the streaming completion client."""

import json

import httpx
import pytest

from language_ai.config import Settings
from language_ai.services.llm_client import (
    CompletionError,
    CompletionUnavailableError,
    LLMClient,
    LLMProvider,
    LLMProviderConfig,
    get_provider_config,
)

OPENAI = LLMProviderConfig(
    provider=LLMProvider.openai,
    base_url="https://llm.test/v1/",
    model="gpt-4o",
    api_key="sk-test",
)

SSE_HEADERS = {"content-type": "text/event-stream"}


def _chunk(content: str) -> str:
    return "data: " + json.dumps({
        "id": "chatcmpl-1",
        "object": "chat.completion.chunk",
        "created": 0,
        "model": "gpt-4o",
        "choices": [{"index": 0, "delta": {"content": content}, "finish_reason": None}],
    })


def _sse(*events: str) -> str:
    return "\n\n".join([*events, "data: [DONE]"]) + "\n\n"


def _stream_response(*events: str) -> httpx.Response:
    return httpx.Response(200, headers=SSE_HEADERS, text=_sse(*events))


def _client(handler, config: LLMProviderConfig = OPENAI) -> LLMClient:
    return LLMClient(config=config, transport=httpx.MockTransport(handler))


# ---------------------------------------------------------------------------
# Provider config
# ---------------------------------------------------------------------------


class TestProviderConfig:
    def test_openai_default(self):
        config = get_provider_config(Settings(llm_provider="openai", openai_api_key="k"))
        assert config.provider == LLMProvider.openai
        assert config.model == "gpt-4o"
        assert config.requires_api_key

    def test_ollama_needs_no_key(self):
        config = get_provider_config(Settings(llm_provider="ollama"))
        assert config.provider == LLMProvider.ollama
        assert not config.requires_api_key
        assert LLMClient(config=config).is_configured

    def test_invalid_provider_rejected(self):
        with pytest.raises(ValueError):
            Settings(llm_provider="nope")


# ---------------------------------------------------------------------------
# Streaming
# ---------------------------------------------------------------------------


class TestStreamCompletion:
    @pytest.mark.asyncio
    async def test_yields_chunks_in_order(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return _stream_response(_chunk("Très "), _chunk("bien"), _chunk(" !"))

        client = _client(handler)
        chunks = [c async for c in client.stream_completion("sys", [])]
        assert chunks == ["Très ", "bien", " !"]

    @pytest.mark.asyncio
    async def test_request_shape(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return _stream_response(_chunk("ok"))

        history = [{"role": "user", "content": "Je manges du pain"}]
        await _client(handler).complete("SYSTEM", history)

        (request,) = seen
        assert str(request.url) == "https://llm.test/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer sk-test"
        body = json.loads(request.content)
        assert body["model"] == "gpt-4o"
        assert body["stream"] is True
        assert body["messages"] == [
            {"role": "system", "content": "SYSTEM"},
            {"role": "user", "content": "Je manges du pain"},
        ]

    @pytest.mark.asyncio
    async def test_role_only_and_empty_choice_chunks_skipped(self):
        role_only = "data: " + json.dumps({"choices": [{"index": 0, "delta": {"role": "assistant"}}]})
        usage_only = "data: " + json.dumps({"choices": [], "usage": {"total_tokens": 3}})

        def handler(request: httpx.Request) -> httpx.Response:
            return _stream_response(role_only, _chunk("Salut"), usage_only)

        assert await _client(handler).complete("sys", []) == "Salut"

    @pytest.mark.asyncio
    async def test_stops_at_done(self):
        def handler(request: httpx.Request) -> httpx.Response:
            body = _sse(_chunk("a")) + _chunk("late") + "\n\n"
            return httpx.Response(200, headers=SSE_HEADERS, text=body)

        assert await _client(handler).complete("sys", []) == "a"

    @pytest.mark.asyncio
    async def test_complete_concatenates(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return _stream_response(_chunk("[CORRECTION]a|"), _chunk("b|c[/CORRECTION]"))

        assert await _client(handler).complete("sys", []) == "[CORRECTION]a|b|c[/CORRECTION]"

    @pytest.mark.asyncio
    async def test_keyless_provider_is_called(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return _stream_response(_chunk("hi"))

        config = LLMProviderConfig(
            provider=LLMProvider.ollama, base_url="http://localhost:11434/v1", model="llama3.2"
        )
        assert await _client(handler, config).complete("sys", []) == "hi"
        assert str(seen[0].url) == "http://localhost:11434/v1/chat/completions"


class TestStreamErrors:
    @pytest.mark.asyncio
    async def test_missing_key_fails_before_network(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return _stream_response(_chunk("x"))

        config = LLMProviderConfig(
            provider=LLMProvider.openai, base_url="https://llm.test/v1", model="gpt-4o"
        )
        client = _client(handler, config)
        assert not client.is_configured
        with pytest.raises(CompletionUnavailableError):
            await client.complete("sys", [])
        assert calls == []

    @pytest.mark.asyncio
    async def test_http_error_status_is_not_retried(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(429, json={"error": {"message": "slow down"}})

        with pytest.raises(CompletionError) as exc_info:
            await _client(handler).complete("sys", [])
        assert exc_info.value.status_code == 429
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_error_event_inside_stream(self):
        error_event = "data: " + json.dumps({"error": {"message": "context_length_exceeded"}})

        def handler(request: httpx.Request) -> httpx.Response:
            return _stream_response(_chunk("Très "), error_event)

        with pytest.raises(CompletionError, match="context_length_exceeded"):
            await _client(handler).complete("sys", [])

    @pytest.mark.asyncio
    async def test_partial_chunks_arrive_before_error_event(self):
        error_event = "data: " + json.dumps({"error": {"message": "overloaded"}})

        def handler(request: httpx.Request) -> httpx.Response:
            return _stream_response(_chunk("Très "), error_event)

        received: list[str] = []
        with pytest.raises(CompletionError):
            async for chunk in _client(handler).stream_completion("sys", []):
                received.append(chunk)
        assert received == ["Très "]

    @pytest.mark.parametrize(
        "event",
        [
            "data: 1",
            'data: {"choices": [5]}',
            'data: {"choices": "nope"}',
            "data: {not json",
        ],
    )
    @pytest.mark.asyncio
    async def test_malformed_payload(self, event):
        def handler(request: httpx.Request) -> httpx.Response:
            return _stream_response(event)

        with pytest.raises(CompletionError):
            await _client(handler).complete("sys", [])

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(CompletionError, match="timed out"):
            await _client(handler).complete("sys", [])

    @pytest.mark.asyncio
    async def test_unreachable(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(CompletionError, match="unreachable"):
            await _client(handler).complete("sys", [])
