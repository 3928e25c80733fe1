"""Streaming chat-completion client with multi-provider support.

All three providers (OpenAI, Ollama, vLLM) expose an OpenAI-compatible
``/v1/chat/completions`` endpoint, so one ``AsyncOpenAI`` client covers them.
Only the base URL, model name and API key differ.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass

import httpx
from openai import (
    APIConnectionError,
    APIError,
    APIStatusError,
    APITimeoutError,
    AsyncOpenAI,
)

from language_ai.config import Settings, settings

logger = logging.getLogger(__name__)

# The SDK always sends a bearer token; keyless servers ignore it.
_KEYLESS_API_KEY = "none"


class LLMProvider(str, enum.Enum):
    openai = "openai"
    ollama = "ollama"
    vllm = "vllm"


@dataclass(frozen=True)
class LLMProviderConfig:
    provider: LLMProvider
    base_url: str
    model: str
    api_key: str = ""

    @property
    def requires_api_key(self) -> bool:
        return self.provider == LLMProvider.openai


class CompletionError(Exception):
    """Raised when the provider fails during a completion request."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class CompletionUnavailableError(CompletionError):
    """Raised when no provider is configured well enough to be called."""


def get_provider_config(config: Settings = settings) -> LLMProviderConfig:
    """Build the provider config from application settings."""
    provider = LLMProvider(config.llm_provider)

    if provider == LLMProvider.ollama:
        return LLMProviderConfig(
            provider=provider,
            base_url=config.ollama_base_url,
            model=config.ollama_model,
        )
    if provider == LLMProvider.vllm:
        return LLMProviderConfig(
            provider=provider,
            base_url=config.vllm_base_url,
            model=config.vllm_model,
            api_key=config.vllm_api_key,
        )
    return LLMProviderConfig(
        provider=provider,
        base_url=config.openai_base_url,
        model=config.openai_model,
        api_key=config.openai_api_key,
    )


def _chunk_content(chunk: object) -> str | None:
    """Return the text delta of one streamed chunk, if any.

    Raises CompletionError when the chunk is not a chat-completion chunk.
    """
    choices = getattr(chunk, "choices", None)
    if not isinstance(choices, list):
        raise CompletionError("Provider sent a malformed stream chunk")
    if not choices:
        return None
    delta = getattr(choices[0], "delta", None)
    if delta is None:
        raise CompletionError("Provider sent a stream chunk without a delta")
    content = getattr(delta, "content", None)
    return content if isinstance(content, str) and content else None


class LLMClient:
    """Sends the system prompt plus full history and yields reply chunks."""

    def __init__(
        self,
        config: LLMProviderConfig | None = None,
        timeout: httpx.Timeout | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or get_provider_config()
        self.transport = transport
        self.timeout = timeout or httpx.Timeout(
            settings.llm_read_timeout_seconds,
            connect=settings.llm_connect_timeout_seconds,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.config.api_key) or not self.config.requires_api_key

    def _openai_client(self, http_client: httpx.AsyncClient) -> AsyncOpenAI:
        return AsyncOpenAI(
            base_url=self.config.base_url,
            api_key=self.config.api_key or _KEYLESS_API_KEY,
            timeout=self.timeout,
            max_retries=0,
            http_client=http_client,
        )

    def build_messages(self, system_prompt: str, messages: list[dict]) -> list[dict]:
        return [{"role": "system", "content": system_prompt}, *messages]

    async def stream_completion(
        self,
        system_prompt: str,
        messages: list[dict],
    ) -> AsyncIterator[str]:
        """Yield text chunks of the reply as they arrive.

        Raises CompletionUnavailableError before any network call when the
        provider needs an API key and none is set. Every other failure,
        including an error event inside a successful stream and a chunk of
        the wrong shape, surfaces as CompletionError. Nothing is retried.
        """
        if not self.is_configured:
            raise CompletionUnavailableError(
                f"No API key configured for provider '{self.config.provider.value}'"
            )

        logger.debug(
            "Completion request: provider=%s, model=%s, messages=%d",
            self.config.provider.value, self.config.model, len(messages),
        )

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as http_client:
                client = self._openai_client(http_client)
                stream = await client.chat.completions.create(
                    model=self.config.model,
                    messages=self.build_messages(system_prompt, messages),
                    stream=True,
                )
                async for chunk in stream:
                    content = _chunk_content(chunk)
                    if content:
                        yield content
        except APIStatusError as exc:
            logger.error("Completion request failed with HTTP %d", exc.status_code)
            raise CompletionError(
                f"Provider returned HTTP {exc.status_code}",
                status_code=exc.status_code,
            ) from exc
        except APITimeoutError as exc:
            logger.error("Completion request timed out: %s", exc)
            raise CompletionError("Provider timed out") from exc
        except APIConnectionError as exc:
            logger.error("Completion transport error: %s", exc)
            raise CompletionError(f"Provider unreachable: {exc}") from exc
        except APIError as exc:
            logger.error("Provider reported an error mid-stream: %s", exc.message)
            raise CompletionError(f"Provider error: {exc.message}") from exc
        except httpx.HTTPError as exc:
            logger.error("Completion stream broke off: %s", exc)
            raise CompletionError(f"Provider stream failed: {exc}") from exc
        except ValueError as exc:
            logger.error("Provider sent an undecodable stream event: %s", exc)
            raise CompletionError("Provider sent an undecodable stream event") from exc

    async def complete(self, system_prompt: str, messages: list[dict]) -> str:
        """Collect the whole streamed reply into one string."""
        parts = [chunk async for chunk in self.stream_completion(system_prompt, messages)]
        return "".join(parts)
