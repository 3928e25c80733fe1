"""Shared test fixtures for language.ai backend tests."""

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from language_ai.api.dependencies import get_character_registry, get_llm_client
from language_ai.core.characters import CharacterRegistry
from language_ai.main import app
from language_ai.middleware.rate_limiter import limiter
from language_ai.services.llm_client import (
    LLMClient,
    LLMProvider,
    LLMProviderConfig,
)

TEST_CONFIG = LLMProviderConfig(
    provider=LLMProvider.openai,
    base_url="https://llm.test/v1",
    model="gpt-4o",
    api_key="test-key",
)


class FakeLLMClient(LLMClient):
    """Completion client that replays canned chunks instead of calling out.

    Records every (system_prompt, messages) pair it receives.
    """

    def __init__(
        self,
        chunks: list[str] | None = None,
        error: Exception | None = None,
        fail_after: int = 0,
        config: LLMProviderConfig = TEST_CONFIG,
    ) -> None:
        super().__init__(config=config)
        self.chunks = chunks or []
        self.error = error
        self.fail_after = fail_after
        self.calls: list[tuple[str, list[dict]]] = []

    async def stream_completion(self, system_prompt: str, messages: list[dict]) -> AsyncIterator[str]:
        self.calls.append((system_prompt, messages))
        for index, chunk in enumerate(self.chunks):
            if self.error is not None and index >= self.fail_after:
                break
            yield chunk
        if self.error is not None:
            raise self.error


@pytest.fixture
def fake_llm() -> FakeLLMClient:
    return FakeLLMClient(
        chunks=[
            "Très bien ! [CORRECTION]Je manges|Je mange|verb ",
            "agreement[/CORRECTION] [ENCOURAGEMENT]Great start![/ENCOURAGEMENT]",
            " Qu'est-ce que vous aimez manger ?",
        ]
    )


@pytest.fixture
def registry() -> CharacterRegistry:
    return CharacterRegistry()


@pytest.fixture(autouse=True)
def _disable_rate_limits():
    limiter.enabled = False
    yield
    limiter.enabled = True


@pytest_asyncio.fixture
async def client(fake_llm: FakeLLMClient, registry: CharacterRegistry):
    app.dependency_overrides[get_llm_client] = lambda: fake_llm
    app.dependency_overrides[get_character_registry] = lambda: registry
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
