"""API dependencies: LLM client, character registry, language table."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from language_ai.core.characters import CharacterRegistry
from language_ai.core.language_config import DEFAULT_LANGUAGES, LanguageTable
from language_ai.services.llm_client import LLMClient

# Process-wide; user-created characters live until restart.
_registry = CharacterRegistry()


@lru_cache
def get_llm_client() -> LLMClient:
    """Shared completion client built from settings."""
    return LLMClient()


def get_character_registry() -> CharacterRegistry:
    return _registry


def get_languages() -> LanguageTable:
    return DEFAULT_LANGUAGES


LLMClientDep = Annotated[LLMClient, Depends(get_llm_client)]
RegistryDep = Annotated[CharacterRegistry, Depends(get_character_registry)]
LanguagesDep = Annotated[LanguageTable, Depends(get_languages)]
