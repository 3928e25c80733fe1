"""Character (persona) endpoints."""

import logging

from fastapi import APIRouter, HTTPException

from language_ai.api.dependencies import LanguagesDep, RegistryDep
from language_ai.core.characters import CharacterNotFound
from language_ai.core.language_config import resolve_locale
from language_ai.models.character import CharacterCreateRequest, GreetingResponse
from language_ai.models.envelope import success_response

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def list_characters(registry: RegistryDep, q: str | None = None) -> dict:
    """List characters, custom ones first, optionally filtered by ``q``."""
    characters = registry.list(q)
    return success_response(
        [c.model_dump() for c in characters],
        total=len(characters),
    )


@router.post("", status_code=201)
async def create_character(body: CharacterCreateRequest, registry: RegistryDep) -> dict:
    """Create a character that lives until the server restarts."""
    try:
        character = registry.create(
            name=body.name,
            description=body.description,
            language=body.language,
            personality=body.personality,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return success_response(character.model_dump())


@router.get("/{character_id}")
async def get_character(character_id: str, registry: RegistryDep) -> dict:
    try:
        character = registry.get(character_id)
    except CharacterNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return success_response(character.model_dump())


@router.get("/{character_id}/greeting")
async def get_greeting(
    character_id: str,
    registry: RegistryDep,
    languages: LanguagesDep,
) -> dict:
    """Opening assistant message for a new conversation with this character."""
    try:
        character = registry.get(character_id)
    except CharacterNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    greeting = GreetingResponse(
        character_id=character.id,
        greeting=registry.greeting(character),
        language=character.language,
        locale=resolve_locale(character.language, languages),
    )
    return success_response(greeting.model_dump())
