"""Pydantic models for chat characters (personas)."""

from pydantic import BaseModel, Field


class Character(BaseModel):
    """A reusable chat persona."""

    id: str
    name: str
    avatar: str
    description: str
    language: str
    personality: str
    interactions: str = "0"
    creator: str | None = None
    system_prompt: str

    @property
    def is_custom(self) -> bool:
        return self.creator is not None


class CharacterCreateRequest(BaseModel):
    """Request body for creating a session-scoped character."""

    name: str = Field(..., min_length=1, max_length=80)
    description: str = Field(..., min_length=1, max_length=1000)
    language: str = Field(..., min_length=1, max_length=40)
    personality: str = Field(..., min_length=1, max_length=1000)


class GreetingResponse(BaseModel):
    """Opening message for a freshly selected character."""

    character_id: str
    greeting: str
    language: str
    locale: str
