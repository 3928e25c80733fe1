"""Chat message, correction and request/response models."""

import uuid
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from language_ai.config import settings

CorrectionType = Literal["correction", "alternative"]
Role = Literal["user", "assistant"]


class Correction(BaseModel):
    """A flagged difference between what the learner wrote and a suggested form."""

    original: str
    corrected: str
    explanation: str
    type: CorrectionType = "correction"


class Message(BaseModel):
    """One turn in the conversation."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    role: Role
    content: str
    corrections: list[Correction] | None = None
    encouragement: str | None = None


class ParsedReply(BaseModel):
    """Structured result of stripping annotation markers from a reply."""

    display_text: str
    corrections: list[Correction] = Field(default_factory=list)
    encouragement: str | None = None


class ChatRequest(BaseModel):
    """Request body for the streaming chat endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    messages: list[Message] = Field(default_factory=list)
    target_language: str = Field(
        default_factory=lambda: settings.default_target_language,
        alias="targetLanguage",
    )
    native_language: str = Field(
        default_factory=lambda: settings.default_native_language,
        alias="nativeLanguage",
    )
    character_prompt: str | None = Field(
        None,
        alias="characterPrompt",
        description="Persona fragment merged into the system prompt",
    )


class ParseRequest(BaseModel):
    """Request body for parsing a completed assistant reply."""

    content: str


class ReconcileRequest(BaseModel):
    """Request body for attaching a reply's corrections to the conversation."""

    model_config = ConfigDict(populate_by_name=True)

    messages: list[Message]
    assistant_index: int = Field(..., ge=0, alias="assistantIndex")
