"""Tutor chat endpoints: streaming completion, reply parsing, reconciliation."""

import logging
import uuid
from collections.abc import AsyncIterator

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import StreamingResponse

from language_ai.api.dependencies import LanguagesDep, LLMClientDep
from language_ai.config import settings
from language_ai.core.conversation import reconcile_assistant_message
from language_ai.core.marker_parser import parse_annotations
from language_ai.core.prompt_builder import build_system_prompt
from language_ai.middleware.rate_limiter import LLM_LIMIT, limiter
from language_ai.models.chat import ChatRequest, ParseRequest, ReconcileRequest
from language_ai.models.envelope import success_response
from language_ai.services.llm_client import CompletionError, LLMClient
from language_ai.utils import stream_protocol

logger = logging.getLogger(__name__)

# Mounted at /api, the path the chat UI posts to.
stream_router = APIRouter()

# Mounted at /api/v1/chat.
router = APIRouter()


async def _data_stream(
    client: LLMClient,
    system_prompt: str,
    history: list[dict],
) -> AsyncIterator[str]:
    yield stream_protocol.start_part(uuid.uuid4().hex)
    total = 0
    try:
        async for chunk in client.stream_completion(system_prompt, history):
            total += len(chunk)
            yield stream_protocol.text_part(chunk)
    except CompletionError as exc:
        logger.error("Chat stream aborted after %d chars: %s", total, exc)
        message = str(exc) if settings.dev_mode else "The tutor is temporarily unavailable."
        yield stream_protocol.error_part(message)
        yield stream_protocol.finish_part("error")
        return
    except Exception as exc:
        # Headers are already sent, so the failure has to travel in-band.
        logger.error("Chat stream failed after %d chars", total, exc_info=True)
        message = str(exc) if settings.dev_mode else "Internal server error"
        yield stream_protocol.error_part(message)
        yield stream_protocol.finish_part("error")
        return

    logger.info("Chat stream finished: %d chars", total)
    yield stream_protocol.finish_part("stop")


@stream_router.post("/chat")
@limiter.limit(LLM_LIMIT)
async def chat(
    request: Request,
    body: ChatRequest,
    client: LLMClientDep,
    languages: LanguagesDep,
) -> StreamingResponse:
    """Stream the tutor's reply to the conversation so far.

    Markers are left in the streamed text; the caller parses them once the
    stream has finished.
    """
    if not client.is_configured:
        raise HTTPException(
            status_code=503,
            detail="The tutor is not available: no API key configured.",
        )

    system_prompt = build_system_prompt(
        body.target_language,
        body.native_language,
        body.character_prompt,
        languages,
    )
    history = [{"role": m.role, "content": m.content} for m in body.messages]

    logger.info(
        "Chat request: target=%s, native=%s, messages=%d, persona=%s",
        body.target_language, body.native_language, len(history), bool(body.character_prompt),
    )

    return StreamingResponse(
        _data_stream(client, system_prompt, history),
        media_type=stream_protocol.MEDIA_TYPE,
        headers=stream_protocol.DATA_STREAM_HEADERS,
    )


@router.post("/parse")
async def parse_reply(body: ParseRequest) -> dict:
    """Split a finished assistant reply into display text and annotations."""
    parsed = parse_annotations(body.content)
    return success_response(parsed.model_dump())


@router.post("/reconcile")
async def reconcile(body: ReconcileRequest) -> dict:
    """Backfill the corrections of one assistant reply onto the conversation."""
    if body.assistant_index >= len(body.messages):
        raise HTTPException(status_code=422, detail="assistant_index is out of range")
    try:
        messages = reconcile_assistant_message(body.messages, body.assistant_index)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return success_response({"messages": [m.model_dump() for m in messages]})
