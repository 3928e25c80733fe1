"""Conversation state and correction reconciliation.

Corrections parsed from an assistant reply describe the learner's previous
turn, so they are attached to the nearest ``user`` message that precedes the
reply. The scan walks backward by index from the message just before the
reply and stops at the first user message; older user messages are never
touched. A reply with no user message before it keeps its corrections to
itself (they are dropped).
"""

import logging

from language_ai.core.marker_parser import parse_annotations
from language_ai.models.chat import Correction, Message, ParsedReply

logger = logging.getLogger(__name__)


def find_preceding_user_index(messages: list[Message], assistant_index: int) -> int | None:
    """Index of the nearest user message before ``assistant_index``, or None."""
    for i in range(min(assistant_index, len(messages)) - 1, -1, -1):
        if messages[i].role == "user":
            return i
    return None


def attach_corrections(
    messages: list[Message],
    assistant_index: int,
    corrections: list[Correction],
) -> list[Message]:
    """Return a copy of ``messages`` with ``corrections`` backfilled.

    The target user message's corrections are replaced, not merged.
    """
    updated = list(messages)
    if not corrections:
        return updated

    target = find_preceding_user_index(updated, assistant_index)
    if target is None:
        logger.debug(
            "Dropping %d correction(s): no user message before index %d",
            len(corrections), assistant_index,
        )
        return updated

    updated[target] = updated[target].model_copy(
        update={"corrections": list(corrections)}
    )
    return updated


def reconcile_assistant_message(messages: list[Message], assistant_index: int) -> list[Message]:
    """Parse the assistant message at ``assistant_index`` and backfill its corrections."""
    message = messages[assistant_index]
    if message.role != "assistant":
        raise ValueError(f"Message at index {assistant_index} is not an assistant message")
    parsed = parse_annotations(message.content)
    return attach_corrections(messages, assistant_index, parsed.corrections)


class Conversation:
    """Ordered message list for one character/language pair.

    ``generation`` changes on every reset. A reply produced for an older
    generation belongs to a conversation that no longer exists and is
    discarded by ``complete_assistant_message``.
    """

    def __init__(self, greeting: str | None = None) -> None:
        self.generation = 0
        self._messages: list[Message] = []
        if greeting:
            self._messages.append(Message(role="assistant", content=greeting))

    @property
    def messages(self) -> list[Message]:
        return list(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def reset(self, greeting: str | None = None) -> int:
        """Replace the whole conversation with an optional greeting."""
        self.generation += 1
        self._messages = []
        if greeting:
            self._messages.append(Message(role="assistant", content=greeting))
        return self.generation

    def add_user_message(self, content: str) -> Message:
        message = Message(role="user", content=content)
        self._messages.append(message)
        return message

    def complete_assistant_message(
        self,
        raw_text: str,
        generation: int | None = None,
    ) -> ParsedReply | None:
        """Append a finished reply and backfill its corrections.

        Returns the parsed reply, or None when ``generation`` is stale.
        """
        if generation is not None and generation != self.generation:
            logger.info(
                "Discarding reply for stale conversation generation %d (current %d)",
                generation, self.generation,
            )
            return None

        parsed = parse_annotations(raw_text)
        self._messages.append(
            Message(role="assistant", content=raw_text, encouragement=parsed.encouragement)
        )
        self._messages = attach_corrections(
            self._messages, len(self._messages) - 1, parsed.corrections
        )
        return parsed

    def history(self) -> list[dict]:
        """Role/content pairs for the completion request (full, unwindowed)."""
        return [{"role": m.role, "content": m.content} for m in self._messages]
