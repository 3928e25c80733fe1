"""Single-learner chat session driving the full annotation pipeline.

One session holds one conversation. Selecting another character or target
language resets it and bumps its generation; a reply that finishes after
such a reset is discarded instead of being appended to the new conversation.
"""

import logging
from collections.abc import Awaitable, Callable

from language_ai.config import settings
from language_ai.core.characters import CharacterRegistry
from language_ai.core.conversation import Conversation
from language_ai.core.language_config import DEFAULT_LANGUAGES, LanguageTable
from language_ai.core.prompt_builder import build_system_prompt
from language_ai.models.character import Character
from language_ai.models.chat import ParsedReply
from language_ai.services.llm_client import LLMClient

logger = logging.getLogger(__name__)

ChunkCallback = Callable[[str], Awaitable[None] | None]


class ChatSession:
    """Conversation plus the character and language it is scoped to."""

    def __init__(
        self,
        client: LLMClient,
        registry: CharacterRegistry,
        languages: LanguageTable = DEFAULT_LANGUAGES,
        native_language: str | None = None,
    ) -> None:
        self.client = client
        self.registry = registry
        self.languages = languages
        self.native_language = native_language or settings.default_native_language
        self.target_language = settings.default_target_language
        self.character: Character | None = None
        self.conversation = Conversation()

    def select_character(self, character_id: str) -> Character:
        """Switch persona; the conversation restarts with its greeting."""
        character = self.registry.get(character_id)
        self.character = character
        self.target_language = character.language
        self.conversation.reset(self.registry.greeting(character))
        logger.info(
            "Selected character %s (%s), generation %d",
            character.name, character.language, self.conversation.generation,
        )
        return character

    def set_target_language(self, language: str) -> None:
        """Switch target language; the conversation restarts empty.

        A character speaks only its own language, so choosing another one
        leaves the session without a character.
        """
        if self.character is not None and self.character.language != language:
            logger.info("Leaving character %s for %s", self.character.name, language)
            self.character = None
        self.target_language = language
        self.conversation.reset()
        logger.info("Target language set to %s, generation %d", language, self.conversation.generation)

    def system_prompt(self) -> str:
        persona = self.character.system_prompt if self.character else None
        return build_system_prompt(
            self.target_language, self.native_language, persona, self.languages
        )

    async def send(self, text: str, on_chunk: ChunkCallback | None = None) -> ParsedReply | None:
        """Submit a learner message and wait for the annotated reply.

        Returns None when the conversation was reset while the reply was
        streaming. CompletionError propagates; the user message stays.
        """
        text = text.strip()
        if not text:
            raise ValueError("Message must not be empty")

        generation = self.conversation.generation
        self.conversation.add_user_message(text)
        system_prompt = self.system_prompt()
        history = self.conversation.history()

        chunks: list[str] = []
        async for chunk in self.client.stream_completion(system_prompt, history):
            chunks.append(chunk)
            if on_chunk is not None and generation == self.conversation.generation:
                result = on_chunk(chunk)
                if result is not None:
                    await result

        return self.conversation.complete_assistant_message("".join(chunks), generation)
