"""language.ai terminal client and server launcher.

Usage:
    language-ai                         # Chat with Marie Dubois (French)
    language-ai --character 3           # Chat with Hiroshi Tanaka (Japanese)
    language-ai --list                  # List built-in characters
    language-ai --serve --port 8000     # Run the HTTP API with uvicorn

Inside a chat:
    /characters      list characters
    /switch <id>     switch character (restarts the conversation)
    /lang <name>     switch target language (restarts the conversation)
    /quit            leave
"""

import argparse
import asyncio
import logging
import sys

from language_ai.config import settings
from language_ai.core.characters import CharacterNotFound, CharacterRegistry
from language_ai.models.chat import ParsedReply
from language_ai.services.chat_session import ChatSession
from language_ai.services.llm_client import CompletionError, LLMClient


# ANSI color codes
class Color:
    RESET = '\033[0m'
    BOLD = '\033[1m'
    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    BLUE = '\033[34m'
    CYAN = '\033[36m'
    GRAY = '\033[90m'


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        description='language.ai - practice a language with AI characters',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        '--character', '-c',
        default='1',
        help='Character id to chat with (default: 1)',
    )
    parser.add_argument(
        '--native',
        default=settings.default_native_language,
        help='Your native language, used for explanations',
    )
    parser.add_argument(
        '--list',
        action='store_true',
        help='List characters and exit',
    )
    parser.add_argument(
        '--serve',
        action='store_true',
        help='Run the HTTP API instead of the terminal chat',
    )
    parser.add_argument('--host', default='127.0.0.1', help='Bind host for --serve')
    parser.add_argument('--port', type=int, default=8000, help='Bind port for --serve')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    return parser


def format_reply(reply: ParsedReply) -> str:
    """Render a parsed reply with its annotations for the terminal."""
    lines = [reply.display_text]
    if reply.encouragement:
        lines.append(f"{Color.GREEN}★ {reply.encouragement}{Color.RESET}")
    for correction in reply.corrections:
        color = Color.RED if correction.type == 'correction' else Color.BLUE
        label = 'Correction' if correction.type == 'correction' else 'Alternative'
        lines.append(
            f"{color}{label}:{Color.RESET} \"{correction.original}\" → "
            f"\"{correction.corrected}\" {Color.GRAY}({correction.explanation}){Color.RESET}"
        )
    return "\n".join(lines)


def print_characters(registry: CharacterRegistry) -> None:
    for character in registry.list():
        print(
            f"  {Color.BOLD}{character.id:>3}{Color.RESET}  {character.name} "
            f"{Color.GRAY}[{character.language}] {character.personality}{Color.RESET}"
        )


async def chat_loop(session: ChatSession) -> None:
    """Read learner input line by line until /quit or EOF."""
    print(f"{Color.CYAN}{session.conversation.messages[0].content}{Color.RESET}\n")

    while True:
        try:
            line = await asyncio.to_thread(input, f"{Color.BOLD}you>{Color.RESET} ")
        except EOFError:
            return
        line = line.strip()
        if not line:
            continue

        if line == '/quit':
            return
        if line == '/characters':
            print_characters(session.registry)
            continue
        if line.startswith('/switch '):
            try:
                character = session.select_character(line.split(maxsplit=1)[1])
            except CharacterNotFound as exc:
                print(f"{Color.RED}{exc}{Color.RESET}")
                continue
            print(f"{Color.CYAN}{character.name}: {session.conversation.messages[0].content}{Color.RESET}\n")
            continue
        if line.startswith('/lang '):
            session.set_target_language(line.split(maxsplit=1)[1].strip())
            partner = session.character.name if session.character else "the tutor"
            print(f"{Color.GRAY}Now practicing {session.target_language} with {partner}.{Color.RESET}\n")
            continue

        print(f"{Color.GRAY}…{Color.RESET}", end='', flush=True)
        try:
            reply = await session.send(line)
        except CompletionError as exc:
            print(f"\r{Color.RED}No reply: {exc}{Color.RESET}\n")
            continue

        if reply is None:
            continue
        speaker = session.character.name if session.character else 'tutor'
        print(f"\r{Color.CYAN}{speaker}:{Color.RESET} {format_reply(reply)}\n")


def serve(host: str, port: int) -> None:
    import uvicorn

    uvicorn.run("language_ai.main:app", host=host, port=port, log_level=settings.log_level)


def main(argv: list[str] | None = None) -> int:
    args = create_argument_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )

    if args.serve:
        serve(args.host, args.port)
        return 0

    registry = CharacterRegistry()
    if args.list:
        print_characters(registry)
        return 0

    client = LLMClient()
    if not client.is_configured:
        print(f"{Color.RED}No API key configured for {client.config.provider.value}.{Color.RESET}")
        print("Set OPENAI_API_KEY or choose another LLM_PROVIDER.")
        return 1

    session = ChatSession(client, registry, native_language=args.native)
    try:
        session.select_character(args.character)
    except CharacterNotFound as exc:
        print(f"{Color.RED}{exc}{Color.RESET}")
        return 1

    try:
        asyncio.run(chat_loop(session))
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == '__main__':
    sys.exit(main())
