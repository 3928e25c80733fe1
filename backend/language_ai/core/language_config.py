"""Per-language configuration tables.

Every language-specific constant the app needs (tutoring instructions,
speech locale, custom-persona instructions, greeting template) lives in a
single read-only mapping built once at import time. Callers receive the
mapping as an argument and never mutate it.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

DEFAULT_LOCALE = "en-US"


@dataclass(frozen=True)
class LanguageProfile:
    """Everything language-specific about one supported target language."""

    name: str
    locale: str
    tutor_instruction: str
    persona_instruction: str
    greeting_template: str

    def greeting_for(self, character_name: str) -> str:
        return self.greeting_template.format(name=character_name)


LanguageTable = Mapping[str, LanguageProfile]


def _profiles() -> list[LanguageProfile]:
    return [
        LanguageProfile(
            name="French",
            locale="fr-FR",
            tutor_instruction=(
                "You are helping users learn French. Respond primarily in French "
                "with English explanations when needed."
            ),
            persona_instruction=(
                "You respond primarily in French with English explanations when "
                "needed for corrections."
            ),
            greeting_template=(
                "Bonjour ! Je suis {name}. Comment allez-vous aujourd'hui ? "
                "Qu'est-ce qui vous amène ici ?"
            ),
        ),
        LanguageProfile(
            name="Spanish",
            locale="es-ES",
            tutor_instruction=(
                "You are helping users learn Spanish. Respond primarily in Spanish "
                "with English explanations when needed."
            ),
            persona_instruction=(
                "You respond primarily in Spanish with English explanations when "
                "needed for corrections."
            ),
            greeting_template="¡Hola! Soy {name}. ¿Cómo estás hoy? ¿De qué te gustaría hablar?",
        ),
        LanguageProfile(
            name="German",
            locale="de-DE",
            tutor_instruction=(
                "You are helping users learn German. Respond primarily in German "
                "with English explanations when needed."
            ),
            persona_instruction=(
                "You respond primarily in German with English explanations when "
                "needed for corrections."
            ),
            greeting_template=(
                "Guten Tag! Ich bin {name}. Wie geht es Ihnen heute? "
                "Worüber möchten Sie sprechen?"
            ),
        ),
        LanguageProfile(
            name="Italian",
            locale="it-IT",
            tutor_instruction=(
                "You are helping users learn Italian. Respond primarily in Italian "
                "with English explanations when needed."
            ),
            persona_instruction=(
                "You respond primarily in Italian with English explanations when "
                "needed for corrections."
            ),
            greeting_template="Ciao! Sono {name}. Come stai oggi? Di cosa ti piacerebbe parlare?",
        ),
        LanguageProfile(
            name="Chinese",
            locale="zh-CN",
            tutor_instruction=(
                "You are helping users learn Chinese (Mandarin). Respond primarily in "
                "simplified Chinese with English explanations when needed. Include "
                "pinyin for pronunciation help when useful."
            ),
            persona_instruction=(
                "You respond primarily in simplified Chinese with English explanations "
                "when needed for corrections. Include pinyin for pronunciation help "
                "when useful."
            ),
            greeting_template="你好！我是{name}。你今天怎么样？你想聊什么？",
        ),
        LanguageProfile(
            name="Japanese",
            locale="ja-JP",
            tutor_instruction=(
                "You are helping users learn Japanese. Respond primarily in Japanese "
                "with English explanations when needed. Use appropriate levels of "
                "politeness (keigo) and include furigana for difficult kanji when helpful."
            ),
            persona_instruction=(
                "You respond primarily in Japanese with English explanations when "
                "needed for corrections. Include furigana for difficult kanji when helpful."
            ),
            greeting_template="こんにちは！{name}です。今日はいかがですか？何について話したいですか？",
        ),
        LanguageProfile(
            name="Korean",
            locale="ko-KR",
            tutor_instruction=(
                "You are helping users learn Korean. Respond primarily in Korean "
                "with English explanations when needed. Use appropriate levels of "
                "politeness and include romanization when helpful."
            ),
            persona_instruction=(
                "You respond primarily in Korean with English explanations when "
                "needed for corrections. Use appropriate levels of politeness."
            ),
            greeting_template=(
                "안녕하세요! 저는 {name}입니다. 오늘 어떠세요? "
                "무엇에 대해 이야기하고 싶으세요?"
            ),
        ),
        LanguageProfile(
            name="English",
            locale="en-GB",
            tutor_instruction=(
                "You are helping users learn English. Respond in clear, natural "
                "English and simplify when the learner seems lost."
            ),
            persona_instruction="You respond in English and help learners improve their English skills.",
            greeting_template="Hello! I'm {name}. How are you today? What would you like to talk about?",
        ),
    ]


def build_language_table(profiles: list[LanguageProfile] | None = None) -> LanguageTable:
    """Build a read-only language-name → profile mapping."""
    items = profiles if profiles is not None else _profiles()
    return MappingProxyType({p.name: p for p in items})


DEFAULT_LANGUAGES: LanguageTable = build_language_table()


def tutor_instruction(language: str, languages: LanguageTable = DEFAULT_LANGUAGES) -> str:
    profile = languages.get(language)
    if profile is None:
        return f"You are helping users learn {language}."
    return profile.tutor_instruction


def persona_instruction(language: str, languages: LanguageTable = DEFAULT_LANGUAGES) -> str:
    profile = languages.get(language)
    if profile is None:
        return f"You help people learn {language}."
    return profile.persona_instruction


def resolve_locale(language: str, languages: LanguageTable = DEFAULT_LANGUAGES) -> str:
    """Map a language name to the BCP-47 locale used by speech engines."""
    profile = languages.get(language)
    return profile.locale if profile is not None else DEFAULT_LOCALE


def supported_languages(languages: LanguageTable = DEFAULT_LANGUAGES) -> list[str]:
    return list(languages.keys())
