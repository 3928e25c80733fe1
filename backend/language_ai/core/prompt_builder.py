"""System prompt construction for the tutor model."""

from language_ai.core.language_config import (
    DEFAULT_LANGUAGES,
    LanguageTable,
    persona_instruction,
    tutor_instruction,
)
from language_ai.core.marker_parser import (
    ALTERNATIVE_TAG,
    CORRECTION_TAG,
    ENCOURAGEMENT_TAG,
    format_marker,
)

CORRECTION_FORMAT = format_marker(CORRECTION_TAG, "original", "corrected", "explanation")
ALTERNATIVE_FORMAT = format_marker(ALTERNATIVE_TAG, "original", "corrected", "explanation")
ENCOURAGEMENT_FORMAT = format_marker(ENCOURAGEMENT_TAG, "encouraging message")

_EXAMPLE_REPLY = (
    "\"Très bien ! "
    + format_marker(
        CORRECTION_TAG,
        "Je mange du pain",
        "Je mange du pain",
        'This is actually correct - "du pain" works well here!',
    )
    + " "
    + format_marker(
        ALTERNATIVE_TAG,
        "J'aime beaucoup le pain",
        "J'adore le pain",
        "A more natural way to say you really love something.",
    )
    + " "
    + format_marker(ENCOURAGEMENT_TAG, "Great job mixing French naturally!")
    + " Qu'est-ce que vous aimez manger d'autre ?\""
)


def build_system_prompt(
    target_language: str,
    native_language: str,
    persona_fragment: str | None = None,
    languages: LanguageTable = DEFAULT_LANGUAGES,
) -> str:
    """Build the tutoring system prompt.

    The marker formats written here are the only contract with
    ``marker_parser``; changing one without the other breaks extraction.
    Unknown target languages get a generic instruction instead of raising.
    """
    parts: list[str] = [
        f"You are a friendly {target_language} language learning assistant. "
        + tutor_instruction(target_language, languages),
        "",
    ]

    if persona_fragment and persona_fragment.strip():
        parts.extend([
            "CHARACTER:",
            persona_fragment.strip(),
            "",
        ])

    parts.extend([
        "Key behaviors:",
        f"1. Always respond primarily in {target_language}, but use {native_language} explanations when needed",
        f"2. IMPORTANT: When users make mistakes, gently correct them using this format: {CORRECTION_FORMAT}",
        f"3. When a sentence is correct but could sound more natural, suggest it using this format: {ALTERNATIVE_FORMAT}",
        f"4. Provide encouragement using this format: {ENCOURAGEMENT_FORMAT}",
        f"5. Allow users to mix {target_language} and {native_language} - this is normal for learners",
        "6. Ask follow-up questions to keep the conversation going",
        "7. Praise good usage and effort",
        "8. Provide cultural context when relevant",
        "9. Keep responses conversational and not too long",
        "10. For Asian languages, be patient with character recognition and provide romanization/pinyin when helpful",
        "11. Adapt to the user's level - start simple and gradually increase complexity",
        "12. ALWAYS analyze the user's previous message for potential improvements and provide at least one "
        "correction or alternative together with an encouragement when warranted",
        "",
        "Marker rules:",
        "- Write the markers exactly as shown, in capital letters, with both the opening and closing tag",
        "- Separate the three fields with a single | character and never use | inside a field",
        "- Keep each marker on a single line",
        "",
        "Example response format:",
        _EXAMPLE_REPLY,
        "",
        "Remember: Be patient, encouraging, and focus on communication over perfection. "
        "Always provide helpful corrections to help users improve.",
    ])

    return "\n".join(parts)


def build_persona_prompt(
    name: str,
    personality: str,
    language: str,
    languages: LanguageTable = DEFAULT_LANGUAGES,
) -> str:
    """Build the persona fragment for a user-authored character.

    The character is told to embody its personality rather than describe it.
    """
    return "\n".join([
        f"You are {name}. You are {personality}. {persona_instruction(language, languages)}",
        "",
        "IMPORTANT: Never explicitly state your role, personality, or description. Instead, naturally "
        "embody these characteristics through your behavior, questions, and conversation style. Ask "
        "questions and engage in topics that reflect your background and interests. Be encouraging, "
        "patient, and always stay in character while helping with language learning.",
        "",
        "For example:",
        "- If you're a chef, ask about favorite foods and cooking",
        "- If you're a teacher, naturally guide the conversation educationally",
        "- If you're from a specific city, mention local places and culture naturally",
        "- If you have hobbies, bring them up in conversation organically",
        "",
        "Your personality should come through in HOW you speak and WHAT you choose to discuss, "
        "not by telling the user what you are.",
    ])
