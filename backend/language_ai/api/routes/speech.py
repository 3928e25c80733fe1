"""Speech settings for the browser's recognition and synthesis engines."""

from fastapi import APIRouter, Query

from language_ai.api.dependencies import LanguagesDep
from language_ai.config import settings
from language_ai.core.language_config import resolve_locale, supported_languages
from language_ai.models.envelope import success_response

router = APIRouter()


@router.get("/locale")
async def speech_locale(
    languages: LanguagesDep,
    language: str = Query(..., min_length=1),
) -> dict:
    """Locale code and speaking rate for a target language.

    Unlisted languages fall back to en-US.
    """
    return success_response({
        "language": language,
        "locale": resolve_locale(language, languages),
        "rate": settings.speech_rate,
    })


@router.get("/languages")
async def list_languages(languages: LanguagesDep) -> dict:
    return success_response([
        {"language": name, "locale": resolve_locale(name, languages)}
        for name in supported_languages(languages)
    ])
