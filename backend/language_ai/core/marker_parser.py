"""Extraction of annotation markers from assistant replies.

The tutor model is asked to embed three kinds of markers in its reply:

    [CORRECTION]original|corrected|explanation[/CORRECTION]
    [ALTERNATIVE]original|corrected|explanation[/ALTERNATIVE]
    [ENCOURAGEMENT]message[/ENCOURAGEMENT]

The grammar has no escaping: fields are split on the first two ``|``
characters, so a literal ``|`` inside ``original`` or ``corrected`` shifts
the remaining text into the next field. Unterminated markers never match and
stay in the display text. The model is not a trusted producer, so nothing
here raises on odd input.
"""

import re

from language_ai.models.chat import Correction, CorrectionType, ParsedReply

CORRECTION_TAG = "CORRECTION"
ALTERNATIVE_TAG = "ALTERNATIVE"
ENCOURAGEMENT_TAG = "ENCOURAGEMENT"

_ENCOURAGEMENT_RE = re.compile(r"\[ENCOURAGEMENT\](.*?)\[/ENCOURAGEMENT\]", re.DOTALL)

# Field bodies do not cross line breaks.
_CORRECTION_RE = re.compile(r"\[CORRECTION\](.*?)\|(.*?)\|(.*?)\[/CORRECTION\]")
_ALTERNATIVE_RE = re.compile(r"\[ALTERNATIVE\](.*?)\|(.*?)\|(.*?)\[/ALTERNATIVE\]")

# Removal patterns match whole spans, whether or not the body has separators.
_STRIP_PATTERNS = (
    re.compile(r"\[CORRECTION\].*?\[/CORRECTION\]"),
    re.compile(r"\[ALTERNATIVE\].*?\[/ALTERNATIVE\]"),
    _ENCOURAGEMENT_RE,
)


def _collect(pattern: re.Pattern[str], text: str, kind: CorrectionType) -> list[Correction]:
    return [
        Correction(
            original=match.group(1),
            corrected=match.group(2),
            explanation=match.group(3),
            type=kind,
        )
        for match in pattern.finditer(text)
    ]


def extract_encouragement(text: str) -> str | None:
    """Return the stripped body of the first encouragement marker, if any."""
    match = _ENCOURAGEMENT_RE.search(text)
    return match.group(1).strip() if match else None


def extract_corrections(text: str) -> list[Correction]:
    """Return all corrections, then all alternatives.

    The two kinds are gathered in separate passes, so the result is not in
    document order when corrections and alternatives interleave.
    """
    return _collect(_CORRECTION_RE, text, "correction") + _collect(
        _ALTERNATIVE_RE, text, "alternative"
    )


def strip_markers(text: str) -> str:
    """Remove every marker span and trim the surrounding whitespace."""
    for pattern in _STRIP_PATTERNS:
        text = pattern.sub("", text)
    return text.strip()


def parse_annotations(raw_text: str) -> ParsedReply:
    """Split a completed assistant reply into display text and annotations."""
    return ParsedReply(
        display_text=strip_markers(raw_text),
        corrections=extract_corrections(raw_text),
        encouragement=extract_encouragement(raw_text),
    )


def format_marker(tag: str, *fields: str) -> str:
    """Render a marker the way the model is told to write it."""
    return f"[{tag}]{'|'.join(fields)}[/{tag}]"
