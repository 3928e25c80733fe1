"""Encoding for the AI SDK data-stream text protocol.

Each part is one line: ``<type>:<json>\\n``. Only the parts the chat UI reads
are produced here:

  f  message start, carries the message id
  0  text delta (JSON string)
  3  error (JSON string)
  d  finish message, carries the finish reason
"""

import json

DATA_STREAM_HEADERS = {
    "X-Vercel-AI-Data-Stream": "v1",
    "Cache-Control": "no-cache",
}
MEDIA_TYPE = "text/plain; charset=utf-8"


def _part(code: str, value: object) -> str:
    return f"{code}:{json.dumps(value, ensure_ascii=False, separators=(',', ':'))}\n"


def start_part(message_id: str) -> str:
    return _part("f", {"messageId": message_id})


def text_part(text: str) -> str:
    return _part("0", text)


def error_part(message: str) -> str:
    return _part("3", message)


def finish_part(reason: str = "stop") -> str:
    return _part("d", {"finishReason": reason})


def decode_parts(body: str) -> list[tuple[str, object]]:
    """Split a stream body back into (code, value) pairs."""
    parts: list[tuple[str, object]] = []
    for line in body.splitlines():
        if not line:
            continue
        code, _, raw = line.partition(":")
        parts.append((code, json.loads(raw)))
    return parts


def collect_text(body: str) -> str:
    """Concatenate every text delta in a stream body."""
    return "".join(value for code, value in decode_parts(body) if code == "0")
