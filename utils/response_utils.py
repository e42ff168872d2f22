"""Helpers for reading Postman API response bodies.

Postman reports failures as ``{"error": {"name": ..., "message": ...}}``, but
proxies in front of it sometimes answer with HTML or NDJSON. `robust_parse_text`
turns whatever came back into a Python object and `extract_error_message`
pulls the human-readable message out of it.
"""
from __future__ import annotations

import json
from typing import Any, Optional


def robust_parse_text(text: str) -> Any:
    """Parse JSON, then NDJSON, then the first JSON object in a noisy blob.

    Returns the parsed object, or the original text when nothing parses.
    """
    if not text or not text.strip():
        return text

    try:
        return json.loads(text)
    except ValueError:
        pass

    lines = [ln for ln in text.splitlines() if ln.strip()]
    try:
        objs = [json.loads(ln) for ln in lines]
    except ValueError:
        objs = []
    if objs:
        return objs if len(objs) > 1 else objs[0]

    start = text.find("{")
    if start != -1:
        try:
            obj, _ = json.JSONDecoder().raw_decode(text, start)
            return obj
        except ValueError:
            pass

    return text


def extract_error_message(body: Any) -> Optional[str]:
    """Return ``body["error"]["message"]`` when present and non-empty."""
    if isinstance(body, (str, bytes)):
        if isinstance(body, bytes):
            body = body.decode("utf-8", errors="replace")
        body = robust_parse_text(body)
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if not isinstance(error, dict):
        return None
    message = error.get("message")
    if message is None or message == "":
        return None
    return str(message)
