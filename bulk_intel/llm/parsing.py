"""Helpers for decoding the model's JSON reply."""

from __future__ import annotations

import json
from typing import Any


def parse_json_response(content: str) -> dict[str, Any]:
    """Parse model text as a JSON object.

    The reply must be a bare JSON object, or a single ```json fenced block
    and nothing else. JSON embedded in prose is rejected.

    Raises:
        json.JSONDecodeError: If the reply is not exactly one JSON object
    """
    if not content or not content.strip():
        raise json.JSONDecodeError("Empty content", content or "", 0)
    obj = json.loads(_strip_fence(content.strip()))
    if not isinstance(obj, dict):
        raise json.JSONDecodeError("Top-level JSON value is not an object", content, 0)
    return obj


def _strip_fence(text: str) -> str:
    """Return the body of a reply that is wholly one fenced block."""
    lines = text.splitlines()
    if len(lines) < 2 or not text.endswith("```"):
        return text
    opener = lines[0].strip()
    if opener not in ("```", "```json", "```JSON") or lines[-1].strip() != "```":
        return text
    return "\n".join(lines[1:-1]).strip()
