"""Best-available field resolution for records.

Emails and project updates name the same concept differently (subject vs
title, sender vs created_by, content vs description). Each concept is an
ordered chain of attribute names; the first non-empty value wins. Callers
supply their own default when nothing in the chain is set.
"""

from __future__ import annotations

from .types import Record

TITLE_FIELDS: tuple[str, ...] = ("subject", "title")
BODY_FIELDS: tuple[str, ...] = ("content", "description")
SENDER_FIELDS: tuple[str, ...] = ("sender", "created_by")

UNKNOWN_SENDER = "Unknown"


def first_present(record: Record, chain: tuple[str, ...]) -> str | None:
    """Return the first non-empty attribute in ``chain``, or None."""
    for name in chain:
        value = getattr(record, name, None)
        if value:
            return value
    return None


def record_title(record: Record, default: str = "") -> str:
    return first_present(record, TITLE_FIELDS) or default


def record_body(record: Record) -> str:
    return first_present(record, BODY_FIELDS) or ""


def record_sender(record: Record, default: str | None = UNKNOWN_SENDER) -> str | None:
    return first_present(record, SENDER_FIELDS) or default
