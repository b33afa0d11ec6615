"""JSON parser for record export files.

The export format pairs run context with the records to analyze:

    {
        "context": {
            "instanceId": 12,
            "instanceName": "Acme Sales Desk",
            "period": "weekly",
            "agentIdentifier": "t5t"
        },
        "records": [
            {
                "id": 101,
                "subject": "Customer asking for renewal pricing",
                "sender": "ana@example.com",
                "content": "Hi team, ...",
                "source": "email",
                "sourceAgent": "t5t",
                "createdAt": "2026-02-03T11:44:10Z"
            },
            {
                "id": "p-7",
                "title": "Launch checklist",
                "createdBy": "joe",
                "description": "...",
                "source": "project",
                "sourceAgent": "polly",
                "status": "open"
            }
        ]
    }
"""

from __future__ import annotations

import logging
from typing import Any

from ..core.types import AnalysisContext, Record, Source

logger = logging.getLogger(__name__)

_SOURCES = {source.value: source for source in Source}


def parse_records_json(data: dict[str, Any]) -> tuple[list[Record], AnalysisContext]:
    """Parse an export document into records and run context.

    Args:
        data: The parsed JSON content as a dictionary

    Returns:
        A tuple of (records, context). Records with no id or an unknown
        source are skipped with a warning.

    Raises:
        ValueError: If the document has no 'records' list
    """
    items = data.get("records")
    if not isinstance(items, list):
        raise ValueError("Invalid JSON format: missing 'records' list")

    records: list[Record] = []
    for position, item in enumerate(items):
        record = parse_record(item, position)
        if record is not None:
            records.append(record)

    return records, parse_context(data.get("context") or {})


def parse_record(item: Any, position: int = 0) -> Record | None:
    if not isinstance(item, dict):
        logger.warning(f"Skipping record #{position}: not an object")
        return None

    record_id = item.get("id")
    if record_id is None or record_id == "":
        logger.warning(f"Skipping record #{position}: missing id")
        return None

    source = _SOURCES.get(str(item.get("source", "")).strip().lower())
    if source is None:
        logger.warning(f"Skipping record {record_id}: unknown source {item.get('source')!r}")
        return None

    return Record(
        id=record_id,
        source=source,
        source_agent=str(item.get("sourceAgent") or "unknown"),
        subject=_optional_str(item.get("subject")),
        title=_optional_str(item.get("title")),
        sender=_optional_str(item.get("sender")),
        created_by=_optional_str(item.get("createdBy")),
        content=_optional_str(item.get("content")),
        description=_optional_str(item.get("description")),
        created_at=_optional_str(item.get("createdAt")),
        status=_optional_str(item.get("status")),
    )


def parse_context(raw: dict[str, Any]) -> AnalysisContext:
    try:
        instance_id = int(raw.get("instanceId", 0))
    except (TypeError, ValueError):
        logger.warning(f"Invalid instanceId {raw.get('instanceId')!r}; using 0")
        instance_id = 0
    return AnalysisContext(
        instance_id=instance_id,
        instance_name=str(raw.get("instanceName") or ""),
        period=str(raw.get("period") or "weekly"),
        agent_identifier=str(raw.get("agentIdentifier") or ""),
    )


def _optional_str(value: Any) -> str | None:
    """Convert empty values to None and everything else to str."""
    if value is None or value == "":
        return None
    return str(value)
