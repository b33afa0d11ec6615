"""Shared helpers."""

from .logging import JsonlFormatter, log_event, redact_text, setup_logging, truncate_text

__all__ = ["JsonlFormatter", "log_event", "redact_text", "setup_logging", "truncate_text"]
