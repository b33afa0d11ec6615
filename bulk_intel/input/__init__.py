"""Input parsing."""

from .json_parser import parse_context, parse_record, parse_records_json

__all__ = ["parse_context", "parse_record", "parse_records_json"]
