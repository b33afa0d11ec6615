"""
Bulk Intel - batch communication intelligence.

This package analyzes exports of emails and project updates in batches with
an LLM (falling back to keyword heuristics when the model is unavailable)
and merges the per-batch results into one report.

Main entry point is the CLI via `bulk-intel analyze` command.

Example:
    $ bulk-intel analyze -i export.json --format json
"""

__all__ = ["__version__", "IntelligencePipeline", "parse_records_json", "create_batches"]
__version__ = "0.1.0"

from .core.batcher import create_batches
from .input.json_parser import parse_records_json
from .pipeline import IntelligencePipeline
