"""Shared fixtures for pipeline tests."""

from __future__ import annotations

import logging

import pytest

from bulk_intel.core.types import AnalysisContext, Record, Source
from bulk_intel.llm import tracing


@pytest.fixture(autouse=True)
def _reset_globals():
    tracing._TRACER = None
    tracing._CFG = None
    yield
    tracing._TRACER = None
    tracing._CFG = None
    # setup_logging detaches the package logger from root; caplog needs it back.
    package_logger = logging.getLogger("bulk_intel")
    package_logger.handlers = []
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def context() -> AnalysisContext:
    return AnalysisContext(instance_id=7, instance_name="Acme Desk", period="weekly", agent_identifier="t5t")


def make_email(record_id, subject=None, sender="ana@example.com", content=None, agent="t5t") -> Record:
    return Record(
        id=record_id,
        source=Source.EMAIL,
        source_agent=agent,
        subject=subject,
        sender=sender,
        content=content,
    )


def make_project(record_id, title=None, created_by="joe", description=None, agent="polly") -> Record:
    return Record(
        id=record_id,
        source=Source.PROJECT,
        source_agent=agent,
        title=title,
        created_by=created_by,
        description=description,
    )
