"""Tests for record batching."""

import math

import pytest

from bulk_intel.core.batcher import create_batches, create_token_batches, estimate_tokens
from bulk_intel.core.fields import record_body, record_sender, record_title

from conftest import make_email, make_project


@pytest.mark.parametrize("count,size", [(1, 10), (10, 10), (12, 10), (25, 4), (7, 1)])
def test_create_batches_count_and_order(count, size):
    records = [make_email(i, subject=f"s{i}") for i in range(count)]
    batches = create_batches(records, size)
    assert len(batches) == math.ceil(count / size)
    assert all(1 <= len(batch) <= size for batch in batches)
    assert [r for batch in batches for r in batch] == records


def test_create_batches_empty_input():
    assert create_batches([], 10) == []


def test_create_batches_rejects_non_positive_size():
    with pytest.raises(ValueError):
        create_batches([make_email(1)], 0)


def test_twelve_records_split_ten_and_two():
    records = [make_email(i) for i in range(12)]
    batches = create_batches(records)
    assert [len(b) for b in batches] == [10, 2]


def test_estimate_tokens_uses_title_body_and_sender():
    record = make_email(1, subject="abcd", sender="efgh", content="ijkl")
    assert estimate_tokens(record) == 3


def test_token_batches_close_when_budget_exceeded():
    records = [make_email(i, subject="x" * 40, sender=None) for i in range(5)]
    # 10 tokens each, budget 25 -> 2, 2, 1
    batches = create_token_batches(records, max_tokens=25, max_items=10)
    assert [len(b) for b in batches] == [2, 2, 1]
    assert [r for batch in batches for r in batch] == records


def test_token_batches_keep_oversized_record_alone():
    big = make_email(1, subject="x" * 400, sender=None)
    small = make_email(2, subject="hi", sender=None)
    batches = create_token_batches([small, big, small], max_tokens=20)
    assert batches == [[small], [big], [small]]


def test_token_batches_respect_item_cap():
    records = [make_email(i, subject="a", sender=None) for i in range(7)]
    batches = create_token_batches(records, max_tokens=1000, max_items=3)
    assert [len(b) for b in batches] == [3, 3, 1]


def test_field_chains_prefer_email_fields_then_project_fields():
    email = make_email(1, subject="Subject", sender="ana", content="Body")
    project = make_project(2, title="Title", created_by="joe", description="Desc")
    bare = make_email(3, sender=None)

    assert record_title(email) == "Subject"
    assert record_title(project) == "Title"
    assert record_body(project) == "Desc"
    assert record_sender(project) == "joe"
    assert record_sender(bare) == "Unknown"
    assert record_body(bare) == ""
    assert record_title(bare, default="No title") == "No title"
