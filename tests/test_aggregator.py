"""Tests for merging batch results into the final report."""

import itertools

from bulk_intel.analyzers.aggregator import (
    aggregate,
    count_participants,
    dedupe_topics,
    empty_report,
    ensure_sentence,
    format_list,
    rank_insights,
    sentiment_score,
)
from bulk_intel.core.types import (
    BatchResult,
    Insight,
    Level,
    Sentiment,
    SentimentBreakdown,
    TrendingTopic,
)

from conftest import make_email, make_project


def _topic(name, frequency, urgency=Level.MEDIUM, description="desc"):
    return TrendingTopic(
        topic=name,
        frequency=frequency,
        urgency=urgency,
        sentiment=Sentiment.NEUTRAL,
        description=description,
    )


def _insight(insight_id, priority, frequency, urgency=Level.LOW, description=None, topic="Topic"):
    return Insight(
        id=insight_id,
        topic=topic,
        description=description if description is not None else f"Insight {insight_id}",
        urgency=urgency,
        priority=priority,
        frequency=frequency,
        sentiment=Sentiment.NEUTRAL,
        confidence=80,
    )


def test_support_topic_merged_across_batches():
    results = [
        BatchResult(trending_topics=[_topic("Support", 3, description="first")]),
        BatchResult(trending_topics=[_topic("Support", 3, description="second")]),
    ]
    report = aggregate(results, [make_email(1), make_email(2)])
    assert len(report.trending_topics) == 1
    merged = report.trending_topics[0]
    assert merged.topic == "Support"
    assert merged.frequency == 6
    assert merged.description == "first"


def test_dedupe_topics_sorts_and_does_not_mutate_input():
    a = _topic("A", 1)
    b = _topic("B", 2)
    a2 = _topic("A", 4)
    merged = dedupe_topics([a, b, a2])
    assert [(t.topic, t.frequency) for t in merged] == [("A", 5), ("B", 2)]
    assert a.frequency == 1
    assert len({t.topic for t in merged}) == len(merged)


def test_rank_insights_orders_by_priority_then_frequency_stably():
    insights = [
        _insight("low-9", Level.LOW, 9),
        _insight("none-50", None, 50),
        _insight("high-1a", Level.HIGH, 1),
        _insight("med-3", Level.MEDIUM, 3),
        _insight("high-2", Level.HIGH, 2),
        _insight("high-1b", Level.HIGH, 1),
    ]
    ranked = [i.id for i in rank_insights(insights)]
    assert ranked == ["high-2", "high-1a", "high-1b", "med-3", "low-9", "none-50"]


def test_report_insights_never_out_of_order_and_capped():
    results = [
        BatchResult(insights=[_insight(f"b{b}-{i}", level, i) for i, level in enumerate([Level.LOW, Level.HIGH, None, Level.MEDIUM])])
        for b in range(4)
    ]
    report = aggregate(results, [make_email(1)])
    assert len(report.insights) == 10
    keys = [((i.priority.rank if i.priority else 0), i.frequency) for i in report.insights]
    assert keys == sorted(keys, reverse=True)


def test_sentiment_score_bounds():
    assert sentiment_score(SentimentBreakdown()) == 50
    assert sentiment_score(SentimentBreakdown(positive=4)) == 100
    assert sentiment_score(SentimentBreakdown(negative=4)) == 0
    assert sentiment_score(SentimentBreakdown(positive=1, negative=0, neutral=3)) == 63
    for pos, neg, neu in itertools.product(range(4), repeat=3):
        score = sentiment_score(SentimentBreakdown(pos, neg, neu))
        assert 0 <= score <= 100


def test_metrics_come_from_records():
    records = [
        make_email(1, sender=" ana@example.com "),
        make_email(2, sender="ana@example.com"),
        make_project(3, created_by="joe"),
        make_email(4, sender=None),
    ]
    results = [
        BatchResult(
            insights=[_insight("x", Level.HIGH, 1, urgency=Level.HIGH), _insight("y", Level.LOW, 1)],
            sentiment_breakdown=SentimentBreakdown(positive=2, negative=0, neutral=2),
        )
    ]
    report = aggregate(results, records)
    assert report.metrics.email_volume == 4
    assert report.metrics.participation_rate == 3
    assert report.metrics.alert_count == 1
    assert report.metrics.sentiment_score == 75
    assert report.source_breakdown == {"t5t_email": 3, "polly_project": 1}
    assert count_participants(records) == 3


def test_summary_highlights_and_key_findings():
    records = [make_email(1, sender="ana"), make_email(2, sender="ana"), make_email(3, sender="lee")]
    results = [
        BatchResult(
            insights=[
                _insight("a", Level.HIGH, 3, topic="Renewals", description="Renewals are due"),
                _insight("b", Level.MEDIUM, 1, description="Onboarding is slow!"),
            ],
            trending_topics=[_topic("Pricing", 2, description="Questions on price"), _topic("Support", 1)],
            key_findings=["Raw finding one", "Raw finding two", "Raw finding three", "Raw finding four"],
        ),
        BatchResult(key_findings=["Renewals are due"]),
    ]
    report = aggregate(results, records)

    assert report.executive_summary == "Renewals are due."
    assert report.summary_highlights == [
        "Onboarding is slow!",
        "Frequent themes: Pricing and Support.",
        "ana shared 2 updates.",
    ]
    assert report.recommended_action == "Prioritize Renewals: Renewals are due."
    assert len(report.key_findings) <= 6
    assert len(set(report.key_findings)) == len(report.key_findings)
    assert report.key_findings[:4] == [report.executive_summary, *report.summary_highlights]
    assert report.key_findings[4] == "Pricing: Questions on price."


def test_topic_only_report_recommends_coordination():
    results = [BatchResult(trending_topics=[_topic("Launch", 4)])]
    report = aggregate(results, [make_email(1, sender="solo")])
    assert report.executive_summary == "Frequent themes: Launch."
    assert report.recommended_action == "Coordinate next steps on Launch to keep momentum."
    assert report.summary_highlights == ["solo shared 1 update."]


def test_no_material_falls_back_to_channel_summary():
    report = aggregate([BatchResult()], [make_email(1, sender="   ")])
    assert report.executive_summary == "Communications include 1 updates across 1 channels."
    assert report.summary_highlights == []
    assert report.recommended_action == "Review recent communications for actionable follow-ups."
    assert report.metrics.participation_rate == 0


def test_missing_sender_counts_as_unknown_participant():
    records = [make_email(1, sender=None), make_project(2, created_by=None)]
    assert count_participants(records) == 1


def test_empty_records_return_canonical_empty_report():
    report = aggregate([], [])
    assert report == empty_report()
    assert report.metrics.email_volume == 0
    assert report.key_findings == ["No data available for analysis"]
    assert report.executive_summary == "No data available for intelligence analysis"
    assert report.recommended_action == "No immediate actions available."
    assert report.source_breakdown == {}


def test_format_list_and_ensure_sentence():
    assert format_list([]) == ""
    assert format_list(["A"]) == "A"
    assert format_list(["A", "B"]) == "A and B"
    assert format_list(["A", "B", "C"]) == "A, B, and C"
    assert ensure_sentence("  done  ") == "done."
    assert ensure_sentence("Really?") == "Really?"
    assert ensure_sentence("   ") is None
    assert ensure_sentence(None) is None
