"""
Terminal rendering for analysis reports.

Converts an AnalysisReport into Rich renderables: a summary panel, a metrics
table, ranked insights, trending topics and key findings.
"""

from __future__ import annotations

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .core.types import AnalysisReport, Level

_LEVEL_STYLES = {Level.HIGH: "bold red", Level.MEDIUM: "yellow", Level.LOW: "green"}


def render_report(report: AnalysisReport, console: Console, title: str = "Communication Intelligence") -> None:
    """Print the full report to ``console``."""
    console.print(_summary_panel(report, title))
    console.print(_metrics_table(report))
    if report.insights:
        console.print(_insights_table(report))
    if report.trending_topics:
        console.print(_topics_table(report))
    console.print(_findings_panel(report))


def _summary_panel(report: AnalysisReport, title: str) -> Panel:
    body = Text(report.executive_summary, style="bold")
    parts: list = [body]
    for highlight in report.summary_highlights:
        parts.append(Text(f"• {highlight}"))
    parts.append(Text(""))
    parts.append(Text(f"Recommended: {report.recommended_action}", style="cyan"))
    return Panel(Group(*parts), title=title, expand=True)


def _metrics_table(report: AnalysisReport) -> Table:
    table = Table(title="Metrics", show_header=True)
    table.add_column("Volume", justify="right")
    table.add_column("Participants", justify="right")
    table.add_column("Sentiment", justify="right")
    table.add_column("Alerts", justify="right")
    table.add_column("Sources")
    metrics = report.metrics
    sources = ", ".join(f"{key}={count}" for key, count in report.source_breakdown.items()) or "-"
    table.add_row(
        str(metrics.email_volume),
        str(metrics.participation_rate),
        f"{metrics.sentiment_score}/100",
        str(metrics.alert_count),
        sources,
    )
    return table


def _insights_table(report: AnalysisReport) -> Table:
    table = Table(title="Insights", show_header=True, show_lines=False)
    table.add_column("#", justify="right")
    table.add_column("Topic")
    table.add_column("Priority")
    table.add_column("Urgency")
    table.add_column("Freq", justify="right")
    table.add_column("Conf", justify="right")
    table.add_column("Description", overflow="fold")
    for idx, insight in enumerate(report.insights, start=1):
        table.add_row(
            str(idx),
            insight.topic,
            _level_text(insight.priority),
            _level_text(insight.urgency),
            str(insight.frequency),
            str(insight.confidence),
            insight.description,
        )
    return table


def _topics_table(report: AnalysisReport) -> Table:
    table = Table(title="Trending topics", show_header=True)
    table.add_column("Topic")
    table.add_column("Freq", justify="right")
    table.add_column("Urgency")
    table.add_column("Sentiment")
    table.add_column("Description", overflow="fold")
    for topic in report.trending_topics:
        table.add_row(
            topic.topic,
            str(topic.frequency),
            _level_text(topic.urgency),
            topic.sentiment.value,
            topic.description,
        )
    return table


def _findings_panel(report: AnalysisReport) -> Panel:
    lines = [Text(f"{idx}. {finding}") for idx, finding in enumerate(report.key_findings, start=1)]
    return Panel(Group(*lines), title="Key findings", expand=True)


def _level_text(level: Level | None) -> Text:
    if level is None:
        return Text("-", style="dim")
    return Text(level.value, style=_LEVEL_STYLES[level])
