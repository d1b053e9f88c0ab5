"""Unit tests for the action history log."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from promptlab.history import HistoryAction, HistoryLog, format_history_markdown


class FakeClock:
    """Clock returning a scripted sequence of instants."""

    def __init__(self, *moments: datetime) -> None:
        self.moments = list(moments)

    def __call__(self) -> datetime:
        return self.moments.pop(0)


START = datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)


def test_record_prepends_entries() -> None:
    log = HistoryLog(clock=FakeClock(START, START + timedelta(seconds=1), START + timedelta(seconds=2)))

    log.record(HistoryAction.SIMULATION_RUN, "first")
    log.record(HistoryAction.PROMPT_IMPROVED, "second")
    log.record(HistoryAction.SIMULATION_RUN, "third")

    entries = log.entries()
    assert len(entries) == len(log) == 3
    assert [e.details for e in entries] == ["third", "second", "first"]
    oldest_first = [e.timestamp for e in reversed(entries)]
    assert oldest_first == sorted(oldest_first)


def test_timestamp_is_iso_utc_with_millis() -> None:
    log = HistoryLog(clock=FakeClock(START))

    entry = log.record(HistoryAction.SIMULATION_RUN, "run")

    assert entry.timestamp == "2024-01-02T03:04:05.678Z"
    assert entry.action is HistoryAction.SIMULATION_RUN


def test_timestamps_never_go_backwards() -> None:
    log = HistoryLog(clock=FakeClock(START, START - timedelta(minutes=5)))

    first = log.record(HistoryAction.SIMULATION_RUN, "a")
    second = log.record(HistoryAction.SIMULATION_RUN, "b")

    assert second.timestamp == first.timestamp


def test_entries_returns_a_copy() -> None:
    log = HistoryLog()
    log.record(HistoryAction.SIMULATION_RUN, "a")

    log.entries().clear()

    assert len(log) == 1


def test_format_history_markdown() -> None:
    log = HistoryLog(clock=FakeClock(START))
    assert format_history_markdown(log.entries()) == "No actions yet."

    log.record(HistoryAction.PROMPT_IMPROVED, "New prompt: x")
    rendered = format_history_markdown(log.entries())

    assert "**Prompt Improved**" in rendered
    assert "New prompt: x" in rendered


def test_format_history_markdown_escapes_details() -> None:
    log = HistoryLog(clock=FakeClock(START))
    log.record(HistoryAction.PROMPT_IMPROVED, "New prompt: # Title *bold* <b>x</b>")

    rendered = format_history_markdown(log.entries())

    assert "New prompt: \\# Title \\*bold\\* &lt;b&gt;x&lt;/b&gt;" in rendered
    assert "<b>" not in rendered
