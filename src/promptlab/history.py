"""In-memory action history, most recent first."""
from __future__ import annotations

import html
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable


class HistoryAction(str, Enum):
    SIMULATION_RUN = "Simulation Run"
    PROMPT_IMPROVED = "Prompt Improved"


@dataclass(frozen=True)
class HistoryEntry:
    timestamp: str
    action: HistoryAction
    details: str


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _isoformat(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class HistoryLog:
    """Append-only log of completed actions.

    Entries are never mutated or removed. ``entries()`` returns them newest
    first. Timestamps never go backwards, even if the wall clock does.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or _utc_now
        self._entries: list[HistoryEntry] = []
        self._last: datetime | None = None

    def record(self, action: HistoryAction, details: str) -> HistoryEntry:
        moment = self._clock()
        if self._last is not None and moment < self._last:
            moment = self._last
        self._last = moment
        entry = HistoryEntry(timestamp=_isoformat(moment), action=HistoryAction(action), details=details)
        self._entries.insert(0, entry)
        return entry

    def entries(self) -> list[HistoryEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


_MARKDOWN_SPECIAL = re.compile(r"([\\`*_{}\[\]()#+\-.!|~])")


def escape_markdown(text: str) -> str:
    """Render ``text`` literally inside Markdown: no HTML, no emphasis, no headings."""
    escaped = _MARKDOWN_SPECIAL.sub(r"\\\1", html.escape(text, quote=False))
    return escaped.replace("\n", "  \n")


def format_history_markdown(entries: list[HistoryEntry]) -> str:
    if not entries:
        return "No actions yet."
    blocks = []
    for entry in entries:
        moment = datetime.fromisoformat(entry.timestamp.replace("Z", "+00:00")).astimezone()
        blocks.append(
            f"<sub>{moment.strftime('%Y-%m-%d %H:%M:%S')}</sub>  \n"
            f"**{entry.action.value}**  \n"
            f"{escape_markdown(entry.details)}"
        )
    return "\n\n---\n\n".join(blocks)
