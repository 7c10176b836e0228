"""
Totals, achievement percentages and lowest-performer rankings.

Everything here is a pure function over entries already fetched from the
store. Name lookups are plain mappings passed in by the caller.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Iterable, Mapping, Optional, Sequence, Union

from tracker.services.entries import DailyEntry
from tracker.utils import parse_iso_date, percent

LOW_THRESHOLD = 70.0
HIGH_THRESHOLD = 90.0

UNKNOWN_NAME = "Unknown"


class Performance(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def classify(pct: float) -> Performance:
    """< 70 is low, 70..90 (both inclusive) is medium, above 90 is high."""
    if pct < LOW_THRESHOLD:
        return Performance.LOW
    if pct <= HIGH_THRESHOLD:
        return Performance.MEDIUM
    return Performance.HIGH


@dataclass(frozen=True)
class Summary:
    total_target: int
    total_achieved: int
    total_cash: int
    balance: int
    achievement_percent: float


@dataclass(frozen=True)
class RankedExecutive:
    executive_id: int
    name: str
    total_target: int
    total_achieved: int
    avg_percent: float


def summarize_window(entries: Iterable[DailyEntry]) -> Summary:
    total_target = 0
    total_achieved = 0
    total_cash = 0
    for e in entries:
        total_target += int(e.target)
        total_achieved += int(e.achieved)
        total_cash += int(e.cash)

    return Summary(
        total_target=total_target,
        total_achieved=total_achieved,
        total_cash=total_cash,
        balance=total_target - total_achieved,
        achievement_percent=percent(total_achieved, total_target),
    )


def rank_lowest_performers(
    entries: Iterable[DailyEntry],
    n: int,
    executive_name_of: Optional[Mapping[int, str]] = None,
) -> list[RankedExecutive]:
    """
    Worst-first executives by ratio of summed achieved to summed target.

    Executives whose cumulative target is 0 are left out. Ties keep the order
    in which executives first appear in `entries`.
    """
    names = executive_name_of or {}
    totals: dict[int, list[int]] = {}
    for e in entries:
        acc = totals.setdefault(int(e.executive_id), [0, 0])
        acc[0] += int(e.target)
        acc[1] += int(e.achieved)

    ranked = [
        RankedExecutive(
            executive_id=exec_id,
            name=names.get(exec_id, UNKNOWN_NAME),
            total_target=tgt,
            total_achieved=ach,
            avg_percent=percent(ach, tgt),
        )
        for exec_id, (tgt, ach) in totals.items()
        if tgt > 0
    ]
    ranked.sort(key=lambda r: r.avg_percent)
    return ranked[: max(0, int(n))]


def trailing_window(end: Union[str, date], days: int) -> tuple[str, str]:
    """Inclusive (start, end) ISO dates covering `days` calendar days up to `end`."""
    if int(days) < 1:
        raise ValueError("A window covers at least one day.")
    end_d = parse_iso_date(end)
    start_d = end_d - timedelta(days=int(days) - 1)
    return start_d.isoformat(), end_d.isoformat()


def entries_in_window(entries: Sequence[DailyEntry], start: str, end: str) -> list[DailyEntry]:
    lo = parse_iso_date(start).isoformat()
    hi = parse_iso_date(end).isoformat()
    return [e for e in entries if lo <= e.entry_date <= hi]
