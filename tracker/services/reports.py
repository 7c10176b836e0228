"""
Telegram-ready status messages (HTML parse mode).

All functions are deterministic: branches are ordered by name, percentages
are rounded half-up to fixed places, and nothing depends on the process locale.
"""
from __future__ import annotations

import html
from dataclasses import dataclass
from typing import Iterable, Sequence

from tracker.services.aggregation import Performance, classify
from tracker.services.branches import Branch
from tracker.services.entries import DailyEntry
from tracker.utils import format_percent, name_sort_key, parse_iso_date, percent

STATUS_MARKERS = {
    Performance.LOW: "🔴",
    Performance.MEDIUM: "🟡",
    Performance.HIGH: "🟢",
}


@dataclass(frozen=True)
class BranchSummary:
    branch_name: str
    has_entry: bool
    total_target: int = 0
    total_achieved: int = 0
    executive_count: int = 0


@dataclass(frozen=True)
class EntryNotice:
    branch_name: str
    executive_name: str
    entry_date: str
    target: int
    achieved: int
    cash: int
    is_update: bool


def status_marker(pct: float) -> str:
    return STATUS_MARKERS[classify(pct)]


def _esc(text: str) -> str:
    return html.escape(str(text), quote=False)


def _branch_line(name: str, achieved: int, target: int) -> str:
    pct = percent(achieved, target)
    # Marker follows the unrounded percent, so 69.6 shows as red next to "70%"
    return f"   {status_marker(pct)} {_esc(name)}: {achieved}/{target} ({format_percent(pct, 0)}%)\n"


def summarize_branches(branches: Sequence[Branch], entries: Iterable[DailyEntry]) -> list[BranchSummary]:
    """One BranchSummary per branch from the entries given (usually a single day)."""
    totals: dict[int, list[int]] = {}
    execs: dict[int, set[int]] = {}
    for e in entries:
        acc = totals.setdefault(int(e.branch_id), [0, 0])
        acc[0] += int(e.target)
        acc[1] += int(e.achieved)
        execs.setdefault(int(e.branch_id), set()).add(int(e.executive_id))

    out = []
    for b in branches:
        tgt, ach = totals.get(b.id, (0, 0))
        out.append(
            BranchSummary(
                branch_name=b.name,
                has_entry=b.id in totals,
                total_target=tgt,
                total_achieved=ach,
                executive_count=len(execs.get(b.id, ())),
            )
        )
    return out


def format_summary_report(report_date: str, summaries: Sequence[BranchSummary]) -> str:
    ordered = sorted(summaries, key=lambda s: name_sort_key(s.branch_name))
    entered = [s for s in ordered if s.has_entry]
    not_entered = [s for s in ordered if not s.has_entry]

    total_target = sum(int(s.total_target) for s in entered)
    total_ach = sum(int(s.total_achieved) for s in entered)
    overall = format_percent(percent(total_ach, total_target), 1)

    message = "📊 <b>Daily Collection Report</b>\n"
    message += f"📅 Date: {report_date}\n\n"

    message += f"✅ <b>Branches with Entry ({len(entered)})</b>\n"
    if not entered:
        message += "   No entries yet\n"
    for s in entered:
        message += _branch_line(s.branch_name, int(s.total_achieved), int(s.total_target))

    message += f"\n❌ <b>Branches without Entry ({len(not_entered)})</b>\n"
    if not not_entered:
        message += "   All branches have entered!\n"
    for s in not_entered:
        message += f"   ⚠️ {_esc(s.branch_name)}\n"

    message += "\n📈 <b>Overall Summary</b>\n"
    message += f"   Total Target: {total_target}\n"
    message += f"   Total ACH: {total_ach}\n"
    message += f"   Achievement: {total_ach}/{total_target} ({overall}%)\n"
    message += f"   Branches Reported: {len(entered)}/{len(summaries)}"
    return message


def format_entry_notification(notice: EntryNotice) -> str:
    balance = int(notice.target) - int(notice.achieved)
    pct = percent(notice.achieved, notice.target)
    action = "✏️ Updated" if notice.is_update else "📝 New Entry"

    message = f"{action}\n\n"
    message += f"🏢 <b>{_esc(notice.branch_name)}</b>\n"
    message += f"👤 Executive: {_esc(notice.executive_name)}\n"
    message += f"📅 Date: {notice.entry_date}\n\n"
    message += f"🎯 Target: {notice.target}\n"
    message += f"✅ ACH: {notice.achieved}\n"
    message += f"💵 Cash: {notice.cash}\n"
    message += f"📊 Balance: {balance}\n"
    message += f"{status_marker(pct)} Achievement: {format_percent(pct, 1)}%"
    return message


def format_branch_status_update(
    report_date: str,
    all_branches: Sequence[Branch],
    entries_for_date: Iterable[DailyEntry],
) -> str:
    """
    Which branches have entered figures for `report_date` and which have not.

    Entries for other dates are ignored, so callers may pass a wider list.
    """
    day = parse_iso_date(report_date).isoformat()
    todays = [e for e in entries_for_date if e.entry_date == day]
    summaries = summarize_branches(all_branches, todays)

    entered = sorted((s for s in summaries if s.has_entry), key=lambda s: name_sort_key(s.branch_name))
    not_entered = sorted((s for s in summaries if not s.has_entry), key=lambda s: name_sort_key(s.branch_name))

    total_target = sum(s.total_target for s in entered)
    total_ach = sum(s.total_achieved for s in entered)
    overall = format_percent(percent(total_ach, total_target), 1)

    message = "📋 <b>Entry Status Update</b>\n"
    message += f"📅 {day}\n\n"

    message += f"✅ <b>Entered ({len(entered)}/{len(summaries)})</b>\n"
    if not entered:
        message += "   None yet\n"
    for s in entered:
        message += _branch_line(s.branch_name, s.total_achieved, s.total_target)

    message += f"\n❌ <b>Not Entered ({len(not_entered)})</b>\n"
    if not summaries:
        message += "   No branches configured\n"
    elif not not_entered:
        message += "   ✨ All branches reported!\n"
    for s in not_entered:
        message += f"   ⚠️ {_esc(s.branch_name)}\n"

    message += f"\n📈 <b>Total: {total_ach}/{total_target} ({overall}%)</b>"
    return message
