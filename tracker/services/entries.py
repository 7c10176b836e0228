from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from tracker.db import q, x, x_many
from tracker.services.audit import (
    AuditPolicy,
    EditRecord,
    Figures,
    TrackedField,
    build_history,
    field_changes,
)
from tracker.utils import iso_now, parse_iso_date, percent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DailyEntry:
    id: int
    branch_id: int
    executive_id: int
    entry_date: str
    target: int
    achieved: int
    cash: int
    remarks: str = ""
    history: tuple[EditRecord, ...] = field(default_factory=tuple)

    @property
    def figures(self) -> Figures:
        return Figures(target=self.target, achieved=self.achieved, cash=self.cash)

    @property
    def balance(self) -> int:
        return self.target - self.achieved

    @property
    def achievement_percent(self) -> float:
        return percent(self.achieved, self.target)


@dataclass(frozen=True)
class SaveResult:
    entry: DailyEntry
    is_update: bool
    appended: tuple[EditRecord, ...]


def _validate_figures(figures: Figures) -> Figures:
    for name in ("target", "achieved", "cash"):
        v = getattr(figures, name)
        if int(v) < 0:
            raise ValueError("Target, ACH and Cash must be zero or more.")
    return Figures(target=int(figures.target), achieved=int(figures.achieved), cash=int(figures.cash))


def _history_for(conn, entry_ids: list[int]) -> dict[int, list[EditRecord]]:
    if not entry_ids:
        return {}
    marks = ",".join("?" for _ in entry_ids)
    rows = q(
        conn,
        f"""
        SELECT entry_id, field, old_value, new_value, edited_at, edited_by
        FROM entry_edits
        WHERE entry_id IN ({marks})
        ORDER BY id ASC
        """,
        entry_ids,
    )
    out: dict[int, list[EditRecord]] = {}
    for r in rows:
        out.setdefault(int(r["entry_id"]), []).append(
            EditRecord(
                field=TrackedField(r["field"]),
                old_value=int(r["old_value"]),
                new_value=int(r["new_value"]),
                edited_at=str(r["edited_at"]),
                edited_by=str(r["edited_by"]),
            )
        )
    return out


def _to_entries(conn, rows) -> list[DailyEntry]:
    history = _history_for(conn, [int(r["id"]) for r in rows])
    return [
        DailyEntry(
            id=int(r["id"]),
            branch_id=int(r["branch_id"]),
            executive_id=int(r["executive_id"]),
            entry_date=str(r["entry_date"]),
            target=int(r["target_qty"] or 0),
            achieved=int(r["ach_qty"] or 0),
            cash=int(r["cash_qty"] or 0),
            remarks=str(r["remarks"] or ""),
            history=tuple(history.get(int(r["id"]), [])),
        )
        for r in rows
    ]


def get_entry(conn, executive_id: int, entry_date: str) -> Optional[DailyEntry]:
    rows = q(
        conn,
        "SELECT * FROM daily_entries WHERE executive_id=? AND entry_date=?",
        (int(executive_id), parse_iso_date(entry_date).isoformat()),
    )
    found = _to_entries(conn, rows)
    return found[0] if found else None


def get_entry_by_id(conn, entry_id: int) -> Optional[DailyEntry]:
    rows = q(conn, "SELECT * FROM daily_entries WHERE id=?", (int(entry_id),))
    found = _to_entries(conn, rows)
    return found[0] if found else None


def list_entries(
    conn,
    *,
    branch_id: Optional[int] = None,
    executive_id: Optional[int] = None,
    entry_date: Optional[str] = None,
    start: Optional[str] = None,
    end: Optional[str] = None,
) -> list[DailyEntry]:
    """Entries matching every given filter, newest date first. Range bounds are inclusive."""
    where = []
    params: list = []
    if branch_id is not None:
        where.append("branch_id=?")
        params.append(int(branch_id))
    if executive_id is not None:
        where.append("executive_id=?")
        params.append(int(executive_id))
    if entry_date is not None:
        where.append("entry_date=?")
        params.append(parse_iso_date(entry_date).isoformat())
    if start is not None:
        where.append("entry_date>=?")
        params.append(parse_iso_date(start).isoformat())
    if end is not None:
        where.append("entry_date<=?")
        params.append(parse_iso_date(end).isoformat())

    sql = "SELECT * FROM daily_entries"
    if where:
        sql += " WHERE " + " AND ".join(where)
    sql += " ORDER BY entry_date DESC, id ASC"
    return _to_entries(conn, q(conn, sql, params))


def _edit_inserts(entry_id: int, records) -> list[tuple[str, tuple]]:
    return [
        (
            """
            INSERT INTO entry_edits (entry_id, field, old_value, new_value, edited_at, edited_by)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (int(entry_id), r.field.value, int(r.old_value), int(r.new_value), r.edited_at, r.edited_by),
        )
        for r in records
    ]


def _apply_update(
    conn,
    existing: DailyEntry,
    figures: Figures,
    remarks: str,
    editor: str,
    now: str,
    policy: AuditPolicy,
) -> tuple[DailyEntry, tuple[EditRecord, ...]]:
    history = build_history(
        existing.history,
        field_changes(existing.figures, figures),
        editor=editor,
        now=now,
        policy=policy,
    )
    appended = tuple(history[len(existing.history):])

    x_many(
        conn,
        [
            (
                """
                UPDATE daily_entries
                SET target_qty=?, ach_qty=?, cash_qty=?, remarks=?, last_updated=?
                WHERE id=?
                """,
                (figures.target, figures.achieved, figures.cash, remarks, now, int(existing.id)),
            ),
            *_edit_inserts(existing.id, appended),
        ],
    )

    updated = DailyEntry(
        id=existing.id,
        branch_id=existing.branch_id,
        executive_id=existing.executive_id,
        entry_date=existing.entry_date,
        target=figures.target,
        achieved=figures.achieved,
        cash=figures.cash,
        remarks=remarks,
        history=tuple(history),
    )
    return updated, appended


def save_entry(
    conn,
    *,
    branch_id: int,
    executive_id: int,
    entry_date: str,
    figures: Figures,
    remarks: str = "",
    editor: str,
    now: Optional[str] = None,
) -> SaveResult:
    """
    Branch manager save: create the (executive, date) entry the first time,
    update it in place afterwards. Audited with the creation-aware policy.
    """
    figures = _validate_figures(figures)
    day = parse_iso_date(entry_date).isoformat()
    now = now or iso_now()
    remarks = str(remarks or "").strip()

    existing = get_entry(conn, int(executive_id), day)
    if existing is None:
        entry_id = x(
            conn,
            """
            INSERT INTO daily_entries (
                branch_id, executive_id, entry_date,
                target_qty, ach_qty, cash_qty, remarks, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (int(branch_id), int(executive_id), day, figures.target, figures.achieved, figures.cash, remarks, now),
        )
        logger.info("Created entry %s for executive %s on %s", entry_id, executive_id, day)
        entry = DailyEntry(
            id=int(entry_id),
            branch_id=int(branch_id),
            executive_id=int(executive_id),
            entry_date=day,
            target=figures.target,
            achieved=figures.achieved,
            cash=figures.cash,
            remarks=remarks,
        )
        return SaveResult(entry=entry, is_update=False, appended=())

    updated, appended = _apply_update(
        conn, existing, figures, remarks, editor, now, AuditPolicy.CREATION_AWARE
    )
    logger.info("Updated entry %s (%d edit(s) logged)", existing.id, len(appended))
    return SaveResult(entry=updated, is_update=True, appended=appended)


def correct_entry(
    conn,
    entry_id: int,
    *,
    figures: Figures,
    remarks: str = "",
    editor: str,
    now: Optional[str] = None,
) -> SaveResult:
    """Administrator correction: every changed figure is logged."""
    figures = _validate_figures(figures)
    existing = get_entry_by_id(conn, int(entry_id))
    if existing is None:
        raise ValueError("Entry not found.")

    updated, appended = _apply_update(
        conn,
        existing,
        figures,
        str(remarks or "").strip(),
        editor,
        now or iso_now(),
        AuditPolicy.FULL_CORRECTION,
    )
    logger.info("Corrected entry %s (%d edit(s) logged)", existing.id, len(appended))
    return SaveResult(entry=updated, is_update=True, appended=appended)


def delete_entry(conn, entry_id: int) -> None:
    x_many(
        conn,
        [
            ("DELETE FROM entry_edits WHERE entry_id=?", (int(entry_id),)),
            ("DELETE FROM daily_entries WHERE id=?", (int(entry_id),)),
        ],
    )
    logger.info("Deleted entry %s", entry_id)
