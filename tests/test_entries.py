from __future__ import annotations

import pytest

from tracker.services.audit import TrackedField
from tracker.services.entries import (
    correct_entry,
    delete_entry,
    get_entry,
    get_entry_by_id,
    list_entries,
    save_entry,
)
from tracker.services.executives import create_executive

from conftest import figures

DAY = "2024-05-01"


def _save(conn, branch_id, executive_id, t, a, c, *, day=DAY, remarks="", editor="mgr@x.com", now=None):
    return save_entry(
        conn,
        branch_id=branch_id,
        executive_id=executive_id,
        entry_date=day,
        figures=figures(t, a, c),
        remarks=remarks,
        editor=editor,
        now=now,
    )


class TestOwnerSave:
    def test_first_save_creates(self, conn, branch_id, executive_id):
        res = _save(conn, branch_id, executive_id, 100, 80, 50, remarks=" ok ")
        assert res.is_update is False
        assert res.appended == ()
        stored = get_entry(conn, executive_id, DAY)
        assert stored is not None
        assert (stored.target, stored.achieved, stored.cash, stored.remarks) == (100, 80, 50, "ok")

    def test_second_save_updates_in_place(self, conn, branch_id, executive_id):
        first = _save(conn, branch_id, executive_id, 100, 80, 50)
        second = _save(conn, branch_id, executive_id, 120, 80, 50, now="2024-05-01T12:00:00+00:00")
        assert second.is_update is True
        assert second.entry.id == first.entry.id
        assert len(list_entries(conn, executive_id=executive_id)) == 1

        [rec] = second.appended
        assert (rec.field, rec.old_value, rec.new_value) == (TrackedField.TARGET, 100, 120)
        assert rec.edited_by == "mgr@x.com"
        assert get_entry(conn, executive_id, DAY).history == (rec,)

    def test_zero_to_value_not_logged(self, conn, branch_id, executive_id):
        _save(conn, branch_id, executive_id, 0, 0, 0)
        res = _save(conn, branch_id, executive_id, 10, 5, 5)
        assert res.is_update and res.appended == ()
        assert get_entry(conn, executive_id, DAY).target == 10

    def test_remarks_only_change_not_logged(self, conn, branch_id, executive_id):
        _save(conn, branch_id, executive_id, 10, 5, 5, remarks="a")
        res = _save(conn, branch_id, executive_id, 10, 5, 5, remarks="b")
        assert res.appended == ()
        assert get_entry(conn, executive_id, DAY).remarks == "b"

    def test_rejects_negative(self, conn, branch_id, executive_id):
        with pytest.raises(ValueError):
            _save(conn, branch_id, executive_id, -1, 0, 0)
        assert get_entry(conn, executive_id, DAY) is None

    def test_other_day_is_separate_entry(self, conn, branch_id, executive_id):
        _save(conn, branch_id, executive_id, 10, 5, 5)
        res = _save(conn, branch_id, executive_id, 10, 5, 5, day="2024-05-02")
        assert res.is_update is False
        assert len(list_entries(conn, executive_id=executive_id)) == 2


class TestAdminCorrection:
    def test_logs_every_difference_including_from_zero(self, conn, branch_id, executive_id):
        created = _save(conn, branch_id, executive_id, 0, 0, 0)
        res = correct_entry(
            conn,
            created.entry.id,
            figures=figures(10, 0, 3),
            editor="admin@card.com (Admin)",
            now="2024-05-02T09:00:00+00:00",
        )
        assert [(r.field, r.old_value, r.new_value) for r in res.appended] == [
            (TrackedField.TARGET, 0, 10),
            (TrackedField.CASH, 0, 3),
        ]
        assert all(r.edited_by == "admin@card.com (Admin)" for r in res.appended)

    def test_history_accumulates_across_paths(self, conn, branch_id, executive_id):
        created = _save(conn, branch_id, executive_id, 10, 5, 5)
        _save(conn, branch_id, executive_id, 12, 5, 5)
        correct_entry(conn, created.entry.id, figures=figures(12, 6, 5), editor="admin (Admin)")
        history = get_entry_by_id(conn, created.entry.id).history
        assert [r.field for r in history] == [TrackedField.TARGET, TrackedField.ACH]
        assert [r.edited_by for r in history] == ["mgr@x.com", "admin (Admin)"]

    def test_missing_entry(self, conn):
        with pytest.raises(ValueError):
            correct_entry(conn, 999, figures=figures(1, 1, 1), editor="admin")


class TestQueries:
    def test_filters_and_order(self, conn, branch_id, executive_id):
        other = create_executive(conn, branch_id=branch_id + 100, name="Elsewhere")
        for day in ("2024-05-01", "2024-05-02", "2024-05-03"):
            _save(conn, branch_id, executive_id, 10, 5, 5, day=day)
        _save(conn, branch_id + 100, other, 10, 5, 5, day="2024-05-02")

        ranged = list_entries(conn, start="2024-05-02", end="2024-05-03")
        assert [e.entry_date for e in ranged] == ["2024-05-03", "2024-05-02", "2024-05-02"]

        assert len(list_entries(conn, branch_id=branch_id)) == 3
        assert len(list_entries(conn, entry_date="2024-05-02")) == 2
        assert len(list_entries(conn, branch_id=branch_id, entry_date="2024-05-02")) == 1

    def test_rejects_bad_date(self, conn):
        with pytest.raises(ValueError):
            list_entries(conn, entry_date="05/01/2024")

    def test_delete_removes_entry_and_history(self, conn, branch_id, executive_id):
        res = _save(conn, branch_id, executive_id, 10, 5, 5)
        _save(conn, branch_id, executive_id, 11, 5, 5)
        delete_entry(conn, res.entry.id)
        assert get_entry_by_id(conn, res.entry.id) is None
        assert conn.execute("SELECT COUNT(*) FROM entry_edits").fetchone()[0] == 0
