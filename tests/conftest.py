from __future__ import annotations

import pytest

from tracker.db import connect, ensure_schema
from tracker.services.audit import EditRecord, Figures, TrackedField
from tracker.services.branches import create_branch
from tracker.services.entries import DailyEntry
from tracker.services.executives import create_executive


@pytest.fixture
def conn(tmp_path):
    c = connect(tmp_path / "test.db")
    ensure_schema(c)
    yield c
    c.close()


@pytest.fixture
def branch_id(conn):
    return create_branch(conn, name="Central", manager_email="Central.Manager@Example.com ")


@pytest.fixture
def executive_id(conn, branch_id):
    return create_executive(conn, branch_id=branch_id, name="Asha", phone="0700 000 000")


def make_entry(
    executive_id: int = 1,
    target: int = 0,
    achieved: int = 0,
    cash: int = 0,
    *,
    branch_id: int = 1,
    entry_date: str = "2024-05-01",
    entry_id: int = 0,
    history: tuple = (),
) -> DailyEntry:
    return DailyEntry(
        id=entry_id,
        branch_id=branch_id,
        executive_id=executive_id,
        entry_date=entry_date,
        target=target,
        achieved=achieved,
        cash=cash,
        history=history,
    )


def make_record(field: TrackedField, old: int, new: int, by: str = "someone") -> EditRecord:
    return EditRecord(field=field, old_value=old, new_value=new, edited_at="2024-05-01T08:00:00+00:00", edited_by=by)


def figures(target: int, achieved: int, cash: int) -> Figures:
    return Figures(target=target, achieved=achieved, cash=cash)
