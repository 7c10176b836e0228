from __future__ import annotations

import random
from datetime import date, timedelta

from tracker.db import q, ensure_schema
from tracker.services.audit import Figures
from tracker.services.branches import create_branch, find_branch_for_manager, list_branches
from tracker.services.entries import save_entry
from tracker.services.executives import create_executive, list_executives


DEFAULT_BRANCHES = [
    ("Main Branch", "main@card.com"),
    ("Branch B", "branchb@card.com"),
    ("Branch C", "branchc@card.com"),
]
DEFAULT_EXECUTIVES = ["Asha", "Brian", "Chen", "Dina"]


def upsert_reference_data(conn) -> None:
    ensure_schema(conn)

    # A seeded branch may have been renamed or reassigned, so match on either
    names = {b.name.casefold() for b in list_branches(conn)}
    for name, email in DEFAULT_BRANCHES:
        if name.casefold() not in names and find_branch_for_manager(conn, email) is None:
            create_branch(conn, name=name, manager_email=email)


def wipe_all(conn) -> None:
    # Keep schema, delete data.
    for t in ["entry_edits", "daily_entries", "executives", "branches"]:
        conn.execute(f"DELETE FROM {t};")
    conn.commit()


def load_demo_data(conn, *, seed: int = 7, days: int = 5) -> None:
    rng = random.Random(seed)
    upsert_reference_data(conn)

    branches = q(conn, "SELECT id, name, manager_email FROM branches ORDER BY id")
    for br in branches:
        if not list_executives(conn, int(br["id"])):
            for name in DEFAULT_EXECUTIVES:
                create_executive(conn, branch_id=int(br["id"]), name=f"{name} ({br['name']})")

    # Last branch skips today so status reports show a "not entered" branch
    today = date.today()
    for i, br in enumerate(branches):
        for exe in list_executives(conn, int(br["id"])):
            for back in range(days):
                if back == 0 and i == len(branches) - 1:
                    continue
                target = rng.randint(40, 120)
                achieved = int(target * rng.uniform(0.5, 1.1))
                save_entry(
                    conn,
                    branch_id=int(br["id"]),
                    executive_id=exe.id,
                    entry_date=(today - timedelta(days=back)).isoformat(),
                    figures=Figures(target=target, achieved=achieved, cash=int(achieved * rng.uniform(0.6, 1.0))),
                    remarks="Demo entry",
                    editor=str(br["manager_email"]),
                )
