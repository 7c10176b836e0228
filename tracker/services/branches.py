from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from tracker.db import q, x
from tracker.utils import iso_now, name_sort_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Branch:
    id: int
    name: str
    manager_email: str


def _normalize_name(name: str) -> str:
    s = str(name or "").strip()
    if not s:
        raise ValueError("Branch name is required.")
    return s


def _normalize_email(email: str) -> str:
    s = str(email or "").strip().lower()
    if not s:
        raise ValueError("Manager email is required.")
    return s


def _row_to_branch(r) -> Branch:
    return Branch(id=int(r["id"]), name=str(r["name"]), manager_email=str(r["manager_email"]))


def list_branches(conn) -> list[Branch]:
    rows = q(conn, "SELECT id, name, manager_email FROM branches")
    return sorted((_row_to_branch(r) for r in rows), key=lambda b: name_sort_key(b.name))


def get_branch(conn, branch_id: int) -> Optional[Branch]:
    rows = q(conn, "SELECT id, name, manager_email FROM branches WHERE id=?", (int(branch_id),))
    return _row_to_branch(rows[0]) if rows else None


def find_branch_for_manager(conn, email: str) -> Optional[Branch]:
    rows = q(
        conn,
        "SELECT id, name, manager_email FROM branches WHERE manager_email=? ORDER BY id LIMIT 1",
        (str(email or "").strip().lower(),),
    )
    return _row_to_branch(rows[0]) if rows else None


def create_branch(conn, *, name: str, manager_email: str) -> int:
    branch_id = x(
        conn,
        "INSERT INTO branches (name, manager_email, created_at) VALUES (?, ?, ?)",
        (_normalize_name(name), _normalize_email(manager_email), iso_now()),
    )
    logger.info("Created branch %s", branch_id)
    return branch_id


def update_branch(conn, branch_id: int, *, name: str, manager_email: str) -> None:
    """Rename a branch and/or reassign its manager."""
    if get_branch(conn, branch_id) is None:
        raise ValueError("Branch not found.")
    x(
        conn,
        "UPDATE branches SET name=?, manager_email=? WHERE id=?",
        (_normalize_name(name), _normalize_email(manager_email), int(branch_id)),
    )


def delete_branch(conn, branch_id: int) -> None:
    # Executives and entries of the branch are left in place.
    x(conn, "DELETE FROM branches WHERE id=?", (int(branch_id),))
    logger.info("Deleted branch %s", branch_id)


def branch_names(conn) -> dict[int, str]:
    return {b.id: b.name for b in list_branches(conn)}
