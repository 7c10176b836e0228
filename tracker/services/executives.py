from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from tracker.db import q, x
from tracker.utils import iso_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Executive:
    id: int
    branch_id: int
    name: str
    phone: str = ""


def _normalize_name(name: str) -> str:
    s = str(name or "").strip()
    if not s:
        raise ValueError("Executive name is required.")
    return s


def _row_to_executive(r) -> Executive:
    return Executive(
        id=int(r["id"]),
        branch_id=int(r["branch_id"]),
        name=str(r["name"]),
        phone=str(r["phone"] or ""),
    )


def list_executives(conn, branch_id: Optional[int] = None) -> list[Executive]:
    if branch_id is None:
        rows = q(conn, "SELECT id, branch_id, name, phone FROM executives ORDER BY id")
    else:
        rows = q(
            conn,
            "SELECT id, branch_id, name, phone FROM executives WHERE branch_id=? ORDER BY id",
            (int(branch_id),),
        )
    return [_row_to_executive(r) for r in rows]


def create_executive(conn, *, branch_id: int, name: str, phone: Optional[str] = None) -> int:
    exec_id = x(
        conn,
        "INSERT INTO executives (branch_id, name, phone, created_at) VALUES (?, ?, ?, ?)",
        (int(branch_id), _normalize_name(name), str(phone or "").strip(), iso_now()),
    )
    logger.info("Created executive %s in branch %s", exec_id, branch_id)
    return exec_id


def update_executive(conn, executive_id: int, *, name: str, phone: Optional[str] = None) -> None:
    x(
        conn,
        "UPDATE executives SET name=?, phone=? WHERE id=?",
        (_normalize_name(name), str(phone or "").strip(), int(executive_id)),
    )


def delete_executive(conn, executive_id: int) -> None:
    # Entries keep their executive_id; they show as "Unknown" afterwards.
    x(conn, "DELETE FROM executives WHERE id=?", (int(executive_id),))
    logger.info("Deleted executive %s", executive_id)


def executive_names(conn, branch_id: Optional[int] = None) -> dict[int, str]:
    return {e.id: e.name for e in list_executives(conn, branch_id)}
