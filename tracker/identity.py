from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from tracker.services.branches import Branch, find_branch_for_manager


@dataclass(frozen=True)
class Identity:
    email: str
    is_admin: bool
    branch: Optional[Branch] = None

    @property
    def has_branch(self) -> bool:
        return self.branch is not None


def resolve_identity(conn, email: str, admin_email: str) -> Identity:
    """Admin, manager of a branch, or signed in with no branch assigned."""
    e = str(email or "").strip().lower()
    if not e:
        raise ValueError("Email is required.")
    if e == str(admin_email).strip().lower():
        return Identity(email=e, is_admin=True)
    return Identity(email=e, is_admin=False, branch=find_branch_for_manager(conn, e))
