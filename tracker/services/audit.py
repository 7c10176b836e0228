"""
Field-level edit history for daily entries.

Two policies exist and callers pick one explicitly:

- CREATION_AWARE (branch manager saving their own figures): a field that was 0
  before is being filled in for the first time, so it is not logged.
- FULL_CORRECTION (administrator fixing an entry): every difference is logged,
  including changes away from 0.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Sequence


class TrackedField(str, Enum):
    TARGET = "Target"
    ACH = "ACH"
    CASH = "Cash"

    @property
    def attr(self) -> str:
        return _ATTRS[self]


_ATTRS = {
    TrackedField.TARGET: "target",
    TrackedField.ACH: "achieved",
    TrackedField.CASH: "cash",
}

FIELD_ORDER = (TrackedField.TARGET, TrackedField.ACH, TrackedField.CASH)


class AuditPolicy(str, Enum):
    CREATION_AWARE = "creation_aware"
    FULL_CORRECTION = "full_correction"


@dataclass(frozen=True)
class Figures:
    target: int
    achieved: int
    cash: int


@dataclass(frozen=True)
class FieldChange:
    field: TrackedField
    old_value: int
    new_value: int


@dataclass(frozen=True)
class EditRecord:
    field: TrackedField
    old_value: int
    new_value: int
    edited_at: str
    edited_by: str

    def describe(self) -> str:
        return (
            f"{self.field.value} changed from {self.old_value} to {self.new_value}"
            f" • {self.edited_at} by {self.edited_by}"
        )


def field_changes(stored: Figures, incoming: Figures) -> list[FieldChange]:
    return [
        FieldChange(field=f, old_value=int(getattr(stored, f.attr)), new_value=int(getattr(incoming, f.attr)))
        for f in FIELD_ORDER
    ]


def _should_log(change: FieldChange, policy: AuditPolicy) -> bool:
    if change.old_value == change.new_value:
        return False
    if policy is AuditPolicy.CREATION_AWARE:
        return change.old_value != 0
    return True


def build_history(
    existing: Sequence[EditRecord],
    changes: Iterable[FieldChange],
    editor: str,
    now: str,
    policy: AuditPolicy,
) -> list[EditRecord]:
    """Return `existing` plus one record per logged change, Target then ACH then Cash."""
    by_field = {c.field: c for c in changes}
    history = list(existing)
    for f in FIELD_ORDER:
        c = by_field.get(f)
        if c is None or not _should_log(c, policy):
            continue
        history.append(
            EditRecord(
                field=f,
                old_value=int(c.old_value),
                new_value=int(c.new_value),
                edited_at=str(now),
                edited_by=str(editor),
            )
        )
    return history


def admin_editor(identity: str) -> str:
    return f"{identity} (Admin)"
