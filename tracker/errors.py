from __future__ import annotations


class TrackerError(Exception):
    """Base class for record store failures surfaced to the screens."""


class StoreReadError(TrackerError):
    pass


class StoreWriteError(TrackerError):
    pass
