from __future__ import annotations

import logging
import sys
import unicodedata
from datetime import datetime, date, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def iso_today() -> str:
    return date.today().isoformat()


def iso_now() -> str:
    # Use UTC ISO timestamps for consistency.
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def percent(part: float, whole: float) -> float:
    # Zero whole means zero percent, not an error.
    return float(part) * 100.0 / float(whole) if whole else 0.0


def format_percent(value: float, places: int = 1) -> str:
    """Round half-up to a fixed number of places, independent of locale."""
    quant = Decimal(1).scaleb(-places)
    return str(Decimal(str(value)).quantize(quant, rounding=ROUND_HALF_UP))


def parse_quantity(raw: Union[str, int, None]) -> int:
    """Form input to a non-negative integer quantity. Blank means 0."""
    if raw is None:
        return 0
    if isinstance(raw, int):
        value = raw
    else:
        s = str(raw).strip()
        if not s:
            return 0
        try:
            value = int(s)
        except ValueError:
            raise ValueError(f"'{s}' is not a whole number.")
    if value < 0:
        raise ValueError("Quantities must be zero or more.")
    return value


def parse_iso_date(value: Union[str, date]) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise ValueError(f"Invalid date '{value}'. Use YYYY-MM-DD.")


def name_sort_key(name: str) -> tuple[str, str]:
    # Accent- and case-insensitive ordering, original spelling as tie-break.
    decomposed = unicodedata.normalize("NFKD", str(name))
    base = "".join(c for c in decomposed if not unicodedata.combining(c))
    return base.casefold(), str(name)


def configure_logging(level: Optional[str] = "INFO") -> None:
    root = logging.getLogger()
    if any(getattr(h, "_tracker_handler", False) for h in root.handlers):
        root.setLevel(str(level or "INFO").upper())
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._tracker_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(str(level or "INFO").upper())
