"""UTC datetime utilities."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def epoch_millis(moment: datetime | None = None) -> int:
    """Milliseconds since the Unix epoch (used in gateway receipts)."""
    return int((moment or utc_now()).timestamp() * 1000)


def isoformat_or_none(moment: datetime | None) -> str | None:
    return moment.isoformat() if moment else None
