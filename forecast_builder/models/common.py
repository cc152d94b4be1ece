"""Common helpers shared across models."""

from datetime import UTC, datetime, timedelta


def utc_now() -> datetime:
    return datetime.now(UTC)


def epoch_ms(dt: datetime) -> int:
    return int(dt.timestamp() * 1000)


def expiration_ms(days: int) -> int:
    """Epoch milliseconds `days` from now."""
    return epoch_ms(utc_now() + timedelta(days=days))
