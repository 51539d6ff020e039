from datetime import UTC, datetime


def now() -> datetime:
    return datetime.now(UTC)


def short_id(value: str) -> str:
    """Shorten an opaque identifier for log output."""
    return value[:8]
