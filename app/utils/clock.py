from datetime import datetime, timezone, date


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, matching what the columns store."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def today() -> date:
    return utcnow().date()


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
