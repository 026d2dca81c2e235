from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, matching what the database stores"""
    return datetime.now(timezone.utc).replace(tzinfo=None)
