from datetime import datetime, timezone


def utcnow() -> datetime:
    """Timezone-aware UTC timestamp used for all column defaults."""
    return datetime.now(timezone.utc)
