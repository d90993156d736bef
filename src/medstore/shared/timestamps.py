from datetime import UTC


def as_utc(moment):
    """``moment`` as an aware UTC datetime.

    SQL providers hand back naive timestamps, which are stored in UTC.
    """
    if moment is None:
        return None
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)
