import math
from datetime import datetime, tzinfo


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (``round`` would go to even)."""
    return math.floor(value + 0.5)


def format_duration(minutes: int) -> str:
    return f"{minutes // 60}h {minutes % 60}m"


def local_today(tz: tzinfo | None = None) -> str:
    """Today's calendar date in ``tz`` (system local time when omitted)."""
    return datetime.now(tz).date().isoformat()


def local_date_label(timestamp: str, tz: tzinfo | None = None) -> str:
    """Calendar date (YYYY-MM-DD) of an ISO-8601 instant as seen in ``tz``.

    The instant is converted to local time before the date is taken, so
    ``2024-01-15T23:30:00Z`` stays on the 15th west of UTC. Timestamps without
    an offset are already local.
    """
    moment = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    if moment.tzinfo is None:
        if tz is not None:
            moment = moment.replace(tzinfo=tz)
    else:
        moment = moment.astimezone(tz)
    return moment.date().isoformat()
