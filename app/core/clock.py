"""Time source shared by models and services."""

import datetime
from typing import Callable

Clock = Callable[[], datetime.datetime]


def utc_now() -> datetime.datetime:
    """Timezone-aware current time in UTC."""
    return datetime.datetime.now(datetime.timezone.utc)
