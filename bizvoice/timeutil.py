"""Clock helpers shared by the ledger and analytics services."""

from datetime import datetime
from typing import Callable

Clock = Callable[[], datetime]


def local_now() -> datetime:
    """Current time as an aware datetime in the host's local zone."""
    return datetime.now().astimezone()


def align_to(value: datetime, reference: datetime) -> datetime:
    """
    Express value in the same zone convention as reference.

    Aware values are converted to reference's zone. Naive values are
    taken to already be in reference's zone. When reference is naive,
    aware values are converted to host local time and made naive.
    """
    if reference.tzinfo is not None:
        if value.tzinfo is None:
            return value.replace(tzinfo=reference.tzinfo)
        return value.astimezone(reference.tzinfo)

    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value
