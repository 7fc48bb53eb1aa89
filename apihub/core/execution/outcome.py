"""Outcome classification for executed requests.

Failures other than unknown connections are data on the history entry; this
maps an entry back onto the error taxonomy for logging and summaries.
"""

from enum import Enum

from apihub.infrastructure.storage.models import HistoryEntry

TRANSPORT_FAILURE_STATUS = 0
TRANSPORT_FAILURE_TEXT = "Network Error"


class OutcomeCategory(str, Enum):
    """Outcome categories for executed requests.

    - SUCCESS: 2xx/3xx response
    - UPSTREAM_ERROR: remote API answered with a 4xx/5xx status
    - TRANSPORT_FAILURE: DNS, connect, timeout or TLS failure (status 0)
    """

    SUCCESS = "success"
    UPSTREAM_ERROR = "upstream_error"
    TRANSPORT_FAILURE = "transport_failure"


def classify(entry: HistoryEntry) -> OutcomeCategory:
    if entry.status == TRANSPORT_FAILURE_STATUS:
        return OutcomeCategory.TRANSPORT_FAILURE
    if entry.status >= 400:
        return OutcomeCategory.UPSTREAM_ERROR
    return OutcomeCategory.SUCCESS
