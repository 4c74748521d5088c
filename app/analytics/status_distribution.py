from collections import Counter
from typing import List, Sequence

from app.models.application import ApplicationRecord, ApplicationStatus
from app.schemas.analytics import StatusDistribution
from app.analytics.utils import percentage


def count_by_status(applications: Sequence[ApplicationRecord]) -> "Counter[ApplicationStatus]":
    return Counter(app.status for app in applications)


def calculate_status_distribution(applications: Sequence[ApplicationRecord]) -> List[StatusDistribution]:
    """
    Count applications per status and convert the counts to percentages.

    Only statuses present in the input are listed, in first-encountered order.
    An empty input gives an empty list.
    """
    total = len(applications)
    if total == 0:
        return []

    return [
        StatusDistribution(status=status, count=count, percentage=percentage(count, total))
        for status, count in count_by_status(applications).items()
    ]
