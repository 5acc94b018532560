"""Delinquency evaluation over a loan's unpaid installments"""

from datetime import datetime
from typing import Sequence

from billing_service.utils.date_utils import local_time

DEFAULT_DELINQUENCY_THRESHOLD = 2


def count_missed_periods(due_dates: Sequence[datetime], now: datetime) -> int:
    """
    Count consecutive past-due installments from the earliest due date.

    Requirements:
    - due_dates are the unpaid installments sorted ascending
    - an installment is missed only if its due date is strictly before now
    - counting stops at the first installment not yet due, so missed
      periods are always a prefix of the list
    """
    now = local_time(now)

    missed = 0
    for due_date in due_dates:
        if local_time(due_date) < now:
            missed += 1
        else:
            break

    return missed


def is_delinquent(
    due_dates: Sequence[datetime],
    now: datetime,
    threshold: int = DEFAULT_DELINQUENCY_THRESHOLD,
) -> bool:
    """
    A loan is delinquent once it has missed more than `threshold` periods.

    With the default threshold of 2, two missed periods is still in good
    standing; the third missed period tips it over.
    """
    return count_missed_periods(due_dates, now) > threshold
