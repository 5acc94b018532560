"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List

from billing_service.domain.amount import Amount
from billing_service.domain.exceptions import ValidationError


class LoanFrequency(str, Enum):
    """Installment cadence"""

    WEEKLY = "weekly"

    @classmethod
    def parse(cls, raw: str) -> "LoanFrequency":
        """Case-insensitive lookup, e.g. "Weekly" -> WEEKLY"""
        for frequency in cls:
            if frequency.value == str(raw).lower():
                return frequency
        raise ValidationError(
            f"LoanFrequency should be one of {[f.value for f in cls]}"
        )


class ScheduleStatus(str, Enum):
    UNPAID = "unpaid"
    PAID = "paid"


@dataclass
class LoanSchedule:
    """Single installment in a loan's amortization schedule"""

    id: str
    loan_id: str
    seq: int
    due_date: datetime
    amount_due: Amount
    status: ScheduleStatus = ScheduleStatus.UNPAID


@dataclass
class Loan:
    """Installment loan, fixed at origination"""

    id: str
    borrower_id: str
    principal_amount: Amount
    interest_rate: float
    started_at: datetime
    ended_at: datetime
    payment_frequency: LoanFrequency
    total_payments: int

    # Derived at origination
    loan_term_days: int
    term_amount: Amount

    schedules: List[LoanSchedule] = field(default_factory=list)


@dataclass
class OutstandingLoan:
    """Unpaid total regardless of due date"""

    id: str
    amount: Amount


@dataclass
class PendingLoan:
    """Unpaid total already past due"""

    id: str
    amount: Amount
