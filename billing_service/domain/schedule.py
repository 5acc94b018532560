"""Amortization schedule generation for installment loans"""

import uuid
from datetime import datetime
from typing import Dict, List

from billing_service.domain.amount import Amount
from billing_service.domain.models import Loan, LoanFrequency, LoanSchedule, ScheduleStatus
from billing_service.utils.date_utils import add_days

# Calendar days covered by one payment period
DAYS_PER_PERIOD: Dict[LoanFrequency, int] = {
    LoanFrequency.WEEKLY: 7,
}


def loan_term_days(payment_frequency: LoanFrequency, total_payments: int) -> int:
    """
    Total loan term in days.

    Raises:
        ValueError: If the frequency has no day count (a new frequency was
            added without updating DAYS_PER_PERIOD)
    """
    try:
        days_per_period = DAYS_PER_PERIOD[payment_frequency]
    except KeyError:
        raise ValueError(f"No day count defined for payment frequency {payment_frequency!r}") from None
    return total_payments * days_per_period


def calculate_term_amount(principal_amount: Amount, interest_rate: float, total_payments: int) -> Amount:
    """
    Per-installment amount with flat interest applied once over the term.

    Example:
        5,000,000 at 10% over 50 payments -> 5,500,000 / 50 = 110,000
    """
    total_amount = principal_amount.to_float() * (1 + interest_rate)
    return Amount.from_float(total_amount / total_payments)


def build_loan(
    borrower_id: str,
    principal_amount: Amount,
    interest_rate: float,
    payment_frequency: LoanFrequency,
    total_payments: int,
    started_at: datetime,
) -> Loan:
    """Assemble a new loan with its full schedule attached"""
    term_days = loan_term_days(payment_frequency, total_payments)

    loan = Loan(
        id=str(uuid.uuid4()),
        borrower_id=borrower_id,
        principal_amount=principal_amount,
        interest_rate=interest_rate,
        started_at=started_at,
        ended_at=add_days(started_at, term_days),
        payment_frequency=payment_frequency,
        total_payments=total_payments,
        loan_term_days=term_days,
        term_amount=calculate_term_amount(principal_amount, interest_rate, total_payments),
    )
    loan.schedules = generate_loan_schedule(loan)
    return loan


def generate_loan_schedule(loan: Loan) -> List[LoanSchedule]:
    """
    Generate one installment per payment, spread over the loan term.

    Due dates use cumulative day allocation, so uneven terms drift by at
    most one day against a naive even split:
        due_date(i) = started_at + floor(loan_term_days * i / total_payments)

    Args:
        loan: Loan with started_at, loan_term_days and term_amount set

    Returns:
        Installments with seq 1..total_payments, all unpaid
    """
    schedules = []
    for seq in range(1, loan.total_payments + 1):
        days = loan.loan_term_days * seq // loan.total_payments
        schedules.append(
            LoanSchedule(
                id=str(uuid.uuid4()),
                loan_id=loan.id,
                seq=seq,
                due_date=add_days(loan.started_at, days),
                amount_due=loan.term_amount,
                status=ScheduleStatus.UNPAID,
            )
        )

    return schedules
