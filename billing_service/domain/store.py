"""Persistence contract required by the billing engine"""

from datetime import datetime
from typing import List, Protocol

from billing_service.domain.amount import Amount
from billing_service.domain.models import Loan, LoanSchedule


class LoanStore(Protocol):
    """
    Storage operations for loans and their schedules.

    Writes that touch several rows (loan + schedule creation, bulk
    mark-paid) must be atomic. Errors propagate to the caller unchanged.
    """

    def create_loan(self, loan: Loan) -> None:
        """Persist the loan together with loan.schedules, all or nothing"""
        ...

    def get_loan_by_id(self, loan_id: str, for_update: bool = False) -> Loan:
        """Raises LoanNotFoundError when absent"""
        ...

    def get_schedules(self, loan_id: str) -> List[LoanSchedule]:
        ...

    def get_outstanding(self, loan_id: str) -> Amount:
        """Sum of unpaid installments regardless of due date"""
        ...

    def get_total_pending(self, loan_id: str, as_of: datetime) -> Amount:
        """Sum of unpaid installments with due_date < as_of"""
        ...

    def get_unpaid_due_dates(self, loan_id: str) -> List[datetime]:
        """Due dates of unpaid installments, ascending"""
        ...

    def mark_pending_as_paid(self, loan_id: str, as_of: datetime) -> int:
        """Flip unpaid installments with due_date < as_of to paid; returns rows updated"""
        ...
