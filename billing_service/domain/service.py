"""Loan billing engine - origination, balances, delinquency and settlement"""

import logging
from datetime import datetime
from typing import Callable

from billing_service.domain.amount import Amount
from billing_service.domain.delinquency import DEFAULT_DELINQUENCY_THRESHOLD, is_delinquent
from billing_service.domain.exceptions import PaymentAmountMismatchError, ValidationError
from billing_service.domain.locks import SettlementLocks, settlement_locks
from billing_service.domain.models import Loan, LoanFrequency, OutstandingLoan, PendingLoan
from billing_service.domain.schedule import build_loan
from billing_service.domain.store import LoanStore
from billing_service.utils.date_utils import current_local_time


class LoanService:
    """
    Billing operations over a LoanStore.

    Every query confirms the loan exists before aggregating, so a missing
    loan always surfaces as LoanNotFoundError. Storage failures are logged
    and re-raised unchanged.
    """

    def __init__(
        self,
        logger: logging.Logger,
        loan_store: LoanStore,
        clock: Callable[[], datetime] = current_local_time,
        locks: SettlementLocks = settlement_locks,
        delinquency_threshold: int = DEFAULT_DELINQUENCY_THRESHOLD,
    ):
        self.logger = logger
        self.loan_store = loan_store
        self.clock = clock
        self.locks = locks
        self.delinquency_threshold = delinquency_threshold

    def create_loan(
        self,
        borrower_id: str,
        principal_amount: Amount,
        interest_rate: float,
        payment_frequency: LoanFrequency,
        total_payments: int,
    ) -> Loan:
        """
        Originate a loan and persist it with its full schedule.

        The borrower id is trusted as given.
        """
        if total_payments < 1:
            raise ValidationError("total_payments is required and must be greater than 0")

        loan = build_loan(
            borrower_id=borrower_id,
            principal_amount=principal_amount,
            interest_rate=interest_rate,
            payment_frequency=payment_frequency,
            total_payments=total_payments,
            started_at=self.clock(),
        )

        try:
            self.loan_store.create_loan(loan)
        except Exception as e:
            self.logger.warning("failed to create loan", extra={"borrower_id": borrower_id, "error": str(e)})
            raise

        return loan

    def _get_loan(self, loan_id: str, for_update: bool = False) -> Loan:
        try:
            return self.loan_store.get_loan_by_id(loan_id, for_update=for_update)
        except Exception as e:
            self.logger.warning("failed to get loan", extra={"loan_id": loan_id, "error": str(e)})
            raise

    def get_loan(self, loan_id: str) -> Loan:
        """Loan with its installments ordered by sequence"""
        loan = self._get_loan(loan_id)

        try:
            loan.schedules = self.loan_store.get_schedules(loan_id)
        except Exception as e:
            self.logger.warning("failed to get loan schedules", extra={"loan_id": loan_id, "error": str(e)})
            raise

        return loan

    def get_outstanding(self, loan_id: str) -> OutstandingLoan:
        self._get_loan(loan_id)

        try:
            amount = self.loan_store.get_outstanding(loan_id)
        except Exception as e:
            self.logger.warning("failed to get outstanding loan", extra={"loan_id": loan_id, "error": str(e)})
            raise

        return OutstandingLoan(id=loan_id, amount=amount)

    def get_total_pending(self, loan_id: str) -> PendingLoan:
        self._get_loan(loan_id)

        try:
            amount = self.loan_store.get_total_pending(loan_id, self.clock())
        except Exception as e:
            self.logger.warning("failed to get pending loan", extra={"loan_id": loan_id, "error": str(e)})
            raise

        return PendingLoan(id=loan_id, amount=amount)

    def is_delinquent(self, loan_id: str) -> bool:
        self._get_loan(loan_id)

        try:
            due_dates = self.loan_store.get_unpaid_due_dates(loan_id)
        except Exception as e:
            self.logger.warning("failed to get unpaid schedules", extra={"loan_id": loan_id, "error": str(e)})
            raise

        return is_delinquent(due_dates, self.clock(), self.delinquency_threshold)

    def pay_loan(self, loan_id: str, pay_amount: Amount) -> int:
        """
        Settle everything currently due with one exact payment.

        Flow:
        1. Serialize on the loan (in-process lock + row lock)
        2. Read the pending total as of a single timestamp
        3. Require an exact match with the payment
        4. Mark the same past-due installments paid in one update

        A repeated payment after a successful settlement fails with
        PaymentAmountMismatchError, because nothing is pending any more.

        Returns:
            Number of installments settled
        """
        with self.locks.hold(loan_id):
            self._get_loan(loan_id, for_update=True)
            as_of = self.clock()

            try:
                pending_amount = self.loan_store.get_total_pending(loan_id, as_of)
            except Exception as e:
                self.logger.warning("failed to get pending loan", extra={"loan_id": loan_id, "error": str(e)})
                raise

            if not pay_amount.equal_to(pending_amount):
                self.logger.warning(
                    "payment amount mismatch",
                    extra={"loan_id": loan_id, "pay_amount": str(pay_amount), "pending_amount": str(pending_amount)},
                )
                raise PaymentAmountMismatchError()

            try:
                settled = self.loan_store.mark_pending_as_paid(loan_id, as_of)
            except Exception as e:
                self.logger.warning("failed to mark loan as paid", extra={"loan_id": loan_id, "error": str(e)})
                raise

            if settled == 0:
                # Pending total matched but nothing was left to flip: another
                # settlement got there first
                self.logger.warning("no pending installments to settle", extra={"loan_id": loan_id})
                raise PaymentAmountMismatchError()

            return settled
