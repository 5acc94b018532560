"""Data access layer for loans and installment schedules"""

import uuid
from datetime import datetime
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from billing_service.domain.amount import Amount, sum_amounts
from billing_service.domain.exceptions import InvalidIdentifierError, LoanNotFoundError
from billing_service.domain.models import Loan, LoanFrequency, LoanSchedule, ScheduleStatus
from billing_service.infrastructure.database.models import LoanRecord, LoanScheduleRecord
from billing_service.utils.date_utils import local_time


def _as_uuid(loan_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(str(loan_id))
    except ValueError as e:
        raise InvalidIdentifierError() from e


def _to_schedule(record: LoanScheduleRecord) -> LoanSchedule:
    return LoanSchedule(
        id=str(record.id),
        loan_id=str(record.loan_id),
        seq=record.seq,
        due_date=local_time(record.due_date),
        amount_due=Amount.from_dict(record.amount_due),
        status=ScheduleStatus(record.status),
    )


def _to_loan(record: LoanRecord) -> Loan:
    return Loan(
        id=str(record.id),
        borrower_id=record.borrower_id,
        principal_amount=Amount.from_dict(record.principal_amount),
        interest_rate=record.interest_rate,
        started_at=local_time(record.started_at),
        ended_at=local_time(record.ended_at),
        payment_frequency=LoanFrequency(record.payment_frequency),
        total_payments=record.total_payments,
        loan_term_days=record.loan_term_days,
        term_amount=Amount.from_dict(record.term_amount),
    )


class LoanRepository:
    """Repository for loans and their schedules"""

    def __init__(self, db: Session):
        self.db = db

    def create_loan(self, loan: Loan) -> None:
        """Persist loan and every installment in one transaction"""
        loan_uuid = _as_uuid(loan.id)
        try:
            self.db.add(
                LoanRecord(
                    id=loan_uuid,
                    borrower_id=loan.borrower_id,
                    principal_amount=loan.principal_amount.to_dict(),
                    interest_rate=loan.interest_rate,
                    started_at=local_time(loan.started_at),
                    ended_at=local_time(loan.ended_at),
                    payment_frequency=loan.payment_frequency.value,
                    total_payments=loan.total_payments,
                    loan_term_days=loan.loan_term_days,
                    term_amount=loan.term_amount.to_dict(),
                )
            )
            self.db.flush()  # Loan row must exist before its schedules

            for schedule in loan.schedules:
                self.db.add(
                    LoanScheduleRecord(
                        id=uuid.UUID(schedule.id),
                        loan_id=loan_uuid,
                        seq=schedule.seq,
                        due_date=local_time(schedule.due_date),
                        amount_due=schedule.amount_due.to_dict(),
                        status=schedule.status.value,
                    )
                )

            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def get_loan_by_id(self, loan_id: str, for_update: bool = False) -> Loan:
        """
        Fetch a loan.

        Args:
            for_update: Lock the loan row until the transaction ends
                (ignored by backends without row locks, e.g. SQLite)

        Raises:
            InvalidIdentifierError: If loan_id is not a UUID
            LoanNotFoundError: If no loan has this id
        """
        query = self.db.query(LoanRecord).filter(LoanRecord.id == _as_uuid(loan_id))
        if for_update:
            query = query.with_for_update()

        record = query.first()
        if record is None:
            raise LoanNotFoundError()
        return _to_loan(record)

    def get_schedules(self, loan_id: str) -> List[LoanSchedule]:
        records = (
            self.db.query(LoanScheduleRecord)
            .filter(LoanScheduleRecord.loan_id == _as_uuid(loan_id))
            .order_by(LoanScheduleRecord.seq)
            .all()
        )
        return [_to_schedule(r) for r in records]

    def _unpaid(self, loan_id: str):
        return self.db.query(LoanScheduleRecord).filter(
            LoanScheduleRecord.loan_id == _as_uuid(loan_id),
            LoanScheduleRecord.status == ScheduleStatus.UNPAID.value,
        )

    def get_outstanding(self, loan_id: str) -> Amount:
        """Unpaid installments regardless of due date"""
        rows = self._unpaid(loan_id).with_entities(LoanScheduleRecord.amount_due).all()
        # Summed from the stored integer magnitudes so nothing is lost to float math
        return sum_amounts(Amount.from_dict(row.amount_due) for row in rows)

    def get_total_pending(self, loan_id: str, as_of: datetime) -> Amount:
        """Unpaid installments already past due at as_of"""
        rows = (
            self._unpaid(loan_id)
            .filter(LoanScheduleRecord.due_date < local_time(as_of))
            .with_entities(LoanScheduleRecord.amount_due)
            .all()
        )
        return sum_amounts(Amount.from_dict(row.amount_due) for row in rows)

    def get_unpaid_due_dates(self, loan_id: str) -> List[datetime]:
        rows = (
            self._unpaid(loan_id)
            .with_entities(LoanScheduleRecord.due_date)
            .order_by(LoanScheduleRecord.due_date)
            .all()
        )
        return [local_time(row.due_date) for row in rows]

    def mark_pending_as_paid(self, loan_id: str, as_of: datetime) -> int:
        """
        Bulk transition of past-due installments to paid.

        Uses the same due_date < as_of predicate as get_total_pending so the
        settled rows are exactly the ones that were summed.
        """
        try:
            updated = (
                self._unpaid(loan_id)
                .filter(LoanScheduleRecord.due_date < local_time(as_of))
                .update({LoanScheduleRecord.status: ScheduleStatus.PAID.value}, synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        return updated
