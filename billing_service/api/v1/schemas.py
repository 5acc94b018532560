"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field, field_validator
from typing import Any, List

from billing_service.domain.exceptions import ValidationError as DomainValidationError
from billing_service.domain.models import Loan, LoanFrequency, LoanSchedule
from billing_service.utils.date_utils import local_time


class CreateLoanRequest(BaseModel):
    """Request body for POST /api/loans"""

    borrower_id: str = Field(..., min_length=1, description="Borrower identifier (trusted as given)")
    principal_amount: float = Field(..., gt=0, allow_inf_nan=False, description="Principal in base currency units")
    interest_rate: float = Field(..., gt=0, allow_inf_nan=False, description="Flat rate over the term, e.g. 0.1 for 10%")
    payment_frequency: LoanFrequency = Field(..., description="Installment cadence")
    total_payments: int = Field(..., gt=0, strict=True, description="Number of installments")

    @field_validator("payment_frequency", mode="before")
    @classmethod
    def parse_frequency(cls, value: Any) -> LoanFrequency:
        if isinstance(value, LoanFrequency):
            return value
        if not isinstance(value, str):
            raise ValueError(f"LoanFrequency should be one of {[f.value for f in LoanFrequency]}")
        try:
            return LoanFrequency.parse(value)
        except DomainValidationError as e:
            raise ValueError(e.message) from e


class PayLoanRequest(BaseModel):
    """Request body for POST /api/loans/pay"""

    id: str = Field(..., min_length=1, description="Loan identifier")
    amount: float = Field(..., gt=0, allow_inf_nan=False, description="Payment amount; must equal the pending total")


class LoanResponse(BaseModel):
    """Loan as returned after origination"""

    id: str
    borrower_id: str
    principal_amount: float
    interest_rate: float
    started_at: str
    ended_at: str
    payment_frequency: str
    total_payments: int

    @classmethod
    def from_loan(cls, loan: Loan) -> "LoanResponse":
        return cls(
            id=loan.id,
            borrower_id=loan.borrower_id,
            principal_amount=loan.principal_amount.to_float(),
            interest_rate=loan.interest_rate,
            started_at=local_time(loan.started_at).date().isoformat(),
            ended_at=local_time(loan.ended_at).date().isoformat(),
            payment_frequency=loan.payment_frequency.value,
            total_payments=loan.total_payments,
        )


class InstallmentSchema(BaseModel):
    """Single installment in a loan schedule"""

    seq: int
    due_date: str
    amount_due: str
    status: str

    @classmethod
    def from_schedule(cls, schedule: LoanSchedule) -> "InstallmentSchema":
        return cls(
            seq=schedule.seq,
            due_date=local_time(schedule.due_date).date().isoformat(),
            amount_due=str(schedule.amount_due),
            status=schedule.status.value,
        )


class LoanDetailResponse(LoanResponse):
    """Response for GET /api/loans/{loan_id}"""

    loan_term_days: int
    term_amount: str
    installments: List[InstallmentSchema]

    @classmethod
    def from_loan(cls, loan: Loan) -> "LoanDetailResponse":
        base = LoanResponse.from_loan(loan)
        return cls(
            **base.model_dump(),
            loan_term_days=loan.loan_term_days,
            term_amount=str(loan.term_amount),
            installments=[InstallmentSchema.from_schedule(s) for s in loan.schedules],
        )


class OutstandingResponse(BaseModel):
    """Response for GET /api/loans/{loan_id}/outstanding"""

    id: str
    outstanding_amount: str


class PendingResponse(BaseModel):
    """Response for GET /api/loans/{loan_id}/pending"""

    id: str
    pending_amount: str


class DelinquencyResponse(BaseModel):
    """Response for GET /api/loans/{loan_id}/delinquency"""

    loan_id: str
    is_delinquent: bool


class SuccessResponse(BaseModel):
    status: str = "success"
