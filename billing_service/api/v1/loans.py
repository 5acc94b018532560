"""/api/loans - origination, balances, delinquency and payment endpoints"""

import time
import uuid
import logging
from fastapi import APIRouter, Depends, Request

from billing_service.api.v1.schemas import (
    CreateLoanRequest,
    DelinquencyResponse,
    LoanDetailResponse,
    LoanResponse,
    OutstandingResponse,
    PayLoanRequest,
    PendingResponse,
    SuccessResponse,
)
from billing_service.api.dependencies import get_loan_service, get_request_id
from billing_service.domain.amount import Amount
from billing_service.domain.exceptions import InvalidIdentifierError, PaymentAmountMismatchError
from billing_service.domain.service import LoanService
from billing_service.infrastructure.observability.logging import log_payment
from billing_service.infrastructure.observability.metrics import (
    record_delinquency_check,
    record_loan_created,
    record_payment,
)

router = APIRouter()
logger = logging.getLogger("billing_service.api")


def parse_loan_id(loan_id: str) -> str:
    """Reject malformed identifiers before they reach the billing engine"""
    try:
        return str(uuid.UUID(loan_id))
    except ValueError:
        raise InvalidIdentifierError()


@router.post("", response_model=LoanResponse, status_code=201)
def create_loan(
    request_body: CreateLoanRequest,
    request: Request,
    loan_service: LoanService = Depends(get_loan_service),
):
    """
    Originate a loan and its installment schedule.

    Flow:
    1. Round principal to the fixed currency precision
    2. Compute term amount, loan term and due dates
    3. Persist loan + schedule atomically
    """
    loan = loan_service.create_loan(
        borrower_id=request_body.borrower_id,
        principal_amount=Amount.from_float(request_body.principal_amount),
        interest_rate=request_body.interest_rate,
        payment_frequency=request_body.payment_frequency,
        total_payments=request_body.total_payments,
    )

    record_loan_created(loan.payment_frequency.value)
    logger.info(
        "Loan created",
        extra={
            "request_id": get_request_id(request),
            "loan_id": loan.id,
            "borrower_id": loan.borrower_id,
            "total_payments": loan.total_payments,
        },
    )

    return LoanResponse.from_loan(loan)


@router.post("/pay", response_model=SuccessResponse)
def pay_loan(
    request_body: PayLoanRequest,
    request: Request,
    loan_service: LoanService = Depends(get_loan_service),
):
    """
    Settle all past-due installments with a payment equal to the pending total.

    Returns 400 PAYMENT_AMOUNT_MISMATCH for partial, over or repeated payments.
    """
    start_time = time.time()
    loan_id = parse_loan_id(request_body.id)
    amount = Amount.from_float(request_body.amount)

    try:
        settled = loan_service.pay_loan(loan_id, amount)
    except PaymentAmountMismatchError:
        record_payment(settled=False)
        log_payment(logger, get_request_id(request), loan_id, str(amount), False, 0, (time.time() - start_time) * 1000)
        raise

    record_payment(settled=True, installments_settled=settled)
    log_payment(logger, get_request_id(request), loan_id, str(amount), True, settled, (time.time() - start_time) * 1000)

    return SuccessResponse()


@router.get("/{loan_id}", response_model=LoanDetailResponse)
def get_loan(loan_id: str, loan_service: LoanService = Depends(get_loan_service)):
    """Loan details with the full installment schedule"""
    loan = loan_service.get_loan(parse_loan_id(loan_id))
    return LoanDetailResponse.from_loan(loan)


@router.get("/{loan_id}/outstanding", response_model=OutstandingResponse)
def get_outstanding(loan_id: str, loan_service: LoanService = Depends(get_loan_service)):
    """Total unpaid amount, including installments not yet due"""
    outstanding = loan_service.get_outstanding(parse_loan_id(loan_id))
    return OutstandingResponse(id=outstanding.id, outstanding_amount=str(outstanding.amount))


@router.get("/{loan_id}/pending", response_model=PendingResponse)
def get_pending(loan_id: str, loan_service: LoanService = Depends(get_loan_service)):
    """Amount owed right now (unpaid and past due)"""
    pending = loan_service.get_total_pending(parse_loan_id(loan_id))
    return PendingResponse(id=pending.id, pending_amount=str(pending.amount))


@router.get("/{loan_id}/delinquency", response_model=DelinquencyResponse)
def get_delinquency(loan_id: str, loan_service: LoanService = Depends(get_loan_service)):
    loan_id = parse_loan_id(loan_id)
    delinquent = loan_service.is_delinquent(loan_id)
    record_delinquency_check(delinquent)
    return DelinquencyResponse(loan_id=loan_id, is_delinquent=delinquent)
