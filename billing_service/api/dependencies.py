"""Dependency injection for FastAPI endpoints"""

from datetime import datetime
from typing import Callable

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from billing_service.config import settings
from billing_service.domain.service import LoanService
from billing_service.infrastructure.database.repositories import LoanRepository
from billing_service.infrastructure.database.session import get_db
from billing_service.infrastructure.observability.logging import get_logger
from billing_service.utils.date_utils import current_local_time


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_clock() -> Callable[[], datetime]:
    """Source of "now" for balance and settlement checks"""
    return current_local_time


def get_loan_service(
    db: Session = Depends(get_db),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> LoanService:
    """Provide a LoanService bound to the request's database session"""
    return LoanService(
        logger=get_logger(),
        loan_store=LoanRepository(db),
        clock=clock,
        delinquency_threshold=settings.delinquency_threshold,
    )
