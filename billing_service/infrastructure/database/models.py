"""SQLAlchemy ORM models for loans and their installment schedules"""

import uuid
from sqlalchemy import Column, Float, DateTime, Integer, ForeignKey, Text, JSON, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class LoanRecord(Base):
    """Installment loan as originated"""

    __tablename__ = "loans"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    borrower_id = Column(Text, nullable=False, index=True)
    principal_amount = Column(JSON, nullable=False)  # {"value", "decimal_precision", "currency"}
    interest_rate = Column(Float, nullable=False)
    started_at = Column(DateTime(timezone=True), nullable=False)
    ended_at = Column(DateTime(timezone=True), nullable=False)
    payment_frequency = Column(Text, nullable=False)
    total_payments = Column(Integer, nullable=False)
    loan_term_days = Column(Integer, nullable=False)
    term_amount = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    schedules = relationship(
        "LoanScheduleRecord",
        back_populates="loan",
        cascade="all, delete-orphan",
        order_by="LoanScheduleRecord.seq",
    )


class LoanScheduleRecord(Base):
    """Single installment row; status only moves unpaid -> paid"""

    __tablename__ = "loan_schedules"
    __table_args__ = (UniqueConstraint("loan_id", "seq", name="uq_loan_schedules_loan_seq"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    loan_id = Column(UUID(as_uuid=True), ForeignKey("loans.id", ondelete="CASCADE"), nullable=False, index=True)
    seq = Column(Integer, nullable=False)
    due_date = Column(DateTime(timezone=True), nullable=False)
    amount_due = Column(JSON, nullable=False)  # value + decimal_precision + currency, stored together
    status = Column(Text, nullable=False, default="unpaid")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    loan = relationship("LoanRecord", back_populates="schedules")
