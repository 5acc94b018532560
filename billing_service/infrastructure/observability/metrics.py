"""Prometheus metrics for monitoring loan origination, settlement and delinquency"""

from prometheus_client import Counter, Histogram

# Origination metrics
loans_created_counter = Counter(
    "billing_loans_created_total",
    "Total loans originated",
    ["payment_frequency"],
)

# Settlement metrics
payment_counter = Counter(
    "billing_payments_total",
    "Payment attempts by outcome",
    ["outcome"],  # settled | mismatch
)

installments_settled_counter = Counter(
    "billing_installments_settled_total",
    "Installments transitioned from unpaid to paid",
)

# Delinquency metrics
delinquency_check_counter = Counter(
    "billing_delinquency_checks_total",
    "Delinquency evaluations by result",
    ["outcome"],  # delinquent | current
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_loan_created(payment_frequency: str) -> None:
    loans_created_counter.labels(payment_frequency=payment_frequency).inc()


def record_payment(settled: bool, installments_settled: int = 0) -> None:
    """Record settlement outcome for monitoring mismatch rates"""
    outcome = "settled" if settled else "mismatch"
    payment_counter.labels(outcome=outcome).inc()

    if installments_settled:
        installments_settled_counter.inc(installments_settled)


def record_delinquency_check(delinquent: bool) -> None:
    outcome = "delinquent" if delinquent else "current"
    delinquency_check_counter.labels(outcome=outcome).inc()
