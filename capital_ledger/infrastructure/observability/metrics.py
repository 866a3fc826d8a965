"""Prometheus metrics for loan payments, securities and ledger activity"""

from prometheus_client import Counter, Histogram

# Loan metrics
loans_created_counter = Counter(
    "capital_ledger_loans_created_total",
    "Loans originated",
    ["frequency"],  # weekly | biweekly | monthly
)

payment_counter = Counter(
    "capital_ledger_payments_total",
    "Loan payment attempts",
    ["outcome"],  # applied | paid_off | rejected
)

payment_conflict_counter = Counter(
    "capital_ledger_payment_conflicts_total",
    "Loan writes retried after losing an optimistic-concurrency race",
)

loan_status_counter = Counter(
    "capital_ledger_loan_status_changes_total",
    "Administrative loan status updates",
    ["status"],
)

# Investment and ledger metrics
securities_created_counter = Counter(
    "capital_ledger_securities_created_total",
    "Securities registered",
)

transactions_counter = Counter(
    "capital_ledger_transactions_total",
    "Ledger transactions recorded",
    ["type"],  # income | withdrawal
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_payment(status: str) -> None:
    """Record an applied payment, distinguishing the one that closes the loan"""
    outcome = "paid_off" if status == "paid" else "applied"
    payment_counter.labels(outcome=outcome).inc()


def record_rejected_payment() -> None:
    payment_counter.labels(outcome="rejected").inc()
