"""Prometheus metrics for monitoring approval rates, risk tiers, and loan sizes"""

from prometheus_client import Counter, Histogram

# Assessment metrics
assessment_counter = Counter(
    "underwriting_assessment_total",
    "Total loan applications assessed",
    ["outcome"],  # approved | rejected
)

risk_tier_counter = Counter(
    "underwriting_risk_tier_total",
    "Eligible applicants by risk tier",
    ["tier"],  # prime | standard | subprime
)

approved_amount_bucket_counter = Counter(
    "underwriting_approved_amount_bucket",
    "Approved loan amounts by bucket",
    ["bucket"],  # 0, 0-100k, 100k-500k, 500k+
)

invalid_profile_counter = Counter(
    "underwriting_invalid_profile_total",
    "Applications rejected by profile validation",
)

# EMI calculator
emi_quote_counter = Counter(
    "emi_quote_total",
    "Standalone EMI calculations served",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_assessment(eligible: bool, risk_tier: str | None, approved_amount: float) -> None:
    """Record assessment metrics for monitoring approval rates and loan size distribution"""
    outcome = "approved" if eligible else "rejected"
    assessment_counter.labels(outcome=outcome).inc()

    if not eligible:
        return

    if risk_tier is not None:
        risk_tier_counter.labels(tier=risk_tier).inc()

    # Bucket approved amounts for distribution analysis
    if approved_amount <= 0:
        bucket = "0"
    elif approved_amount <= 100_000:
        bucket = "0-100k"
    elif approved_amount <= 500_000:
        bucket = "100k-500k"
    else:
        bucket = "500k+"

    approved_amount_bucket_counter.labels(bucket=bucket).inc()
