"""EMI arithmetic and amortisation schedules for fixed-rate loans"""

import math
from datetime import date
from typing import Any, List
from underwriting_gateway.domain.models import EmiQuote, Installment
from underwriting_gateway.domain.exceptions import InvalidInputError
from underwriting_gateway.utils.date_utils import add_months, generate_monthly_dates


def _as_amount(name: str, value: Any) -> float:
    if value is None or isinstance(value, bool):
        raise InvalidInputError(f"{name} is required")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"{name} must be numeric, got {value!r}") from e
    if not math.isfinite(number) or number < 0:
        raise InvalidInputError(f"{name} must be a finite non-negative number")
    return number


def _as_tenure(value: Any) -> int:
    if value is None or isinstance(value, bool):
        raise InvalidInputError("tenure_months is required")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"tenure_months must be numeric, got {value!r}") from e
    if not number.is_integer() or number <= 0:
        raise InvalidInputError("tenure_months must be a positive whole number of months")
    return int(number)


def _growth_factor(annual_rate_percent: float, tenure_months: int) -> tuple[float, float]:
    """Return (monthly rate, (1 + r)^n)"""
    monthly_rate = annual_rate_percent / 1200
    return monthly_rate, (1 + monthly_rate) ** tenure_months


def calculate_emi(principal: Any, annual_rate_percent: Any, tenure_months: Any) -> float:
    """
    Equated monthly installment for an amortising loan.

    EMI = P * r * (1 + r)^n / ((1 + r)^n - 1), with r = annual rate / 1200.
    A zero rate repays the principal linearly.

    Raises:
        InvalidInputError: On missing, non-numeric or negative values, or tenure <= 0
    """
    p = _as_amount("principal", principal)
    rate = _as_amount("rate", annual_rate_percent)
    n = _as_tenure(tenure_months)

    if rate == 0:
        return p / n

    r, growth = _growth_factor(rate, n)
    return p * r * growth / (growth - 1)


def principal_for_emi(emi: Any, annual_rate_percent: Any, tenure_months: Any) -> float:
    """
    Largest principal whose EMI equals `emi` (inverse of calculate_emi).

    P = EMI * ((1 + r)^n - 1) / (r * (1 + r)^n)
    """
    installment = _as_amount("emi", emi)
    rate = _as_amount("rate", annual_rate_percent)
    n = _as_tenure(tenure_months)

    if rate == 0:
        return installment * n

    r, growth = _growth_factor(rate, n)
    return installment * (growth - 1) / (r * growth)


def emi_breakdown(principal: Any, annual_rate_percent: Any, tenure_months: Any) -> EmiQuote:
    """Monthly installment plus total repayment and total interest over the tenure"""
    emi = calculate_emi(principal, annual_rate_percent, tenure_months)
    p = float(principal)
    total_amount = emi * int(float(tenure_months))

    return EmiQuote(
        principal=p,
        emi=emi,
        total_amount=total_amount,
        total_interest=total_amount - p,
    )


def generate_repayment_schedule(
    principal: float,
    annual_rate_percent: float,
    tenure_months: int,
    start_date: date | None = None,
) -> List[Installment]:
    """
    Generate the month-by-month amortisation plan for an approved loan.

    Requirements:
    - One installment per month, due dates one calendar month apart
    - Interest accrues on the opening balance of each month
    - Amounts rounded to 2 decimals; last installment absorbs the rounding
      remainder so principal components sum to the principal exactly

    Args:
        principal: Approved loan amount
        annual_rate_percent: Annual interest rate, e.g. 12.0
        tenure_months: Number of monthly payments
        start_date: First due date (default: one month from today)

    Returns:
        List of Installment objects, empty for a zero principal

    Example:
        100000 at 12% over 12 months → 11 payments of 8884.88, the last one
        adjusted by a few paise so the balance closes at 0.00
    """
    emi = round(calculate_emi(principal, annual_rate_percent, tenure_months), 2)
    if principal <= 0:
        return []

    if start_date is None:
        start_date = add_months(date.today(), 1)

    monthly_rate = annual_rate_percent / 1200
    balance = round(principal, 2)

    installments = []
    for i, due_date in enumerate(generate_monthly_dates(start_date, tenure_months)):
        interest = round(balance * monthly_rate, 2)

        # Last installment clears whatever balance rounding left behind
        if i == tenure_months - 1:
            principal_part = balance
        else:
            principal_part = min(round(emi - interest, 2), balance)

        balance = round(balance - principal_part, 2)
        installments.append(
            Installment(
                sequence=i + 1,
                due_date=due_date,
                amount=round(principal_part + interest, 2),
                principal_component=principal_part,
                interest_component=interest,
                closing_balance=balance,
            )
        )

    return installments
