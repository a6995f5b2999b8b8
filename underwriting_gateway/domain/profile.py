"""Applicant profile parsing and validation"""

import math
from dataclasses import MISSING, fields, replace
from typing import Any, Mapping
from underwriting_gateway.domain.models import (
    ApplicantProfile,
    EMPLOYMENT_TYPES,
    HOUSING_STATUSES,
    INVESTMENT_HABITS,
)
from underwriting_gateway.domain.exceptions import InvalidProfileError

MONEY_FIELDS = (
    "current_salary",
    "previous_salary",
    "existing_emis",
    "credit_card_debt",
    "rent_amount",
    "grocery_expense",
    "mall_spending",
    "entertainment_budget",
    "monthly_savings",
    "desired_amount",
)
COUNT_FIELDS = ("experience_years", "mall_visits")
CHOICE_FIELDS = {
    "employment_type": EMPLOYMENT_TYPES,
    "owns_house": HOUSING_STATUSES,
    "investment_habit": INVESTMENT_HABITS,
}

# Absent optional values mean "not applicable", not an error
OPTIONAL_FIELDS = frozenset(
    f.name for f in fields(ApplicantProfile) if f.default is not MISSING
)


def _parse_money(name: str, value: Any) -> float:
    if isinstance(value, bool):
        raise InvalidProfileError(f"{name} must be numeric")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidProfileError(f"{name} must be numeric, got {value!r}") from e
    if not math.isfinite(number) or number < 0:
        raise InvalidProfileError(f"{name} must be a finite non-negative number")
    return number


def _parse_count(name: str, value: Any) -> int:
    number = _parse_money(name, value)
    if not number.is_integer():
        raise InvalidProfileError(f"{name} must be a whole number")
    return int(number)


def _parse_choice(name: str, value: Any) -> str:
    allowed = CHOICE_FIELDS[name]
    if value not in allowed:
        raise InvalidProfileError(f"{name} must be one of {', '.join(allowed)}, got {value!r}")
    return value


def validate_profile(profile: ApplicantProfile) -> ApplicantProfile:
    """
    Check a profile before scoring and normalize its numbers.

    Money fields may hold ints, floats, Decimals or numeric strings; the
    returned copy carries them as floats and counts as ints.

    Raises:
        InvalidProfileError: On non-finite or negative numbers, unknown categories,
            or a current salary that is not strictly positive
    """
    values: dict[str, Any] = {}
    for name in MONEY_FIELDS:
        values[name] = _parse_money(name, getattr(profile, name))
    for name in COUNT_FIELDS:
        values[name] = _parse_count(name, getattr(profile, name))
    for name in CHOICE_FIELDS:
        values[name] = _parse_choice(name, getattr(profile, name))

    if values["current_salary"] <= 0:
        raise InvalidProfileError("current_salary must be greater than zero")

    return replace(profile, **values)


def parse_profile(data: Mapping[str, Any]) -> ApplicantProfile:
    """
    Build an ApplicantProfile from raw intake data.

    Monetary values may be numbers, Decimals or numeric strings ("80000.00").
    Optional fields that are missing or None default to zero; required fields
    never default.
    """
    values: dict[str, Any] = {}
    for f in fields(ApplicantProfile):
        raw = data.get(f.name)
        if raw is None or raw == "":
            if f.name in OPTIONAL_FIELDS:
                continue
            raise InvalidProfileError(f"{f.name} is required")
        values[f.name] = raw

    return validate_profile(ApplicantProfile(**values))
