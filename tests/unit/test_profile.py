"""Unit tests for applicant profile parsing"""

import pytest
from decimal import Decimal
from underwriting_gateway.domain.profile import parse_profile, validate_profile
from underwriting_gateway.domain.models import ApplicantProfile
from underwriting_gateway.domain.exceptions import InvalidProfileError


@pytest.fixture
def raw_profile():
    """Minimal intake data with only required fields, values as stored strings"""
    return {
        "current_salary": "45000.00",
        "employment_type": "probation",
        "experience_years": 2,
        "owns_house": "family",
        "grocery_expense": "6000.00",
        "investment_habit": "minimal",
        "desired_amount": "150000.00",
    }


def test_parse_profile_defaults_optional_fields_to_zero(raw_profile):
    """Test absent optional fields mean 'not applicable'"""
    profile = parse_profile(raw_profile)

    assert profile.current_salary == 45000.0
    assert profile.previous_salary == 0
    assert profile.rent_amount == 0
    assert profile.mall_visits == 0
    assert profile.monthly_savings == 0


def test_parse_profile_accepts_decimals_and_none(raw_profile):
    """Test Decimal values parse and explicit None defaults like absence"""
    raw_profile["monthly_savings"] = Decimal("5000.50")
    raw_profile["rent_amount"] = None
    raw_profile["mall_visits"] = "4"

    profile = parse_profile(raw_profile)

    assert profile.monthly_savings == 5000.5
    assert profile.rent_amount == 0
    assert profile.mall_visits == 4


@pytest.mark.parametrize("field", ["current_salary", "grocery_expense", "desired_amount", "owns_house"])
def test_parse_profile_required_fields(raw_profile, field):
    """Test required fields never default"""
    del raw_profile[field]

    with pytest.raises(InvalidProfileError, match=field):
        parse_profile(raw_profile)


@pytest.mark.parametrize(
    "field,value",
    [
        ("current_salary", "0"),
        ("current_salary", "-100"),
        ("current_salary", "nan"),
        ("existing_emis", "abc"),
        ("existing_emis", True),
        ("mall_visits", 2.5),
        ("owns_house", "rented"),
        ("employment_type", "freelance"),
        ("investment_habit", "crypto"),
    ],
)
def test_parse_profile_rejects_bad_values(raw_profile, field, value):
    """Test unparseable numbers and unknown categories"""
    raw_profile[field] = value

    with pytest.raises(InvalidProfileError):
        parse_profile(raw_profile)


def test_validate_profile_normalizes_numbers():
    """Test Decimal and string values come back as floats and ints"""
    profile = validate_profile(
        ApplicantProfile(
            current_salary=Decimal("80000.00"),
            employment_type="permanent",
            experience_years="6",
            owns_house="no",
            grocery_expense="8000",
            investment_habit="none",
            desired_amount=Decimal("0"),
        )
    )

    assert profile.current_salary == 80000.0
    assert isinstance(profile.current_salary, float)
    assert profile.experience_years == 6
    assert isinstance(profile.experience_years, int)
    assert profile.grocery_expense == 8000.0
    assert profile.desired_amount == 0.0


def test_validate_profile_rejects_non_numeric_salary():
    """Test a string salary that is not a number is a profile error, not a TypeError"""
    with pytest.raises(InvalidProfileError, match="current_salary"):
        validate_profile(
            ApplicantProfile(
                current_salary="eighty thousand",
                employment_type="permanent",
                experience_years=6,
                owns_house="yes",
                grocery_expense=8000,
                investment_habit="moderate",
                desired_amount=200000,
            )
        )
