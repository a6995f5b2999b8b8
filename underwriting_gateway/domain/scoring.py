"""Underwriting engine - core business logic for loan eligibility and terms"""

from dataclasses import dataclass, replace
from functools import reduce
from typing import Callable, List, Optional, Sequence, Tuple
from underwriting_gateway.domain.models import (
    ApplicantProfile,
    Assessment,
    ComponentScores,
    EligibleAssessment,
    FinancialMetrics,
    IneligibleAssessment,
    LoanTerms,
)
from underwriting_gateway.domain.emi import calculate_emi, principal_for_emi
from underwriting_gateway.domain.profile import validate_profile

# Policy constants
CREDIT_CARD_MIN_PAYMENT = 0.05
OVERALL_WEIGHTS = (30, 35, 20, 15)  # percent: income, repayment, spending, employment
MIN_ELIGIBLE_SCORE = 60
MAX_ELIGIBLE_DTI = 50.0
EMI_INCOME_SHARE = 0.4
SALARY_MULTIPLE_CAP = 4
DESIRED_AMOUNT_SHARE = 0.9
DEFAULT_TENURE_MONTHS = 24


@dataclass(frozen=True)
class RiskTier:
    """Score band that sets the loan multiplier and interest rate"""

    name: str
    min_score_exclusive: int
    loan_multiplier: float
    interest_rate: float


RISK_TIERS = (
    RiskTier("prime", 80, 1.0, 11.5),
    RiskTier("standard", 70, 0.9, 12.0),
    RiskTier("subprime", -1, 0.8, 13.0),
)


@dataclass(frozen=True)
class Adjustment:
    """Outcome of a single rule: score delta plus at most one explanatory note"""

    delta: int = 0
    positive_factor: Optional[str] = None
    negative_factor: Optional[str] = None


@dataclass(frozen=True)
class ScoreCard:
    """Accumulator threaded through the rules of one scoring pass"""

    score: int
    positive_factors: Tuple[str, ...] = ()
    negative_factors: Tuple[str, ...] = ()

    def apply(self, adjustment: Optional[Adjustment]) -> "ScoreCard":
        if adjustment is None:
            return self
        return ScoreCard(
            score=self.score + adjustment.delta,
            positive_factors=self.positive_factors
            + ((adjustment.positive_factor,) if adjustment.positive_factor else ()),
            negative_factors=self.negative_factors
            + ((adjustment.negative_factor,) if adjustment.negative_factor else ()),
        )

    def clamped(self) -> "ScoreCard":
        return replace(self, score=min(100, max(0, self.score)))


Rule = Callable[[ApplicantProfile, FinancialMetrics], Optional[Adjustment]]


def derive_metrics(profile: ApplicantProfile) -> FinancialMetrics:
    """
    Compute the ratios every pass reads.

    Requirements:
    - Credit card debt contributes a 5% minimum payment to monthly obligations
    - All ratios are percentages of current salary
    - Salary growth is undefined (None) without a previous salary
    """
    salary = profile.current_salary
    total_existing_debt = profile.existing_emis + profile.credit_card_debt * CREDIT_CARD_MIN_PAYMENT
    lifestyle_spend = profile.mall_visits * profile.mall_spending + profile.entertainment_budget

    salary_growth = None
    if profile.previous_salary > 0:
        salary_growth = (salary - profile.previous_salary) / profile.previous_salary * 100

    return FinancialMetrics(
        total_existing_debt=total_existing_debt,
        debt_to_income_ratio=total_existing_debt / salary * 100,
        savings_ratio=profile.monthly_savings / salary * 100,
        housing_cost=profile.rent_amount if profile.owns_house == "no" else 0.0,
        rent_ratio=profile.rent_amount / salary * 100,
        lifestyle_spend=lifestyle_spend,
        lifestyle_ratio=lifestyle_spend / salary * 100,
        grocery_ratio=profile.grocery_expense / salary * 100,
        salary_growth=salary_growth,
    )


# Income stability rules (base 50)


def salary_growth_rule(profile: ApplicantProfile, metrics: FinancialMetrics) -> Optional[Adjustment]:
    growth = metrics.salary_growth
    if growth is None:
        return None
    if growth > 10:
        return Adjustment(20, positive_factor=f"Strong salary growth of {growth:.1f}%")
    if growth > 0:
        return Adjustment(10, positive_factor="Positive salary growth trend")
    return Adjustment(-10, negative_factor="No recent salary increase")


def employment_type_rule(profile: ApplicantProfile, metrics: FinancialMetrics) -> Optional[Adjustment]:
    if profile.employment_type == "permanent":
        return Adjustment(15, positive_factor="Permanent employment status")
    if profile.employment_type == "contract":
        return Adjustment(-10, negative_factor="Contract employment (higher risk)")
    return None


def experience_rule(profile: ApplicantProfile, metrics: FinancialMetrics) -> Optional[Adjustment]:
    if profile.experience_years >= 5:
        return Adjustment(15, positive_factor=f"{profile.experience_years}+ years of experience")
    if profile.experience_years >= 2:
        return Adjustment(5)
    return Adjustment(-10, negative_factor="Limited work experience")


# Repayment capacity rules (base 100)


def debt_burden_rule(profile: ApplicantProfile, metrics: FinancialMetrics) -> Optional[Adjustment]:
    dti = metrics.debt_to_income_ratio
    if dti > 50:
        return Adjustment(-40, negative_factor=f"High debt-to-income ratio ({dti:.1f}%)")
    if dti > 30:
        return Adjustment(-20, negative_factor=f"Moderate debt burden ({dti:.1f}%)")
    if dti < 20:
        return Adjustment(0, positive_factor=f"Low debt-to-income ratio ({dti:.1f}%)")
    return None


def savings_rule(profile: ApplicantProfile, metrics: FinancialMetrics) -> Optional[Adjustment]:
    ratio = metrics.savings_ratio
    if ratio > 20:
        return Adjustment(10, positive_factor=f"Excellent savings habit ({ratio:.1f}% of income)")
    if ratio > 10:
        return Adjustment(5, positive_factor="Good savings pattern")
    if ratio < 5:
        return Adjustment(-15, negative_factor="Low savings rate indicates financial stress")
    return None


# Spending pattern rules (base 70)


def housing_rule(profile: ApplicantProfile, metrics: FinancialMetrics) -> Optional[Adjustment]:
    if profile.owns_house == "yes":
        return Adjustment(20, positive_factor="Homeowner (asset and stability)")
    if profile.owns_house == "family":
        return Adjustment(10, positive_factor="Living with family (reduced expenses)")

    ratio = metrics.rent_ratio
    if ratio > 40:
        return Adjustment(-20, negative_factor=f"High rental expense ({ratio:.1f}% of income)")
    if ratio > 30:
        return Adjustment(-10, negative_factor="Moderate rental burden")
    return None


def lifestyle_rule(profile: ApplicantProfile, metrics: FinancialMetrics) -> Optional[Adjustment]:
    ratio = metrics.lifestyle_ratio
    if ratio > 15:
        return Adjustment(-20, negative_factor=f"High discretionary spending ({ratio:.1f}% of income)")
    if ratio > 10:
        return Adjustment(-10, negative_factor="Moderate lifestyle spending")
    if ratio < 5:
        return Adjustment(10, positive_factor="Conservative spending habits")
    return None


def grocery_rule(profile: ApplicantProfile, metrics: FinancialMetrics) -> Optional[Adjustment]:
    if metrics.grocery_ratio > 15:
        return Adjustment(-10, negative_factor="High grocery expenses")
    return None


# Employment rules (base 60)


def tenure_stability_rule(profile: ApplicantProfile, metrics: FinancialMetrics) -> Optional[Adjustment]:
    if profile.employment_type == "permanent" and profile.experience_years >= 3:
        return Adjustment(25, positive_factor="Stable employment with good tenure")
    return None


def investment_rule(profile: ApplicantProfile, metrics: FinancialMetrics) -> Optional[Adjustment]:
    habit = profile.investment_habit
    if habit in ("aggressive", "moderate"):
        return Adjustment(15, positive_factor="Active investment portfolio")
    if habit == "conservative":
        return Adjustment(10, positive_factor="Conservative investment approach")
    if habit == "none":
        return Adjustment(-10, negative_factor="No investment habit")
    return None


INCOME_STABILITY_PASS: Tuple[int, Sequence[Rule]] = (
    50,
    (salary_growth_rule, employment_type_rule, experience_rule),
)
REPAYMENT_CAPACITY_PASS: Tuple[int, Sequence[Rule]] = (100, (debt_burden_rule, savings_rule))
SPENDING_PATTERN_PASS: Tuple[int, Sequence[Rule]] = (70, (housing_rule, lifestyle_rule, grocery_rule))
EMPLOYMENT_PASS: Tuple[int, Sequence[Rule]] = (60, (tenure_stability_rule, investment_rule))


def run_pass(
    base_score: int,
    rules: Sequence[Rule],
    profile: ApplicantProfile,
    metrics: FinancialMetrics,
) -> ScoreCard:
    """Fold rules over a fresh ScoreCard, then clamp the score to [0, 100]"""
    card = reduce(
        lambda acc, rule: acc.apply(rule(profile, metrics)),
        rules,
        ScoreCard(score=base_score),
    )
    return card.clamped()


def calculate_overall_score(
    income_stability: int,
    repayment_capacity: int,
    spending_pattern: int,
    employment: int,
) -> int:
    """
    Weighted overall risk score, rounded half up.

    Weights: income 30%, repayment 35%, spending 20%, employment 15%.
    Integer arithmetic keeps x.5 cases exact.
    """
    weighted = sum(
        weight * score
        for weight, score in zip(
            OVERALL_WEIGHTS,
            (income_stability, repayment_capacity, spending_pattern, employment),
        )
    )
    return (weighted + 50) // 100


def determine_risk_tier(overall_score: int) -> RiskTier:
    """
    Map overall score to a risk tier.

    - > 80: prime, full multiplier, 11.5%
    - > 70: standard, 0.9 multiplier, 12.0%
    - else: subprime, 0.8 multiplier, 13.0%
    """
    for tier in RISK_TIERS:
        if overall_score > tier.min_score_exclusive:
            return tier
    return RISK_TIERS[-1]


def derive_loan_terms(
    profile: ApplicantProfile,
    metrics: FinancialMetrics,
    overall_score: int,
) -> LoanTerms:
    """
    Size the loan for an eligible applicant.

    The EMI may never exceed 40% of salary minus existing obligations: when the
    first-pass amount breaks that ceiling, the principal is recomputed from the
    ceiling by inverting the EMI formula.
    """
    tier = determine_risk_tier(overall_score)
    tenure = DEFAULT_TENURE_MONTHS
    rate = tier.interest_rate

    max_emi_capacity = profile.current_salary * EMI_INCOME_SHARE - metrics.total_existing_debt
    capacity_based_amount = min(
        profile.desired_amount,
        profile.current_salary * SALARY_MULTIPLE_CAP * tier.loan_multiplier,
    )
    approved_amount = min(profile.desired_amount * DESIRED_AMOUNT_SHARE, capacity_based_amount)

    monthly_emi = calculate_emi(approved_amount, rate, tenure)
    if monthly_emi > max_emi_capacity:
        approved_amount = principal_for_emi(max(max_emi_capacity, 0.0), rate, tenure)
        monthly_emi = calculate_emi(approved_amount, rate, tenure)

    return LoanTerms(
        approved_amount=approved_amount,
        interest_rate=rate,
        tenure_months=tenure,
        monthly_emi=monthly_emi,
    )


def build_recommendations(profile: ApplicantProfile, metrics: FinancialMetrics) -> List[str]:
    """All applicable advice, independent of the eligibility outcome"""
    recommendations = []
    if metrics.debt_to_income_ratio > 30:
        recommendations.append("Consider consolidating existing debts to reduce EMI burden")
    if metrics.savings_ratio < 10:
        recommendations.append("Increase monthly savings to 15-20% of income for better financial health")
    if metrics.lifestyle_ratio > 10:
        recommendations.append("Reduce discretionary spending to improve loan repayment capacity")
    if profile.investment_habit == "none":
        recommendations.append("Start investing in mutual funds or SIPs for long-term wealth creation")
    if profile.owns_house == "no" and metrics.rent_ratio > 30:
        recommendations.append("Consider home ownership to reduce long-term housing costs")
    return recommendations


def assess(profile: ApplicantProfile) -> Assessment:
    """
    Main entry point: score a profile and decide eligibility and terms.

    Raises:
        InvalidProfileError: If the profile fails validation
    """
    profile = validate_profile(profile)
    metrics = derive_metrics(profile)

    cards = [
        run_pass(base, rules, profile, metrics)
        for base, rules in (
            INCOME_STABILITY_PASS,
            REPAYMENT_CAPACITY_PASS,
            SPENDING_PATTERN_PASS,
            EMPLOYMENT_PASS,
        )
    ]
    income, repayment, spending, employment = (card.score for card in cards)
    overall = calculate_overall_score(income, repayment, spending, employment)

    positive_factors = [factor for card in cards for factor in card.positive_factors]
    negative_factors = [factor for card in cards for factor in card.negative_factors]

    if overall < MIN_ELIGIBLE_SCORE:
        negative_factors.append("Overall risk score below minimum threshold")
    if metrics.debt_to_income_ratio > MAX_ELIGIBLE_DTI:
        negative_factors.append("Debt-to-income ratio exceeds maximum limit")
    is_eligible = overall >= MIN_ELIGIBLE_SCORE and metrics.debt_to_income_ratio <= MAX_ELIGIBLE_DTI

    terms = None
    if is_eligible:
        terms = derive_loan_terms(profile, metrics, overall)
        if terms.approved_amount <= 0 < profile.desired_amount:
            negative_factors.append("Existing obligations leave no room for a new EMI")

    total_monthly_expenses = (
        metrics.housing_cost
        + profile.grocery_expense
        + metrics.total_existing_debt
        + metrics.lifestyle_spend
    )

    common = dict(
        scores=ComponentScores(
            income_stability=income,
            repayment_capacity=repayment,
            spending_pattern=spending,
            employment=employment,
            overall=overall,
        ),
        debt_to_income_ratio=metrics.debt_to_income_ratio,
        disposable_income=profile.current_salary - total_monthly_expenses,
        lifestyle_risk_factor=metrics.lifestyle_ratio / 100,
        positive_factors=tuple(positive_factors),
        negative_factors=tuple(negative_factors),
        recommendations=tuple(build_recommendations(profile, metrics)),
    )

    if terms is not None:
        return EligibleAssessment(terms=terms, **common)
    return IneligibleAssessment(**common)
