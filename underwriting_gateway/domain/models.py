"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from datetime import date
from typing import Tuple, Union

EMPLOYMENT_TYPES = ("permanent", "contract", "probation")
HOUSING_STATUSES = ("yes", "no", "family")
INVESTMENT_HABITS = ("aggressive", "moderate", "conservative", "minimal", "none")


@dataclass(frozen=True)
class ApplicantProfile:
    """Financial and lifestyle data submitted with a loan application"""

    current_salary: float
    employment_type: str  # permanent | contract | probation
    experience_years: int
    owns_house: str  # yes | no | family
    grocery_expense: float
    investment_habit: str  # aggressive | moderate | conservative | minimal | none
    desired_amount: float
    previous_salary: float = 0.0
    existing_emis: float = 0.0
    credit_card_debt: float = 0.0
    rent_amount: float = 0.0
    mall_visits: int = 0
    mall_spending: float = 0.0
    entertainment_budget: float = 0.0
    monthly_savings: float = 0.0


@dataclass(frozen=True)
class FinancialMetrics:
    """Ratios derived from a profile, shared by every scoring pass"""

    total_existing_debt: float
    debt_to_income_ratio: float
    savings_ratio: float
    housing_cost: float
    rent_ratio: float
    lifestyle_spend: float
    lifestyle_ratio: float
    grocery_ratio: float
    salary_growth: float | None  # None when there is no previous salary


@dataclass(frozen=True)
class ComponentScores:
    """Component scores and their weighted overall, each in [0, 100]"""

    income_stability: int
    repayment_capacity: int
    spending_pattern: int
    employment: int
    overall: int


@dataclass(frozen=True)
class LoanTerms:
    """Offer made to an eligible applicant"""

    approved_amount: float
    interest_rate: float
    tenure_months: int
    monthly_emi: float


@dataclass(frozen=True)
class AssessmentBase:
    """Fields present on every underwriting outcome"""

    scores: ComponentScores
    debt_to_income_ratio: float
    disposable_income: float
    lifestyle_risk_factor: float
    positive_factors: Tuple[str, ...]
    negative_factors: Tuple[str, ...]
    recommendations: Tuple[str, ...]


@dataclass(frozen=True)
class IneligibleAssessment(AssessmentBase):
    """Underwriting outcome for an applicant who does not qualify"""

    @property
    def is_eligible(self) -> bool:
        return False


@dataclass(frozen=True)
class EligibleAssessment(AssessmentBase):
    """Underwriting outcome carrying the loan terms offered"""

    terms: LoanTerms

    @property
    def is_eligible(self) -> bool:
        return True


Assessment = Union[EligibleAssessment, IneligibleAssessment]


@dataclass(frozen=True)
class EmiQuote:
    """Result of the standalone EMI calculator"""

    principal: float
    emi: float
    total_amount: float
    total_interest: float


@dataclass
class Installment:
    """Single monthly payment in an amortisation schedule"""

    sequence: int
    due_date: date
    amount: float
    principal_component: float
    interest_component: float
    closing_balance: float
