"""Pydantic schemas for API request/response validation"""

from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field
from datetime import date
from typing import Any, Dict, List, Literal, Optional


class ApplicationRequest(BaseModel):
    """
    Request body for POST /v1/applications.

    Only types are checked here; value ranges are enforced by profile validation.
    """

    user_id: str = Field(..., min_length=1, description="User identifier")
    loan_purpose: Optional[str] = Field(None, description="Free-text purpose of the loan")

    # Employment
    current_salary: Decimal = Field(..., description="Current monthly salary")
    previous_salary: Optional[Decimal] = Field(None, description="Monthly salary before the last hike")
    employment_type: Literal["permanent", "contract", "probation"]
    experience_years: int

    # Existing obligations
    existing_emis: Optional[Decimal] = None
    credit_card_debt: Optional[Decimal] = Field(None, description="Outstanding credit card balance")

    # Lifestyle
    owns_house: Literal["yes", "no", "family"]
    rent_amount: Optional[Decimal] = None
    grocery_expense: Decimal
    mall_visits: Optional[int] = Field(None, description="Mall visits per month")
    mall_spending: Optional[Decimal] = Field(None, description="Average spend per mall visit")
    entertainment_budget: Optional[Decimal] = None
    investment_habit: Literal["aggressive", "moderate", "conservative", "minimal", "none"]
    monthly_savings: Optional[Decimal] = None

    # Loan
    desired_amount: Decimal

    def profile_data(self) -> Dict[str, Any]:
        """Applicant profile fields as JSON-safe values"""
        return self.model_dump(mode="json", exclude={"user_id", "loan_purpose"})


class AssessmentSchema(BaseModel):
    """Underwriting outcome as stored; terms are null unless eligible"""

    model_config = ConfigDict(from_attributes=True)

    is_eligible: bool
    approved_amount: Optional[float] = None
    interest_rate: Optional[float] = None
    tenure_months: Optional[int] = None
    monthly_emi: Optional[float] = None
    overall_risk_score: int
    income_stability_score: int
    repayment_capacity_score: int
    spending_pattern_score: int
    employment_score: int
    debt_to_income_ratio: float
    disposable_income: float
    lifestyle_risk_factor: float
    positive_factors: List[str]
    negative_factors: List[str]
    recommendations: List[str]


class ApplicationResponse(BaseModel):
    """Response for POST /v1/applications and GET /v1/applications/{application_id}"""

    application_id: str
    user_id: str
    status: str
    loan_purpose: Optional[str] = None
    created_at: str
    assessment: Optional[AssessmentSchema] = None
    loan_id: Optional[str] = None


class HistoryItem(BaseModel):
    """Single application in history"""

    application_id: str
    status: str
    desired_amount: float
    approved_amount: Optional[float] = None
    overall_risk_score: Optional[int] = None
    created_at: str


class HistoryResponse(BaseModel):
    """Response for GET /v1/applications/history"""

    user_id: str
    applications: List[HistoryItem]


class InstallmentSchema(BaseModel):
    """Single installment in a repayment schedule"""

    sequence: int
    due_date: date
    amount: float
    principal_component: float
    interest_component: float
    closing_balance: float
    status: str = "scheduled"


class LoanResponse(BaseModel):
    """Response for GET /v1/loans/{loan_id}"""

    loan_id: str
    loan_number: str
    user_id: str
    principal_amount: float
    outstanding_amount: float
    interest_rate: float
    tenure_months: int
    monthly_emi: float
    next_due_date: date
    status: str
    installments: List[InstallmentSchema]
    created_at: str


class LoanSummary(BaseModel):
    """Single active loan in a user's loan list"""

    loan_id: str
    loan_number: str
    principal_amount: float
    outstanding_amount: float
    interest_rate: float
    tenure_months: int
    monthly_emi: float
    next_due_date: date
    status: str
    created_at: str


class LoanListResponse(BaseModel):
    """Response for GET /v1/loans"""

    user_id: str
    loans: List[LoanSummary]


class DashboardStatsResponse(BaseModel):
    """Response for GET /v1/dashboard/stats"""

    user_id: str
    active_loans_count: int
    total_outstanding: float
    next_emi_amount: float
    next_due_date: Optional[date] = None


class EmiRequest(BaseModel):
    """Request body for POST /v1/emi"""

    principal: float = Field(..., description="Loan principal")
    rate: float = Field(..., description="Annual interest rate in percent")
    tenure_months: int = Field(..., description="Repayment duration in months")


class EmiResponse(BaseModel):
    """Response for POST /v1/emi, monetary values rounded to whole units"""

    emi: int
    total_amount: int
    total_interest: int
    principal: int
