"""Data access layer for applications, assessments, and active loans"""

import uuid
from datetime import date
from typing import Any, Dict, List, Optional
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from underwriting_gateway.infrastructure.database.models import (
    ActiveLoan,
    LoanApplication,
    LoanAssessment,
    LoanInstallment,
)
from underwriting_gateway.domain.exceptions import DuplicateAssessmentError
from underwriting_gateway.domain.models import Assessment, Installment
from underwriting_gateway.config import settings


class ApplicationRepository:
    """Repository for loan applications"""

    def __init__(self, db: Session):
        self.db = db

    def create_application(
        self,
        user_id: str,
        profile: Dict[str, Any],
        desired_amount: float,
        loan_purpose: str | None = None,
    ) -> LoanApplication:
        """Persist a pending application"""
        db_application = LoanApplication(
            user_id=user_id,
            loan_purpose=loan_purpose,
            desired_amount=desired_amount,
            profile=profile,
            status="pending",
        )
        self.db.add(db_application)
        self.db.flush()  # Get ID without committing
        return db_application

    def get_application_by_id(self, application_id: uuid.UUID) -> Optional[LoanApplication]:
        """Fetch application with its assessment"""
        return (
            self.db.query(LoanApplication)
            .filter(LoanApplication.id == application_id)
            .first()
        )

    def get_applications_by_user(self, user_id: str, limit: int = 10) -> List[LoanApplication]:
        """Fetch recent applications for a user"""
        return (
            self.db.query(LoanApplication)
            .filter(LoanApplication.user_id == user_id)
            .order_by(LoanApplication.created_at.desc())
            .limit(limit)
            .all()
        )

    def update_status(self, application: LoanApplication, status: str) -> None:
        """Move application to approved or rejected"""
        application.status = status
        self.db.flush()


class AssessmentRepository:
    """Repository for underwriting assessments"""

    def __init__(self, db: Session):
        self.db = db

    def create_assessment(self, application_id: uuid.UUID, assessment: Assessment) -> LoanAssessment:
        """
        Persist an assessment for an application.

        Raises:
            DuplicateAssessmentError: If the application was already assessed
        """
        existing = (
            self.db.query(LoanAssessment.id)
            .filter(LoanAssessment.application_id == application_id)
            .first()
        )
        if existing is not None:
            raise DuplicateAssessmentError(f"Application {application_id} already assessed")

        scores = assessment.scores
        db_assessment = LoanAssessment(
            application_id=application_id,
            is_eligible=assessment.is_eligible,
            overall_risk_score=scores.overall,
            income_stability_score=scores.income_stability,
            repayment_capacity_score=scores.repayment_capacity,
            spending_pattern_score=scores.spending_pattern,
            employment_score=scores.employment,
            debt_to_income_ratio=round(assessment.debt_to_income_ratio, 2),
            disposable_income=round(assessment.disposable_income, 2),
            lifestyle_risk_factor=round(assessment.lifestyle_risk_factor, 3),
            positive_factors=list(assessment.positive_factors),
            negative_factors=list(assessment.negative_factors),
            recommendations=list(assessment.recommendations),
        )
        if assessment.is_eligible:
            terms = assessment.terms
            db_assessment.approved_amount = round(terms.approved_amount, 2)
            db_assessment.interest_rate = terms.interest_rate
            db_assessment.tenure_months = terms.tenure_months
            db_assessment.monthly_emi = round(terms.monthly_emi, 2)

        self.db.add(db_assessment)
        try:
            self.db.flush()
        except IntegrityError as e:
            raise DuplicateAssessmentError(f"Application {application_id} already assessed") from e
        return db_assessment


class LoanRepository:
    """Repository for active loans and their repayment schedules"""

    def __init__(self, db: Session):
        self.db = db

    def create_loan(
        self,
        user_id: str,
        application_id: uuid.UUID,
        assessment_id: uuid.UUID,
        principal_amount: float,
        interest_rate: float,
        monthly_emi: float,
        installments: List[Installment],
    ) -> ActiveLoan:
        """Create active loan with its installment schedule"""
        loan_id = uuid.uuid4()
        db_loan = ActiveLoan(
            id=loan_id,
            user_id=user_id,
            application_id=application_id,
            assessment_id=assessment_id,
            loan_number=generate_loan_number(loan_id),
            principal_amount=round(principal_amount, 2),
            outstanding_amount=round(principal_amount, 2),
            interest_rate=interest_rate,
            tenure_months=len(installments),
            monthly_emi=round(monthly_emi, 2),
            next_due_date=installments[0].due_date,
        )
        self.db.add(db_loan)
        self.db.flush()

        for inst in installments:
            self.db.add(
                LoanInstallment(
                    loan_id=db_loan.id,
                    sequence=inst.sequence,
                    due_date=inst.due_date,
                    amount=inst.amount,
                    principal_component=inst.principal_component,
                    interest_component=inst.interest_component,
                    closing_balance=inst.closing_balance,
                )
            )

        return db_loan

    def get_loan_by_id(self, loan_id: uuid.UUID) -> Optional[ActiveLoan]:
        """Fetch loan with installments"""
        return (
            self.db.query(ActiveLoan)
            .filter(ActiveLoan.id == loan_id)
            .first()
        )

    def get_loan_by_application(self, application_id: uuid.UUID) -> Optional[ActiveLoan]:
        return (
            self.db.query(ActiveLoan)
            .filter(ActiveLoan.application_id == application_id)
            .first()
        )

    def get_loans_by_user(self, user_id: str) -> List[ActiveLoan]:
        """Active loans for a user, newest first"""
        return (
            self.db.query(ActiveLoan)
            .filter(ActiveLoan.user_id == user_id, ActiveLoan.status == "active")
            .order_by(ActiveLoan.created_at.desc())
            .all()
        )

    def get_dashboard_stats(self, user_id: str) -> Dict[str, Any]:
        """Active loan count, total outstanding, and the soonest upcoming EMI"""
        count, total_outstanding = (
            self.db.query(func.count(ActiveLoan.id), func.coalesce(func.sum(ActiveLoan.outstanding_amount), 0))
            .filter(ActiveLoan.user_id == user_id, ActiveLoan.status == "active")
            .one()
        )

        next_loan = (
            self.db.query(ActiveLoan)
            .filter(ActiveLoan.user_id == user_id, ActiveLoan.status == "active")
            .order_by(ActiveLoan.next_due_date.asc())
            .first()
        )

        return {
            "active_loans_count": count,
            "total_outstanding": float(total_outstanding),
            "next_emi_amount": next_loan.monthly_emi if next_loan else 0.0,
            "next_due_date": next_loan.next_due_date if next_loan else None,
        }


def generate_loan_number(loan_id: uuid.UUID, today: date | None = None) -> str:
    """Human-readable loan number: prefix, year, and six digits derived from the loan id"""
    year = (today or date.today()).year
    return f"{settings.loan_number_prefix}{year}{loan_id.int % 1_000_000:06d}"
