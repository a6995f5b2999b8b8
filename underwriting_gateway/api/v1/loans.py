"""Active loan endpoints: loan list, repayment schedule, and dashboard stats"""

import uuid
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from underwriting_gateway.api.v1.schemas import (
    DashboardStatsResponse,
    InstallmentSchema,
    LoanListResponse,
    LoanResponse,
    LoanSummary,
)
from underwriting_gateway.infrastructure.database.session import get_db
from underwriting_gateway.infrastructure.database.repositories import LoanRepository

router = APIRouter()


@router.get("/loans", response_model=LoanListResponse)
def list_loans(
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    """List a user's active loans, newest first"""
    loans = LoanRepository(db).get_loans_by_user(user_id)

    return LoanListResponse(
        user_id=user_id,
        loans=[
            LoanSummary(
                loan_id=str(loan.id),
                loan_number=loan.loan_number,
                principal_amount=loan.principal_amount,
                outstanding_amount=loan.outstanding_amount,
                interest_rate=loan.interest_rate,
                tenure_months=loan.tenure_months,
                monthly_emi=loan.monthly_emi,
                next_due_date=loan.next_due_date,
                status=loan.status,
                created_at=loan.created_at.isoformat(),
            )
            for loan in loans
        ],
    )


@router.get("/loans/{loan_id}", response_model=LoanResponse)
def get_loan(loan_id: str, db: Session = Depends(get_db)):
    """
    Retrieve an active loan with its installment schedule.

    Returns:
        Loan details with one installment per month of tenure
    """
    try:
        loan_uuid = uuid.UUID(loan_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid loan ID format")

    loan_repo = LoanRepository(db)
    loan = loan_repo.get_loan_by_id(loan_uuid)

    if not loan:
        raise HTTPException(status_code=404, detail="Loan not found")

    installments = [
        InstallmentSchema(
            sequence=inst.sequence,
            due_date=inst.due_date,
            amount=inst.amount,
            principal_component=inst.principal_component,
            interest_component=inst.interest_component,
            closing_balance=inst.closing_balance,
            status=inst.status,
        )
        for inst in loan.installments
    ]

    return LoanResponse(
        loan_id=str(loan.id),
        loan_number=loan.loan_number,
        user_id=loan.user_id,
        principal_amount=loan.principal_amount,
        outstanding_amount=loan.outstanding_amount,
        interest_rate=loan.interest_rate,
        tenure_months=loan.tenure_months,
        monthly_emi=loan.monthly_emi,
        next_due_date=loan.next_due_date,
        status=loan.status,
        installments=installments,
        created_at=loan.created_at.isoformat(),
    )


@router.get("/dashboard/stats", response_model=DashboardStatsResponse)
def get_dashboard_stats(
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    """Summary of a user's active loans"""
    stats = LoanRepository(db).get_dashboard_stats(user_id)
    return DashboardStatsResponse(user_id=user_id, **stats)
