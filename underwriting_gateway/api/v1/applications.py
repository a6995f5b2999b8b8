"""Loan application endpoints: submit, read back, and list history"""

import time
import uuid
import logging
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from underwriting_gateway.api.v1.schemas import (
    ApplicationRequest,
    ApplicationResponse,
    AssessmentSchema,
    HistoryItem,
    HistoryResponse,
)
from underwriting_gateway.api.dependencies import get_request_id
from underwriting_gateway.config import settings
from underwriting_gateway.infrastructure.database.session import get_db
from underwriting_gateway.infrastructure.database.repositories import (
    ApplicationRepository,
    AssessmentRepository,
    LoanRepository,
)
from underwriting_gateway.domain.profile import parse_profile
from underwriting_gateway.domain.scoring import assess, determine_risk_tier
from underwriting_gateway.domain.emi import generate_repayment_schedule
from underwriting_gateway.domain.exceptions import InvalidProfileError, DuplicateAssessmentError
from underwriting_gateway.infrastructure.observability.metrics import record_assessment, invalid_profile_counter
from underwriting_gateway.infrastructure.observability.logging import log_assessment

router = APIRouter()


@router.post("/applications", response_model=ApplicationResponse)
def submit_application(
    request_body: ApplicationRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Submit a loan application and underwrite it.

    Flow:
    1. Parse the applicant profile
    2. Run the underwriting engine
    3. Persist application + assessment
    4. Move application to approved/rejected
    5. Create active loan with repayment schedule if eligible
    6. Return application with its assessment
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        # 1-2. Score the profile
        profile_data = request_body.profile_data()
        profile = parse_profile(profile_data)
        assessment = assess(profile)

        # 3. Persist application and assessment
        application_repo = ApplicationRepository(db)
        db_application = application_repo.create_application(
            user_id=request_body.user_id,
            profile=profile_data,
            desired_amount=profile.desired_amount,
            loan_purpose=request_body.loan_purpose,
        )
        db_assessment = AssessmentRepository(db).create_assessment(db_application.id, assessment)

        # 4. Status transition
        application_repo.update_status(db_application, "approved" if assessment.is_eligible else "rejected")

        # 5. Active loan for a non-zero offer
        loan_id = None
        approved_amount = None
        risk_tier = None
        if assessment.is_eligible:
            terms = assessment.terms
            approved_amount = round(terms.approved_amount, 2)
            risk_tier = determine_risk_tier(assessment.scores.overall).name

            if approved_amount > 0:
                installments = generate_repayment_schedule(
                    approved_amount, terms.interest_rate, terms.tenure_months
                )
                db_loan = LoanRepository(db).create_loan(
                    user_id=request_body.user_id,
                    application_id=db_application.id,
                    assessment_id=db_assessment.id,
                    principal_amount=approved_amount,
                    interest_rate=terms.interest_rate,
                    monthly_emi=terms.monthly_emi,
                    installments=installments,
                )
                loan_id = str(db_loan.id)

        db.commit()
        db.refresh(db_application)

        # Record metrics and logs
        duration_ms = (time.time() - start_time) * 1000
        record_assessment(assessment.is_eligible, risk_tier, approved_amount or 0.0)
        log_assessment(
            request_id,
            request_body.user_id,
            str(db_application.id),
            assessment.is_eligible,
            assessment.scores.overall,
            approved_amount,
            duration_ms,
        )

        return ApplicationResponse(
            application_id=str(db_application.id),
            user_id=db_application.user_id,
            status=db_application.status,
            loan_purpose=db_application.loan_purpose,
            created_at=db_application.created_at.isoformat(),
            assessment=AssessmentSchema.model_validate(db_assessment),
            loan_id=loan_id,
        )

    except InvalidProfileError as e:
        invalid_profile_counter.inc()
        db.rollback()
        logging.warning(f"Invalid profile: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except DuplicateAssessmentError as e:
        db.rollback()
        logging.warning(f"Duplicate assessment: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=409, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/applications/history", response_model=HistoryResponse)
def get_application_history(
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    """
    Retrieve recent loan applications for a user.

    Returns:
        List of applications (approved/rejected) with approved amounts and scores
    """
    application_repo = ApplicationRepository(db)
    applications = application_repo.get_applications_by_user(user_id, limit=settings.recent_history_limit)

    history_items = [
        HistoryItem(
            application_id=str(a.id),
            status=a.status,
            desired_amount=a.desired_amount,
            approved_amount=a.assessment.approved_amount if a.assessment else None,
            overall_risk_score=a.assessment.overall_risk_score if a.assessment else None,
            created_at=a.created_at.isoformat(),
        )
        for a in applications
    ]

    return HistoryResponse(user_id=user_id, applications=history_items)


@router.get("/applications/{application_id}", response_model=ApplicationResponse)
def get_application(application_id: str, db: Session = Depends(get_db)):
    """Retrieve an application together with its assessment and loan, if any"""
    try:
        application_uuid = uuid.UUID(application_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid application ID format")

    application = ApplicationRepository(db).get_application_by_id(application_uuid)
    if not application:
        raise HTTPException(status_code=404, detail="Application not found")

    loan = LoanRepository(db).get_loan_by_application(application_uuid)

    return ApplicationResponse(
        application_id=str(application.id),
        user_id=application.user_id,
        status=application.status,
        loan_purpose=application.loan_purpose,
        created_at=application.created_at.isoformat(),
        assessment=AssessmentSchema.model_validate(application.assessment) if application.assessment else None,
        loan_id=str(loan.id) if loan else None,
    )
