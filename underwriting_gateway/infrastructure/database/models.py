"""SQLAlchemy ORM models for applications, assessments, and active loans"""

import uuid
from sqlalchemy import Column, Boolean, DateTime, Date, Integer, Numeric, ForeignKey, Text, JSON, Uuid
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()

Money = Numeric(12, 2, asdecimal=False)


class LoanApplication(Base):
    """Submitted loan application with the raw applicant profile"""

    __tablename__ = "loan_application"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    loan_purpose = Column(Text, nullable=True)
    desired_amount = Column(Money, nullable=False)
    profile = Column(JSON, nullable=False)
    status = Column(Text, nullable=False, default="pending")  # pending | approved | rejected
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    assessment = relationship(
        "LoanAssessment", back_populates="application", uselist=False, cascade="all, delete-orphan"
    )


class LoanAssessment(Base):
    """Underwriting outcome; at most one per application"""

    __tablename__ = "loan_assessment"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    application_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("loan_application.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    is_eligible = Column(Boolean, nullable=False)

    # Terms, present iff eligible
    approved_amount = Column(Money, nullable=True)
    interest_rate = Column(Numeric(5, 2, asdecimal=False), nullable=True)
    tenure_months = Column(Integer, nullable=True)
    monthly_emi = Column(Money, nullable=True)

    overall_risk_score = Column(Integer, nullable=False)
    income_stability_score = Column(Integer, nullable=False)
    repayment_capacity_score = Column(Integer, nullable=False)
    spending_pattern_score = Column(Integer, nullable=False)
    employment_score = Column(Integer, nullable=False)

    debt_to_income_ratio = Column(Numeric(7, 2, asdecimal=False), nullable=False)
    disposable_income = Column(Money, nullable=False)
    lifestyle_risk_factor = Column(Numeric(7, 3, asdecimal=False), nullable=False)

    positive_factors = Column(JSON, nullable=False)
    negative_factors = Column(JSON, nullable=False)
    recommendations = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    application = relationship("LoanApplication", back_populates="assessment")


class ActiveLoan(Base):
    """Loan created from an approved application"""

    __tablename__ = "active_loan"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    application_id = Column(Uuid(as_uuid=True), ForeignKey("loan_application.id", ondelete="CASCADE"), nullable=False)
    assessment_id = Column(Uuid(as_uuid=True), ForeignKey("loan_assessment.id", ondelete="CASCADE"), nullable=False)
    loan_number = Column(Text, nullable=False, unique=True)
    principal_amount = Column(Money, nullable=False)
    outstanding_amount = Column(Money, nullable=False)
    interest_rate = Column(Numeric(5, 2, asdecimal=False), nullable=False)
    tenure_months = Column(Integer, nullable=False)
    monthly_emi = Column(Money, nullable=False)
    next_due_date = Column(Date, nullable=False)
    status = Column(Text, nullable=False, default="active")  # active | closed | defaulted
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    installments = relationship(
        "LoanInstallment",
        back_populates="loan",
        cascade="all, delete-orphan",
        order_by="LoanInstallment.sequence",
    )


class LoanInstallment(Base):
    """Individual monthly payment within an amortisation schedule"""

    __tablename__ = "loan_installment"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    loan_id = Column(Uuid(as_uuid=True), ForeignKey("active_loan.id", ondelete="CASCADE"), nullable=False)
    sequence = Column(Integer, nullable=False)
    due_date = Column(Date, nullable=False)
    amount = Column(Money, nullable=False)
    principal_component = Column(Money, nullable=False)
    interest_component = Column(Money, nullable=False)
    closing_balance = Column(Money, nullable=False)
    status = Column(Text, nullable=False, default="scheduled")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    loan = relationship("ActiveLoan", back_populates="installments")
