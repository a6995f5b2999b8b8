"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidProfileError(DomainException):
    """Applicant profile is missing a required field or holds an unusable value"""

    pass


class InvalidInputError(DomainException):
    """EMI inputs are missing, non-numeric or out of range"""

    pass


class DuplicateAssessmentError(DomainException):
    """Application already has an assessment; re-assessment needs a new application"""

    pass
