"""Enrollment package - admission control and waitlist promotion."""

from registrar.enrollment.engine import AdmissionEngine
from registrar.enrollment.models import (
    CandidateCheck,
    EnrollmentDetail,
    PromotionResult,
    WithdrawalResult,
)

__all__ = [
    "AdmissionEngine",
    "CandidateCheck",
    "EnrollmentDetail",
    "PromotionResult",
    "WithdrawalResult",
]
