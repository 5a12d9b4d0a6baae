"""REST API for Registrar."""

from registrar.api.app import app, create_app
from registrar.api.models import (
    APIResponse,
    EnrollmentCreate,
    EnrollmentResponse,
    WithdrawalResponse,
)

__all__ = [
    "APIResponse",
    "EnrollmentCreate",
    "EnrollmentResponse",
    "WithdrawalResponse",
    "app",
    "create_app",
]
