"""
Licensing module.

Decides whether a developer's license is active, expired, or due for an
automatic renewal, and performs the renewal charge when it is.

Public API:
- ILicenseService: Interface for the license lifecycle
- evaluate: Pure license state classification
- LicensePolicy: Trial/renewal periods and prices
- SessionResult: Outcome of a session check
"""

from .interfaces import ILicenseService
from .evaluator import evaluate
from .models import (
    LicensePolicy,
    LicenseState,
    SessionResult,
    SessionStatus,
    RenewalFailureReason,
)
from .exceptions import InvalidLicenseDataError

__all__ = [
    # Interface
    "ILicenseService",
    # Evaluation
    "evaluate",
    # Models
    "LicensePolicy",
    "LicenseState",
    "SessionResult",
    "SessionStatus",
    "RenewalFailureReason",
    # Exceptions
    "InvalidLicenseDataError",
]
