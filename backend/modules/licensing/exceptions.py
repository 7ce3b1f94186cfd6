"""
Licensing module exceptions.

Gateway and post-charge persistence failures are reported as session
results rather than raised; only data faults surface as exceptions here.
"""

from shared.exceptions import ValidationError


class InvalidLicenseDataError(ValidationError):
    """
    Raised when a developer record cannot be classified.

    A persisted developer always has an expiration. A missing one is a
    data-integrity fault and is never defaulted.
    """

    def __init__(self, developer_id: str, reason: str = "expiration is not set"):
        super().__init__(
            f"Invalid license data for developer {developer_id}: {reason}",
            code="INVALID_LICENSE_DATA",
            details={"developer_id": developer_id, "reason": reason},
        )
