"""Domain-specific exceptions"""

from enum import Enum
from typing import Dict, List, Optional


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InputValidationError(DomainException):
    """User input failed a local check; nothing was sent to the backend"""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class AmountErrorCode(str, Enum):
    EMPTY = "empty"
    NOT_A_NUMBER = "not_a_number"
    NOT_POSITIVE = "not_positive"
    BELOW_MINIMUM = "below_minimum"


class AmountError(InputValidationError):
    """Requested amount is missing, malformed or too small"""

    def __init__(self, code: AmountErrorCode, message: str):
        super().__init__(message, field="amount")
        self.code = code


class MissingFieldError(InputValidationError):
    """A required form field is empty"""

    pass


class InvalidFieldError(InputValidationError):
    """A form field is filled in but malformed"""

    pass


class ProofError(InputValidationError):
    """Payment screenshot is missing, too large or not an image"""

    def __init__(self, message: str):
        super().__init__(message, field="screenshot")


class WizardStateError(DomainException):
    """Operation is not allowed in the wizard's current state"""

    pass


class SubmissionInProgressError(WizardStateError):
    """A backend request for this draft is still in flight"""

    pass


class PlanLockedError(DomainException):
    """Plan is locked for the current user and cannot be bought"""

    pass


class BackendAPIError(DomainException):
    """Backend API returned an error or is unavailable"""

    pass


class SubmissionRejectedError(BackendAPIError):
    """Backend refused the payload (duplicate reference, bad fields, insufficient balance)"""

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        field_errors: Optional[Dict[str, List[str]]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.field_errors = field_errors or {}


class AuthenticationError(BackendAPIError):
    """Credential is missing, invalid or expired"""

    pass


class TransportError(BackendAPIError):
    """Network failure, timeout or server-side error"""

    pass


class InvalidResponseError(BackendAPIError):
    """Backend response body is malformed"""

    pass
