"""Custom exception hierarchy."""

from typing import Any, Dict, Optional


class AppError(Exception):
    """Base exception for application errors."""

    error_code = "InternalServerError"
    status_code = 500

    def __init__(
        self,
        message: str,
        original_error: Exception = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.original_error = original_error
        self.details = details or {}


class NotFoundError(AppError):
    """Raised when an entity lookup misses."""

    error_code = "NotFound"
    status_code = 404


class ValidationError(AppError):
    """Raised when input validation fails."""

    error_code = "ValidationError"
    status_code = 400


class ReferenceMismatchError(AppError):
    """Raised when a confirmation payload names a different payment than the stored one."""

    error_code = "ReferenceMismatch"
    status_code = 400


class VerificationMismatchError(AppError):
    """Raised when the payment rail reports a different reference or a failed transaction."""

    error_code = "VerificationMismatch"
    status_code = 400


class ExternalServiceError(AppError):
    """Raised when a downstream verification service cannot be used."""

    error_code = "ExternalServiceError"
    status_code = 500


class ExternalVerificationFailedError(ExternalServiceError):
    """Raised when the payment rail lookup fails at the HTTP level or times out."""

    error_code = "ExternalVerificationFailed"
    status_code = 400


class ExternalServiceUnavailableError(ExternalServiceError):
    """Raised when the downstream service cannot be reached at all."""

    pass


class InvalidProofError(AppError):
    """Raised when a World ID proof payload is missing required fields."""

    error_code = "InvalidProof"
    status_code = 400


class ConfigurationError(AppError):
    """Raised when configuration is invalid or missing."""

    pass
