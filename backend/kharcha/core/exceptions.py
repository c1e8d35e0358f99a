"""
Custom Exceptions for Kharcha
=============================

Services raise these instead of generic Exception; the API layer maps them
to HTTP responses (see `kharcha.main`).

Usage:
    from kharcha.core.exceptions import AccountNotFoundError

    if not account:
        raise AccountNotFoundError(account_id)
"""

from typing import Optional, Any, Dict


class KharchaError(Exception):
    """Base exception for all Kharcha errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


# ============================================
# Authentication Errors
# ============================================

class AuthenticationError(KharchaError):
    """User authentication failed"""

    status_code = 401

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, code="AUTH_FAILED")


class TokenExpiredError(AuthenticationError):
    """Session token or sign-in link has expired"""

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message)
        self.code = "TOKEN_EXPIRED"


class InvalidTokenError(AuthenticationError):
    """Session token or sign-in link is invalid"""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)
        self.code = "INVALID_TOKEN"


class PermissionDeniedError(KharchaError):
    """Authenticated user lacks the required role"""

    status_code = 403

    def __init__(self, message: str = "Permission denied"):
        super().__init__(message, code="PERMISSION_DENIED")


class UnsupportedProviderError(AuthenticationError):
    """Sign-in requested for a provider that is not configured"""

    def __init__(self, provider: str):
        super().__init__(f"Unsupported sign-in provider '{provider}'")
        self.code = "UNSUPPORTED_PROVIDER"
        self.details = {"provider": provider}


# ============================================
# Resource Errors (404-type)
# ============================================

class ResourceNotFoundError(KharchaError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} with ID '{resource_id}' not found",
            code=f"{resource_type.upper().replace(' ', '_')}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id}
        )


class UserNotFoundError(ResourceNotFoundError):
    def __init__(self, user_id: str):
        super().__init__("User", user_id)


class AccountNotFoundError(ResourceNotFoundError):
    def __init__(self, account_id: str):
        super().__init__("Account", account_id)


class OutflowTypeNotFoundError(ResourceNotFoundError):
    def __init__(self, outflow_type_id: str):
        super().__init__("Outflow type", outflow_type_id)


class TransactionNotFoundError(ResourceNotFoundError):
    def __init__(self, transaction_id: str):
        super().__init__("Transaction", transaction_id)


class BudgetNotFoundError(ResourceNotFoundError):
    def __init__(self, budget_id: str):
        super().__init__("Budget", budget_id)


class NotificationNotFoundError(ResourceNotFoundError):
    def __init__(self, notification_id: str):
        super().__init__("Notification", notification_id)


# ============================================
# Validation Errors (400-type)
# ============================================

class ValidationError(KharchaError):
    """Input validation failed"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class ReadOnlyResourceError(ValidationError):
    """Built-in resources cannot be edited or deleted"""

    def __init__(self, message: str):
        super().__init__(message)
        self.code = "READ_ONLY_RESOURCE"


# ============================================
# Conflict Errors (409-type)
# ============================================

class DuplicateResourceError(KharchaError):
    """Resource with the same unique key already exists"""

    status_code = 409

    def __init__(self, message: str):
        super().__init__(message, code="DUPLICATE_RESOURCE")


class ResourceInUseError(KharchaError):
    """Resource is still referenced and cannot be deleted"""

    status_code = 409

    def __init__(self, message: str):
        super().__init__(message, code="RESOURCE_IN_USE")


# ============================================
# External Service Errors
# ============================================

class EmailDeliveryError(KharchaError):
    """Email provider rejected or failed to deliver a message"""

    status_code = 502

    def __init__(self, provider: str, reason: str):
        super().__init__(
            f"Email delivery via {provider} failed: {reason}",
            code="EMAIL_DELIVERY_FAILED",
            details={"provider": provider}
        )
