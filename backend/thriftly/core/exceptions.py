"""
Marketplace error taxonomy

Services raise these; the API layer translates them to HTTP status codes.
Store lookups never raise for absence, they return None.

Author: Thriftly
Date: 2026-10-19
"""


class MarketplaceError(Exception):
    """Base class for all domain errors"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(MarketplaceError):
    """Identity lookup miss (product or user)"""


class ForbiddenError(MarketplaceError):
    """Ownership check failed on update/delete"""


class ValidationError(MarketplaceError):
    """Field constraint violation (enum, range, required)"""


class DuplicateUserError(MarketplaceError):
    """Email or username already registered"""


def describe_schema_error(error) -> str:
    """Flatten a pydantic ValidationError into 'field: message; ...'"""
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'body'}: {err['msg']}"
        for err in error.errors()
    )
