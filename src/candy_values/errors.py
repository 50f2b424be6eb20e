"""Exception hierarchy for candy values.

Every failure raised by this package derives from CandyError. The
concrete classes also derive from the closest builtin so callers that
only know about ValueError/TypeError keep working.
"""

from __future__ import annotations

from enum import Enum


class CandyError(Exception):
    """Base exception for all candy value failures."""


class NotRepresentableError(CandyError, ValueError):
    """Raised when a variant has no value for the requested coercion."""


class ValueOverflowError(CandyError, OverflowError):
    """Raised when a value exists but does not fit the target width."""


class UnsupportedError(CandyError, TypeError):
    """Raised when an operation is undefined for a variant."""

    def __init__(self, message: str, variant: str | None = None) -> None:
        super().__init__(message)
        self.variant = variant


class MalformedAddressError(CandyError, ValueError):
    """Raised for a zone/chunk address that is negative or not an integer."""


class CandyConfigError(CandyError):
    """Raised for invalid runtime configuration."""


class PropertyErrorKind(Enum):
    """Reasons a record property query or update can fail."""

    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    INVALID_REQUEST = "invalid_request"
    AUTHORIZED_PRINCIPAL_LIMIT_REACHED = "authorized_principal_limit_reached"
    IMMUTABLE = "immutable"


class PropertyError(CandyError):
    """Raised by record property queries and updates."""

    def __init__(self, kind: PropertyErrorKind, name: str | None = None) -> None:
        if name is None:
            message = kind.value
        else:
            message = f"{kind.value}: '{name}'"
        super().__init__(message)
        self.kind = kind
        self.name = name
