"""Custom exceptions for the Naybourhood scoring service."""


class NaybourhoodException(Exception):
    """Base exception for the scoring service."""

    pass


class ValidationError(NaybourhoodException):
    """Raised when a request payload fails validation."""

    pass


class NotFoundError(NaybourhoodException):
    """Raised when a buyer record is not found."""

    pass


class DatabaseError(NaybourhoodException):
    """Raised when a database operation fails."""

    pass


class ConfigurationError(NaybourhoodException):
    """Raised when configuration is invalid."""

    pass
