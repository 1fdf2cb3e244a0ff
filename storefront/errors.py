"""
Domain exceptions for the storefront engine.
Every failure a shopper can see has a name.
"""


class ConfigError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


class TransportError(Exception):
    """Raised when the backend is unreachable or returns something that is not JSON."""
    pass


class ApplicationError(Exception):
    """Raised when the backend answers with success=false or a message field."""
    pass


class ValidationError(Exception):
    """Raised when a local precondition fails. No network call is made."""
    pass


class NormalizationError(Exception):
    """Raised when raw backend data cannot be normalized."""
    pass


class RetryExhaustedError(TransportError):
    """Raised when all retry attempts for a backend read are exhausted."""
    pass
