"""
Storefront commerce engine - debounced search, server-authoritative cart
and checkout decision flow over the commerce API.
"""

__version__ = "1.0.0"
__author__ = "Engineering Team"

# Export main components for easy import
from storefront.config import config
from storefront.logger import logger
from storefront.errors import (
    ConfigError,
    TransportError,
    ApplicationError,
    ValidationError,
    NormalizationError,
    RetryExhaustedError
)

__all__ = [
    'config',
    'logger',
    'ConfigError',
    'TransportError',
    'ApplicationError',
    'ValidationError',
    'NormalizationError',
    'RetryExhaustedError'
]
