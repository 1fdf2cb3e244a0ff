"""
Services package initialization.
Centralizes service imports.
"""

from storefront.services.api_gateway import ApiGateway, GatewayResponse, check_response
from storefront.services.auth_service import AuthService

__all__ = [
    'ApiGateway',
    'GatewayResponse',
    'check_response',
    'AuthService'
]
