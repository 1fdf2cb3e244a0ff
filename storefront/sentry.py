"""
Sentry initialization for centralized error tracking.
Observes failures, never changes what the shopper sees.
"""
import logging
from typing import Dict, Any, Optional

import sentry_sdk
from sentry_sdk.integrations.asyncio import AsyncioIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

from storefront.config import config
from storefront.logger import logger


def initialize_sentry() -> bool:
    """Initialize Sentry SDK if DSN is configured."""
    if not config.has_sentry:
        logger.info("Sentry not configured, skipping initialization")
        return False

    try:
        sentry_sdk.init(
            dsn=config.SENTRY_DSN,
            environment=config.ENVIRONMENT,
            integrations=[
                AsyncioIntegration(),
                LoggingIntegration(level=logging.INFO, event_level=logging.ERROR)
            ],
            traces_sample_rate=0.1,
            send_default_pii=False,
            before_send=_enrich_sentry_event
        )
        logger.info("Sentry initialized for error tracking")
        return True

    except Exception as e:
        logger.error(f"Failed to initialize Sentry: {e}")
        return False


def _enrich_sentry_event(event: Dict[str, Any], hint: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Tag events with system context."""
    event.setdefault("tags", {})
    event["tags"]["system"] = "storefront"
    event["tags"]["environment"] = config.ENVIRONMENT

    if "exception" in event:
        values = event["exception"].get("values", [])
        if values:
            exc = values[0]
            event["fingerprint"] = [
                "{{ default }}",
                exc.get("type", "Unknown"),
                exc.get("module", "unknown")
            ]

    return event


def capture_transport_failure(method: str, path: str, error: str):
    """Capture a failed backend call in Sentry."""
    if not config.has_sentry:
        return

    with sentry_sdk.new_scope() as scope:
        scope.set_tag("error_type", "transport")
        scope.set_tag("method", method)
        scope.set_extra("path", path)
        scope.set_extra("error", error)
        scope.set_level("warning")

        sentry_sdk.capture_message(
            f"Backend call failed: {method} {path}",
            "warning"
        )


def capture_checkout_failure(address_id: Optional[str], message: str):
    """Capture an order the backend refused or never received."""
    if not config.has_sentry:
        return

    with sentry_sdk.new_scope() as scope:
        scope.set_tag("error_type", "checkout")
        scope.set_extra("address_id", address_id)
        scope.set_extra("message", message)
        scope.set_level("error")

        sentry_sdk.capture_message("Order placement failed", "error")
