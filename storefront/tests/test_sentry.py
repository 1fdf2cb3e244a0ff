"""
Error tracking stays out of the way unless configured.
"""
from unittest.mock import MagicMock, patch

from storefront.config import config
from storefront.sentry import (
    _enrich_sentry_event,
    capture_checkout_failure,
    capture_transport_failure,
    initialize_sentry,
)


def test_initialize_without_dsn_is_noop():
    with patch.object(config, "SENTRY_DSN", ""), \
         patch("storefront.sentry.sentry_sdk.init") as init:
        assert initialize_sentry() is False

    init.assert_not_called()


def test_initialize_with_dsn():
    with patch.object(config, "SENTRY_DSN", "https://key@sentry.example/1"), \
         patch("storefront.sentry.sentry_sdk.init") as init:
        assert initialize_sentry() is True

    kwargs = init.call_args.kwargs
    assert kwargs["dsn"] == "https://key@sentry.example/1"
    assert kwargs["send_default_pii"] is False


def test_initialize_failure_is_logged_not_raised():
    with patch.object(config, "SENTRY_DSN", "https://key@sentry.example/1"), \
         patch("storefront.sentry.sentry_sdk.init", side_effect=Exception("bad dsn")):
        assert initialize_sentry() is False


def test_events_are_tagged():
    event = _enrich_sentry_event(
        {"exception": {"values": [{"type": "TransportError", "module": "storefront.errors"}]}},
        None
    )

    assert event["tags"]["system"] == "storefront"
    assert event["fingerprint"] == ["{{ default }}", "TransportError", "storefront.errors"]


def test_capture_is_skipped_without_dsn():
    with patch.object(config, "SENTRY_DSN", ""), \
         patch("storefront.sentry.sentry_sdk.capture_message") as capture:
        capture_transport_failure("GET", "/products", "down")
        capture_checkout_failure("a1", "refused")

    capture.assert_not_called()


def test_capture_checkout_failure_with_dsn():
    scope = MagicMock()
    scope_cm = MagicMock()
    scope_cm.__enter__.return_value = scope

    with patch.object(config, "SENTRY_DSN", "https://key@sentry.example/1"), \
         patch("storefront.sentry.sentry_sdk.new_scope", return_value=scope_cm), \
         patch("storefront.sentry.sentry_sdk.capture_message") as capture:
        capture_checkout_failure("a1", "Wallet balance not sufficient to place order")

    scope.set_tag.assert_any_call("error_type", "checkout")
    capture.assert_called_once_with("Order placement failed", "error")
