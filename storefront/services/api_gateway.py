"""
Wrapper for the commerce API.
Attaches auth, applies timeouts and retries, and reports transport failures
as data instead of exceptions.
All network logic is isolated here.
"""
import aiohttp
import asyncio
from typing import Any, Dict, NamedTuple, Optional

from storefront.config import config
from storefront.errors import ApplicationError, RetryExhaustedError, TransportError
from storefront.logger import logger
from storefront.sentry import capture_transport_failure
from storefront.session import SessionStore
from storefront.utils.retry import async_retry


class GatewayResponse(NamedTuple):
    errored: bool
    body: Any


def check_response(errored: bool, body: Any, action: str) -> Any:
    """
    Turn a gateway response into its body, or raise.

    Args:
        errored: Whether the call itself failed
        body: Parsed JSON body
        action: What was attempted, e.g. "fetch cart"

    Raises:
        TransportError: The backend could not be reached or returned invalid JSON
        ApplicationError: The backend answered with a message or success=false
    """
    if errored:
        raise TransportError(
            f"Could not {action}. Check that the backend is running, "
            f"reachable and returns valid JSON."
        )
    if isinstance(body, dict):
        if body.get("message"):
            raise ApplicationError(str(body["message"]))
        if body.get("success") is False:
            raise ApplicationError(f"Could not {action}.")
    return body


class ApiGateway:
    """
    Outbound calls to the commerce API.
    Components never talk to aiohttp directly.
    """

    def __init__(self, session_store: SessionStore, base_url: Optional[str] = None):
        self.session_store = session_store
        self.base_url = (base_url or config.API_ENDPOINT).rstrip("/")
        self.session: Optional[aiohttp.ClientSession] = None

    async def initialize(self):
        """Open the HTTP session."""
        if self.session is not None:
            return
        self.session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=config.REQUEST_TIMEOUT)
        )
        logger.info(f"API gateway initialized for {self.base_url}")

    async def close(self):
        """Close HTTP session."""
        if self.session:
            await self.session.close()
            self.session = None

    def _headers(self, auth: bool, has_body: bool) -> Dict[str, str]:
        headers = {}
        if has_body:
            headers["Content-Type"] = "application/json"
        if auth:
            token = self.session_store.token
            if token:
                headers["Authorization"] = f"Bearer {token}"
            else:
                logger.warning("Authenticated call without a stored token; sending unauthenticated")
        return headers

    async def _send(self, method: str, url: str, headers: Dict[str, str],
                    payload: Optional[Dict[str, Any]]) -> Any:
        kwargs: Dict[str, Any] = {"headers": headers}
        if payload is not None:
            kwargs["json"] = payload

        async with self.session.request(method, url, **kwargs) as response:
            # Status codes are the caller's business; the body carries the verdict
            logger.debug(
                f"{method} {url} -> HTTP {response.status}",
                extra={"context": {"method": method, "url": url, "status": response.status}}
            )
            return await response.json(content_type=None)

    @async_retry(exceptions=(aiohttp.ClientError, asyncio.TimeoutError))
    async def _send_idempotent(self, method: str, url: str, headers: Dict[str, str],
                               payload: Optional[Dict[str, Any]]) -> Any:
        return await self._send(method, url, headers, payload)

    async def call(self, path: str, method: str = "GET",
                   payload: Optional[Dict[str, Any]] = None,
                   auth: bool = False) -> GatewayResponse:
        """
        Call an API path.

        Args:
            path: Path below the API endpoint, e.g. "/cart"
            method: HTTP method
            payload: JSON body, if any
            auth: Attach the session's bearer token

        Returns:
            GatewayResponse; errored is True with body None when the backend
            was unreachable or did not return JSON. Never raises.
        """
        method = method.upper()
        url = f"{self.base_url}/{path.lstrip('/')}"
        headers = self._headers(auth, payload is not None)

        try:
            if self.session is None:
                await self.initialize()

            if method == "GET":
                body = await self._send_idempotent(method, url, headers, payload)
            else:
                body = await self._send(method, url, headers, payload)

        except (aiohttp.ClientError, asyncio.TimeoutError, RetryExhaustedError, ValueError) as e:
            # ValueError covers malformed JSON
            logger.error(
                f"Transport failure for {method} {path}: {e}",
                extra={"context": {"method": method, "path": path, "error_type": type(e).__name__}}
            )
            capture_transport_failure(method, path, str(e))
            return GatewayResponse(errored=True, body=None)
        except Exception as e:
            logger.error(f"Unexpected error calling {method} {path}: {e}", exc_info=True)
            capture_transport_failure(method, path, str(e))
            return GatewayResponse(errored=True, body=None)

        if body is None:
            logger.error(f"Empty response body for {method} {path}")
            capture_transport_failure(method, path, "empty body")
            return GatewayResponse(errored=True, body=None)

        return GatewayResponse(errored=False, body=body)

    async def request(self, path: str, action: str, method: str = "GET",
                      payload: Optional[Dict[str, Any]] = None,
                      auth: bool = False) -> Any:
        """call() followed by check_response(); raises TransportError or ApplicationError."""
        errored, body = await self.call(path, method=method, payload=payload, auth=auth)
        return check_response(errored, body, action)

