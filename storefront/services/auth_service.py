"""
Register, login and logout.
Local validation runs first; the backend only sees well-formed requests.
"""
from typing import Optional

from storefront.errors import ApplicationError, TransportError, ValidationError
from storefront.logger import logger
from storefront.navigation import Navigator
from storefront.notices import NoticeBoard
from storefront.services.api_gateway import ApiGateway, check_response
from storefront.session import SessionStore

MIN_USERNAME_LENGTH = 6
MIN_PASSWORD_LENGTH = 6


class AuthService:

    def __init__(self, gateway: ApiGateway, session: SessionStore,
                 notices: NoticeBoard, navigator: Navigator):
        self.gateway = gateway
        self.session = session
        self.notices = notices
        self.navigator = navigator
        self.loading = False

    @staticmethod
    def validate_registration(username: str, password: str, confirm_password: str):
        """
        Raises:
            ValidationError: With the first rule the input breaks
        """
        if not username:
            raise ValidationError("Username is a required field")
        if len(username) < MIN_USERNAME_LENGTH:
            raise ValidationError(f"Username must be at least {MIN_USERNAME_LENGTH} characters")
        if not password:
            raise ValidationError("Password is a required field")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        if password != confirm_password:
            raise ValidationError("Passwords do not match")

    @staticmethod
    def validate_login(username: str, password: str):
        if not username:
            raise ValidationError("Username is a required field")
        if not password:
            raise ValidationError("Password is a required field")

    async def register(self, username: str, password: str, confirm_password: str) -> bool:
        """POST /auth/register; on success go to the login page."""
        try:
            self.validate_registration(username, password, confirm_password)
        except ValidationError as e:
            self.notices.error(str(e))
            return False

        self.loading = True
        try:
            errored, body = await self.gateway.call(
                "/auth/register",
                method="POST",
                payload={"username": username, "password": password}
            )
            check_response(errored, body, "register")
        except (TransportError, ApplicationError) as e:
            self.notices.error(str(e))
            return False
        finally:
            self.loading = False

        logger.info(f"Registered user '{username}'")
        self.notices.success("Registered successfully")
        self.navigator.push("/login")
        return True

    async def login(self, username: str, password: str) -> bool:
        """POST /auth/login; store the session and go to the product list."""
        try:
            self.validate_login(username, password)
        except ValidationError as e:
            self.notices.error(str(e))
            return False

        self.loading = True
        try:
            errored, body = await self.gateway.call(
                "/auth/login",
                method="POST",
                payload={"username": username, "password": password}
            )
            body = check_response(errored, body, "log in")
            token: Optional[str] = body.get("token") if isinstance(body, dict) else None
            if not token:
                raise TransportError(
                    "Could not log in. Check that the backend is running, "
                    "reachable and returns valid JSON."
                )
        except (TransportError, ApplicationError) as e:
            self.notices.error(str(e))
            return False
        finally:
            self.loading = False

        self.session.persist_login(
            token=token,
            username=body.get("username") or username,
            balance=body.get("balance", 0)
        )
        self.notices.success("Logged in successfully")
        self.navigator.push("/products")
        return True

    def logout(self):
        username = self.session.username
        self.session.clear()
        logger.info(f"Logged out user '{username}'")
        self.navigator.push("/")
