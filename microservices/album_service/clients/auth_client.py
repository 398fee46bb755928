"""
Auth Client for Album Service

Email/password authentication against the Firebase Identity Toolkit REST API.
Keeps the current user and notifies auth state listeners on every change.
"""

import inspect
import logging
from typing import Callable, List, Optional

import httpx

from core.config import BackendConfig
from core.service_client_base import BaseServiceClient

from ..models import AuthUser
from ..protocols import AuthError, AuthStateListener

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"
SIGN_UP_FAILED_MESSAGE = "Failed to create account"

# Identity Toolkit error codes that mean "wrong email or password"
INVALID_CREDENTIAL_CODES = {
    "EMAIL_NOT_FOUND",
    "INVALID_PASSWORD",
    "INVALID_LOGIN_CREDENTIALS",
    "INVALID_EMAIL",
    "USER_DISABLED",
    "MISSING_PASSWORD",
}


class AuthClient(BaseServiceClient):
    """Client for the Identity Toolkit accounts API"""

    service_name = "identitytoolkit"

    def __init__(self, config: BackendConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        super().__init__(config.auth_url, timeout=config.http_timeout, transport=transport)
        self.api_key = config.api_key
        self.current_user: Optional[AuthUser] = None
        self._listeners: List[AuthStateListener] = []

    @staticmethod
    def _error_code(response: httpx.Response) -> str:
        """Leading code of an Identity Toolkit error, e.g. ``WEAK_PASSWORD``"""
        try:
            message = response.json().get("error", {}).get("message", "")
        except ValueError:
            message = ""
        return message.split(" : ")[0].strip() or f"HTTP {response.status_code}"

    @staticmethod
    def _user_from_payload(data: dict) -> AuthUser:
        return AuthUser(
            user_id=data["localId"],
            email=data.get("email"),
            id_token=data.get("idToken"),
            refresh_token=data.get("refreshToken"),
        )

    async def _accounts_call(self, endpoint: str, email: str, password: str) -> httpx.Response:
        return await self.post(
            f"/accounts:{endpoint}",
            json={"email": email, "password": password, "returnSecureToken": True},
            params={"key": self.api_key},
        )

    async def sign_in(self, email: str, password: str) -> AuthUser:
        """
        Sign in with email and password

        Raises:
            AuthError: "Invalid email or password" for credential errors,
                the backend's own message otherwise
        """
        try:
            response = await self._accounts_call("signInWithPassword", email, password)
        except httpx.HTTPError as e:
            logger.error(f"Login error: {e}")
            raise AuthError(f"Sign-in request failed: {e}")

        if response.status_code != 200:
            code = self._error_code(response)
            logger.error(f"Login error: {code}")
            if code in INVALID_CREDENTIAL_CODES:
                raise AuthError(INVALID_CREDENTIALS_MESSAGE)
            raise AuthError(code)

        user = self._user_from_payload(response.json())
        logger.info(f"User signed in: {user.user_id}")
        await self._set_current_user(user)
        return user

    async def sign_up(self, email: str, password: str) -> AuthUser:
        """
        Create an account and sign it in

        Raises:
            AuthError: "Failed to create account" on any failure
        """
        try:
            response = await self._accounts_call("signUp", email, password)
        except httpx.HTTPError as e:
            logger.error(f"Sign up error: {e}")
            raise AuthError(SIGN_UP_FAILED_MESSAGE)

        if response.status_code != 200:
            logger.error(f"Sign up error: {self._error_code(response)}")
            raise AuthError(SIGN_UP_FAILED_MESSAGE)

        user = self._user_from_payload(response.json())
        logger.info(f"Account created: {user.user_id}")
        await self._set_current_user(user)
        return user

    async def sign_out(self) -> None:
        """Drop the current user's tokens (ID tokens are stateless; nothing to revoke)"""
        if self.current_user:
            logger.info(f"User signed out: {self.current_user.user_id}")
        await self._set_current_user(None)

    def on_auth_state_changed(self, callback: AuthStateListener) -> Callable[[], None]:
        """Register a listener called with the new user (or None); returns an unsubscribe function"""
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    async def _set_current_user(self, user: Optional[AuthUser]) -> None:
        self.current_user = user
        for listener in list(self._listeners):
            try:
                result = listener(user)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(f"Auth state listener failed: {e}")
