"""
Backend Session

Holds the signed-in user and bearer token shared by the storage and
document clients. Opened when a session signs in, released at sign-out.
"""

import logging
from typing import Dict, Optional

from .models import AuthUser
from .protocols import AuthError

logger = logging.getLogger(__name__)


class BackendSession:
    """Per-session credentials for backend requests"""

    def __init__(self):
        self._user: Optional[AuthUser] = None

    @property
    def user(self) -> Optional[AuthUser]:
        return self._user

    @property
    def is_open(self) -> bool:
        return self._user is not None

    def open(self, user: AuthUser) -> None:
        self._user = user
        logger.debug(f"Backend session opened for user {user.user_id}")

    def close(self) -> None:
        if self._user is not None:
            logger.debug(f"Backend session released for user {self._user.user_id}")
        self._user = None

    def require_user(self) -> AuthUser:
        if self._user is None:
            raise AuthError("User must be authenticated")
        return self._user

    def auth_headers(self) -> Dict[str, str]:
        """Bearer header for the current user, empty when signed out"""
        if self._user is None or not self._user.id_token:
            return {}
        return {"Authorization": f"Bearer {self._user.id_token}"}
