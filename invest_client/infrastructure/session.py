"""Session credential holder, passed explicitly to every backend caller"""

import logging
from typing import Callable, Dict, Optional

from jose import JWTError, jwt

logger = logging.getLogger(__name__)

ANONYMOUS = "anonymous"
GENERIC_DISPLAY_NAME = "INVESTOR"

# Claims that carry a human name; email is never shown
NAME_CLAIMS = ("username", "name", "user")


def resolve_display_name(token: str) -> str:
    """
    Best-effort display name from the token payload.

    The signature is not verified: the backend is the authority on the
    token, the client only reads a label out of it.
    """
    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError:
        logger.warning("Access token could not be decoded; using generic display name")
        return GENERIC_DISPLAY_NAME

    for claim in NAME_CLAIMS:
        value = claims.get(claim)
        if isinstance(value, str) and value.strip():
            return value.strip().upper()

    return GENERIC_DISPLAY_NAME


class SessionContext:
    """
    Holds the bearer credential for the lifetime of a login.

    Written only by init() (login) and clear() (logout or a 401 response);
    everything else reads it.
    """

    def __init__(self, identity_provider: Optional[Callable[[str], str]] = None):
        self._identity_provider = identity_provider or resolve_display_name
        self._access_token: Optional[str] = None
        self._refresh_token: Optional[str] = None
        self._display_name: Optional[str] = None

    def init(self, access_token: str, refresh_token: Optional[str] = None) -> None:
        if not access_token:
            raise ValueError("access_token is required")
        self._access_token = access_token
        self._refresh_token = refresh_token
        self._display_name = self._identity_provider(access_token)
        logger.info("Session started", extra={"user": self._display_name})

    def clear(self) -> None:
        if self._access_token is not None:
            logger.info("Session cleared", extra={"user": self._display_name})
        self._access_token = None
        self._refresh_token = None
        self._display_name = None

    def is_authenticated(self) -> bool:
        return self._access_token is not None

    def current_user(self) -> str:
        return self._display_name if self.is_authenticated() else ANONYMOUS

    @property
    def access_token(self) -> Optional[str]:
        return self._access_token

    @property
    def refresh_token(self) -> Optional[str]:
        return self._refresh_token

    def auth_headers(self) -> Dict[str, str]:
        if self._access_token is None:
            return {}
        return {"Authorization": f"Bearer {self._access_token}"}
