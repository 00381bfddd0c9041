"""Build a Session from inbound request headers."""

import hmac
import logging
from collections.abc import Mapping

from recordgate.auth.jwt_service import JWTError, JWTService
from recordgate.auth.types import Session

logger = logging.getLogger(__name__)

ROOT_KEY_HEADER = "x-root-key"


class SessionResolver:
    """Resolves the per-request Session.

    A request is root when it presents the configured root key. A bearer
    token, when valid, supplies the session claims. Invalid tokens produce
    an anonymous session; rejecting unauthenticated requests is left to
    the collection's hooks.
    """

    def __init__(self, jwt_service: JWTService | None = None, root_key: str | None = None):
        self._jwt_service = jwt_service
        self._root_key = root_key

    def is_root_key(self, presented: str | None) -> bool:
        """Constant-time comparison against the configured root key."""
        if not self._root_key or not presented:
            return False
        return hmac.compare_digest(presented.encode(), self._root_key.encode())

    def resolve(self, headers: Mapping[str, str]) -> Session:
        """Resolve a session from request headers.

        Args:
            headers: Case-insensitive header mapping (e.g. starlette Headers)

        Returns:
            The Session for this request
        """
        is_root = self.is_root_key(headers.get(ROOT_KEY_HEADER))
        claims: dict = {}

        auth_header = headers.get("authorization")
        if self._jwt_service and auth_header and auth_header.startswith("Bearer "):
            token = auth_header[7:]  # Remove "Bearer " prefix
            try:
                claims = self._jwt_service.decode_token(token).to_session_claims()
            except JWTError as e:
                logger.debug("Ignoring bearer token: %s", e)

        return Session(is_root=is_root, claims=claims)
