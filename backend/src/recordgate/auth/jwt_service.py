"""JWT token generation and validation service."""

import time
from typing import Any

import jwt

from recordgate.auth.types import TokenClaims

_REGISTERED_CLAIMS = ("sub", "exp", "iat")


class JWTError(Exception):
    """Base exception for JWT-related errors."""

    pass


class TokenExpiredError(JWTError):
    """Raised when a token has expired."""

    pass


class InvalidTokenError(JWTError):
    """Raised when a token is invalid or malformed."""

    pass


class JWTService:
    """Service for generating and validating JWT tokens.

    Uses HS256 algorithm with a shared secret key.
    """

    ACCESS_TOKEN_TTL = 60 * 60  # 1 hour

    def __init__(self, secret_key: str, algorithm: str = "HS256"):
        """Initialize the JWT service.

        Args:
            secret_key: Secret key for signing tokens (should be at least 32 chars)
            algorithm: JWT algorithm (default HS256)
        """
        self._secret_key = secret_key
        self._algorithm = algorithm

    def generate_token(
        self,
        user_id: str,
        claims: dict[str, Any] | None = None,
        ttl: int | None = None,
    ) -> str:
        """Generate a signed access token.

        Args:
            user_id: Subject of the token
            claims: Additional claims carried into the session
            ttl: Lifetime in seconds (default ACCESS_TOKEN_TTL)

        Returns:
            Encoded JWT
        """
        now = int(time.time())
        payload: dict[str, Any] = dict(claims or {})
        payload.update(
            {
                "sub": user_id,
                "iat": now,
                "exp": now + (ttl if ttl is not None else self.ACCESS_TOKEN_TTL),
            }
        )
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def decode_token(self, token: str) -> TokenClaims:
        """Decode and validate a JWT token.

        Args:
            token: The JWT token string

        Returns:
            TokenClaims with the decoded claims

        Raises:
            TokenExpiredError: If the token has expired
            InvalidTokenError: If the token is invalid or malformed
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpiredError("Token has expired")
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}")

        return TokenClaims(
            user_id=payload.get("sub", ""),
            exp=payload.get("exp", 0),
            iat=payload.get("iat", 0),
            extra={k: v for k, v in payload.items() if k not in _REGISTERED_CLAIMS},
        )
