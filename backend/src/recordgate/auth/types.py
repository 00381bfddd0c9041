"""Type definitions for sessions and authentication."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Session:
    """Per-request identity and privilege context.

    Constructed for each request by the transport layer and passed
    explicitly to every collection operation. Never stored.

    Attributes:
        is_root: Privileged caller; hooks cannot cancel or redact for it
        claims: Arbitrary identity data (e.g. decoded token claims)
    """

    is_root: bool = False
    claims: dict[str, Any] = field(default_factory=dict)

    @property
    def user_id(self) -> str | None:
        return self.claims.get("sub")

    @classmethod
    def root(cls, **claims: Any) -> "Session":
        return cls(is_root=True, claims=dict(claims))

    @classmethod
    def anonymous(cls) -> "Session":
        return cls()


@dataclass
class TokenClaims:
    """Claims embedded in a JWT token.

    Attributes:
        user_id: The subject (``sub``) of the token
        exp: Token expiration timestamp
        iat: Token issued-at timestamp
        extra: Any other claims, passed through to the session
    """

    user_id: str
    exp: int = 0
    iat: int = 0
    extra: dict[str, Any] = field(default_factory=dict)

    def to_session_claims(self) -> dict[str, Any]:
        return {"sub": self.user_id, **self.extra}
