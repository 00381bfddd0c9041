"""Session and authentication module for RecordGate.

Provides:
- Session: per-request privilege context passed to every operation
- JWTService: bearer token generation and validation
- SessionResolver: builds a Session from request headers
"""

from recordgate.auth.jwt_service import (
    InvalidTokenError,
    JWTError,
    JWTService,
    TokenExpiredError,
)
from recordgate.auth.session import ROOT_KEY_HEADER, SessionResolver
from recordgate.auth.types import Session, TokenClaims

__all__ = [
    "InvalidTokenError",
    "JWTError",
    "JWTService",
    "ROOT_KEY_HEADER",
    "Session",
    "SessionResolver",
    "TokenClaims",
    "TokenExpiredError",
]
