"""Tests for sessions, JWT tokens and settings."""

import time
from pathlib import Path

import jwt
import pytest

from recordgate.auth import (
    ROOT_KEY_HEADER,
    InvalidTokenError,
    JWTService,
    Session,
    SessionResolver,
    TokenClaims,
    TokenExpiredError,
)
from recordgate.config import DEFAULT_SECRET_KEY, Settings

SECRET = "test-secret-key-for-testing-only-32chars"


@pytest.fixture
def jwt_service():
    return JWTService(SECRET)


@pytest.fixture
def resolver(jwt_service):
    return SessionResolver(jwt_service, root_key="sesame")


class TestSession:
    def test_defaults(self):
        session = Session()
        assert session.is_root is False
        assert session.claims == {}
        assert session.user_id is None

    def test_root(self):
        session = Session.root(sub="admin")
        assert session.is_root
        assert session.user_id == "admin"

    def test_anonymous(self):
        assert Session.anonymous() == Session()

    def test_immutable(self):
        with pytest.raises(AttributeError):
            Session().is_root = True  # type: ignore[misc]


class TestJWTService:
    def test_round_trip(self, jwt_service):
        token = jwt_service.generate_token("U001", {"role": "editor"})
        claims = jwt_service.decode_token(token)
        assert claims.user_id == "U001"
        assert claims.extra == {"role": "editor"}
        assert claims.exp - claims.iat == JWTService.ACCESS_TOKEN_TTL

    def test_custom_ttl(self, jwt_service):
        claims = jwt_service.decode_token(jwt_service.generate_token("U001", ttl=60))
        assert claims.exp - claims.iat == 60

    def test_claims_cannot_override_subject(self, jwt_service):
        token = jwt_service.generate_token("U001", {"sub": "someone-else"})
        assert jwt_service.decode_token(token).user_id == "U001"

    def test_expired(self, jwt_service):
        payload = {"sub": "U001", "iat": int(time.time()) - 120, "exp": int(time.time()) - 60}
        token = jwt.encode(payload, SECRET, algorithm="HS256")
        with pytest.raises(TokenExpiredError):
            jwt_service.decode_token(token)

    def test_wrong_secret(self, jwt_service):
        token = JWTService("another-secret-key-that-is-32-chars!").generate_token("U001")
        with pytest.raises(InvalidTokenError):
            jwt_service.decode_token(token)

    def test_garbage(self, jwt_service):
        with pytest.raises(InvalidTokenError):
            jwt_service.decode_token("not.a.token")

    def test_session_claims(self):
        claims = TokenClaims(user_id="U001", extra={"role": "admin"})
        assert claims.to_session_claims() == {"sub": "U001", "role": "admin"}


class TestSessionResolver:
    def test_no_headers_is_anonymous(self, resolver):
        assert resolver.resolve({}) == Session()

    def test_bearer_token_sets_claims(self, resolver, jwt_service):
        token = jwt_service.generate_token("U001", {"role": "editor"})
        session = resolver.resolve({"authorization": f"Bearer {token}"})
        assert session.is_root is False
        assert session.claims == {"sub": "U001", "role": "editor"}

    def test_invalid_token_is_anonymous(self, resolver):
        assert resolver.resolve({"authorization": "Bearer junk"}) == Session()

    def test_non_bearer_scheme_ignored(self, resolver):
        assert resolver.resolve({"authorization": "Basic dXNlcjpwYXNz"}) == Session()

    def test_root_key(self, resolver, jwt_service):
        token = jwt_service.generate_token("U001")
        session = resolver.resolve({ROOT_KEY_HEADER: "sesame", "authorization": f"Bearer {token}"})
        assert session.is_root
        assert session.user_id == "U001"

    def test_wrong_root_key(self, resolver):
        assert resolver.resolve({ROOT_KEY_HEADER: "open"}).is_root is False

    def test_no_root_key_configured(self, jwt_service):
        resolver = SessionResolver(jwt_service)
        assert resolver.is_root_key("anything") is False
        assert resolver.is_root_key(None) is False

    def test_without_jwt_service_tokens_ignored(self):
        resolver = SessionResolver()
        assert resolver.resolve({"authorization": "Bearer x"}) == Session()


class TestSettings:
    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for var in (
            "DATABASE_URL",
            "RECORDGATE_DB",
            "RECORDGATE_RESOURCES_PATH",
            "RECORDGATE_SECRET_KEY",
            "RECORDGATE_ROOT_KEY",
            "RECORDGATE_HOOK_MODULES",
            "RECORDGATE_LOG_LEVEL",
            "RECORDGATE_PORT",
        ):
            monkeypatch.delenv(var, raising=False)

    def test_defaults(self, tmp_path):
        settings = Settings.from_env(tmp_path)
        assert settings.resources_path == tmp_path / "resources"
        assert settings.database.url == f"sqlite:///{tmp_path / 'data' / 'recordgate.db'}"
        assert settings.secret_key == DEFAULT_SECRET_KEY
        assert settings.root_key is None
        assert settings.hook_modules == []
        assert settings.log_level == "info"
        assert settings.port == 8000

    def test_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("RECORDGATE_RESOURCES_PATH", "/srv/resources")
        monkeypatch.setenv("RECORDGATE_DB", "memory")
        monkeypatch.setenv("RECORDGATE_SECRET_KEY", "s3cret")
        monkeypatch.setenv("RECORDGATE_ROOT_KEY", "sesame")
        monkeypatch.setenv("RECORDGATE_HOOK_MODULES", "app.hooks, other.hooks ,")
        monkeypatch.setenv("RECORDGATE_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("RECORDGATE_PORT", "9000")

        settings = Settings.from_env(tmp_path)
        assert settings.resources_path == Path("/srv/resources")
        assert settings.database.is_memory
        assert settings.secret_key == "s3cret"
        assert settings.root_key == "sesame"
        assert settings.hook_modules == ["app.hooks", "other.hooks"]
        assert settings.log_level == "debug"
        assert settings.port == 9000

    def test_base_path_from_backend_dir(self, tmp_path, monkeypatch):
        backend = tmp_path / "backend"
        backend.mkdir()
        monkeypatch.chdir(backend)
        assert Settings.from_env().base_path == tmp_path

    def test_import_hook_modules(self, tmp_path, monkeypatch):
        monkeypatch.setenv("RECORDGATE_HOOK_MODULES", "recordgate.hooks.builtin")
        Settings.from_env(tmp_path).import_hook_modules()

    def test_import_missing_hook_module(self, tmp_path, monkeypatch):
        monkeypatch.setenv("RECORDGATE_HOOK_MODULES", "no_such_module_xyz")
        with pytest.raises(ModuleNotFoundError):
            Settings.from_env(tmp_path).import_hook_modules()
