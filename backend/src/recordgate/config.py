"""Application settings, read from environment variables."""

from __future__ import annotations

import importlib
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from recordgate.persistence.config import DatabaseConfig

logger = logging.getLogger(__name__)

DEFAULT_SECRET_KEY = "dev-secret-key-change-in-production"


@dataclass
class Settings:
    """Runtime settings for the RecordGate server.

    Attributes:
        base_path: Project root; relative defaults resolve against it
        resources_path: Directory of resource YAML definitions
        database: Store backend configuration
        secret_key: Secret used to verify bearer tokens
        root_key: Key granting root sessions (None: no root requests)
        hook_modules: Modules imported at startup to register hooks
        log_level: Logging level name
        port: HTTP port for ``recordgate serve``
    """

    base_path: Path
    resources_path: Path
    database: DatabaseConfig
    secret_key: str = DEFAULT_SECRET_KEY
    root_key: str | None = None
    hook_modules: list[str] = field(default_factory=list)
    log_level: str = "info"
    port: int = 8000

    @classmethod
    def from_env(cls, base_path: Path | None = None) -> Settings:
        """Create settings from environment variables.

        Variables:
            RECORDGATE_RESOURCES_PATH (default: {base_path}/resources)
            DATABASE_URL / RECORDGATE_DB (see DatabaseConfig.from_env)
            RECORDGATE_SECRET_KEY
            RECORDGATE_ROOT_KEY
            RECORDGATE_HOOK_MODULES (comma-separated module names)
            RECORDGATE_LOG_LEVEL (default: info)
            RECORDGATE_PORT (default: 8000)
        """
        if base_path is None:
            cwd = Path.cwd()
            base_path = cwd.parent if cwd.name == "backend" else cwd

        resources_path = os.environ.get("RECORDGATE_RESOURCES_PATH")
        hook_modules = os.environ.get("RECORDGATE_HOOK_MODULES", "")

        return cls(
            base_path=base_path,
            resources_path=Path(resources_path) if resources_path else base_path / "resources",
            database=DatabaseConfig.from_env(base_path),
            secret_key=os.environ.get("RECORDGATE_SECRET_KEY", DEFAULT_SECRET_KEY),
            root_key=os.environ.get("RECORDGATE_ROOT_KEY") or None,
            hook_modules=[m.strip() for m in hook_modules.split(",") if m.strip()],
            log_level=os.environ.get("RECORDGATE_LOG_LEVEL", "info").lower(),
            port=int(os.environ.get("RECORDGATE_PORT", "8000")),
        )

    def import_hook_modules(self) -> None:
        """Import the configured hook modules so their @hook decorators run."""
        for module in self.hook_modules:
            logger.debug("Importing hook module %s", module)
            importlib.import_module(module)


def configure_logging(level: str = "info") -> None:
    """Configure root logging for the server and CLI."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
