"""Load resource definitions from YAML files."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from recordgate.hooks.types import VALID_HOOK_KEYS
from recordgate.validation.types import PropertySchema

logger = logging.getLogger(__name__)


@dataclass
class ResourceConfig:
    """A collection resource as declared in YAML.

    Attributes:
        name: Resource name; the store and the URL path derive from it
        properties: Declared property schema
        hooks: Hook names keyed by setting key (``onGet``, ``onPost``...)
        resources: Names of auxiliary resources exposed to hooks
        strict: False lets records through unchanged when no properties
            are declared
        source: File the definition was loaded from
    """

    name: str
    properties: PropertySchema = field(default_factory=PropertySchema)
    hooks: dict[str, str] = field(default_factory=dict)
    resources: list[str] = field(default_factory=list)
    strict: bool = True
    source: Path | None = None

    @property
    def path(self) -> str:
        return f"/{self.name}"


class ResourceLoader:
    """Loads resource definitions from ``<path>/*.yaml``."""

    def __init__(self, resources_path: Path):
        self.resources_path = resources_path
        self.resources: dict[str, ResourceConfig] = {}

    def load_all(self) -> None:
        """Load every resource definition and check cross references.

        Raises:
            ValueError: On duplicate names or unknown auxiliary resources
        """
        if not self.resources_path.exists():
            logger.warning("Resources directory not found: %s", self.resources_path)
            return

        for yaml_file in sorted(self.resources_path.glob("*.yaml")):
            with open(yaml_file) as f:
                data = yaml.safe_load(f)
            if not data or "resource" not in data:
                continue
            config = self._resolve_resource(data, yaml_file)
            if config.name in self.resources:
                raise ValueError(
                    f"Duplicate resource '{config.name}' in {yaml_file} "
                    f"(already defined in {self.resources[config.name].source})"
                )
            self.resources[config.name] = config

        self._validate_references()

    def _validate_references(self) -> None:
        for config in self.resources.values():
            for ref in config.resources:
                if ref not in self.resources:
                    raise ValueError(
                        f"Resource '{config.name}' references unknown resource '{ref}'"
                    )

    def _resolve_resource(self, data: dict, source: Path) -> ResourceConfig:
        """Convert a resource dict to ResourceConfig."""
        name = str(data["resource"]).strip("/")

        hooks: dict[str, str] = {}
        for key, hook_name in (data.get("hooks") or {}).items():
            if key not in VALID_HOOK_KEYS:
                raise ValueError(
                    f"Resource '{name}' has unknown hook event '{key}'. "
                    f"Expected one of: {', '.join(VALID_HOOK_KEYS)}"
                )
            hooks[key] = hook_name

        return ResourceConfig(
            name=name,
            properties=PropertySchema.from_dict(data.get("properties")),
            hooks=hooks,
            resources=list(data.get("resources") or []),
            strict=bool(data.get("strict", True)),
            source=source,
        )

    def get_resource(self, name: str) -> ResourceConfig | None:
        """Get a resource definition by name."""
        return self.resources.get(name)

    def list_resources(self) -> list[str]:
        """List all resource names."""
        return list(self.resources.keys())
