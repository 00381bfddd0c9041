"""
metadata/validator.py — JSON Schema validation for resource YAML files.

Usage:
    from recordgate.metadata.validator import validate_resources_dir

    issues = validate_resources_dir(Path("resources"))
    for issue in issues:
        print(issue)

Unregistered hook names are reported as warnings: the hook module may
simply not have been imported by the process running the check.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

from recordgate.core.types import PROPERTY_TYPES
from recordgate.hooks.registry import HookRegistry
from recordgate.hooks.types import VALID_HOOK_KEYS

logger = logging.getLogger(__name__)

RESOURCE_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$id": "https://recordgate.dev/schemas/resource.schema.json",
    "type": "object",
    "required": ["resource"],
    "additionalProperties": False,
    "properties": {
        "resource": {"type": "string", "pattern": "^/?[A-Za-z0-9_-]+$"},
        "strict": {"type": "boolean"},
        "properties": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "additionalProperties": False,
                "properties": {
                    "type": {"enum": list(PROPERTY_TYPES)},
                    "required": {"type": "boolean"},
                },
            },
        },
        "hooks": {
            "type": "object",
            "additionalProperties": False,
            "properties": {key: {"type": "string", "minLength": 1} for key in VALID_HOOK_KEYS},
        },
        "resources": {
            "type": "array",
            "items": {"type": "string"},
            "uniqueItems": True,
        },
    },
}


@dataclass
class ValidationIssue:
    """A single validation finding for a resource YAML file."""

    file: Path
    message: str
    path: str = ""          # JSON pointer path within the document, e.g. "properties/title"
    severity: str = "error" # "error" | "warning"

    def __str__(self) -> str:
        loc = f" at {self.path}" if self.path else ""
        return f"[{self.severity.upper()}] {self.file}{loc}: {self.message}"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _json_path(error: ValidationError) -> str:
    """Convert a jsonschema ValidationError path to a readable string."""
    parts = []
    for p in error.absolute_path:
        if isinstance(p, int):
            parts.append(f"[{p}]")
        else:
            parts.append(str(p))
    return "/".join(parts).replace("/[", "[")


def _hook_issues(yaml_path: Path, doc: dict[str, Any]) -> list[ValidationIssue]:
    issues = []
    hooks = doc.get("hooks") or {}
    for key, name in hooks.items():
        if isinstance(name, str) and not HookRegistry.is_registered(name):
            issues.append(
                ValidationIssue(
                    file=yaml_path,
                    message=f"Hook '{name}' is not registered",
                    path=f"hooks/{key}",
                    severity="warning",
                )
            )
    return issues


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate_resource_file(yaml_path: Path) -> list[ValidationIssue]:
    """
    Validate a single resource YAML file.

    Returns:
        A list of :class:`ValidationIssue` objects (empty on success).
    """
    try:
        with yaml_path.open() as fh:
            raw = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        return [ValidationIssue(file=yaml_path, message=f"YAML parse error: {exc}")]

    if raw is None:
        return [
            ValidationIssue(file=yaml_path, message="File is empty or contains only whitespace")
        ]

    validator = Draft202012Validator(RESOURCE_SCHEMA)
    issues = [
        ValidationIssue(file=yaml_path, message=error.message, path=_json_path(error))
        for error in sorted(validator.iter_errors(raw), key=lambda e: list(e.path))
    ]

    if isinstance(raw, dict):
        issues.extend(_hook_issues(yaml_path, raw))
    return issues


def validate_resources_dir(
    resources_dir: Path,
    *,
    strict: bool = False,
) -> list[ValidationIssue]:
    """
    Validate all ``*.yaml`` files under *resources_dir*.

    Args:
        resources_dir: Directory holding resource definitions.
        strict:        If ``True``, warnings are escalated to errors.

    Returns:
        A flat list of :class:`ValidationIssue` objects across all files.
    """
    if not resources_dir.is_dir():
        return [
            ValidationIssue(
                file=resources_dir,
                message=f"Resources directory does not exist: {resources_dir}",
            )
        ]

    all_issues: list[ValidationIssue] = []
    for yaml_file in sorted(resources_dir.glob("*.yaml")):
        file_issues = validate_resource_file(yaml_file)
        if strict:
            for issue in file_issues:
                if issue.severity == "warning":
                    issue.severity = "error"
        all_issues.extend(file_issues)

    return all_issues
