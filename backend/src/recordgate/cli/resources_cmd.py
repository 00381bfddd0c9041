"""Resource CLI commands: validate and list."""

from pathlib import Path

import click

from recordgate.config import Settings
from recordgate.hooks import register_builtin_hooks
from recordgate.metadata.loader import ResourceLoader
from recordgate.metadata.validator import validate_resource_file, validate_resources_dir


@click.group()
def resources():
    """Resource definition commands."""
    pass


@resources.command()
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Treat warnings as errors.",
)
@click.option(
    "--path",
    "target_path",
    default=None,
    type=click.Path(exists=True, path_type=Path),
    help="Validate a single YAML file instead of the whole resources directory.",
)
def validate(strict: bool, target_path: Path | None):
    """Validate resource YAML files."""
    settings = Settings.from_env()
    register_builtin_hooks()
    settings.import_hook_modules()

    # ── Schema (JSON Schema) validation ─────────────────────────────────────
    if target_path is not None:
        issues = validate_resource_file(target_path)
        if strict:
            for issue in issues:
                issue.severity = "error"
    else:
        if not settings.resources_path.exists():
            click.echo(
                f"Error: Resources directory not found at {settings.resources_path}", err=True
            )
            raise SystemExit(1)
        issues = validate_resources_dir(settings.resources_path, strict=strict)

    errors = [i for i in issues if i.severity == "error"]
    warnings = [i for i in issues if i.severity == "warning"]

    for issue in issues:
        colour = "red" if issue.severity == "error" else "yellow"
        click.echo(click.style(str(issue), fg=colour))

    if errors:
        click.echo(
            click.style(
                f"\n{len(errors)} error(s) found"
                + (f", {len(warnings)} warning(s)" if warnings else ""),
                fg="red",
                bold=True,
            )
        )
        raise SystemExit(1)

    if warnings:
        click.echo(click.style(f"{len(warnings)} warning(s) found.", fg="yellow"))

    # ── Semantic (loader) validation ─────────────────────────────────────────
    if target_path is None:
        try:
            loader = ResourceLoader(settings.resources_path)
            loader.load_all()
        except (ValueError, KeyError) as e:
            click.echo(click.style(f"\nSemantic validation failed: {e}", fg="red"), err=True)
            raise SystemExit(1)
        click.echo(f"\nLoaded {len(loader.list_resources())} resource(s).")

    click.echo(click.style("\nAll resources are valid.", fg="green", bold=True))


@resources.command("list")
def list_cmd():
    """List configured resources with their properties and hooks."""
    settings = Settings.from_env()
    loader = ResourceLoader(settings.resources_path)
    loader.load_all()

    names = loader.list_resources()
    if not names:
        click.echo("No resources defined.")
        return

    for name in sorted(names):
        config = loader.get_resource(name)
        props = ", ".join(
            f"{p.name}:{p.type}{'*' if p.required else ''}" for p in config.properties.values()
        )
        hooks = ", ".join(f"{k}={v}" for k, v in config.hooks.items()) or "-"
        click.echo(f"  {config.path}  [{props}]  hooks: {hooks}")
