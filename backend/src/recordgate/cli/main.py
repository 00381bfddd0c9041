"""RecordGate CLI entry point."""

import click

from recordgate.auth.jwt_service import JWTService
from recordgate.config import Settings, configure_logging


@click.group()
def cli():
    """RecordGate — schema-validated collection resources CLI."""
    pass


@cli.command()
@click.option("--host", default="127.0.0.1", show_default=True, help="Interface to bind.")
@click.option("--port", type=int, default=None, help="Port (default: RECORDGATE_PORT or 8000).")
@click.option("--reload", is_flag=True, default=False, help="Reload on code changes.")
def serve(host: str, port: int | None, reload: bool):
    """Run the API server."""
    import uvicorn

    settings = Settings.from_env()
    configure_logging(settings.log_level)
    uvicorn.run(
        "recordgate.api.app:app",
        host=host,
        port=port or settings.port,
        reload=reload,
        log_level=settings.log_level,
    )


@cli.command()
@click.option("--sub", required=True, help="Subject (user id) of the token.")
@click.option(
    "--claim",
    "claims",
    multiple=True,
    help="Extra claim as key=value (repeatable).",
)
@click.option("--ttl", type=int, default=None, help="Lifetime in seconds.")
def token(sub: str, claims: tuple[str, ...], ttl: int | None):
    """Mint a bearer token signed with RECORDGATE_SECRET_KEY."""
    extra = {}
    for claim in claims:
        key, sep, value = claim.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"Expected key=value, got '{claim}'", param_hint="--claim")
        extra[key] = value

    settings = Settings.from_env()
    click.echo(JWTService(settings.secret_key).generate_token(sub, extra, ttl=ttl))


# Register subcommand groups
from recordgate.cli.resources_cmd import resources  # noqa: E402

cli.add_command(resources)
