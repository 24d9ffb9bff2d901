#!/usr/bin/env python3
"""
InkLine service runner.

Backend operations for developers and operators. The notes client itself is
the ``inkline`` command.

    python cli.py --service server --reload -v
    python cli.py --service health
    python cli.py --service config
    python cli.py --service token --user-id alice
"""

import subprocess
import sys
from collections.abc import Callable
from pathlib import Path

import click
import structlog

from inkline.backend.core.config import find_project_root, get_app_config
from inkline.backend.core.logging import get_logger, setup_logging

SERVICES: dict[str, tuple[Callable[..., None], str]] = {}


def service(name: str, summary: str):
    def register(func: Callable[..., None]) -> Callable[..., None]:
        SERVICES[name] = (func, summary)
        return func

    return register


def fail(message: str, code: int = 1) -> None:
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(code)


@click.command()
@click.option(
    "--service", "-s",
    type=click.Choice(["server", "health", "config", "info", "token"]),
    default="info",
    help="What to run.",
)
@click.option("--verbose", "-v", is_flag=True, help="Log at INFO.")
@click.option("--debug", "-d", is_flag=True, help="Log at DEBUG.")
@click.option("--host", default=None, help="Server host (server only).")
@click.option("--port", default=None, type=int, help="Server port (server only).")
@click.option("--reload", is_flag=True, help="Restart on code changes (server only).")
@click.option("--user-id", default=None, help="Token subject (token only).")
def main(service: str, verbose: bool, debug: bool, **options) -> None:
    """InkLine backend service runner."""
    try:
        root = find_project_root()
    except RuntimeError as e:
        fail(str(e))

    level = "DEBUG" if debug else "INFO" if verbose else "WARNING"
    setup_logging(level=level, format_type="console")
    structlog.contextvars.bind_contextvars(source="cli")

    logger = get_logger(__name__)
    logger.debug("Service requested", extra={"service": service, "root": str(root)})
    handler, _ = SERVICES[service]
    handler(logger, root=root, **options)


@service("server", "Run the FastAPI backend with uvicorn")
def run_server(logger, root: Path, host: str | None, port: int | None, reload: bool, **_) -> None:
    server = get_app_config().application.server
    host = host or server.host
    port = port or server.port

    cmd = [sys.executable, "-m", "uvicorn", "inkline.backend.main:app", "--host", host, "--port", str(port)]
    if reload:
        cmd.append("--reload")

    logger.info("Starting server", extra={"host": host, "port": port, "reload": reload})
    click.echo(f"InkLine backend on http://{host}:{port} (Ctrl+C to stop)")
    try:
        subprocess.run(cmd, check=True, cwd=root)
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except subprocess.CalledProcessError as e:
        logger.error("Server exited", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


def _checks():
    """Yield (name, ok, detail) for each startup dependency."""
    try:
        config = get_app_config()
    except (FileNotFoundError, ValueError) as e:
        yield "Settings (config/settings)", False, str(e)
        return
    notes = config.notes
    yield "Settings (config/settings)", True, config.application.name
    yield "Note quota", True, f"{notes.note_limit} notes, {notes.quota_policy.value} policy"

    from pydantic import ValidationError

    from inkline.backend.core.config import get_settings

    try:
        get_settings()
        yield "Secrets (config/.env)", True, None
    except ValidationError as e:
        yield "Secrets (config/.env)", False, f"{e.error_count()} missing"

    from inkline.backend.main import get_app
    from inkline.backend.models import Base

    yield "Application", True, get_app().title
    yield "Tables", True, ", ".join(sorted(Base.metadata.tables))


@service("health", "Check settings, secrets and the application")
def check_health(logger, **_) -> None:
    failed = 0
    for name, ok, detail in _checks():
        mark = click.style("PASS", fg="green") if ok else click.style("FAIL", fg="red")
        click.echo(f"  {mark}  {name}" + (f" ({detail})" if detail else ""))
        if not ok:
            failed += 1
            logger.warning("Health check failed", extra={"check": name, "detail": detail})
    if failed:
        fail(f"{failed} check(s) failed")
    click.echo(click.style("All checks passed", fg="green"))


def _echo_section(title: str, values: dict, indent: int = 2) -> None:
    click.echo(f"{title} Settings:")
    _echo_values(values, indent)
    click.echo()


def _echo_values(values: dict, indent: int) -> None:
    for key, value in values.items():
        if isinstance(value, dict):
            click.echo(f"{' ' * indent}{key}:")
            _echo_values(value, indent + 2)
        else:
            click.echo(f"{' ' * indent}{key}: {value}")


@service("config", "Print the loaded YAML settings")
def show_config(logger, **_) -> None:
    try:
        config = get_app_config()
    except (FileNotFoundError, ValueError) as e:
        logger.error("Configuration invalid", extra={"error": str(e)})
        fail(str(e))
    for name in config.SECTIONS:
        _echo_section(name.title(), getattr(config, name).model_dump(mode="json"))


@service("token", "Issue a development access token")
def issue_token(logger, user_id: str | None, **_) -> None:
    if not user_id:
        fail("--user-id is required for --service token")

    from pydantic import ValidationError

    from inkline.backend.core.security import create_access_token

    try:
        token = create_access_token({"sub": user_id})
    except ValidationError:
        fail("JWT_SECRET is not set (config/.env or environment)")
    logger.info("Development token issued", extra={"user_id": user_id})
    click.echo(token)


@service("info", "Show this overview")
def show_info(logger, **_) -> None:
    application = get_app_config().application
    click.echo(f"{application.name} {application.version}")
    click.echo(application.description)
    click.echo()
    click.echo("Services (--service):")
    for name, (_, summary) in SERVICES.items():
        click.echo(f"  {name:<8} {summary}")
    click.echo()
    click.echo("Notes client: run `inkline --help`.")


if __name__ == "__main__":
    main()
