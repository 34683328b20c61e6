"""Console script for homework_checker."""

from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console

from . import __version__
from .config.loader import DEFAULT_CONFIG_DIR, DEFAULT_ENVIRONMENT
from .main import CheckOptions, run_check
from .utils.logging import DEFAULT_LOG_DIR

app = typer.Typer(add_completion=False)
console = Console()

PRODUCTION_ENVIRONMENT = "prod"


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"hsck {__version__}")
        raise typer.Exit()


@app.command()
def main(
    send: bool = typer.Option(
        False, "--send", "-s", help="Email missing students (requires --name)."
    ),
    homework_name: Optional[str] = typer.Option(
        None, "--name", "-n", help="Homework name used in reminders (requires --send)."
    ),
    receive: bool = typer.Option(
        False, "--resv", "-r", help="Receive submissions by email (not implemented)."
    ),
    config_dir: Path = typer.Option(
        DEFAULT_CONFIG_DIR, "--config", "-c", envvar="CONFIG_DIR",
        metavar="DIR", help="Configuration directory.",
    ),
    environment: str = typer.Option(
        DEFAULT_ENVIRONMENT, "--env", "-e", envvar="APP_ENV",
        metavar="ENV", help="Environment (dev, prod).",
    ),
    check_dir: Optional[Path] = typer.Option(
        None, "--dir", "-d", metavar="CHECK_DIR",
        help="Directory to check, defaults to the current directory.",
    ),
    strict: Optional[bool] = typer.Option(
        None, "--strict/--no-strict",
        help="Require credentials and a non-empty roster. Default: on for 'prod'.",
    ),
    log_dir: Path = typer.Option(DEFAULT_LOG_DIR, "--log-dir", help="Log file directory."),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True,
        help="Show the version and exit.",
    ),
):
    """Check which students have not submitted their homework."""
    if strict is None:
        strict = environment == PRODUCTION_ENVIRONMENT

    options = CheckOptions(
        environment=environment,
        config_dir=config_dir,
        check_dir=check_dir,
        strict=strict,
        send=send,
        homework_name=homework_name,
        receive=receive,
        log_dir=log_dir,
    )
    try:
        options.validate()
    except ValueError as e:
        raise typer.BadParameter(str(e))

    raise typer.Exit(code=run_check(options, console))


def run() -> None:
    """Entry point: load .env, then run the CLI."""
    load_dotenv()
    app()


if __name__ == "__main__":
    run()
