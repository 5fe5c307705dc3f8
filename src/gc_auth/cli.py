"""Command-line interface for gc-auth.

Provides a terminal stand-in for the login screen: it prints the URLs to
visit and turns the redirect URL pasted back by the user into a token.
"""

from __future__ import annotations

import asyncio
import sys
import webbrowser

import typer

from gc_auth import __version__
from gc_auth.config import Config, ConfigError, load_config
from gc_auth.logging_config import get_logger, setup_logging
from gc_auth.oauth.flows import OAuth2LoginFlow
from gc_auth.oauth.pkce import generate_code_challenge

app = typer.Typer(
    name="gc-auth",
    help="gc-auth - OAuth 2.0 Implicit and PKCE login helper",
    add_completion=False,
)

ConfigOption = typer.Option(
    None,
    "--config",
    "-c",
    help="Path to configuration file (JSON or YAML)",
)
LogLevelOption = typer.Option(
    None,
    "--log-level",
    "-l",
    help="Log level override (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
)
EnvironmentOption = typer.Option(
    None,
    "--environment",
    "-e",
    help="Identity provider host suffix override, e.g. mypurecloud.com",
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"gc-auth version {__version__}")
        typer.echo(f"Python {sys.version}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """gc-auth CLI."""


def _load(
    config_path: str | None,
    log_level: str | None,
    environment: str | None,
) -> Config:
    """Load configuration with CLI overrides and set up logging."""
    cli_args: dict[str, str] = {}
    if log_level:
        cli_args["log_level"] = log_level
    if environment:
        cli_args["environment"] = environment

    config = load_config(path=config_path, cli_args=cli_args)
    setup_logging(config)
    return config


@app.command()
def login(
    config_path: str | None = ConfigOption,
    log_level: str | None = LogLevelOption,
    environment: str | None = EnvironmentOption,
    open_browser: bool = typer.Option(
        False,
        "--open/--no-open",
        help="Open the login page in the system browser",
    ),
    redirect_url: str | None = typer.Option(
        None,
        "--redirect-url",
        help="Redirect URL to process instead of prompting for it",
    ),
) -> None:
    """Log in and print the access token.

    Prints the login URL, then asks for the URL the browser was sent back
    to after signing in.
    """
    try:
        config = _load(config_path, log_level, environment)
        flow_config = config.to_flow_config()
    except ConfigError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(code=1) from None

    logger = get_logger(__name__)
    logger.info(
        "Starting %s login (environment: %s)",
        "PKCE" if flow_config.use_pkce else "implicit grant",
        flow_config.environment,
    )

    try:
        exit_code = asyncio.run(
            _run_login(
                OAuth2LoginFlow(flow_config, timeout=config.http_timeout),
                open_browser=open_browser,
                redirect_url=redirect_url,
            )
        )
    except KeyboardInterrupt:
        logger.info("Login aborted (keyboard interrupt)")
        raise typer.Exit(code=1) from None

    raise typer.Exit(code=exit_code)


async def _run_login(
    flow: OAuth2LoginFlow,
    open_browser: bool,
    redirect_url: str | None,
) -> int:
    """Drive one login attempt and report its outcome.

    Returns:
        Process exit code
    """
    async with flow:
        request = flow.build_login_request()
        typer.echo(f"Open this URL to log in:\n{request.url}")
        if open_browser:
            webbrowser.open(request.url)

        if redirect_url is None:
            redirect_url = typer.prompt("Paste the URL you were redirected to")

        result = await flow.handle_redirect(redirect_url)

    if result is None:
        typer.echo(
            f"Not a redirect to {flow.config.redirect_uri}: {redirect_url}",
            err=True,
        )
        return 1

    if not result.ok:
        typer.echo(f"Login failed: {result.error or 'unknown error'}", err=True)
        return 1

    typer.echo(result.token)
    return 0


@app.command("logout-url")
def logout_url(
    config_path: str | None = ConfigOption,
    log_level: str | None = LogLevelOption,
    environment: str | None = EnvironmentOption,
) -> None:
    """Print the logout URL."""
    try:
        config = _load(config_path, log_level, environment)
        flow_config = config.to_flow_config()
    except ConfigError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(code=1) from None

    typer.echo(OAuth2LoginFlow(flow_config).build_logout_request().url)


@app.command()
def challenge(
    verifier: str = typer.Argument(..., help="PKCE code verifier"),
) -> None:
    """Print the S256 code challenge of a verifier."""
    try:
        typer.echo(generate_code_challenge(verifier))
    except UnicodeEncodeError:
        typer.echo("Code verifier must be ASCII", err=True)
        raise typer.Exit(code=1) from None


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
