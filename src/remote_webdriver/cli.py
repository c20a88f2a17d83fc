"""Command line interface for remote-webdriver."""

from __future__ import annotations

import logging
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from rich.console import Console
from rich.table import Table

from .config import load_config
from .errors import WebDriverError
from .factory import build_driver, build_notifier, build_transport
from .locator import parse_locator
from .status import STATUS_TABLE

app = typer.Typer(help="Remote WebDriver client")
console = Console()
err_console = Console(stderr=True)


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Configure logging before executing any command."""

    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@app.command()
def version() -> None:
    """Print the package version."""

    try:
        typer.echo(get_version("remote-webdriver"))
    except PackageNotFoundError:  # pragma: no cover - when running from source tree
        typer.echo("0.0.0")


@app.command("status-codes")
def status_codes() -> None:
    """Print the wire status code table."""

    table = Table(title="Wire status codes")
    table.add_column("Code", justify="right")
    table.add_column("Kind")
    table.add_column("Description")
    for entry in STATUS_TABLE.values():
        table.add_row(str(entry.code), entry.kind.value, entry.description)
    console.print(table)


@app.command("parse-locator")
def parse_locator_command(
    locator: Annotated[str, typer.Argument(help='Locator such as "css selector=#main".')],
) -> None:
    """Show the element query a locator string turns into."""

    try:
        parsed = parse_locator(locator)
    except WebDriverError as exc:
        err_console.print(str(exc), style="red", markup=False)
        raise typer.Exit(code=1) from exc
    typer.echo(f"using={parsed.strategy.value}")
    typer.echo(f"value={parsed.value}")


@app.command()
def run(
    url: Annotated[str, typer.Argument(help="Page to load in the remote browser.")],
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to YAML configuration."),
    ] = None,
    env_file: Annotated[
        Optional[Path],
        typer.Option("--env-file", help="Path to an .env file with default configuration values."),
    ] = None,
    provider: Annotated[
        Optional[str],
        typer.Option("--provider", help="local, host, sauce, browserstack or testingbot."),
    ] = None,
    browser: Annotated[
        Optional[str],
        typer.Option("--browser", help="Browser name to request."),
    ] = None,
    browser_version: Annotated[
        Optional[str],
        typer.Option("--browser-version", help="Browser version to request from hosted providers."),
    ] = None,
    os_name: Annotated[
        Optional[str],
        typer.Option("--os", help="Operating system to request from hosted providers."),
    ] = None,
    os_version: Annotated[
        Optional[str],
        typer.Option("--os-version", help="Operating system version (BrowserStack)."),
    ] = None,
    host: Annotated[
        Optional[str],
        typer.Option("--host", help="Server host for the host provider."),
    ] = None,
    port: Annotated[
        Optional[int],
        typer.Option("--port", help="Server port for the local and host providers."),
    ] = None,
    expect_title: Annotated[
        Optional[str],
        typer.Option("--expect-title", help="Fail unless the page title becomes this value."),
    ] = None,
    report: Annotated[
        bool,
        typer.Option("--report/--no-report", help="Report the job result to the provider."),
    ] = False,
    name: Annotated[
        Optional[str],
        typer.Option("--name", help="Job name used when reporting."),
    ] = None,
) -> None:
    """Open a session, load a page, print its title and quit."""

    overrides: dict[str, Any] = {}
    for key, value in (
        ("provider", provider),
        ("browser", browser),
        ("browser_version", browser_version),
        ("os", os_name),
        ("os_version", os_version),
        ("host", host),
        ("local_port", port),
    ):
        if value is not None:
            overrides[key] = value

    try:
        config = load_config(config_path, env_file=env_file, **overrides)
    except ValueError as exc:
        err_console.print(f"Invalid configuration: {exc}", style="red", markup=False)
        raise typer.Exit(code=1) from exc
    typer.echo(f"Opening {config.browser} session at {config.provider}")

    transport = build_transport(config.transport)
    try:
        try:
            driver = build_driver(config, transport)
        except (WebDriverError, ValueError) as exc:
            err_console.print(f"Could not open a session: {exc}", style="red", markup=False)
            raise typer.Exit(code=1) from exc

        passed = True
        ended = True
        try:
            driver.load(url)
            typer.echo(f"Title: {driver.get_title()}")
            if expect_title is not None:
                driver.assert_title(expect_title)
            job = driver.job_url()
            if job:
                typer.echo(f"Job: {job}")
        except (WebDriverError, AssertionError) as exc:
            passed = False
            err_console.print(str(exc), style="red", markup=False)
        finally:
            try:
                driver.quit()
            except WebDriverError as exc:
                ended = False
                err_console.print(f"Could not end the session: {exc}", style="red", markup=False)
            if report:
                build_notifier(config).report(driver.session, passed=passed, name=name)
    finally:
        transport.close()

    if not (passed and ended):
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
