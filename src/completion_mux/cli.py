# src/completion_mux/cli.py
"""completion-mux Command Line Interface.

Entry point for the completion-mux CLI tool.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from pathlib import Path

import typer
import yaml
from pydantic import ValidationError

from completion_mux import __version__
from completion_mux.contracts import SettledResult
from completion_mux.core.config import DemoSettings, LoggingSettings, load_settings
from completion_mux.core.logging import configure_logging, get_logger, log_context
from completion_mux.mux import CompletionMultiplexer
from completion_mux.testing import fail_after, settle_after

__all__ = ["app"]

logger = get_logger(__name__)

app = typer.Typer(
    name="completion-mux",
    help="completion-mux: stream awaitable outcomes in settlement order.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"completion-mux version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose/debug logging.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Output structured JSON logs (for machine processing).",
    ),
) -> None:
    """completion-mux: stream awaitable outcomes in settlement order."""
    configure_logging(LoggingSettings(level="DEBUG" if verbose else "INFO", json_output=json_logs))


def _parse_int_list(raw: str, option: str) -> list[int]:
    try:
        return [int(item) for item in raw.split(",") if item.strip()]
    except ValueError:
        typer.secho(f"Error: {option} expects comma-separated integers, got {raw!r}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from None


def _format_result(result: SettledResult[str]) -> str:
    if result.is_success:
        outcome = f"value={result.value!r}"
    else:
        outcome = f"reason={result.reason!r}"
    return f"position={result.position} status={result.status} {outcome} settle={result.settle_index}"


async def _run_demo(demo: DemoSettings) -> list[SettledResult[str]]:
    failing = set(demo.fail_positions)
    operations: list[Awaitable[str]] = []
    for position, delay_ms in enumerate(demo.delays_ms):
        if position in failing:
            operations.append(fail_after(RuntimeError(f"op-{position} failed"), delay_ms / 1000))  # type: ignore[arg-type]
        else:
            operations.append(settle_after(f"op-{position}", delay_ms / 1000))

    results: list[SettledResult[str]] = []
    with log_context(multiplexer="demo", operations=len(operations)):
        async for result in CompletionMultiplexer(operations, name="demo"):
            typer.echo(_format_result(result))
            results.append(result)
    return results


@app.command()
def demo(
    delays: str | None = typer.Option(
        None,
        "--delays",
        "-d",
        help="Comma-separated settle delays in milliseconds, in input order.",
    ),
    fail: str | None = typer.Option(
        None,
        "--fail",
        "-f",
        help="Comma-separated positions that fail instead of succeeding.",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to settings YAML file (options override its demo section).",
    ),
) -> None:
    """Run simulated operations and print each outcome as it settles."""
    base = DemoSettings()
    if config is not None:
        config_path = config.expanduser()
        try:
            settings = load_settings(config_path)
        except yaml.YAMLError as e:
            typer.secho(f"Error: YAML syntax error in {config_path.name}: {e}", fg=typer.colors.RED, err=True)
            raise typer.Exit(1) from None
        except FileNotFoundError:
            typer.secho(f"Error: settings file does not exist: {config_path}", fg=typer.colors.RED, err=True)
            raise typer.Exit(1) from None
        except ValidationError as e:
            typer.secho(f"Error: invalid settings in {config_path.name}", fg=typer.colors.RED, err=True)
            for error in e.errors():
                loc = ".".join(str(x) for x in error["loc"])
                typer.secho(f"  - {loc}: {error['msg']}", fg=typer.colors.RED, err=True)
            raise typer.Exit(1) from None
        except ValueError as e:
            # Must stay after ValidationError, which subclasses ValueError
            typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
            raise typer.Exit(1) from None
        configure_logging(settings.logging)
        base = settings.demo

    overrides: dict[str, list[int]] = {}
    if delays is not None:
        overrides["delays_ms"] = _parse_int_list(delays, "--delays")
    if fail is not None:
        overrides["fail_positions"] = _parse_int_list(fail, "--fail")

    try:
        demo_settings = DemoSettings(**{**base.model_dump(), **overrides})
    except ValidationError as e:
        for error in e.errors():
            typer.secho(f"Error: {error['msg']}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from None

    logger.debug(
        "Starting demo",
        operations=len(demo_settings.delays_ms),
        fail_positions=demo_settings.fail_positions,
    )
    results = asyncio.run(_run_demo(demo_settings))
    failures = sum(1 for r in results if r.is_failure)
    typer.echo(f"settled={len(results)} successes={len(results) - failures} failures={failures}")


if __name__ == "__main__":
    app()
