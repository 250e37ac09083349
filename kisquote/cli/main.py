"""Main entry point for the kisquote command line interface."""

from __future__ import annotations

from pathlib import Path

import typer

from kisquote.core.logging import configure_logging

from .formatters import create_formatter
from .quotes import register as register_quote_commands

_LOG_LEVELS = frozenset({"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"})


def create_app() -> typer.Typer:
    """Create a Typer application instance for kisquote."""

    app = typer.Typer(add_completion=False, help="kisquote command line interface")

    @app.callback()
    def main(
        ctx: typer.Context,
        format: str = typer.Option(
            "table",
            "--format",
            "-f",
            help="Output format (table or jsonl).",
            show_default=True,
        ),
        output: Path | None = typer.Option(
            None,
            "--output",
            "-o",
            help="Write output to a file instead of stdout.",
        ),
        log_level: str = typer.Option(
            "WARNING",
            "--log-level",
            help="Log level for the structured stderr log.",
            show_default=True,
        ),
        no_color: bool = typer.Option(
            False,
            "--no-color",
            help="Disable colorized output for table format.",
        ),
    ) -> None:
        ctx.ensure_object(dict)
        normalized_format = format.strip().lower()
        try:
            create_formatter(normalized_format, no_color=no_color)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--format") from exc

        ctx.obj.update(
            {
                "format": normalized_format,
                "output_path": output,
                "log_level": log_level.upper(),
                "no_color": no_color,
            }
        )
        if log_level.upper() not in _LOG_LEVELS:
            raise typer.BadParameter(f"Unknown log level '{log_level}'.", param_hint="--log-level")
        configure_logging(level=log_level.upper())

    register_quote_commands(app)
    return app


app = create_app()
