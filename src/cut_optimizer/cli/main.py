"""Typer CLI for cut optimization."""

import logging
from pathlib import Path
from typing import Annotated

import typer
import uvicorn

from cut_optimizer.application import OptimizeCommand
from cut_optimizer.application.config import ConfigError, load_request
from cut_optimizer.cli.commands import validate_command
from cut_optimizer.domain import ValidationError
from cut_optimizer.infrastructure import CutDiagramRenderer
from cut_optimizer.web import ServerSettings, create_app

OUTPUT_FORMATS = ("json", "diagram", "summary", "svg")


def configure_logging(verbose: int = 0, quiet: bool = False) -> int:
    """Configure root logging from the command line flags.

    Args:
        verbose: Number of -v flags (0 warning, 1 info, 2+ debug).
        quiet: Silence all log output.

    Returns:
        The level applied to the root logger.
    """
    if quiet:
        level = logging.CRITICAL + 1
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        force=True,
    )
    return level


def _uvicorn_log_level(level: int) -> str:
    if level > logging.CRITICAL:
        return "critical"
    return logging.getLevelName(level).lower()


app = typer.Typer(
    name="cut-optimizer",
    help="Optimize rectangular cut pieces from stock sheets.",
)

# Register the validate command
app.command(name="validate")(validate_command)


@app.command()
def serve(
    ip: Annotated[str, typer.Option("--ip", "-i", help="Address to bind")] = "127.0.0.1",
    port: Annotated[int, typer.Option("--port", "-p", help="Port to listen on")] = 3030,
    max_content_length: Annotated[
        int, typer.Option("--max-content-length", help="Maximum request body in bytes")
    ] = 32896,
    timeout: Annotated[
        float, typer.Option("--timeout", help="Seconds before a request times out")
    ] = 30.0,
    max_requests: Annotated[
        int, typer.Option("--max-requests", help="Concurrent requests before shedding load")
    ] = 100,
    workers: Annotated[
        int, typer.Option("--workers", help="Worker processes per optimization")
    ] = 1,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Disable logging")] = False,
    verbose: Annotated[
        int, typer.Option("--verbose", "-v", count=True, help="Increase log verbosity")
    ] = 0,
) -> None:
    """Run the HTTP optimization server."""
    level = configure_logging(verbose, quiet)

    try:
        settings = ServerSettings(
            ip=ip,
            port=port,
            max_content_length=max_content_length,
            timeout=timeout,
            max_requests=max_requests,
            workers=workers,
        )
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    uvicorn.run(
        create_app(settings),
        host=settings.ip,
        port=settings.port,
        log_level=_uvicorn_log_level(level),
        access_log=not quiet,
    )


@app.command()
def optimize(
    request_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON optimization request"),
    ],
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: json, diagram, summary, svg"),
    ] = "json",
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write output to a file instead of stdout"),
    ] = None,
    time_limit: Annotated[
        float | None,
        typer.Option("--time-limit", help="Cap the optimization budget in seconds"),
    ] = None,
    workers: Annotated[
        int, typer.Option("--workers", help="Worker processes for heuristic runs")
    ] = 1,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Disable logging")] = False,
    verbose: Annotated[
        int, typer.Option("--verbose", "-v", count=True, help="Increase log verbosity")
    ] = 0,
) -> None:
    """Optimize a request file and print the resulting layout."""
    configure_logging(verbose, quiet)

    output_format = output_format.lower()
    if output_format not in OUTPUT_FORMATS:
        typer.echo(f"Unknown format: {output_format}", err=True)
        typer.echo(f"Available formats: {', '.join(OUTPUT_FORMATS)}", err=True)
        raise typer.Exit(code=1)
    if output_format == "svg" and output is None:
        typer.echo("SVG output requires --output", err=True)
        raise typer.Exit(code=1)
    if workers < 1:
        typer.echo("Error: --workers must be at least 1", err=True)
        raise typer.Exit(code=1)
    if time_limit is not None and not time_limit > 0:
        typer.echo("Error: --time-limit must be positive", err=True)
        raise typer.Exit(code=1)

    try:
        request = load_request(request_file)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    try:
        outcome = OptimizeCommand(max_workers=workers).execute(request, time_limit)
    except ValidationError as e:
        for error in e.errors:
            typer.echo(f"Error: {error}", err=True)
        raise typer.Exit(code=1)

    renderer = CutDiagramRenderer()
    if output_format == "svg":
        _write_svgs(renderer.render_all_svg(outcome.result), output)
        return

    if output_format == "json":
        text = outcome.output.model_dump_json(by_alias=True, indent=2)
    elif output_format == "diagram":
        text = renderer.render_all_ascii(outcome.result)
    else:
        text = renderer.render_waste_summary(outcome.result)

    if output is None:
        typer.echo(text)
    else:
        output.write_text(text + "\n", encoding="utf-8")
        typer.echo(f"Wrote {output}")


def _write_svgs(svgs: list[str], output: Path) -> None:
    """Write one SVG per sheet, numbering files when there are several."""
    if not svgs:
        typer.echo("No sheets to display.")
        return
    if len(svgs) == 1:
        paths = [output]
    else:
        paths = [
            output.with_name(f"{output.stem}-{n}{output.suffix or '.svg'}")
            for n in range(1, len(svgs) + 1)
        ]
    for path, svg in zip(paths, svgs):
        path.write_text(svg, encoding="utf-8")
        typer.echo(f"Wrote {path}")


if __name__ == "__main__":
    app()
