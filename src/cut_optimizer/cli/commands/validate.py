"""Validate command for checking optimization request files.

This module provides the `validate` command that checks a JSON request file
for syntax, schema and problem errors without running the optimizer.
"""

from pathlib import Path
from typing import Annotated

import typer

from cut_optimizer.application.config import (
    ConfigError,
    load_request,
    request_to_problem,
)
from cut_optimizer.domain import ValidationError


def validate_command(
    request_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON request file to validate"),
    ],
) -> None:
    """Validate an optimization request file.

    Checks the request file for:
    - JSON syntax errors
    - Schema validation errors (missing fields, invalid types, etc.)
    - Problem errors (non-positive sizes, duplicate ids, missing stock)

    Exit codes:
        0 - Request is valid
        1 - Request has errors

    Example:
        cut-optimizer validate request.json
    """
    typer.echo(f"Validating {request_file}...")
    typer.echo()

    try:
        request = load_request(request_file)
    except ConfigError as e:
        _display_load_error(e)
        raise typer.Exit(code=1)

    try:
        problem = request_to_problem(request)
    except ValidationError as e:
        typer.echo("Errors:", err=True)
        for error in e.errors:
            typer.echo(f"  {error}", err=True)
        typer.echo()
        typer.echo("Validation failed.", err=True)
        raise typer.Exit(code=1)

    typer.echo(
        f"{len(problem.instances)} piece(s), {len(problem.sheet_types)} stock sheet type(s)"
    )
    typer.echo("Validation passed. Request is valid.")


def _display_load_error(error: ConfigError) -> None:
    """Display a request loading error.

    Args:
        error: The ConfigError to display
    """
    typer.echo("Errors:", err=True)
    if error.error_type == "file_not_found":
        typer.echo(f"  File not found: {error.path}", err=True)
    elif error.error_type == "json_parse":
        typer.echo("  Invalid JSON syntax", err=True)
        for detail in error.details:
            line = detail.get("line", "?")
            column = detail.get("column", "?")
            message = detail.get("message", "Unknown error")
            typer.echo(f"    Line {line}, Column {column}: {message}", err=True)
    elif error.error_type == "validation" and error.details:
        for detail in error.details:
            path = detail.get("path", "unknown")
            message = detail.get("message", "Unknown error")
            typer.echo(f"  {path}: {message}", err=True)
            value = detail.get("value")
            if value is not None and not isinstance(value, (dict, list)):
                typer.echo(f"    Value: {value!r}", err=True)
    else:
        typer.echo(f"  {error.message}", err=True)

    typer.echo()
    typer.echo("Validation failed.", err=True)
