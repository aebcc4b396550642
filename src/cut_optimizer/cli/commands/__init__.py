"""CLI command implementations for the cut-optimizer application."""

from cut_optimizer.cli.commands.validate import validate_command

__all__ = ["validate_command"]
