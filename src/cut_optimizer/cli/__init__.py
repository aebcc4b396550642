"""Command line interface for the cut optimizer."""
