"""Pytest configuration and shared fixtures for cut optimizer tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from cut_optimizer.domain import CutPiece, StockSheet


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "slow: tests that take a long time to run")


# =============================================================================
# Shared domain fixtures
# =============================================================================


@pytest.fixture
def square_sheet() -> StockSheet:
    """A single 1000x1000 sheet."""
    return StockSheet(id="a", width=1000, height=1000, quantity=1)


@pytest.fixture
def half_piece() -> CutPiece:
    """A 500x500 piece covering a quarter of the square sheet."""
    return CutPiece(id="p1", width=500, height=500)


# =============================================================================
# Request payloads
# =============================================================================


@pytest.fixture
def request_payload() -> dict[str, Any]:
    """A minimal valid optimization request in wire format."""
    return {
        "stockPieces": [{"id": "a", "width": 1000, "length": 1000, "quantity": 1}],
        "cutPieces": [{"externalId": "p1", "width": 500, "length": 500}],
    }


@pytest.fixture
def write_request(tmp_path: Path) -> Callable[[Any, str], Path]:
    """Write a request payload to a JSON file and return its path."""

    def _write(payload: Any, name: str = "request.json") -> Path:
        path = tmp_path / name
        if isinstance(payload, str):
            path.write_text(payload, encoding="utf-8")
        else:
            path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _write
