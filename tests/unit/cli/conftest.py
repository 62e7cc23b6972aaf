"""Shared fixtures for CLI tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import typer
from typer.testing import CliRunner


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a CLI runner for testing commands."""
    return CliRunner()


@pytest.fixture
def mock_context() -> MagicMock:
    """Create a mock Typer context with empty global options."""
    ctx = MagicMock(spec=typer.Context)
    ctx.obj = {
        "username": None,
        "secret": None,
        "host_url": None,
        "concurrency": None,
        "quiet": False,
        "verbose": False,
        "client": None,
    }
    return ctx
