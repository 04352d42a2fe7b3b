"""Fixtures for end-to-end CLI tests.

Every invocation gets its own file-backed store and log path under the
test's temp dir, so runs never touch the per-user defaults.
"""

from pathlib import Path

import pytest
from click.testing import CliRunner, Result

from pvtrack.entrypoints.cli.main import pvtrack

# pylint: disable=redefined-outer-name


@pytest.fixture
def runner() -> CliRunner:
    """Return a Click CliRunner for invoking CLI commands in tests."""
    return CliRunner()


@pytest.fixture
def cli_env(tmp_path: Path) -> dict[str, str]:
    """Environment pointing the CLI at a temp store and log file."""
    return {
        "PVTRACK_STORE_URL": f"file://{tmp_path / 'kv'}",
        "PVTRACK_LOG_PATH": str(tmp_path / "logs" / "latest.log"),
        "PVTRACK_TOTAL_UNITS": "",
    }


@pytest.fixture
def invoke(runner: CliRunner, cli_env: dict[str, str]):
    """Invoke ``pvtrack`` with the temp environment; extra env merges on top."""

    def _invoke(*args: str, env: dict[str, str] | None = None) -> Result:
        return runner.invoke(pvtrack, list(args), env={**cli_env, **(env or {})})

    return _invoke
