"""Fixtures for end-to-end tests of the ``datastash`` CLI.

Provides a test-only ``log-demo`` command for the logging-option tests, a
CliRunner whose environment points the flight recorder, the remote store and
the cache root at per-test temporary paths, and small helpers to read those
locations back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import click
import pytest
from click.testing import CliRunner

from datastash.entrypoints.cli.main import datastash

# pylint: disable=redefined-outer-name


@click.command()
def log_demo():
    """Emit one record per level on a project logger and a third-party logger."""
    logger = logging.getLogger("datastash.demo")
    logger.debug("This is a debug-level test message.")
    logger.info("This is an info-level test message.")
    logger.warning("This is a warning-level test message.")
    logger.error("This is an error-level test message.")
    logger.critical("This is a critical-level test message.")
    third_party = logging.getLogger("some.thirdparty")
    third_party.debug("This is a debug-level third-party test message.")
    third_party.info("This is an info-level third-party test message.")
    third_party.warning("This is a warning-level third-party test message.")
    logger.debug("This is a final debug-level test message.")


@pytest.fixture
def registered_log_demo():
    """Register ``log-demo`` on the top-level group for one test."""
    datastash.add_command(log_demo, name="log-demo")
    try:
        yield
    finally:
        datastash.commands.pop("log-demo", None)
        for section in getattr(datastash, "_section_set", getattr(datastash, "_sections", [])):
            getattr(section, "commands", {}).pop("log-demo", None)


@dataclass
class Workspace:
    """Per-test locations wired into the CLI through environment variables."""

    root: Path
    remote: Path
    cache: Path
    log_path: Path

    def env(self) -> dict[str, str]:
        """Environment selecting this workspace's remote, cache and log file."""
        return {
            "DATASTASH_REMOTE": f"file://{self.remote}",
            "DATASTASH_CACHE_DIR": str(self.cache),
            "DATASTASH_LOG_PATH": str(self.log_path),
        }


@pytest.fixture
def workspace(tmp_path: Path) -> Workspace:
    """Fresh remote directory, cache root and log path under tmp_path."""
    return Workspace(
        root=tmp_path,
        remote=tmp_path / "remote",
        cache=tmp_path / "cache",
        log_path=tmp_path / "logs" / "latest.log",
    )


@pytest.fixture
def runner(workspace: Workspace) -> CliRunner:
    """CliRunner whose base environment targets the workspace."""
    return CliRunner(env=workspace.env())


@pytest.fixture
def fs(runner: CliRunner):
    """Run the test inside an isolated working directory."""
    with runner.isolated_filesystem():
        yield
