"""End-to-end tests for the logging options of the top-level ``datastash`` command.

The ``log-demo`` command emits records at every level so each test can check
console verbosity, logger-level overrides, debug formatting and the
flight recorder from the outside.
"""

import re
from pathlib import Path

import pytest

from datastash.entrypoints.cli.main import datastash

# pylint: disable=unused-argument

LOG = "flight_recorder.log"


def found(pattern: str, text: str) -> bool:
    """True if the regex `pattern` matches anywhere in `text` (multiline)."""
    return re.search(pattern, text, re.MULTILINE) is not None


def read_log(path: str = LOG) -> str:
    """Contents of the flight-recorder file."""
    return Path(path).read_text(encoding="utf-8")


@pytest.mark.parametrize(
    ("flags", "shown", "hidden"),
    [
        ([], "WARNING", "INFO"),
        (["-v"], "INFO", "DEBUG"),
        (["-vv"], "DEBUG", None),
        (["-q"], "ERROR", "WARNING"),
        (["-qq"], "CRITICAL", "ERROR"),
    ],
    ids=["default", "-v", "-vv", "-q", "-qq"],
)
def test_verbosity_flags(registered_log_demo, runner, fs, flags, shown, hidden):
    """-v/-q move the console threshold one level per repetition from WARNING."""
    result = runner.invoke(datastash, flags + ["log-demo"])
    assert result.exit_code == 0
    assert found(shown, result.output)
    if hidden is not None:
        assert not found(hidden, result.output)


@pytest.mark.parametrize(
    ("env", "cli_args"),
    [
        ({}, ["-vv", "-L", "some.thirdparty=INFO"]),
        ({"DATASTASH_LOGGER_LEVEL": "some.thirdparty=INFO"}, ["-vv"]),
    ],
    ids=["cli-flag", "env-var"],
)
def test_logger_level_override(registered_log_demo, runner, fs, env, cli_args):
    """-L (or its env var) raises one logger's threshold without touching others."""
    result = runner.invoke(datastash, cli_args + ["log-demo"], env=env)
    assert result.exit_code == 0
    assert "debug-level third-party" not in result.output
    assert "info-level third-party" in result.output
    assert "This is a debug-level test message." in result.output


def test_third_party_records_are_prefixed(registered_log_demo, runner, fs):
    """Outside debug mode third-party records carry a [name] prefix."""
    result = runner.invoke(datastash, ["log-demo"])
    assert result.exit_code == 0
    assert found(r"\[some\].*warning-level third-party", result.output)


def test_debug_mode_shows_source_locations(registered_log_demo, runner, fs):
    """--debug adds file:line locations; the default output does not."""
    debug = runner.invoke(datastash, ["--debug", "log-demo"])
    plain = runner.invoke(datastash, ["log-demo"])
    assert debug.exit_code == plain.exit_code == 0
    assert found(r"conftest\.py:\d+", debug.output)
    assert not found(r"conftest\.py:\d+", plain.output)


def test_flight_recorder_dumps_on_warning(registered_log_demo, runner, fs):
    """Buffered DEBUG records are written out once a WARNING arrives."""
    result = runner.invoke(
        datastash, ["--log-path", LOG, "-L", "some.thirdparty=INFO", "log-demo"]
    )
    assert result.exit_code == 0
    content = read_log()
    assert "This is a debug-level test message." in content
    assert "This is a critical-level test message." in content
    assert "info-level third-party" in content
    assert "debug-level third-party" not in content
    # records after the last flush stay in memory without --force-flush
    assert "final debug-level" not in content


@pytest.mark.parametrize(
    ("env", "cli_args"),
    [({}, ["--force-flush"]), ({"DATASTASH_FORCE_FLUSH_FLIGHT_RECORDER": "true"}, [])],
    ids=["cli-flag", "env-var"],
)
def test_flight_recorder_force_flush(registered_log_demo, runner, fs, env, cli_args):
    """--force-flush writes the tail of the buffer on exit."""
    result = runner.invoke(
        datastash, ["--log-path", LOG] + cli_args + ["log-demo"], env=env
    )
    assert result.exit_code == 0
    assert "final debug-level" in read_log()


@pytest.mark.parametrize(
    ("env", "cli_args"),
    [({}, ["--no-flight-recorder"]), ({"DATASTASH_FLIGHT_RECORDER": "0"}, [])],
    ids=["cli-flag", "env-var"],
)
def test_flight_recorder_can_be_disabled(
    registered_log_demo, runner, fs, env, cli_args
):
    """With the recorder off no log file is written."""
    result = runner.invoke(
        datastash, ["--log-path", LOG] + cli_args + ["log-demo"], env=env
    )
    assert result.exit_code == 0
    assert not Path(LOG).exists()


def test_flight_recorder_truncates_between_runs(registered_log_demo, runner, fs):
    """Each run starts a new log file instead of appending."""
    sizes = []
    for _ in range(2):
        assert runner.invoke(datastash, ["--log-path", LOG, "log-demo"]).exit_code == 0
        sizes.append(len(read_log().splitlines()))
    assert sizes[0] == sizes[1]


def test_startup_diagnostics(registered_log_demo, runner, fs):
    """The startup summary and diagnostics reach the flight recorder."""
    result = runner.invoke(
        datastash, ["--log-path", LOG, "--force-flush", "log-demo"]
    )
    assert result.exit_code == 0
    content = read_log()
    for pattern in (
        r"DATASTASH \d+\.\d+\.\d+",
        r"console=WARNING",
        r"flight-recorder=ON",
        r"Python: \d+\.\d+\.\d+",
        r"PID: \d+",
        r"boto3: \d+\.\d+\.\d+",
        r"botocore: \d+\.\d+\.\d+",
        r"Flight recorder: path=flight_recorder\.log, capacity=2000, flush_on_close=True",
        r"Per-logger overrides: .*'botocore': 'WARNING'",
    ):
        assert found(pattern, content), pattern
