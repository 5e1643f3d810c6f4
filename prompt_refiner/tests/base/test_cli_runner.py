"""Tests for the subprocess runner used by CLI transports.

These spawn the current Python interpreter as a stand-in CLI tool.
"""

from __future__ import annotations

import os
import sys
import time

import pytest

from prompt_refiner.base.cli import run_command
from prompt_refiner.base.errors import DispatchError, ErrorCode


def _env() -> dict:
    return dict(os.environ)


@pytest.mark.integration
def test_timeout_kills_and_reaps_the_process(tmp_path) -> None:
    with pytest.raises(DispatchError) as info:
        run_command(
            [sys.executable, "-c", "import time; time.sleep(1)"],
            timeout=0.1,
            cwd=tmp_path,
            env=_env(),
            provider="copilot",
        )

    err = info.value
    assert err.code is ErrorCode.TRANSPORT_TIMEOUT
    assert err.retryable is True
    assert "timed out after 100ms" in err.message
    with pytest.raises(ProcessLookupError):
        os.kill(err.details["pid"], 0)


@pytest.mark.integration
@pytest.mark.skipif(os.name != "posix", reason="process groups are POSIX only")
def test_timeout_kills_helpers_holding_the_pipes(tmp_path) -> None:
    script = (
        "import subprocess, sys, time; "
        "subprocess.Popen([sys.executable, '-c', 'import time; time.sleep(4)']); "
        "time.sleep(4)"
    )
    started = time.monotonic()
    with pytest.raises(DispatchError) as info:
        run_command([sys.executable, "-c", script], timeout=0.2, cwd=tmp_path, env=_env())

    assert info.value.code is ErrorCode.TRANSPORT_TIMEOUT
    assert time.monotonic() - started < 2.0


@pytest.mark.integration
def test_stdout_and_env_overrides(tmp_path) -> None:
    script = "import os, sys; print(os.environ['NO_COLOR'], os.environ['TERM'], sys.stdin.read() == '')"
    result = run_command([sys.executable, "-c", script], timeout=10, cwd=tmp_path, env=_env())
    assert result.returncode == 0
    assert result.stdout.split() == ["1", "dumb", "True"]


@pytest.mark.integration
def test_non_zero_exit_reports_stderr(tmp_path) -> None:
    script = "import sys; sys.stderr.write('not logged in'); sys.exit(3)"
    with pytest.raises(DispatchError) as info:
        run_command([sys.executable, "-c", script], timeout=10, cwd=tmp_path, env=_env(), provider="claude")

    err = info.value
    assert err.code is ErrorCode.TRANSPORT_FAILURE
    assert err.details["exit_code"] == 3
    assert err.raw_excerpt == "not logged in"
    assert "not logged in" in err.message


@pytest.mark.integration
def test_non_zero_exit_without_check_returns_output(tmp_path) -> None:
    script = "import sys; print('Allowed choices are a, b.'); sys.exit(1)"
    result = run_command([sys.executable, "-c", script], timeout=10, cwd=tmp_path, env=_env(), check=False)
    assert result.returncode == 1
    assert "Allowed choices" in result.combined


def test_missing_executable_is_transport_failure(tmp_path) -> None:
    with pytest.raises(DispatchError) as info:
        run_command([str(tmp_path / "no-such-tool")], timeout=1, cwd=tmp_path, env=_env())
    assert info.value.code is ErrorCode.TRANSPORT_FAILURE
