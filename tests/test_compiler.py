import sys
from pathlib import Path

import pytest

from arduino_cloud_compiler import compiler
from arduino_cloud_compiler.compiler import (
    get_arduino_cli_path,
    health_check,
    run_arduino_command,
)
from arduino_cloud_compiler.models import ArduinoCommand


@pytest.fixture
def cli(monkeypatch):
    """Point the CLI path at a given executable for one test."""

    def use(path):
        monkeypatch.setenv(compiler.CLI_PATH_ENV, str(path))
        get_arduino_cli_path.cache_clear()
        return Path(path)

    yield use
    get_arduino_cli_path.cache_clear()


def test_path_comes_from_environment(cli):
    expected = cli(sys.executable)
    assert get_arduino_cli_path() == expected


def test_path_is_cached(cli, monkeypatch):
    expected = cli(sys.executable)
    first = get_arduino_cli_path()
    monkeypatch.setenv(compiler.CLI_PATH_ENV, "/elsewhere/cli")
    assert get_arduino_cli_path() == first == expected


def test_health_check_succeeds(cli, tmp_path, monkeypatch):
    cli(sys.executable)
    (tmp_path / "version").write_text("print('1.0')\n")
    monkeypatch.chdir(tmp_path)
    assert health_check() is True


def test_health_check_fails_on_nonzero_exit(cli, tmp_path, monkeypatch):
    cli(sys.executable)
    (tmp_path / "version").write_text("raise SystemExit(2)\n")
    monkeypatch.chdir(tmp_path)
    assert health_check() is False


def test_health_check_fails_when_missing(cli, tmp_path):
    cli(tmp_path / "no-such-cli")
    assert health_check() is False


@pytest.mark.asyncio
async def test_run_collects_stdout(cli):
    cli(sys.executable)
    command = ArduinoCommand("-c", ["print('hello')"])
    response = await run_arduino_command(command)
    assert response.success is True
    assert response.output.strip() == "hello"
    assert response.error is None
    assert response.command == "-c"
    assert response.args == ["print('hello')"]


@pytest.mark.asyncio
async def test_run_collects_stderr(cli):
    cli(sys.executable)
    command = ArduinoCommand("-c", ["import sys; sys.stderr.write('oops')"])
    response = await run_arduino_command(command)
    assert response.success is True
    assert response.error == "oops"
    assert response.output == ""


@pytest.mark.asyncio
async def test_run_reports_nonzero_exit(cli):
    cli(sys.executable)
    response = await run_arduino_command(ArduinoCommand("-c", ["raise SystemExit(3)"]))
    assert response.success is False
    assert response.error is None


@pytest.mark.asyncio
async def test_run_missing_executable(cli, tmp_path):
    cli(tmp_path / "no-such-cli")
    command = ArduinoCommand("board", ["list", "--format", "json"])
    response = await run_arduino_command(command)
    assert response.success is False
    assert response.output == ""
    assert response.error.startswith("Failed to execute command: ")
    assert response.command == "board"
    assert response.args == ["list", "--format", "json"]