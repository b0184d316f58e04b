"""Locating and running the arduino-cli executable."""

from __future__ import annotations

import asyncio
import functools
import logging
import os
import shutil
import subprocess
from pathlib import Path

from .models import ArduinoCommand, CommandResponse

logger = logging.getLogger(__name__)

CLI_PATH_ENV = "ARDUINO_CLI_PATH"
CLI_NAME = "arduino-cli"


@functools.cache
def get_arduino_cli_path() -> Path:
    """Return the path of the arduino-cli executable.

    The ARDUINO_CLI_PATH environment variable wins; otherwise the
    executable is looked up on PATH. The result is cached.
    """
    configured = os.environ.get(CLI_PATH_ENV)
    if configured:
        return Path(configured)
    found = shutil.which(CLI_NAME)
    return Path(found) if found else Path(CLI_NAME)


def _decode(data: bytes | None) -> str:
    return (data or b"").decode("utf-8", errors="replace")


def health_check() -> bool:
    """Run ``arduino-cli version`` and report whether it succeeded."""
    cli = get_arduino_cli_path()
    try:
        result = subprocess.run([str(cli), "version"], capture_output=True)
    except OSError as exc:
        logger.info("Failed to execute arduino-cli: %s", exc)
        return False
    if result.returncode == 0:
        logger.info("%s", _decode(result.stdout))
        return True
    logger.info("arduino-cli test failed: %s", _decode(result.stderr))
    return False


async def run_arduino_command(command: ArduinoCommand) -> CommandResponse:
    """Run one arduino-cli command and collect its output."""
    cli = get_arduino_cli_path()
    args = list(command.args)
    logger.info("Running Arduino CLI command: %s %s", command.command, args)
    try:
        process = await asyncio.create_subprocess_exec(
            str(cli),
            command.command,
            *args,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await process.communicate()
    except OSError as exc:
        return CommandResponse.failure(
            command.command, f"Failed to execute command: {exc}", args
        )
    error = _decode(stderr)
    return CommandResponse(
        success=process.returncode == 0,
        output=_decode(stdout),
        error=error or None,
        command=command.command,
        args=args,
    )