"""Handlers for the Socket.IO events clients may send."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from .compiler import run_arduino_command
from .models import ArduinoCommand, CommandResponse

logger = logging.getLogger(__name__)

Runner = Callable[[ArduinoCommand], Awaitable[CommandResponse]]

JSON_FORMAT = ["--format", "json"]

# Events whose result goes back to the client as a new event rather than an ack.
EMIT_REPLIES = {"message": "message-back"}


def _string_field(data: Any, key: str) -> str | None:
    """Return ``data[key]`` when data is an object holding a string there."""
    if not isinstance(data, dict):
        return None
    value = data.get(key)
    return value if isinstance(value, str) else None


class EventHandlers:
    """The event handlers registered on every connected socket.

    ``runner`` executes an arduino-cli command; it defaults to running the
    real executable.
    """

    def __init__(self, runner: Runner | None = None) -> None:
        self._runner: Runner = runner or run_arduino_command
        self._events: dict[str, Callable[[Any], Awaitable[Any]]] = {
            "message": self.message,
            "message-with-ack": self.message_with_ack,
            "list-boards": self.list_boards,
            "list-connected": self.list_connected,
            "list-cores": self.list_cores,
            "install-core": self.install_core,
            "compile-sketch": self.compile_sketch,
            "upload-sketch": self.upload_sketch,
        }

    async def _run(self, command: str, args: list[str]) -> CommandResponse:
        return await self._runner(ArduinoCommand(command=command, args=args))

    async def message(self, data: Any) -> Any:
        """Echo the payload; it is sent back as a ``message-back`` event."""
        logger.info("Received event: %r", data)
        return data

    async def message_with_ack(self, data: Any) -> Any:
        """Echo the payload as the acknowledgement."""
        logger.info("Received event: %r", data)
        return data

    async def list_boards(self, data: Any = None) -> CommandResponse:
        """List every board the installed cores know about."""
        return await self._run("board", ["listall", *JSON_FORMAT])

    async def list_connected(self, data: Any = None) -> CommandResponse:
        """List boards attached to this machine."""
        return await self._run("board", ["list", *JSON_FORMAT])

    async def list_cores(self, data: Any = None) -> CommandResponse:
        """List installed cores."""
        return await self._run("core", ["list", *JSON_FORMAT])

    async def install_core(self, data: Any) -> CommandResponse:
        """Install the core named by ``data["core"]``."""
        core = _string_field(data, "core")
        if core is None:
            return CommandResponse.failure("core", "Missing core name", ["install"])
        return await self._run("core", ["install", core])

    async def compile_sketch(self, data: Any) -> CommandResponse:
        """Compile ``data["sketch_path"]``, for ``data["fqbn"]`` when given."""
        sketch_path = _string_field(data, "sketch_path")
        if sketch_path is None:
            return CommandResponse.failure("compile", "Missing sketch path")
        args: list[str] = []
        fqbn = _string_field(data, "fqbn")
        if fqbn is not None:
            args += ["--fqbn", fqbn]
        args.append(sketch_path)
        return await self._run("compile", args)

    async def upload_sketch(self, data: Any) -> CommandResponse:
        """Upload a sketch; ``sketch_path``, ``port`` and ``fqbn`` are required."""
        sketch_path = _string_field(data, "sketch_path")
        if sketch_path is None:
            return CommandResponse.failure("upload", "Missing sketch path")
        port = _string_field(data, "port")
        if port is None:
            return CommandResponse.failure("upload", "Missing port")
        fqbn = _string_field(data, "fqbn")
        if fqbn is None:
            return CommandResponse.failure("upload", "Missing FQBN")
        return await self._run(
            "upload", ["--port", port, "--fqbn", fqbn, sketch_path]
        )

    async def dispatch(self, event: str, data: Any) -> Any:
        """Run the handler for ``event`` and return a JSON-ready result.

        Raises KeyError for an event that has no handler.
        """
        try:
            handler = self._events[event]
        except KeyError:
            raise KeyError(f"unknown event {event!r}") from None
        result = await handler(data)
        if isinstance(result, CommandResponse):
            return result.to_dict()
        return result