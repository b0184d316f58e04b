"""Request and response records exchanged with clients."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass
class CommandResponse:
    """Outcome of one arduino-cli invocation."""

    success: bool
    output: str
    error: str | None
    command: str
    args: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready mapping of this response."""
        return asdict(self)

    @classmethod
    def failure(cls, command: str, error: str, args=()) -> CommandResponse:
        """Build a response for a command that could not run."""
        return cls(False, "", error, command, list(args))


@dataclass
class ArduinoCommand:
    """An arduino-cli sub-command and its arguments."""

    command: str
    args: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data) -> ArduinoCommand:
        """Build a command from a decoded JSON object; raise ValueError if invalid."""
        try:
            command, args = data["command"], data["args"]
        except (KeyError, TypeError):
            raise ValueError("command request needs 'command' and 'args'") from None
        if not isinstance(command, str):
            raise ValueError("field 'command' must be a string")
        if not isinstance(args, list) or not all(isinstance(a, str) for a in args):
            raise ValueError("field 'args' must be a list of strings")
        return cls(command, list(args))