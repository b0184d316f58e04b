"""Socket.IO server over aiohttp that runs arduino-cli commands for remote clients."""

__version__ = "0.1.0"
__all__ = ["models", "compiler", "events", "server"]