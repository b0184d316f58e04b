"""Socket.IO server exposing arduino-cli over WebSocket."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import secrets
from typing import Any

from aiohttp import WSMsgType, web

from .compiler import health_check
from .events import EMIT_REPLIES, EventHandlers

logger = logging.getLogger(__name__)

NAMESPACES = ("/", "/custom")

# Socket.IO packet types.
CONNECT, DISCONNECT, EVENT, ACK, CONNECT_ERROR, BINARY_EVENT, BINARY_ACK = range(7)

PING_INTERVAL = 25.0
PING_TIMEOUT = 20.0


def encode_packet(packet_type: int, namespace="/", data=None, ack_id=None) -> str:
    """Encode a Socket.IO packet as text; ``data`` of None is left out."""
    text = str(packet_type)
    if namespace != "/":
        text += namespace + ","
    if ack_id is not None:
        text += str(ack_id)
    if data is not None:
        text += json.dumps(data, separators=(",", ":"), ensure_ascii=False)
    return text


def decode_packet(text: str) -> tuple[int, str, Any, int | None]:
    """Decode a Socket.IO text packet into (type, namespace, data, ack id).

    Raises ValueError for a malformed packet.
    """
    if not text or not text[0].isdigit() or int(text[0]) > BINARY_ACK:
        raise ValueError(f"malformed packet {text!r}")
    packet_type, rest = int(text[0]), text[1:]
    if packet_type in (BINARY_EVENT, BINARY_ACK):
        count, dash, rest = rest.partition("-")
        if not dash or not count.isdigit():
            raise ValueError(f"malformed binary packet {text!r}")
    namespace = "/"
    if rest.startswith("/"):
        namespace, _, rest = rest.partition(",")
    digits = len(rest) - len(rest.lstrip("0123456789"))
    ack_id = int(rest[:digits]) if digits else None
    payload = rest[digits:]
    return packet_type, namespace, json.loads(payload) if payload else None, ack_id


class SocketIOServer:
    """Serves the Socket.IO protocol over Engine.IO WebSocket connections."""

    def __init__(self, handlers=None, namespaces=NAMESPACES) -> None:
        self.handlers = handlers or EventHandlers()
        self.namespaces = frozenset(namespaces)

    async def handle_packet(self, namespace: str, packet) -> list[str]:
        """Handle ``(type, data, ack id)`` sent to ``namespace``; return replies."""
        packet_type, data, ack_id = packet
        if packet_type == CONNECT:
            if namespace not in self.namespaces:
                return [encode_packet(CONNECT_ERROR, namespace, {"message": "Invalid namespace"})]
            sid = secrets.token_urlsafe(15)
            logger.info("Socket.IO connected: ns=%s id=%s", namespace, sid)
            return [
                encode_packet(CONNECT, namespace, {"sid": sid}),
                encode_packet(EVENT, namespace, ["auth", data]),
            ]
        if packet_type != EVENT or namespace not in self.namespaces:
            return []
        if not isinstance(data, list) or not data or not isinstance(data[0], str):
            return []
        event, *args = data
        payload = None if not args else args[0] if len(args) == 1 else args
        try:
            result = await self.handlers.dispatch(event, payload)
        except KeyError:
            return []
        if event in EMIT_REPLIES:
            return [encode_packet(EVENT, namespace, [EMIT_REPLIES[event], result])]
        if ack_id is not None:
            return [encode_packet(ACK, namespace, [result], ack_id)]
        return []

    async def websocket_handler(self, request: web.Request) -> web.StreamResponse:
        """Serve one Engine.IO connection over the WebSocket transport."""
        if request.query.get("transport") != "websocket":
            return web.json_response({"code": 0, "message": "Transport unknown"}, status=400)
        ws = web.WebSocketResponse()
        await ws.prepare(request)
        loop = asyncio.get_running_loop()
        lock = asyncio.Lock()
        connected: set[str] = set()
        tasks: set[asyncio.Task] = set()
        last_pong = loop.time()

        async def send(text: str) -> None:
            async with lock:
                if not ws.closed:
                    await ws.send_str(text)

        async def respond(namespace, packet) -> None:
            try:
                for reply in await self.handle_packet(namespace, packet):
                    await send("4" + reply)
            except Exception:
                logger.exception("Failed to handle packet on %s", namespace)

        async def pinger() -> None:
            while not ws.closed:
                await asyncio.sleep(PING_INTERVAL)
                sent_at = loop.time()
                await send("2")
                await asyncio.sleep(PING_TIMEOUT)
                if last_pong < sent_at:
                    await ws.close()
                    return

        await send("0" + json.dumps({
            "sid": secrets.token_urlsafe(15),
            "upgrades": [],
            "pingInterval": int(PING_INTERVAL * 1000),
            "pingTimeout": int(PING_TIMEOUT * 1000),
            "maxPayload": 1_000_000,
        }))
        ping_task = asyncio.create_task(pinger())
        try:
            async for msg in ws:
                if msg.type != WSMsgType.TEXT:
                    continue
                kind, body = msg.data[:1], msg.data[1:]
                if kind == "3":
                    last_pong = loop.time()
                elif kind == "2":
                    await send("3" + body)
                elif kind == "1":
                    break
                elif kind == "4":
                    try:
                        packet_type, namespace, data, ack_id = decode_packet(body)
                    except ValueError as exc:
                        logger.warning("Dropping malformed packet: %s", exc)
                        continue
                    packet = (packet_type, data, ack_id)
                    if packet_type == CONNECT:
                        if namespace in self.namespaces:
                            connected.add(namespace)
                        await respond(namespace, packet)
                    elif packet_type == DISCONNECT:
                        connected.discard(namespace)
                    elif namespace in connected:
                        task = asyncio.create_task(respond(namespace, packet))
                        tasks.add(task)
                        task.add_done_callback(tasks.discard)
        finally:
            ping_task.cancel()
            for task in list(tasks):
                task.cancel()
            await ws.close()
        return ws


async def _alive(request: web.Request) -> web.Response:
    return web.Response(text="alive")


def create_app(handlers=None) -> web.Application:
    """Build the web application with the health route and Socket.IO endpoint."""
    server = SocketIOServer(handlers, NAMESPACES)
    app = web.Application()
    app.router.add_get("/", _alive)
    app.router.add_get("/socket.io/", server.websocket_handler)
    app.router.add_get("/socket.io", server.websocket_handler)
    return app


def main(argv=None) -> int:
    """Check arduino-cli, then serve until interrupted."""
    parser = argparse.ArgumentParser(prog="arduino-cloud-compiler")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=3000)
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)
    if not health_check():
        logger.info("arduino-cli test failed")
        return 1
    logger.info("arduino-cli initialized successfully")
    logger.info("Starting server")
    web.run_app(create_app(), host=args.host, port=args.port, print=None)
    return 0