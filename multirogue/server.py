"""The web server: static assets plus a websocket route for players."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Iterable, Optional, Set, Union
from urllib.parse import urlsplit

from aiohttp import WSMsgType, web

from multirogue.creature import Rogue
from multirogue.dungeon import Dungeon
from multirogue.event import Event, MoveData

logger = logging.getLogger(__name__)

EVENT_BUFFER_SIZE = 256
"""How many outbound events a client may have queued before it is dropped."""
IDLE_TIMEOUT = 120.0
"""Seconds an idle keep-alive connection is held open."""
DEFAULT_PORT = 8080

_CLOSED = object()


class Client:
    """A middleman between a websocket connection and the hub."""

    def __init__(self, rogue: Rogue, hub: "Hub", ws) -> None:
        self.rogue = rogue
        self.hub = hub
        self.ws = ws
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False

    def _offer(self, event: Event) -> bool:
        """Queue an event unless the buffer is full or the client is closed."""
        if self._closed or self._queue.qsize() >= EVENT_BUFFER_SIZE:
            return False
        self._queue.put_nowait(event)
        return True

    def _push(self, event: Event) -> None:
        """Queue an event meant for this client alone."""
        if not self._closed:
            self._queue.put_nowait(event)

    def _close(self) -> None:
        """Stop accepting events; the writer finishes what is queued."""
        if not self._closed:
            self._closed = True
            self._queue.put_nowait(_CLOSED)

    async def read_pump(self) -> None:
        """Pass incoming events from the connection to the hub until it closes."""
        try:
            async for msg in self.ws:
                if msg.type == WSMsgType.ERROR:
                    logger.error("%s", self.ws.exception())
                    break
                if msg.type not in (WSMsgType.TEXT, WSMsgType.BINARY):
                    break
                try:
                    event = Event.from_dict(json.loads(msg.data))
                except ValueError as exc:
                    logger.error("%s", exc)
                    break
                if event.name == "move":
                    self.hub.move(self, event)
                else:
                    logger.error("unknown event %s", event.name)
        finally:
            self.hub.unregister(self)
            await self.ws.close()

    async def write_pump(self) -> None:
        """Send queued events to the connection, batching what has piled up."""
        try:
            while True:
                first = await self._queue.get()
                if first is _CLOSED:
                    return
                batch = [first]
                finished = False
                while not self._queue.empty():
                    item = self._queue.get_nowait()
                    if item is _CLOSED:
                        finished = True
                        break
                    batch.append(item)
                try:
                    await self.ws.send_json([event.to_dict() for event in batch])
                except (ConnectionError, RuntimeError):
                    return
                if finished:
                    return
        finally:
            await self.ws.close()


class Hub:
    """Keeps the set of active clients and applies their actions to the dungeon."""

    def __init__(self, dungeon: Optional[Dungeon] = None) -> None:
        self.dungeon = dungeon if dungeon is not None else Dungeon()
        self.clients: Set[Client] = set()

    def register(self, client: Client) -> None:
        """Add a client and place its rogue in the dungeon."""
        logger.info("Registering new client %s...", client.rogue.name)
        self.clients.add(client)
        send, broadcast = self.dungeon.add(client.rogue)
        self._handle_events(client, send, broadcast)

    def unregister(self, client: Client) -> None:
        """Drop a client and take its rogue out of the dungeon."""
        logger.info("Unregistering client %s...", client.rogue.name)
        if client in self.clients:
            self.clients.discard(client)
            client._close()
        send, broadcast = self.dungeon.remove(client.rogue)
        self._handle_events(client, send, broadcast)

    def move(self, client: Client, event: Event) -> None:
        """Apply a "move" event fired by a client."""
        try:
            data = MoveData.from_json(event.data)
        except ValueError as exc:
            logger.error("%s", exc)
            return
        send, broadcast = self.dungeon.move(client.rogue, data)
        self._handle_events(client, send, broadcast)

    def broadcast(self, event: Event) -> None:
        """Send an event to every client on the level it concerns.

        A client whose buffer is full is dropped.
        """
        for client in list(self.clients):
            if event.level is not None and client.rogue.pos.level != event.level:
                continue
            if not client._offer(event):
                client._close()
                self.clients.discard(client)

    def _handle_events(
        self, client: Client, send: Iterable[Event], broadcast: Iterable[Event]
    ) -> None:
        for event in send:
            client._push(event)
        for event in broadcast:
            self.broadcast(event)


class Server:
    """A multiplayer Rogue server."""

    def __init__(
        self, port: int = DEFAULT_PORT, static_dir: Union[str, Path] = "./public"
    ) -> None:
        self.port = port
        self.address = f":{port}"
        self.static_dir = Path(static_dir)
        self.hub = Hub()

    def make_app(self) -> web.Application:
        """Build the web application with the websocket and static routes."""
        app = web.Application()
        app.router.add_get("/ws", self._handle_connection)
        app.router.add_get("/{path:.*}", self._serve_static)
        return app

    async def start(self) -> None:
        """Listen for requests until cancelled. Raises OSError if binding fails."""
        runner = web.AppRunner(self.make_app(), keepalive_timeout=IDLE_TIMEOUT)
        await runner.setup()
        try:
            site = web.TCPSite(runner, port=self.port)
            logger.info("Starting server on %s...", self.address)
            await site.start()
            await asyncio.Event().wait()
        finally:
            await runner.cleanup()

    async def _serve_static(self, request: web.Request) -> web.StreamResponse:
        root = self.static_dir.resolve()
        try:
            target = (root / request.match_info.get("path", "")).resolve()
        except (OSError, ValueError):
            raise web.HTTPNotFound()
        if target != root and root not in target.parents:
            raise web.HTTPNotFound()
        if target.is_dir():
            target = target / "index.html"
        if not target.is_file():
            raise web.HTTPNotFound()
        return web.FileResponse(target)

    @staticmethod
    def _origin_allowed(request: web.Request) -> bool:
        origin = request.headers.get("Origin")
        if origin is None:
            return True
        return urlsplit(origin).netloc.lower() == (request.host or "").lower()

    async def _handle_connection(self, request: web.Request) -> web.StreamResponse:
        if not self._origin_allowed(request):
            logger.error("websocket: request origin not allowed")
            return web.Response(status=403, text="Forbidden")
        ws = web.WebSocketResponse()
        if not ws.can_prepare(request).ok:
            logger.error("websocket: not a websocket handshake")
            return web.Response(status=400, text="Bad Request")
        await ws.prepare(request)

        client = Client(Rogue(request.query.get("name", "")), self.hub, ws)
        self.hub.register(client)

        writer = asyncio.ensure_future(client.write_pump())
        try:
            await client.read_pump()
        finally:
            await writer
        return ws