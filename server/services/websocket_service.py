# server/services/websocket_service.py
"""WebSocket connection management, frame loop and message handling."""

import asyncio
import json
import logging
import math
from typing import Optional, Set

from fastapi import WebSocket, WebSocketDisconnect

from config.settings import *
from models.entities import SpawnMode
from models.errors import BloomError
from utils.helpers import clamp
from utils.random_source import uniform
from .engine_handle import EngineHandle

logger = logging.getLogger(__name__)


class WebSocketService:
    """Streams engine frames to canvas clients and routes their input."""

    def __init__(self, engine: EngineHandle):
        self.engine = engine
        self.connected_clients: Set[WebSocket] = set()
        self.width = DEFAULT_CANVAS_WIDTH
        self.height = DEFAULT_CANVAS_HEIGHT
        self.current_mode = SpawnMode.VINE
        self.brush_size = DEFAULT_BRUSH_SIZE
        self.zen_mode = False
        self.frame = 0
        self._update_task: Optional[asyncio.Task] = None

    def start_background_tasks(self):
        """Start the frame loop."""
        if not self._update_task:
            self._update_task = asyncio.create_task(self._frame_loop())

    async def stop_background_tasks(self):
        if self._update_task:
            self._update_task.cancel()
            try:
                await self._update_task
            except asyncio.CancelledError:
                pass
            self._update_task = None

    async def _frame_loop(self):
        """Background task ticking the engine once per frame."""
        while True:
            await asyncio.sleep(1 / FRAME_RATE)
            message = self.step()
            if self.connected_clients:
                await self._broadcast_message(message)

    def step(self) -> dict:
        """Run one frame: zen autoplay, tick, then build the frame message."""
        if self.zen_mode:
            self.autoplay()
        self.engine.tick(self.width, self.height)
        self.frame += 1
        return {"type": "frame", "frame": self.frame, **self.engine.simulation.snapshot()}

    def autoplay(self) -> bool:
        """Occasionally draw at a random spot, as an idle canvas does."""
        rng = self.engine.simulation.rng
        if rng.random() >= ZEN_SPAWN_CHANCE:
            return False
        self.draw(uniform(rng, 0.0, self.width), uniform(rng, 0.0, self.height))
        return True

    def draw(
        self,
        x: float,
        y: float,
        mode=None,
        size: Optional[float] = None,
        count: Optional[int] = None,
        continuous: bool = False,
    ) -> SpawnMode:
        """Spawn the way a pointer stroke does, with per-mode default counts."""
        mode = SpawnMode.parse(mode) if mode is not None else self.current_mode
        if size is None:
            size = self.brush_size
        if count is None:
            count = DEFAULT_SPAWN_COUNTS[mode.label]

        strokes = VINES_PER_STROKE if continuous and mode is SpawnMode.VINE else 1
        for _ in range(strokes):
            self.engine.spawn(mode, x, y, count, size)
        return mode

    async def handle_connection(self, websocket: WebSocket):
        """Handle a new WebSocket connection."""
        await websocket.accept()
        logger.info("WebSocket connection accepted for %s", websocket.client)

        self.connected_clients.add(websocket)

        try:
            await self._send_initial_state(websocket)
            await self._handle_client_messages(websocket)
        except WebSocketDisconnect:
            self._handle_disconnect(websocket)
        except Exception:
            logger.exception("WebSocket error for %s", websocket.client)
            self._handle_disconnect(websocket)
            await self._close(websocket)

    async def _send_initial_state(self, websocket: WebSocket):
        """Send config and current state to a newly connected client."""
        initial_data = {
            "type": "init",
            "config": get_engine_config(self.engine.profile),
            "mode": self.current_mode.label,
            "zen": self.zen_mode,
            "canvas": {"width": self.width, "height": self.height},
            **self.engine.simulation.snapshot(),
        }
        await websocket.send_json(initial_data)

    async def _handle_client_messages(self, websocket: WebSocket):
        """Handle incoming messages from a client."""
        while True:
            text = await websocket.receive_text()
            try:
                data = json.loads(text)
                if not isinstance(data, dict):
                    raise TypeError("Messages must be JSON objects")
                await self._process_message(websocket, data)
            except (BloomError, KeyError, TypeError, ValueError) as e:
                await websocket.send_json({"type": "error", "message": str(e)})

    async def _process_message(self, websocket: WebSocket, data: dict):
        """Process a single message from a client."""
        message_type = data.get("type")

        if message_type == "draw":
            self._handle_draw(data)
        elif message_type == "spawn":
            self._handle_spawn(data)
        elif message_type == "set_mode":
            self.current_mode = SpawnMode.parse(data["mode"])
        elif message_type == "set_brush":
            self.set_brush(float(data["size"]))
        elif message_type == "set_zen":
            self.zen_mode = bool(data["enabled"])
        elif message_type == "resize":
            self._handle_resize(data)
        elif message_type == "clear":
            self.engine.clear()
        else:
            raise ValueError(f"Unknown message type: {message_type!r}")

        await websocket.send_json({"type": "ack", "for": message_type})

    def _handle_draw(self, data: dict):
        count = data.get("count")
        size = data.get("size")
        self.draw(
            float(data["x"]),
            float(data["y"]),
            mode=data.get("mode"),
            size=float(size) if size is not None else None,
            count=int(count) if count is not None else None,
            continuous=bool(data.get("continuous", False)),
        )

    def _handle_spawn(self, data: dict):
        self.engine.spawn(
            data["mode"],
            float(data["x"]),
            float(data["y"]),
            int(data.get("count", 1)),
            float(data.get("size", self.brush_size)),
        )

    def _handle_resize(self, data: dict):
        width = float(data["width"])
        height = float(data["height"])
        if width <= 0 or height <= 0:
            raise ValueError("canvas dimensions must be positive")
        self.width, self.height = width, height

    def set_brush(self, size: float) -> float:
        """Set the stroke size, kept within the brush range."""
        if math.isnan(size):
            raise ValueError("brush size must be a number")
        self.brush_size = clamp(size, MIN_BRUSH_SIZE, MAX_BRUSH_SIZE)
        return self.brush_size

    async def _close(self, websocket: WebSocket):
        try:
            await websocket.close(code=1011)
        except RuntimeError:
            # Already closed by the peer or the server
            logger.debug("Socket for %s was already closed", websocket.client)

    def _handle_disconnect(self, websocket: WebSocket):
        """Handle client disconnection."""
        logger.info("Client %s disconnected", websocket.client)
        self.connected_clients.discard(websocket)

    async def _broadcast_message(self, message: dict):
        """Broadcast a message to all connected clients."""
        disconnected = set()

        for client in list(self.connected_clients):
            try:
                await client.send_json(message)
            except Exception:
                disconnected.add(client)

        self.connected_clients -= disconnected
