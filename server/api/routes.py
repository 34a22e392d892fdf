# server/api/routes.py
"""API routes for the bloom server."""

from typing import Optional

from fastapi import APIRouter, Body, HTTPException, Query

from config.settings import DEFAULT_BRUSH_SIZE, get_engine_config
from models.errors import BloomError
from models.views import render_point_to_dict
from services.engine_handle import EngineHandle
from services.websocket_service import WebSocketService


class BloomAPI:
    """API routes for engine endpoints."""

    def __init__(self, engine: EngineHandle, websocket_service: WebSocketService):
        self.engine = engine
        self.websocket_service = websocket_service
        self.router = APIRouter()
        self._setup_routes()

    def _setup_routes(self):
        """Set up all API routes."""

        @self.router.get("/")
        async def root():
            """Root endpoint."""
            return {"message": "Digital Bloom Server Running"}

        @self.router.get("/api/bloom/config")
        async def get_config():
            """Get palette, capacities and per-mode spawn defaults."""
            return get_engine_config(self.engine.profile)

        @self.router.get("/api/bloom/state")
        async def get_state():
            """Get every live particle, vine and lightning bolt."""
            return self.engine.simulation.snapshot()

        @self.router.get("/api/bloom/particles")
        async def get_render_points(capacity: Optional[int] = Query(None, ge=0)):
            """Get the flat point buffer, truncated to capacity."""
            points = self.engine.get_render_points(capacity)
            return {
                "written": len(points),
                "points": [render_point_to_dict(p) for p in points],
            }

        @self.router.get("/api/bloom/stats")
        async def get_stats():
            """Get entity counts."""
            return {
                **self.engine.simulation.get_stats(),
                "connectedClients": len(self.websocket_service.connected_clients),
                "frame": self.websocket_service.frame,
            }

        @self.router.post("/api/bloom/spawn")
        async def spawn(data: dict = Body(...)):
            """Spawn entities for one visual mode."""
            try:
                mode = self.engine.spawn(
                    data["mode"],
                    float(data["x"]),
                    float(data["y"]),
                    int(data.get("count", 1)),
                    float(data.get("size", DEFAULT_BRUSH_SIZE)),
                )
            except KeyError as e:
                raise HTTPException(status_code=400, detail=f"Missing field: {e.args[0]}")
            except (BloomError, TypeError, ValueError) as e:
                raise HTTPException(status_code=400, detail=str(e))
            return {"spawned": mode.label, **self.engine.simulation.get_stats()}

        @self.router.post("/api/bloom/tick")
        async def tick(data: dict = Body(default={})):
            """Advance the engine by one or more frames."""
            try:
                width = float(data.get("width", self.websocket_service.width))
                height = float(data.get("height", self.websocket_service.height))
                frames = int(data.get("frames", 1))
            except (TypeError, ValueError) as e:
                raise HTTPException(status_code=400, detail=str(e))
            if frames < 1:
                raise HTTPException(status_code=400, detail="frames must be positive")
            for _ in range(frames):
                self.engine.tick(width, height)
            return self.engine.simulation.get_stats()

        @self.router.post("/api/bloom/clear")
        async def clear():
            """Remove every entity."""
            self.engine.clear()
            return self.engine.simulation.get_stats()
