# server/main.py
"""Digital Bloom server: FastAPI app streaming the simulation to canvases."""

import logging

from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware

from api.routes import BloomAPI
from config.settings import HOST, LOG_LEVEL, PORT, PROFILE, SEED
from services.engine_handle import EngineHandle
from services.websocket_service import WebSocketService
from utils.random_source import make_random

logger = logging.getLogger(__name__)


def create_app(profile: str = PROFILE, seed=SEED) -> FastAPI:
    """Wire one engine, its WebSocket service and the REST routes."""
    app = FastAPI(title="Digital Bloom")

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production, specify your client URL
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    engine = EngineHandle.create(profile, rng=make_random(seed))
    websocket_service = WebSocketService(engine)
    app.state.engine = engine
    app.state.websocket_service = websocket_service

    app.include_router(BloomAPI(engine, websocket_service).router)

    @app.on_event("startup")
    async def startup_event():
        """Start the frame loop."""
        websocket_service.start_background_tasks()

    @app.on_event("shutdown")
    async def shutdown_event():
        await websocket_service.stop_background_tasks()
        engine.destroy()

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        await websocket_service.handle_connection(websocket)

    return app


logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=HOST, port=PORT)
