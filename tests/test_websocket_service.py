import asyncio
import json

import pytest
from fastapi import WebSocketDisconnect

from models.entities import SpawnMode
from services.engine_handle import EngineHandle
from services.simulation_service import Simulation
from services.websocket_service import WebSocketService


def make_service(rng):
    return WebSocketService(EngineHandle(Simulation(rng=rng), "web"))


def test_step_ticks_and_builds_frame(fixed_random):
    service = make_service(fixed_random([0.5]))
    service.engine.spawn("gravity", 100, 100, 3, 4)
    message = service.step()
    assert message["type"] == "frame"
    assert message["frame"] == 1
    assert len(message["particles"]) == 3
    assert message["particles"][0]["life"] == pytest.approx(0.995)


def test_zen_autoplay_draws_in_current_mode(fixed_random):
    service = make_service(fixed_random([0.0]))
    service.zen_mode = True
    service.current_mode = SpawnMode.BURST
    assert service.autoplay()
    assert service.engine.particle_count() == 12


def test_zen_autoplay_mostly_idles(fixed_random):
    service = make_service(fixed_random([0.5]))
    assert not service.autoplay()
    assert service.engine.particle_count() == 0


def test_continuous_vine_stroke_plants_two(fixed_random):
    service = make_service(fixed_random([0.3]))
    service.draw(100, 100, continuous=True)
    assert service.engine.vine_count() == 2
    service.draw(100, 100, mode="bounce", continuous=True)
    assert service.engine.particle_count() == 3


class FakeSocket:
    """Scripted client: replays incoming frames, records what it was sent."""

    client = ("test", 0)

    def __init__(self, incoming):
        self.incoming = list(incoming)
        self.sent = []
        self.close_code = None

    async def accept(self):
        pass

    async def send_json(self, data):
        self.sent.append(data)

    async def receive_text(self):
        if not self.incoming:
            raise WebSocketDisconnect(code=1000)
        item = self.incoming.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    async def close(self, code=1000):
        self.close_code = code


def run_session(service, incoming):
    websocket = FakeSocket(incoming)
    asyncio.run(service.handle_connection(websocket))
    return websocket


@pytest.mark.parametrize("bad_frame", ["[1, 2]", "not json", "42", '"clear"'])
def test_malformed_frames_get_error_reply_and_session_continues(fixed_random, bad_frame):
    service = make_service(fixed_random([0.5]))
    websocket = run_session(service, [bad_frame, json.dumps({"type": "clear"})])
    assert [m["type"] for m in websocket.sent] == ["init", "error", "ack"]
    assert websocket.close_code is None
    assert websocket not in service.connected_clients


def test_unexpected_failure_closes_socket(fixed_random):
    service = make_service(fixed_random([0.5]))
    websocket = run_session(service, [RuntimeError("transport broke")])
    assert [m["type"] for m in websocket.sent] == ["init"]
    assert websocket.close_code == 1011
    assert websocket not in service.connected_clients


@pytest.mark.parametrize("size, expected", [(0.0, 1.0), (-3.0, 1.0), (6.5, 6.5), (float("inf"), 10.0)])
def test_brush_size_is_clamped(fixed_random, size, expected):
    service = make_service(fixed_random([0.5]))
    assert service.set_brush(size) == expected
    assert service.brush_size == expected


def test_set_brush_message_rejects_nan(fixed_random):
    service = make_service(fixed_random([0.5]))
    websocket = run_session(
        service,
        [json.dumps({"type": "set_brush", "size": "nan"}), json.dumps({"type": "set_brush", "size": 25})],
    )
    assert [m["type"] for m in websocket.sent] == ["init", "error", "ack"]
    assert service.brush_size == 10.0
