# server/config/settings.py
"""Engine configuration constants and settings."""

import os

# Palette settings
PALETTE = (
    "#ff69b4",
    "#00ffff",
    "#7fff00",
    "#ff00ff",
    "#ff8c00",
    "#adff2f",
    "#d8bfd8",
)
LIGHTNING_COLORS = ("#ffffff", "#00ffff")
FALLBACK_RGB = (255, 255, 255)

# Capacity settings
MAX_PARTICLES = 500
MAX_LIGHTNINGS = 20

# Vine settings
VINE_MAX_LENGTH = 200.0
VINE_MIN_LENGTH = 50.0
VINE_MIN_SPEED = 0.5
VINE_SPEED_RANGE = 2.0
VINE_TURN_RANGE = 0.12

# Particle physics
FRICTION = 0.99
GRAVITY = 0.3
BOUNCE_RESTITUTION = 0.7
VIEWPORT_MARGIN = 50.0
DEFAULT_DECAY = 0.005
VORTEX_DECAY = 0.003
CONSTELLATION_DECAY = 0.002
VORTEX_ANGULAR_SPEED = 0.08
VORTEX_INWARD_SPEED = 0.5
VORTEX_MIN_RADIUS = 40.0
VORTEX_RADIUS_RANGE = 80.0
VORTEX_ANGLE_JITTER = 0.5
VORTEX_TANGENT_SPEED = 2.0

# Lightning settings
LIGHTNING_SEGMENTS = 16
LIGHTNING_JITTER = 30.0
LIGHTNING_MIN_BRANCHES = 2
LIGHTNING_BRANCH_CHOICES = 3
LIGHTNING_BRANCH_REACH = 0.7
LIGHTNING_MIN_BRANCH_POINTS = 5
LIGHTNING_BRANCH_POINT_CHOICES = 5
LIGHTNING_BRANCH_STEP = 8.0
LIGHTNING_BRANCH_JITTER = 15.0
LIGHTNING_DECAY = 0.02
LIGHTNING_SPREAD = 300.0

# Host settings
DEFAULT_CANVAS_WIDTH = 400.0
DEFAULT_CANVAS_HEIGHT = 400.0
DEFAULT_BRUSH_SIZE = 4.0
MIN_BRUSH_SIZE = 1.0
MAX_BRUSH_SIZE = 10.0
DEFAULT_SPAWN_COUNTS = {
    "vine": 1,
    "gravity": 5,
    "bounce": 3,
    "burst": 12,
    "lightning": 1,
    "constellation": 5,
    "vortex": 8,
}
VINES_PER_STROKE = 2
ZEN_SPAWN_CHANCE = 0.015
FRAME_RATE = 60  # frames per second for the tick loop

# Host profiles: the watch engine never faded vines nor capped lightning
HOST_PROFILES = {
    "web": {
        "vine_fade": True,
        "max_lightnings": MAX_LIGHTNINGS,
        "fixed_canvas": None,
    },
    "watch": {
        "vine_fade": False,
        "max_lightnings": None,
        "fixed_canvas": (DEFAULT_CANVAS_WIDTH, DEFAULT_CANVAS_HEIGHT),
    },
}

# Server settings
PROFILE = os.environ.get("BLOOM_PROFILE", "web")
SEED = os.environ.get("BLOOM_SEED")
LOG_LEVEL = os.environ.get("BLOOM_LOG_LEVEL", "INFO")
HOST = os.environ.get("BLOOM_HOST", "0.0.0.0")
PORT = int(os.environ.get("BLOOM_PORT", "8000"))


def get_engine_config(profile: str = PROFILE):
    """Get the client-facing engine configuration as a dictionary."""
    options = HOST_PROFILES[profile]
    return {
        "profile": profile,
        "palette": list(PALETTE),
        "lightningColors": list(LIGHTNING_COLORS),
        "maxParticles": MAX_PARTICLES,
        "maxLightnings": options["max_lightnings"],
        "vineFade": options["vine_fade"],
        "vineMaxLength": VINE_MAX_LENGTH,
        "vineMinLength": VINE_MIN_LENGTH,
        "brushSize": DEFAULT_BRUSH_SIZE,
        "brushRange": [MIN_BRUSH_SIZE, MAX_BRUSH_SIZE],
        "spawnCounts": dict(DEFAULT_SPAWN_COUNTS),
        "frameRate": FRAME_RATE,
        "zenSpawnChance": ZEN_SPAWN_CHANCE,
    }
