from __future__ import annotations

"""Game configuration constants for Orbit Run."""

# Game configuration
WINDOW_WIDTH = 1280
WINDOW_HEIGHT = 720
FPS = 60
MAX_FRAME_DT = 0.1  # s, upper bound on a single simulation step

# Orbit
ORBIT_RADIUS_FACTOR = 0.35  # fraction of min(viewport width, height)
PLAYER_RADIUS = 12
PLAYER_BASE_SPEED = 2.5  # rad/s
PLAYER_SPEED_STEP = 0.1  # rad/s added per chaos level
TRAIL_LIFETIME = 0.2  # s
TRAIL_MAX_POINTS = 30

# Obstacles
OBSTACLE_SPAWN_DISTANCE_FACTOR = 0.8  # fraction of max(viewport width, height)
OBSTACLE_SPEED_BASE = 100.0  # px/s towards the center
OBSTACLE_SPEED_JITTER = 50.0
OBSTACLE_MIN_RADIUS = 15.0
OBSTACLE_RADIUS_JITTER = 10.0
CONSUMED_DISTANCE = 30.0  # px from center, swallowed by the planet

# Spawn policy
SPAWN_INTERVAL = 0.8  # s at chaos level 0
SPAWN_CHANCE = 0.9
SPAWN_JITTER = 0.1  # s, symmetric
CHAOS_PERIOD = 10.0  # s of play per chaos level
CHAOS_SPAWN_SCALE = 0.5
DIFFICULTY_STEP = 0.2
DOUBLE_SPAWN_MIN_CHAOS = 2  # double spawns start above this level
DOUBLE_SPAWN_CHANCE = 0.3
DOUBLE_SPAWN_DELAY = 0.2  # s

# Scoring
SCORE_RATE = 10.0  # points per second
REVEAL_THRESHOLD = 500.0

# Special item (the egg)
SPECIAL_DISTANCE_FACTOR = 0.5  # fraction of max(viewport width, height)
SPECIAL_SPEED = 150.0
SPECIAL_RADIUS = 25.0
SPECIAL_HIT_RADIUS = 100.0  # hitbox slightly larger than the resting egg
SPECIAL_REST_SIZE = (70, 90)  # half-axes of the resting egg

# Effects
MAX_PARTICLES = 100
MAX_SHARDS = 60
GAME_OVER_BURST = 100
REVEAL_PARTICLE_BURST = 150
REVEAL_SHARD_BURST = 30
SHAKE_DURATION = 0.5
SHAKE_MAGNITUDE = 9
FLASH_DURATION = 0.5
REVEAL_OVERLAY_DELAY = 3.0
REVEAL_INVERT_DELAY = 0.5
REVEAL_INVERT_DURATION = 1.5

# Background
STAR_COUNT = 150
STAR_CULL_ALPHA = 0.15

# Central body
ASSET_DIR = "assets"
PLANET_IMAGE = "saturn.png"
PLANET_WIDTH = 180
PLANET_FALLBACK_RADIUS = 45

# Audio
SAMPLE_RATE = 22050
SFX_VOLUME = 0.35
MUSIC_VOLUME = 0.25

# Palette (neon on deep space)
COL_BG = (5, 5, 16)
COL_ORBIT_GUIDE = (18, 18, 30)
PLAYER_COLOR = (0, 255, 255)
PLAYER_HULL = (17, 17, 17)
FLAME_OUTER = (255, 0, 85)
FLAME_INNER = (255, 204, 0)
OBSTACLE_COLORS = [
    (57, 255, 20),
    (188, 19, 254),
    (0, 255, 255),
]
EGG_SHELL = (255, 251, 230)
EGG_MARK = (255, 0, 85)
HINT_COLOR = (0, 255, 255)
PLANET_FALLBACK = (214, 198, 139)
PLANET_FALLBACK_RIM = (166, 144, 80)
PLANET_GLOW = (0, 255, 255)
BURST_RED = (255, 0, 0)
BURST_WHITE = (255, 255, 255)
FLASH_RED = (255, 0, 0)
FLASH_WHITE = (255, 255, 255)
TEXT_COLOR = (230, 230, 230)
TEXT_DIM = (180, 180, 190)
TEXT_ALERT = (255, 0, 85)
