"""Animation and tuning constants.

Keeps every numeric knob of the particle engine in one place so the
physics code reads as formulas rather than magic numbers. Units are
logical pixels and milliseconds; "per tick" values are applied once per
frame regardless of elapsed time.
"""

# Seasons
SEASONS = ("spring", "summer", "monsoon", "autumn", "winter", "prewinter")
DEFAULT_SEASON = "prewinter"
SEASON_LABELS = {
    "spring": "Spring",
    "summer": "Summer",
    "monsoon": "Monsoon",
    "autumn": "Autumn",
    "winter": "Winter",
    "prewinter": "Pre-Winter",
}
SEASON_BACKGROUNDS = {
    "spring": (58, 34, 52),
    "summer": (64, 44, 20),
    "monsoon": (18, 30, 44),
    "autumn": (52, 28, 14),
    "winter": (14, 22, 38),
    "prewinter": (30, 36, 44),
}

# Pool sizing
POOL_CAPACITY = {
    "spring": 110,
    "summer": 100,
    "monsoon": 140,
    "autumn": 120,
    "winter": 90,
    "prewinter": 90,
}
DEFAULT_POOL_CAPACITY = 90

# Frame timing
MAX_FRAME_DT_MS = 40.0  # cap on elapsed time per tick (tab stalls, breakpoints)
REFERENCE_FRAME_MS = 16.0  # dt / this scales integration and gravity

# Damping is per tick and NOT scaled by dt; integration is. Tune here.
VELOCITY_DAMPING_X = 0.995
VELOCITY_DAMPING_Y = 0.997

# Pointer interaction
POINTER_INFLUENCE_RADIUS = 180.0
POINTER_PUSH_X = 0.04
POINTER_PUSH_Y = 0.02
POINTER_VELOCITY_COUPLING = 0.002

# Spawn / recycle bounds
SPAWN_OVERSCAN = 60.0  # initial y range extends this far above and below
RECYCLE_MARGIN_BOTTOM = 80.0
RECYCLE_MARGIN_TOP = 140.0
RECYCLE_MARGIN_SIDE = 140.0
RESPAWN_Y_MIN = -50.0
RESPAWN_Y_MAX = -10.0
REFLOW_Y_MARGIN = 50.0

# Season forces
SPRING_SWAY = 0.01
SPRING_PULL = 0.006
SPRING_SPIN_RATE = 0.01
SUMMER_SWAY = 0.02
SUMMER_PULL = 0.002
MONSOON_SWAY = 0.06
MONSOON_PULL = 0.02
AUTUMN_SWAY = 0.035
AUTUMN_PULL = 0.008
AUTUMN_SPIN_RATE = 0.018
PREWINTER_MIST_DRIFT = 0.004  # per tick, not dt-scaled
PREWINTER_DEW_PULL = 0.004
WINTER_EMBER_LIFT = 0.006
WINTER_SNOW_PULL = 0.004
WINTER_SWAY = 0.006

# Ripples (rain impact rings)
RIPPLE_IMPACT_OFFSET = 2.0  # rain below height - this spawns a ripple
RIPPLE_SPAWN_OFFSET = 3.0  # ripple centre sits at height - this
RIPPLE_START_RADIUS = 2.0
RIPPLE_START_ALPHA = 0.35
RIPPLE_GROWTH = 0.9
RIPPLE_FADE = 0.015

# Summer lens flares
FLARE_COUNT_MIN = 2
FLARE_COUNT_MAX = 3
FLARE_RADIUS_MIN = 120.0
FLARE_RADIUS_MAX = 240.0
FLARE_SPEED_MIN = 0.0002
FLARE_SPEED_MAX = 0.0005
FLARE_HEIGHT_FRACTION = 0.6
FLARE_ORBIT_X = 120.0
FLARE_ORBIT_Y = 60.0

# Surface
RESIZE_DEBOUNCE_MS = 120

# Assets
LEAF_IMAGES = ("leaf1.png", "leaf2.png")

# Clock tick (square-wave click once per wall-clock second)
TICK_FREQUENCY_HZ = 850
TICK_DURATION_MS = 30
TICK_AMPLITUDE = 3000  # of 32767, signed 16-bit samples
TICK_VOLUME = 0.5

# Clock face
CLOCK_MARKERS = 60
CLOCK_HOUR_MARKER_EVERY = 5

__all__ = [name for name in globals().keys() if name.isupper()]
