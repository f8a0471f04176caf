"""
Configuration constants.

Centralizes all magic numbers and configuration values used throughout the codebase.
Organized by functional area for easy maintenance. Per-biome tuning (hub counts,
radii, noise amplitudes) lives in `mapwright.environment.biomes`, not here.
"""

import logging
import sys

# =============================================================================
# GENERAL
# =============================================================================

# Biome used when callers don't name one
DEFAULT_BIOME = "volcano"

# Test environment detection
IS_TEST_ENVIRONMENT = "pytest" in sys.modules

# Log level used by the command-line tool (the library never configures handlers)
LOG_LEVEL = logging.INFO

# Run the flood-fill reachability check after every generation and raise
# DisconnectedMapError on failure. When disabled, failures are logged instead.
VALIDATE_CONNECTIVITY = __debug__ or IS_TEST_ENVIRONMENT

# =============================================================================
# GRID
# =============================================================================

# Carvers never touch cells this close to the map edge
DEFAULT_EDGE_MARGIN = 2

# Bounding-box slack around ellipses before the distance test
BLOB_BBOX_MARGIN = 3

# =============================================================================
# PATH CARVING
# =============================================================================

PATH_STEP = 1.5  # Cursor advance per iteration, in tiles
PATH_ARRIVAL_DISTANCE = 3.0  # Stop seeking once this close to the target
PATH_ITERATION_FACTOR = 8  # Safety cap: factor * manhattan / step iterations

# Meander: perpendicular offset = sin(|cursor| * frequency) * windiness * scale
WIND_FREQUENCY = 0.1
WIND_SCALE = 1.0
PATH_JITTER = 0.2  # Per-axis random jitter added to the direction

# =============================================================================
# HUB PLACEMENT
# =============================================================================

HUB_ATTEMPT_FACTOR = 3  # Placement attempts per requested hub
ROOM_OVERLAP_MARGIN = 4  # Expansion applied before room overlap tests

# Disk around each hub centre that hazard and water features never write
HUB_PROTECT_RADIUS = 2

# =============================================================================
# SMOOTHING
# =============================================================================

SMOOTH_BIRTH_LIMIT = 6  # Blocked cell opens with at least this many open neighbors
SMOOTH_DEATH_LIMIT = 2  # Open cell closes with at most this many open neighbors

# =============================================================================
# CONNECTIVITY REPAIR
# =============================================================================

REPAIR_ENABLED = True
REPAIR_MIN_REGION_SIZE = 20  # Smaller hubless pockets are filled instead of joined
REPAIR_BLOCKED_COST = 4  # A* cost of tunnelling through blocked terrain
REPAIR_HAZARD_COST = 40  # A* cost of bridging a hazard cell
REPAIR_PASSAGE_RADIUS = 1  # Widening applied around a repair route

# =============================================================================
# PLACEMENT
# =============================================================================

# Maximum ring radius for the player start fallback search
PLAYER_START_SEARCH_RADIUS = 60
