"""Hyperparameters for this project, its simulations, and experiments.
"""

import math

# Container layout, in pixels. The physics world uses screen coordinates, so
# y grows downward and the exit chute sits above the top of the oval.
CANVAS_WIDTH = 520
CANVAS_HEIGHT = 500
WALL = 12
LEFT = WALL
RIGHT = CANVAS_WIDTH - WALL
TOP = WALL
BOTTOM = CANVAS_HEIGHT - WALL

# The oval container and how finely its boundary is approximated.
CX = CANVAS_WIDTH / 2
CY = CANVAS_HEIGHT / 2
RX = (CANVAS_WIDTH - WALL * 2) / 2
RY = (CANVAS_HEIGHT - WALL * 2) / 2
OVAL_SEGMENTS = 48
SEGMENT_OVERLAP = 4

# Exit chute, funnel and gap carved out of the oval for the chute.
CHUTE_PADDING = 14
CHUTE_HEIGHT = 60
FUNNEL_LENGTH = 80
FUNNEL_INSET = 8
FUNNEL_DROP = 20
FUNNEL_ANGLE = 0.45
GAP_DEPTH = 30
GAP_MARGIN = 10
SENSOR_HEIGHT = 8
SENSOR_INSET = 4
SENSOR_Y = -CHUTE_HEIGHT + 5

# Diagonal of the container's bounding box, the reference reach of a jet.
MAX_WIND_DIST = math.hypot(RIGHT - LEFT, BOTTOM - TOP)

# Ball layout before mixing starts.
MAX_COLUMNS = 7
ROW_GAP = 6
ROW_START = 0.4
JITTER_Y = 8
JITTER_X = 10

# Time. Parameters are tuned in milliseconds and per-step units, so the
# physics wrapper converts forces and spins to the engine's seconds.
DT = 1000 / 60
STEPS_PER_SECOND = 60
MS_PER_SECOND = 1000.0
FORCE_SCALE = MS_PER_SECOND ** 2
SELECTION_TIMEOUT = 15000

# Ball moment of inertia, as a multiple of a solid disk's.
INERTIA_SCALE = 4

# Where a recycled winner is dropped back into the mix.
RECYCLE_SPREAD = 80

# The two-phase parameter search.
PHASE1_CONFIGS = 100
PHASE1_RUNS = 40
PHASE2_TOP = 5
PHASE2_RUNS = 1000
MIN_SUCCESS_RATE = 0.5
TABLE_ROWS = 15
HISTOGRAM_WIDTH = 30
