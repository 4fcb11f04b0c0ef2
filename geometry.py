"""Static geometry of the machine: oval, funnel, chute, gate and sensor.

The oval is approximated by straight wall segments. Segments whose midpoint
falls in the gap under the chute are left out, which is what opens the exit
in an otherwise closed boundary. The gate plugs that gap during mixing, and
the sensor sits just past the top of the chute to detect the escaping ball.
"""

import math
from dataclasses import dataclass

import constants as c

WALL_LABEL = 'wall'
GATE_LABEL = 'gate'
SENSOR_LABEL = 'exit-sensor'


@dataclass(frozen=True)
class Segment:
    """A rectangular wall piece, centered on (x, y) and rotated by angle."""
    x: float
    y: float
    length: float
    thickness: float
    angle: float = 0.0


@dataclass
class Container:
    walls: list
    gate: object
    sensor: object
    num_segments: int

    @property
    def num_bodies(self):
        return len(self.walls) + 2


def chute_width(ball_radius):
    return ball_radius * 2 + c.CHUTE_PADDING


def chute_bounds(ball_radius):
    """Left and right x coordinates of the chute's inner edges."""
    half_width = chute_width(ball_radius) / 2
    return c.CX - half_width, c.CX + half_width


def in_chute_gap(x, y, ball_radius):
    left, right = chute_bounds(ball_radius)
    return (y < c.CY - c.RY + c.GAP_DEPTH
            and left - c.GAP_MARGIN < x < right + c.GAP_MARGIN)


def oval_segments(ball_radius):
    """Wall segments approximating the oval, minus those in the chute gap."""
    segments = []
    angle_step = 2 * math.pi / c.OVAL_SEGMENTS
    for i in range(c.OVAL_SEGMENTS):
        a1 = i * angle_step
        a2 = (i + 1) * angle_step
        x1 = c.CX + c.RX * math.cos(a1)
        y1 = c.CY + c.RY * math.sin(a1)
        x2 = c.CX + c.RX * math.cos(a2)
        y2 = c.CY + c.RY * math.sin(a2)
        mx = (x1 + x2) / 2
        my = (y1 + y2) / 2
        if in_chute_gap(mx, my, ball_radius):
            continue
        # Stretch each piece a little so neighbors overlap with no seams.
        length = math.hypot(x2 - x1, y2 - y1) + c.SEGMENT_OVERLAP
        angle = math.atan2(y2 - y1, x2 - x1)
        segments.append(Segment(mx, my, length, c.WALL, angle))
    return segments


def funnel_and_chute(ball_radius):
    left, right = chute_bounds(ball_radius)
    half_funnel = c.FUNNEL_LENGTH / 2
    chute_y = c.TOP - c.CHUTE_HEIGHT / 2
    return [
        # Funnel slopes guiding balls toward the opening.
        Segment(left - half_funnel + c.FUNNEL_INSET, c.TOP + c.FUNNEL_DROP,
                c.FUNNEL_LENGTH, c.WALL, -c.FUNNEL_ANGLE),
        Segment(right + half_funnel - c.FUNNEL_INSET, c.TOP + c.FUNNEL_DROP,
                c.FUNNEL_LENGTH, c.WALL, c.FUNNEL_ANGLE),
        # Chute side walls, standing upright above the gap.
        Segment(left - c.WALL / 2, chute_y, c.WALL, c.CHUTE_HEIGHT),
        Segment(right + c.WALL / 2, chute_y, c.WALL, c.CHUTE_HEIGHT),
    ]


def _add_segment(world, segment, params, label=WALL_LABEL):
    return world.add_box(
        (segment.x, segment.y), (segment.length, segment.thickness), label,
        angle=segment.angle, friction=params.wall_friction,
        restitution=params.wall_restitution)


def build_gate(world, params):
    """Add a gate across the chute gap, blocking the exit."""
    width = chute_width(params.ball_radius) + c.WALL
    gate = Segment(c.CX, c.TOP, width, c.WALL)
    return _add_segment(world, gate, params, label=GATE_LABEL)


def build_sensor(world, params):
    """Add the non-colliding exit detector just past the end of the chute."""
    return world.add_box(
        (c.CX, c.SENSOR_Y),
        (chute_width(params.ball_radius) - c.SENSOR_INSET, c.SENSOR_HEIGHT),
        SENSOR_LABEL, sensor=True)


def build_container(world, params):
    """Add all static geometry for one draw, with the gate closed."""
    segments = oval_segments(params.ball_radius)
    walls = [_add_segment(world, segment, params)
             for segment in segments + funnel_and_chute(params.ball_radius)]
    gate = build_gate(world, params)
    sensor = build_sensor(world, params)
    return Container(walls, gate, sensor, num_segments=len(segments))
