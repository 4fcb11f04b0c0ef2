"""Ball bodies, their labels, and where they start out in the oval.

Balls are named 'ball-<index>' so that a label alone is enough to tell which
participant a body belongs to. Placement is a deterministic grid that follows
the curve of the oval, with a small random jitter so balls never stack in
exactly the same way twice.
"""

import numpy as np

import constants as c

LABEL_PREFIX = 'ball-'


def ball_label(index):
    return f'{LABEL_PREFIX}{index}'


def is_ball(label):
    return label.startswith(LABEL_PREFIX)


def ball_index(label):
    """Recover a ball's index from its label, or -1 for no ball at all."""
    if label is None:
        return -1
    return int(label[len(LABEL_PREFIX):])


def ball_positions(num_balls, ball_radius, rng):
    """Starting positions for all balls, as a (num_balls, 2) array.

    Balls fill rows of up to c.MAX_COLUMNS, starting below the center of the
    oval and stacking upward. Each row spreads across the width of the oval
    at that height, so lower and wider rows spread further apart.
    """
    cols = min(num_balls, c.MAX_COLUMNS)
    index = np.arange(num_balls)
    col = index % cols
    row = index // cols

    y = (c.CY + c.RY * c.ROW_START - row * (ball_radius * 2 + c.ROW_GAP)
         + (rng.random(num_balls) - 0.5) * c.JITTER_Y)
    norm_y = (y - c.CY) / c.RY
    half_w = (c.RX * np.sqrt(np.maximum(0.0, 1 - norm_y ** 2))
              - ball_radius - c.WALL)
    half_w = np.maximum(half_w, ball_radius)
    spacing_x = half_w * 2 / (cols + 1)
    x = (c.CX - half_w + spacing_x * (col + 1)
         + (rng.random(num_balls) - 0.5) * c.JITTER_X)
    return np.stack([x, y], axis=1)


def add_balls(world, params, rng):
    """Add params.num_balls balls to world, returning their bodies in order."""
    positions = ball_positions(params.num_balls, params.ball_radius, rng)
    return [
        world.add_ball(
            (float(x), float(y)), params.ball_radius, ball_label(i),
            density=params.ball_density, friction=params.ball_friction,
            restitution=params.ball_restitution)
        for i, (x, y) in enumerate(positions)
    ]
