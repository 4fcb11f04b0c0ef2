"""Tunable physical parameters for a draw, and random sampling of them.

A Params value fully describes one draw. Callers usually start from
DEFAULT_PARAMS (tuned for headless batch runs) or MACHINE_PARAMS (the tuning
used by the interactive machine) and override a few fields with
make_params(). The optimizer explores the space described by PARAM_RANGES
using sample_params().
"""

from dataclasses import dataclass, asdict, fields, replace

import numpy as np

import constants as c


@dataclass(frozen=True)
class Params:
    # Gravity, in the units of the tuning engine (scale * y px/ms^2).
    gravity_y: float = 2.0
    gravity_scale: float = 0.0015

    # Balls
    num_balls: int = 8
    ball_radius: float = 30
    ball_restitution: float = 0.8
    ball_friction: float = 0.1
    ball_friction_air: float = 0.01
    ball_density: float = 0.003

    # Static geometry
    wall_friction: float = 0.2
    wall_restitution: float = 0.6

    # Wind jets. An oscillation frequency of 0 means steady, equal jets.
    # Jets must out-lift gravity up to the oval's top, or nothing escapes.
    wind_force_x: float = 0.03
    wind_force_y: float = 0.027
    wind_max_dist_scale: float = 1.3
    wind_source_angle: float = 0.45
    wind_osc_freq: float = 1.13
    wind_osc_amp: float = 0.8

    # Turbulence
    chaos_x: float = 0.03
    chaos_y: float = 0.025
    angular_nudge_mag: float = 0.4
    angular_nudge_chance: float = 0.3

    # Timing, in milliseconds of simulated time.
    mix_time: float = 5000
    selection_timeout: float = c.SELECTION_TIMEOUT

    def __post_init__(self):
        if self.num_balls != int(self.num_balls):
            raise ValueError(
                f'num_balls must be a whole number, got {self.num_balls}')
        if self.num_balls < 1:
            raise ValueError(
                f'num_balls must be positive, got {self.num_balls}')
        if self.ball_radius <= 0:
            raise ValueError(
                f'ball_radius must be positive, got {self.ball_radius}')
        # Counts index arrays, so 5.0 is stored as 5.
        object.__setattr__(self, 'num_balls', int(self.num_balls))

    def as_dict(self):
        return asdict(self)


PARAM_NAMES = tuple(f.name for f in fields(Params))


def make_params(overrides=None, base=None, **kwargs):
    """Merge overrides onto a base parameter set (DEFAULT_PARAMS by default).

    Keys that are not overridden keep the base value. Unknown keys raise
    ValueError rather than being silently dropped.
    """
    base = DEFAULT_PARAMS if base is None else base
    changes = dict(overrides or {}, **kwargs)
    unknown = sorted(set(changes) - set(PARAM_NAMES))
    if unknown:
        raise ValueError(f'Unknown parameters: {", ".join(unknown)}')
    return replace(base, **changes)


DEFAULT_PARAMS = Params()

MACHINE_PARAMS = Params(
    gravity_y=2.97,
    gravity_scale=0.00147,
    ball_radius=32,
    ball_restitution=0.782,
    ball_friction=0.092,
    ball_friction_air=0.007,
    ball_density=0.003,
    wall_friction=0.164,
    wall_restitution=0.594,
    wind_force_x=0.026,
    wind_force_y=0.038,
    wind_max_dist_scale=1.29,
    wind_source_angle=0.443,
    wind_osc_freq=1.026,
    wind_osc_amp=0.785,
    chaos_x=0.028,
    chaos_y=0.024,
    angular_nudge_mag=0.394,
    angular_nudge_chance=0.313,
    mix_time=4400,
)


@dataclass(frozen=True)
class Range:
    min: float
    max: float
    integer: bool = False


# Search space for the optimizer. Parameters not listed here (like the
# selection timeout) always keep their default value.
PARAM_RANGES = {
    'gravity_y': Range(0.5, 4.0),
    'gravity_scale': Range(0.001, 0.008),
    'num_balls': Range(5, 15, integer=True),
    'ball_radius': Range(18, 35, integer=True),
    'ball_restitution': Range(0.5, 1.0),
    'ball_friction': Range(0.01, 0.2),
    'ball_friction_air': Range(0.005, 0.06),
    'ball_density': Range(0.0001, 0.004),
    'wall_friction': Range(0.05, 0.5),
    'wall_restitution': Range(0.5, 1.0),
    'wind_force_x': Range(0.005, 0.035),
    'wind_force_y': Range(0.01, 0.05),
    'wind_max_dist_scale': Range(0.5, 1.3),
    'wind_source_angle': Range(0.2, 1.2),
    'wind_osc_freq': Range(0.3, 3.0),
    'wind_osc_amp': Range(0.2, 0.9),
    'chaos_x': Range(0.003, 0.03),
    'chaos_y': Range(0.003, 0.03),
    'angular_nudge_mag': Range(0.2, 1.0),
    'angular_nudge_chance': Range(0.1, 0.5),
    'mix_time': Range(4000, 8000, integer=True),
}


def sample_params(rng, ranges=None):
    """Draw one random parameter set, each value independently uniform."""
    ranges = PARAM_RANGES if ranges is None else ranges
    values = {}
    for name, bounds in ranges.items():
        value = float(rng.uniform(bounds.min, bounds.max))
        if bounds.integer:
            value = int(np.rint(value))
        values[name] = value
    return make_params(values)
