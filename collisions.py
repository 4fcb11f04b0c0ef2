"""Running tallies of one draw, and classification of collisions into them.

SimulationState holds everything a draw accumulates while it runs: which
phase it's in, how many steps it has taken, collision counters, and the
winner, if any. record_collisions() folds the contacts from one physics step
into that state.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ball import is_ball
from geometry import SENSOR_LABEL


class Phase(Enum):
    MIXING = 'mixing'
    SELECTING = 'selecting'
    FINISHED = 'finished'


@dataclass
class SimulationState:
    phase: Phase = Phase.MIXING
    steps: int = 0
    selection_steps: int = 0
    ball_ball_collisions: int = 0
    ball_wall_collisions: int = 0
    winner: Optional[str] = None

    @property
    def total_collisions(self):
        return self.ball_ball_collisions + self.ball_wall_collisions


def record_collisions(state, pairs):
    """Classify newly touching label pairs from a single step.

    The first ball to touch the sensor wins, and later sensor contacts are
    ignored. Sensor contacts never count as collisions. When two balls reach
    the sensor in the same step, the engine's reporting order decides.
    """
    for label_a, label_b in pairs:
        if SENSOR_LABEL in (label_a, label_b):
            other = label_b if label_a == SENSOR_LABEL else label_a
            if state.winner is None and is_ball(other):
                state.winner = other
            continue
        a_is_ball = is_ball(label_a)
        b_is_ball = is_ball(label_b)
        if a_is_ball and b_is_ball:
            state.ball_ball_collisions += 1
        elif a_is_ball or b_is_ball:
            state.ball_wall_collisions += 1
    return state
