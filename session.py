"""DrawSession, a series of draws among named participants in one machine.

Unlike DrawSimulator, which builds and tears down a world for every draw, a
session keeps its world alive between draws the way a physical machine would.
After each draw the winning ball stays frozen where it touched the sensor.
The next draw drops it back into the middle of the oval, closes the gate, and
starts mixing again, so the same participant can win more than once.
"""

from dataclasses import dataclass

import numpy as np

from collisions import SimulationState
import constants as c
from geometry import build_gate
from params import MACHINE_PARAMS, make_params
from simulator import DrawSimulator, SimulationResult


@dataclass(frozen=True)
class SessionDraw:
    name: object
    result: SimulationResult


class DrawSession:
    def __init__(self, names, params=MACHINE_PARAMS, rng=None):
        names = list(names)
        if not names:
            raise ValueError('A draw needs at least one participant')
        self.names = names
        self.params = make_params({'num_balls': len(names)}, base=params)
        self.simulator = DrawSimulator(self.params, rng)
        self.simulator.build()
        self.frozen = None
        self.history = []

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _recycle_winner(self):
        """Drop the last winner back into the mix."""
        if self.frozen is None:
            return
        offset = (self.simulator.rng.random(2) - 0.5) * c.RECYCLE_SPREAD
        self.simulator.world.release(
            self.frozen, (c.CX + offset[0], c.CY + offset[1]))
        self.frozen = None

    def _close_gate(self):
        sim = self.simulator
        if not sim.world.contains(sim.container.gate):
            sim.container.gate = build_gate(sim.world, self.params)

    def draw(self):
        """Run one draw and return the winning participant, if any."""
        sim = self.simulator
        if sim.world is None:
            raise RuntimeError('This session has been closed')
        self._recycle_winner()
        self._close_gate()
        sim.state = SimulationState()
        sim.mix()
        sim.select()

        result = sim.result()
        name = None
        if result.winner is not None:
            self.frozen = sim.balls[result.winner_index]
            sim.world.freeze(self.frozen)
            name = self.names[result.winner_index]
        draw = SessionDraw(name, result)
        self.history.append(draw)
        return draw

    def close(self):
        if self.simulator.world is not None:
            self.simulator.finish()


def run_session(names, num_draws, params=MACHINE_PARAMS, seed=None):
    """Draw num_draws times among names and return every SessionDraw."""
    with DrawSession(names, params, np.random.default_rng(seed)) as session:
        return [session.draw() for _ in range(num_draws)]
