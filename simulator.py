"""DrawSimulator, a class to simulate one draw of the lottery machine.

A draw builds a fresh world with the gate closed, blows the balls around for
a fixed mixing period, opens the gate, and then keeps the wind on until a ball
escapes up the chute and touches the exit sensor. That ball is the winner. If
no ball escapes before the selection timeout, the draw ends without a winner,
which is a normal outcome rather than an error.

Every draw owns its world, its state and its random number generator, so
draws never affect each other and can run in parallel.

To use the simulator, follow these steps:
    - Construct it with a Params value and, optionally, a seed or Generator.
    - Call build() to create the world, the container and the balls.
    - Call step() repeatedly to move the simulation forward one tick.
    - Call finish() to tear down the world and get a SimulationResult.
    - OR call run() to do all of the above in one call.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from ball import add_balls, ball_index
from collisions import Phase, SimulationState, record_collisions
import constants as c
from geometry import build_container
from params import DEFAULT_PARAMS, Params
from wind import WindField
from world import PhysicsWorld


@dataclass(frozen=True)
class SimulationResult:
    winner: Optional[str]
    winner_index: int
    ball_ball_collisions: int
    ball_wall_collisions: int
    total_collisions: int
    selection_time_ms: float
    steps: int
    params: Params

    @property
    def timed_out(self):
        return self.winner is None


def mix_steps(params):
    return round(params.mix_time / c.DT)


def selection_steps(params):
    return round(params.selection_timeout / c.DT)


class DrawSimulator:
    def __init__(self, params=DEFAULT_PARAMS, rng=None):
        self.params = params
        # Accepts a seed, a SeedSequence or an existing Generator.
        self.rng = np.random.default_rng(rng)
        self.wind = WindField(params)
        self.state = SimulationState()
        self.world = None
        self.container = None
        self.balls = []

    def build(self):
        """Create the world with the gate closed and the balls in place."""
        p = self.params
        self.world = PhysicsWorld(p.gravity_y, p.gravity_scale,
                                  p.ball_friction_air)
        self.container = build_container(self.world, p)
        self.balls = add_balls(self.world, p, self.rng)
        self.state = SimulationState()

    def step(self):
        """Blow wind on the balls, advance one tick, and tally collisions."""
        self.state.steps += 1
        self.wind.apply(self.world, self.balls, self.state.steps, self.rng)
        record_collisions(self.state, self.world.step(c.DT))
        if self.state.phase is Phase.SELECTING:
            self.state.selection_steps += 1

    def mix(self):
        """Run the mixing phase with the gate closed, then open the gate."""
        self.state.phase = Phase.MIXING
        for _ in range(mix_steps(self.params)):
            # The gate blocks the sensor, so this should never trigger.
            if self.state.winner is not None:
                break
            self.step()
        self.world.remove(self.container.gate)

    def select(self):
        """Run until a ball touches the sensor, or until the timeout."""
        self.state.phase = Phase.SELECTING
        for _ in range(selection_steps(self.params)):
            if self.state.winner is not None:
                break
            self.step()

    def finish(self):
        """Tear down the world and summarize the draw."""
        self.state.phase = Phase.FINISHED
        self.world.clear()
        self.world = None
        self.container = None
        self.balls = []
        return self.result()

    def result(self):
        state = self.state
        return SimulationResult(
            winner=state.winner,
            winner_index=ball_index(state.winner),
            ball_ball_collisions=state.ball_ball_collisions,
            ball_wall_collisions=state.ball_wall_collisions,
            total_collisions=state.total_collisions,
            selection_time_ms=state.selection_steps * c.DT,
            steps=state.steps,
            params=self.params)

    def run(self):
        self.build()
        self.mix()
        self.select()
        return self.finish()


def run_simulation(params=DEFAULT_PARAMS, rng=None):
    """Run one complete draw and return its SimulationResult."""
    return DrawSimulator(params, rng).run()
