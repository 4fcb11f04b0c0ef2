"""WindField, the air jets that churn the balls while the machine runs.

Two virtual jets sit on the oval near its bottom, mirrored around the
vertical axis. Each pushes balls up and toward the middle, with a strength
that fades linearly with distance. When oscillation is on, the jets take
turns dominating, which turns a steady updraft into a slow swirl. On top of
that, every ball gets random jitter and the occasional random spin.
"""

import math

import numpy as np

import constants as c


class WindField:
    def __init__(self, params):
        self.params = params
        left_angle = math.pi / 2 + params.wind_source_angle
        right_angle = math.pi / 2 - params.wind_source_angle
        self.left_source = np.array([
            c.CX + c.RX * math.cos(left_angle),
            c.CY + c.RY * math.sin(left_angle)])
        self.right_source = np.array([
            c.CX + c.RX * math.cos(right_angle),
            c.CY + c.RY * math.sin(right_angle)])
        self.reach = c.MAX_WIND_DIST * params.wind_max_dist_scale

    def strength(self, positions, source):
        """Jet strength in [0, 1] at each position, zero beyond its reach."""
        dist = np.linalg.norm(positions - source, axis=1)
        return np.maximum(0.0, 1.0 - dist / self.reach)

    def multipliers(self, time_sec):
        """How much the left and right jets are boosted at this moment."""
        p = self.params
        phase = math.sin(2 * math.pi * p.wind_osc_freq * time_sec)
        return 1 + phase * p.wind_osc_amp, 1 - phase * p.wind_osc_amp

    def jet_forces(self, positions, time_sec):
        """Deterministic part of the wind, as a (num_balls, 2) force array."""
        p = self.params
        positions = np.asarray(positions, dtype=float)
        left = self.strength(positions, self.left_source)
        right = self.strength(positions, self.right_source)
        left_mult, right_mult = self.multipliers(time_sec)
        # Left jet pushes right and up, right jet pushes left and up. Up is -y.
        fx = p.wind_force_x * (left * left_mult - right * right_mult)
        fy = -p.wind_force_y * (left * left_mult + right * right_mult)
        return np.stack([fx, fy], axis=1)

    def forces(self, positions, time_sec, rng):
        """Jet forces plus fresh uniform jitter for every ball."""
        p = self.params
        jitter = ((rng.random((len(positions), 2)) - 0.5)
                  * np.array([p.chaos_x, p.chaos_y]))
        return self.jet_forces(positions, time_sec) + jitter

    def spin_nudges(self, num_balls, rng):
        """Random changes to angular velocity, zero for balls left alone."""
        p = self.params
        nudged = rng.random(num_balls) < p.angular_nudge_chance
        deltas = (rng.random(num_balls) - 0.5) * p.angular_nudge_mag
        return np.where(nudged, deltas, 0.0)

    def apply(self, world, balls, step, rng):
        """Push every ball for the given step, before the world advances."""
        if not balls:
            return
        time_sec = step * c.DT / c.MS_PER_SECOND
        positions = np.array([tuple(ball.position) for ball in balls])
        forces = self.forces(positions, time_sec, rng)
        nudges = self.spin_nudges(len(balls), rng)
        for ball, force, nudge in zip(balls, forces, nudges):
            if world.is_frozen(ball):
                continue
            world.apply_force(ball, force)
            if nudge:
                world.set_spin(ball, world.spin(ball) + nudge)
