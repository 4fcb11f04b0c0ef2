"""PhysicsWorld, a thin wrapper that drives pymunk for a single draw.

Parameters in this project are tuned in the units of a millisecond-based
engine: forces are mass * px / ms^2, spins are radians per step, and air
friction is the fraction of velocity lost per step. This wrapper accepts
those units and converts them to pymunk's seconds, so nothing outside this
module needs to know about the conversion.

Collisions are reported synchronously. Each call to step() returns the label
pairs of shapes that started touching during that step, in the order the
engine reported them.
"""

import math

import pymunk

import constants as c


def _mix_materials(arbiter, space, data):
    # Combine materials the way the parameters were tuned: the bouncier
    # surface wins and the slicker surface wins.
    a, b = arbiter.shapes
    arbiter.restitution = max(a.elasticity, b.elasticity)
    arbiter.friction = min(a.friction, b.friction)


class PhysicsWorld:
    def __init__(self, gravity_y, gravity_scale, friction_air):
        self.space = pymunk.Space()
        self.space.gravity = (0.0, gravity_y * gravity_scale * c.FORCE_SCALE)
        # Per-step air friction, expressed as velocity kept per second.
        self.space.damping = (1.0 - friction_air) ** c.STEPS_PER_SECOND
        self.labels = {}
        self.frozen_mass = {}
        self.new_contacts = []
        self.space.on_collision(
            begin=self._record_contact, pre_solve=_mix_materials)

    def _record_contact(self, arbiter, space, data):
        a, b = arbiter.shapes
        self.new_contacts.append((self.labels[a], self.labels[b]))

    def add_box(self, position, size, label, angle=0.0, friction=0.0,
                restitution=0.0, sensor=False):
        """Add a static rectangle centered on position."""
        body = pymunk.Body(body_type=pymunk.Body.STATIC)
        body.position = position
        body.angle = angle
        shape = pymunk.Poly.create_box(body, size)
        shape.friction = friction
        shape.elasticity = restitution
        shape.sensor = sensor
        self.labels[shape] = label
        self.space.add(body, shape)
        return body

    def add_ball(self, position, radius, label, density, friction,
                 restitution):
        """Add a dynamic circle whose mass comes from its density.

        The moment of inertia is INERTIA_SCALE times that of a solid disk,
        which keeps spinning balls from stalling against walls.
        """
        mass = density * math.pi * radius ** 2
        moment = c.INERTIA_SCALE * pymunk.moment_for_circle(mass, 0, radius)
        body = pymunk.Body(mass, moment)
        body.position = position
        shape = pymunk.Circle(body, radius)
        shape.friction = friction
        shape.elasticity = restitution
        self.labels[shape] = label
        self.space.add(body, shape)
        return body

    def remove(self, body):
        for shape in body.shapes:
            del self.labels[shape]
        self.space.remove(body, *body.shapes)

    def contains(self, body):
        return body in self.space.bodies

    def apply_force(self, body, force):
        fx, fy = force
        body.apply_force_at_world_point(
            (fx * c.FORCE_SCALE, fy * c.FORCE_SCALE), body.position)

    def spin(self, body):
        """Angular velocity of body, in radians per step."""
        return body.angular_velocity / c.STEPS_PER_SECOND

    def set_spin(self, body, spin):
        body.angular_velocity = spin * c.STEPS_PER_SECOND

    def freeze(self, body):
        """Pin a body in place, so it no longer moves or feels forces."""
        self.frozen_mass[body] = (body.mass, body.moment)
        body.velocity = (0.0, 0.0)
        body.angular_velocity = 0.0
        body.body_type = pymunk.Body.STATIC

    def is_frozen(self, body):
        return body.body_type != pymunk.Body.DYNAMIC

    def release(self, body, position):
        """Turn a frozen body back into a dynamic one at rest at position."""
        mass, moment = self.frozen_mass.pop(body)
        body.body_type = pymunk.Body.DYNAMIC
        # Going dynamic recomputes mass from the shapes, which carry none.
        body.mass = mass
        body.moment = moment
        body.position = position
        body.velocity = (0.0, 0.0)
        body.angular_velocity = 0.0
        self.space.reindex_shapes_for_body(body)

    def step(self, dt=c.DT):
        """Advance the world by dt milliseconds and return new contacts."""
        self.new_contacts = []
        self.space.step(dt / c.MS_PER_SECOND)
        return self.new_contacts

    def clear(self):
        """Remove every body, leaving an empty world behind."""
        for body in list(self.space.bodies):
            self.remove(body)
        self.new_contacts = []
        self.frozen_mass = {}
