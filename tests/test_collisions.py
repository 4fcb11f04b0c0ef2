import unittest

from collisions import Phase, SimulationState, record_collisions


class RecordCollisionsTests(unittest.TestCase):
    def test_pairs_are_classified(self):
        state = record_collisions(SimulationState(), [
            ("ball-0", "ball-1"),
            ("ball-2", "wall"),
            ("gate", "ball-3"),
            ("wall", "gate"),
        ])
        self.assertEqual(state.ball_ball_collisions, 1)
        self.assertEqual(state.ball_wall_collisions, 2)
        self.assertEqual(state.total_collisions, 3)
        self.assertIsNone(state.winner)

    def test_first_sensor_touch_wins(self):
        state = SimulationState()
        record_collisions(state, [("exit-sensor", "ball-4"),
                                  ("ball-1", "exit-sensor")])
        record_collisions(state, [("ball-2", "exit-sensor")])
        self.assertEqual(state.winner, "ball-4")

    def test_sensor_contacts_never_count_as_collisions(self):
        state = SimulationState()
        record_collisions(state, [("ball-0", "exit-sensor")])
        record_collisions(state, [("ball-1", "exit-sensor")])
        self.assertEqual(state.total_collisions, 0)
        self.assertEqual(state.winner, "ball-0")

    def test_non_ball_sensor_contact_is_not_a_winner(self):
        state = record_collisions(SimulationState(), [("exit-sensor", "gate")])
        self.assertIsNone(state.winner)
        self.assertEqual(state.total_collisions, 0)

    def test_new_state_starts_mixing(self):
        state = SimulationState()
        self.assertIs(state.phase, Phase.MIXING)
        self.assertEqual(state.steps, 0)
        self.assertEqual(state.selection_steps, 0)


if __name__ == "__main__":
    unittest.main()
