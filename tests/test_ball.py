import unittest

import numpy as np

import constants as c
from ball import ball_index, ball_label, ball_positions, is_ball


class BallLabelTests(unittest.TestCase):
    def test_labels_round_trip_to_indices(self):
        self.assertEqual(ball_label(3), "ball-3")
        self.assertEqual(ball_index("ball-12"), 12)
        self.assertEqual(ball_index(None), -1)

    def test_only_ball_labels_are_balls(self):
        self.assertTrue(is_ball("ball-0"))
        for label in ("wall", "gate", "exit-sensor"):
            self.assertFalse(is_ball(label))


class BallPlacementTests(unittest.TestCase):
    def test_positions_shape_and_rows(self):
        positions = ball_positions(10, 20, np.random.default_rng(0))
        self.assertEqual(positions.shape, (10, 2))
        # The eighth ball starts a second row, one row height higher.
        row_height = 20 * 2 + c.ROW_GAP
        self.assertAlmostEqual(
            positions[0, 1] - positions[7, 1], row_height, delta=c.JITTER_Y)

    def test_first_row_starts_below_center(self):
        positions = ball_positions(7, 30, np.random.default_rng(1))
        expected_y = c.CY + c.RY * c.ROW_START
        for _, y in positions:
            self.assertLessEqual(abs(y - expected_y), c.JITTER_Y / 2)

    def test_balls_stay_inside_the_oval(self):
        rng = np.random.default_rng(2)
        for num_balls in (1, 5, 8, 15):
            for x, y in ball_positions(num_balls, 25, rng):
                norm = ((x - c.CX) / c.RX) ** 2 + ((y - c.CY) / c.RY) ** 2
                self.assertLess(norm, 1.0)

    def test_columns_spread_left_to_right(self):
        positions = ball_positions(7, 20, np.random.default_rng(3))
        xs = positions[:, 0]
        self.assertTrue(np.all(np.diff(xs) > 0))

    def test_single_ball_is_near_the_middle(self):
        x, _ = ball_positions(1, 37, np.random.default_rng(4))[0]
        self.assertAlmostEqual(x, c.CX, delta=c.JITTER_X / 2)


if __name__ == "__main__":
    unittest.main()
