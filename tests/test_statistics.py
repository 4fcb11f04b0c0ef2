import unittest

import numpy as np
import pytest

from fitness import evaluate
from params import DEFAULT_PARAMS, make_params


@pytest.mark.slow
class DefaultFairnessTests(unittest.TestCase):
    def test_default_params_are_reliable_and_fair(self):
        evaluation = evaluate(DEFAULT_PARAMS, 1000, seed=2024, workers=4)
        self.assertEqual(len(evaluation.win_counts), DEFAULT_PARAMS.num_balls)
        self.assertLessEqual(sum(evaluation.win_counts), 1000)
        self.assertGreater(evaluation.success_rate, 0.8)
        self.assertLess(evaluation.chi_squared_norm, 2.0)

    def test_oscillation_does_not_add_bias(self):
        steady = make_params(wind_osc_freq=1.0, wind_osc_amp=0.0)
        swirling = make_params(wind_osc_freq=1.0, wind_osc_amp=0.6)
        seeds = np.random.SeedSequence(7).spawn(5)
        steady_dev = [evaluate(steady, 200, seed=s, workers=4).max_deviation
                      for s in seeds]
        swirling_dev = [
            evaluate(swirling, 200, seed=s, workers=4).max_deviation
            for s in seeds]
        # Allow noise, but a swirl should never be much more biased.
        self.assertLessEqual(np.mean(swirling_dev), np.mean(steady_dev) * 1.5)


if __name__ == "__main__":
    unittest.main()
