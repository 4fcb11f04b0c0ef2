import math
import unittest

from fitness import draw_seeds, evaluate, run_draws, score, summarize
from params import make_params
from simulator import SimulationResult


def make_result(params, winner_index, collisions=10, selection_time=1000.0):
    winner = None if winner_index < 0 else f"ball-{winner_index}"
    return SimulationResult(
        winner=winner,
        winner_index=winner_index,
        ball_ball_collisions=collisions // 2,
        ball_wall_collisions=collisions - collisions // 2,
        total_collisions=collisions,
        selection_time_ms=selection_time if winner else 0.0,
        steps=100,
        params=params)


class ScoreTests(unittest.TestCase):
    def test_zero_success_scores_zero(self):
        self.assertEqual(score(0.0, math.inf, 100.0), 0.0)

    def test_score_formula(self):
        self.assertAlmostEqual(
            score(0.9, 1.2, 40.0), 90 - 6 + math.log(41) * 0.3)


class SummarizeTests(unittest.TestCase):
    def test_uniform_wins(self):
        params = make_params(num_balls=4)
        results = [make_result(params, i % 4) for i in range(8)]
        evaluation = summarize(params, results)
        self.assertEqual(evaluation.win_counts, (2, 2, 2, 2))
        self.assertEqual(evaluation.success_rate, 1.0)
        self.assertEqual(evaluation.chi_squared, 0.0)
        self.assertEqual(evaluation.chi_squared_norm, 0.0)
        self.assertEqual(evaluation.max_deviation, 0.0)
        self.assertAlmostEqual(evaluation.score, 100 + math.log(11) * 0.3)

    def test_timeouts_count_toward_collisions_only(self):
        params = make_params(num_balls=2)
        results = [
            make_result(params, 0, collisions=10, selection_time=2000.0),
            make_result(params, 0, collisions=20, selection_time=4000.0),
            make_result(params, -1, collisions=30),
            make_result(params, 1, collisions=40, selection_time=3000.0),
        ]
        evaluation = summarize(params, results)
        self.assertEqual(evaluation.win_counts, (2, 1))
        self.assertEqual(evaluation.num_runs, 4)
        self.assertEqual(evaluation.successful_runs, 3)
        self.assertAlmostEqual(evaluation.success_rate, 0.75)
        self.assertAlmostEqual(evaluation.avg_collisions, 25.0)
        self.assertAlmostEqual(evaluation.avg_selection_time, 3000.0)
        # expected = 1.5 wins per ball
        self.assertAlmostEqual(evaluation.chi_squared, 2 * 0.25 / 1.5)
        self.assertAlmostEqual(evaluation.chi_squared_norm, 2 * 0.25 / 1.5)
        self.assertAlmostEqual(evaluation.max_deviation, 0.5 / 1.5)
        self.assertLessEqual(sum(evaluation.win_counts), evaluation.num_runs)

    def test_all_timeouts(self):
        params = make_params(num_balls=3)
        evaluation = summarize(params, [make_result(params, -1)] * 5)
        self.assertEqual(evaluation.win_counts, (0, 0, 0))
        self.assertEqual(evaluation.success_rate, 0.0)
        self.assertEqual(evaluation.avg_selection_time, math.inf)
        self.assertEqual(evaluation.chi_squared, math.inf)
        self.assertEqual(evaluation.max_deviation, math.inf)
        self.assertEqual(evaluation.score, 0.0)

    def test_single_ball_is_always_uniform(self):
        params = make_params(num_balls=1)
        results = [make_result(params, 0), make_result(params, -1),
                   make_result(params, 0)]
        evaluation = summarize(params, results)
        self.assertEqual(evaluation.win_counts, (2,))
        self.assertEqual(evaluation.chi_squared, 0.0)
        self.assertEqual(evaluation.chi_squared_norm, 0.0)

    def test_win_counts_match_ball_count(self):
        params = make_params(num_balls=6)
        evaluation = summarize(params, [make_result(params, 5)])
        self.assertEqual(len(evaluation.win_counts), 6)
        self.assertEqual(evaluation.win_counts[5], 1)


class EvaluateTests(unittest.TestCase):
    params = make_params(num_balls=3, mix_time=500, selection_timeout=2000)

    def test_single_run_succeeds_or_fails_outright(self):
        evaluation = evaluate(self.params, 1, seed=4)
        self.assertIn(evaluation.success_rate, (0.0, 1.0))
        self.assertEqual(len(evaluation.win_counts), 3)
        if evaluation.success_rate == 0.0:
            self.assertEqual(evaluation.score, 0.0)
        else:
            self.assertGreaterEqual(evaluation.chi_squared, 0.0)

    def test_seeded_evaluations_repeat(self):
        first = evaluate(self.params, 3, seed=9)
        second = evaluate(self.params, 3, seed=9)
        self.assertEqual(first, second)
        self.assertLessEqual(sum(first.win_counts), 3)

    def test_each_draw_gets_its_own_stream(self):
        seeds = draw_seeds(4, seed=1)
        self.assertEqual(len({s.spawn_key for s in seeds}), 4)
        results = run_draws(self.params, 2, seed=1)
        self.assertEqual(len(results), 2)

    def test_parallel_draws_match_sequential_draws(self):
        sequential = run_draws(self.params, 3, seed=12)
        parallel = run_draws(self.params, 3, seed=12, workers=2)
        self.assertEqual(sequential, parallel)


if __name__ == "__main__":
    unittest.main()
