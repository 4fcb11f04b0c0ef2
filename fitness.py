"""Evaluate a parameter set by running many draws and scoring the results.

A good parameter set makes for a draw that is fair (every ball is equally
likely to win), lively (balls collide a lot while mixing), and reliable
(almost every draw produces a winner before the timeout). evaluate() runs N
independent draws for one Params value and summarize() reduces them to an
EvaluationResult with a single comparable score.
"""

from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
import math

import numpy as np

from params import Params
from simulator import run_simulation


@dataclass(frozen=True)
class EvaluationResult:
    params: Params
    num_runs: int
    win_counts: tuple
    success_rate: float
    avg_collisions: float
    avg_selection_time: float
    chi_squared: float
    chi_squared_norm: float
    max_deviation: float
    score: float
    is_default: bool = False

    @property
    def successful_runs(self):
        return sum(self.win_counts)


def score(success_rate, chi_squared_norm, avg_collisions):
    """Success dominates, bias costs five points per unit of normalized
    chi-squared, and more collisions earn a small logarithmic bonus."""
    if success_rate == 0:
        return 0.0
    return (success_rate * 100
            - chi_squared_norm * 5
            + math.log(avg_collisions + 1) * 0.3)


def summarize(params, results, is_default=False):
    """Aggregate a batch of SimulationResults for the same params.

    Timed out draws add nothing to the win counts or the average selection
    time, but they still count toward collisions and the success rate.
    """
    num_runs = len(results)
    win_counts = np.zeros(params.num_balls, dtype=np.int64)
    total_collisions = 0
    total_selection_time = 0.0
    for result in results:
        total_collisions += result.total_collisions
        if result.winner_index >= 0:
            win_counts[result.winner_index] += 1
            total_selection_time += result.selection_time_ms
    successful_runs = int(win_counts.sum())

    success_rate = successful_runs / num_runs if num_runs else 0.0
    avg_collisions = total_collisions / num_runs if num_runs else 0.0
    if successful_runs > 0:
        avg_selection_time = total_selection_time / successful_runs
        expected = successful_runs / params.num_balls
        chi_squared = float(
            ((win_counts - expected) ** 2 / max(expected, 0.001)).sum())
        max_deviation = float((np.abs(win_counts - expected) / expected).max())
    else:
        avg_selection_time = math.inf
        chi_squared = math.inf
        max_deviation = math.inf
    chi_squared_norm = chi_squared / max(params.num_balls - 1, 1)

    return EvaluationResult(
        params=params,
        num_runs=num_runs,
        win_counts=tuple(int(count) for count in win_counts),
        success_rate=success_rate,
        avg_collisions=avg_collisions,
        avg_selection_time=avg_selection_time,
        chi_squared=chi_squared,
        chi_squared_norm=chi_squared_norm,
        max_deviation=max_deviation,
        score=score(success_rate, chi_squared_norm, avg_collisions),
        is_default=is_default)


def draw_seeds(num_runs, seed=None):
    """Independent random streams, one per draw, from a single seed."""
    if not isinstance(seed, np.random.SeedSequence):
        seed = np.random.SeedSequence(seed)
    return seed.spawn(num_runs)


def run_draws(params, num_runs, seed=None, workers=1):
    """Run num_runs independent draws, in order, optionally in parallel."""
    seeds = draw_seeds(num_runs, seed)
    if workers <= 1:
        return [run_simulation(params, s) for s in seeds]
    with ProcessPoolExecutor(max_workers=workers) as executor:
        return list(executor.map(
            run_simulation, [params] * num_runs, seeds,
            chunksize=max(1, num_runs // (workers * 4))))


def evaluate(params, num_runs, seed=None, workers=1, is_default=False):
    """Run num_runs fresh draws with params and summarize them."""
    results = run_draws(params, num_runs, seed=seed, workers=workers)
    return summarize(params, results, is_default=is_default)
