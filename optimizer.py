"""The two-phase parameter search for this project.

The main entrypoint to this module is the optimize() function. Phase 1 screens
many randomly sampled parameter sets with a handful of draws each, plus the
default parameters for reference. Phase 2 takes the best few that produced a
winner in at least half their draws and re-evaluates them with many more
draws, since a few dozen draws can't tell a fair machine from a lucky one.

If nothing clears the bar in Phase 1, the search ends there. That's reported
through OptimizationReport.viable rather than raised as an error.
"""

from dataclasses import dataclass, field

import numpy as np
import pandas as pd
from tqdm import tqdm, trange

import constants as c
from fitness import evaluate
from params import DEFAULT_PARAMS, sample_params


@dataclass
class OptimizationReport:
    # All Phase 1 evaluations, best first, including the default params.
    phase1: list
    # Phase 2 re-evaluations of the top candidates, best first.
    phase2: list = field(default_factory=list)
    # The Phase 1 evaluation of DEFAULT_PARAMS.
    default: object = None
    phase1_runs: int = c.PHASE1_RUNS
    phase2_runs: int = c.PHASE2_RUNS
    min_success_rate: float = c.MIN_SUCCESS_RATE

    @property
    def viable(self):
        return bool(self.phase2)

    @property
    def best(self):
        return self.phase2[0] if self.phase2 else None

    @property
    def num_viable(self):
        """How many sampled configs reached the success threshold."""
        return sum(1 for r in self.phase1
                   if r.success_rate >= self.min_success_rate
                   and not r.is_default)


def rank(results):
    """Sort evaluations by score, best first. Ties keep their order."""
    return sorted(results, key=lambda r: r.score, reverse=True)


def select_candidates(ranked, top=c.PHASE2_TOP,
                      min_success_rate=c.MIN_SUCCESS_RATE):
    """Pick the best Phase 1 results worth a closer look."""
    eligible = [r for r in ranked
                if r.success_rate >= min_success_rate and not r.is_default]
    return eligible[:top]


def to_frame(results):
    """Flatten evaluations into a DataFrame, one row per result."""
    return pd.DataFrame([
        {
            'rank': i + 1,
            'score': r.score,
            'success_rate': r.success_rate,
            'chi_squared': r.chi_squared,
            'chi_squared_norm': r.chi_squared_norm,
            'max_deviation': r.max_deviation,
            'avg_collisions': r.avg_collisions,
            'avg_selection_time': r.avg_selection_time,
            'num_runs': r.num_runs,
            'is_default': r.is_default,
        } | r.params.as_dict()
        for i, r in enumerate(results)
    ])


def optimize(seed=None,
             phase1_configs=c.PHASE1_CONFIGS,
             phase1_runs=c.PHASE1_RUNS,
             phase2_top=c.PHASE2_TOP,
             phase2_runs=c.PHASE2_RUNS,
             min_success_rate=c.MIN_SUCCESS_RATE,
             workers=1,
             progress=True):
    root = np.random.SeedSequence(seed)
    sample_seed, default_seed, *config_seeds = root.spawn(phase1_configs + 2)
    rng = np.random.default_rng(sample_seed)

    # Phase 1: screen randomly sampled configs.
    if progress:
        tqdm.write(f'PHASE 1: Screening {phase1_configs} configs '
                   f'x {phase1_runs} runs...')
    phase1 = []
    bar = trange(phase1_configs, disable=not progress)
    for i in bar:
        phase1.append(evaluate(sample_params(rng), phase1_runs,
                               seed=config_seeds[i], workers=workers))
        best_score = max(r.score for r in phase1)
        best_success = max(r.success_rate for r in phase1)
        bar.set_description(
            f'Best score == {best_score:5.1f}, success == {best_success:4.0%}')

    default = evaluate(DEFAULT_PARAMS, phase1_runs, seed=default_seed,
                       workers=workers, is_default=True)
    phase1 = rank(phase1 + [default])

    report = OptimizationReport(
        phase1=phase1, default=default, phase1_runs=phase1_runs,
        phase2_runs=phase2_runs, min_success_rate=min_success_rate)
    candidates = select_candidates(phase1, phase2_top, min_success_rate)
    if not candidates:
        return report

    # Phase 2: verify the best candidates with many more draws.
    if progress:
        tqdm.write(f'PHASE 2: Deep testing {len(candidates)} configs '
                   f'x {phase2_runs} runs...')
    phase2_seeds = root.spawn(len(candidates))
    phase2 = []
    for i, candidate in enumerate(tqdm(candidates, disable=not progress)):
        result = evaluate(candidate.params, phase2_runs,
                          seed=phase2_seeds[i], workers=workers)
        phase2.append(result)
        if progress:
            tqdm.write(
                f'  Config {i + 1}/{len(candidates)} '
                f'(ph1 score: {candidate.score:.1f}) '
                f'success: {result.success_rate:.1%} | '
                f'chi2n: {result.chi_squared_norm:.2f} | '
                f'maxDev: {result.max_deviation:.2f} | '
                f'score: {result.score:.1f}')
    report.phase2 = rank(phase2)
    return report
