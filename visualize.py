"""Render optimizer results as console tables, histograms, and a chart.

The format_* functions return strings, so the CLI decides where they go.
save_chart() is the only function here that touches the filesystem, and only
at the path it's given.
"""

import math

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

from ball import ball_label
import constants as c
from optimizer import to_frame

RULE_WIDTH = 110


def _fixed(digits):
    def fmt(value):
        if math.isinf(value):
            return 'inf'
        return f'{value:.{digits}f}'
    return fmt


def _seconds(ms):
    return 'inf' if math.isinf(ms) else f'{ms / 1000:.1f}'


# Columns of the ranked table: (DataFrame column, heading, formatter).
TABLE_COLUMNS = [
    ('rank', 'Rank', str),
    ('score', 'Score', _fixed(1)),
    ('success_rate', 'Succ%', lambda v: f'{v * 100:.0f}'),
    ('chi_squared_norm', 'Chi2n', _fixed(2)),
    ('max_deviation', 'MaxDev', _fixed(2)),
    ('avg_collisions', 'Coll', lambda v: f'{round(v)}'),
    ('avg_selection_time', 'SelT', _seconds),
    ('num_balls', '#B', str),
    ('ball_radius', 'Rad', lambda v: f'{v:g}'),
    ('wind_force_y', 'WndY', _fixed(3)),
    ('wind_max_dist_scale', 'WDst', _fixed(2)),
    ('wind_osc_freq', 'OscF', _fixed(1)),
    ('wind_osc_amp', 'OscA', _fixed(2)),
    ('chaos_x', 'ChsX', _fixed(3)),
    ('chaos_y', 'ChsY', _fixed(3)),
    ('mix_time', 'Mix', lambda v: f'{v:g}'),
    ('is_default', 'Def', lambda v: 'DEF' if v else ''),
]


def banner(title, width=RULE_WIDTH):
    rule = '=' * width
    return f'{rule}\n{title}\n{rule}'


def format_table(results, limit=c.TABLE_ROWS):
    """A ranked table of evaluations, best first."""
    frame = to_frame(results[:limit])
    if frame.empty:
        return '(no results)'
    columns = [column for column, _, _ in TABLE_COLUMNS]
    table = frame[columns].rename(
        columns={column: heading for column, heading, _ in TABLE_COLUMNS})
    formatters = {heading: fmt for _, heading, fmt in TABLE_COLUMNS}
    return table.to_string(index=False, formatters=formatters)


def format_histogram(result, width=c.HISTOGRAM_WIDTH):
    """One bar per ball, scaled to the most frequent winner."""
    counts = result.win_counts
    expected = result.successful_runs / len(counts)
    max_count = max(max(counts), 1)
    lines = [f'  Win distribution (expected: {100 / len(counts):.1f}% each):']
    for index, count in enumerate(counts):
        bar_len = round(count / max_count * width)
        bar = '█' * bar_len + '░' * (width - bar_len)
        pct = count / result.num_runs * 100
        if expected > 0:
            dev = f'{(count - expected) / expected * 100:+.0f}%'
        else:
            dev = '-'
        lines.append(f'    {ball_label(index):>8}: {bar} {count:4d} '
                     f'({pct:5.1f}%) [{dev}]')
    return '\n'.join(lines)


def format_summary_line(result):
    return (f'Success: {result.success_rate:.1%} | '
            f'chi2norm: {result.chi_squared_norm:.3f} | '
            f'maxDev: {result.max_deviation:.0%} | '
            f'collisions: {round(result.avg_collisions)} | '
            f'selectTime: {_seconds(result.avg_selection_time)}s')


def format_params(params):
    """Parameters as 'key: value' lines, ready to paste back in."""
    lines = []
    for key, value in params.as_dict().items():
        if isinstance(value, int) or float(value).is_integer():
            lines.append(f'{key}: {value:g}')
        else:
            lines.append(f'{key}: {value:.6f}')
    return '\n'.join(lines)


def format_report(report):
    sections = [
        banner(f'PHASE 1 - TOP {c.TABLE_ROWS}'),
        format_table(report.phase1),
    ]
    if not report.viable:
        sections.append(
            f'\nNo configs achieved >= {report.min_success_rate:.0%} '
            'success rate.')
        return '\n'.join(sections)

    sections += ['', banner('FINAL RESULTS'), format_table(report.phase2)]
    for i, result in enumerate(report.phase2):
        sections += [
            f'\n--- #{i + 1} (score: {result.score:.1f}) ---',
            f'  {format_summary_line(result)}',
            format_histogram(result),
        ]

    best = report.best
    sections += [
        '',
        banner('BEST PARAMETERS'),
        f'# Score: {best.score:.1f} | {format_summary_line(best)}',
        format_params(best.params),
        '',
        banner('SUMMARY'),
        f'Phase 1: {len(report.phase1) - 1} configs, {report.num_viable} had '
        f'>= {report.min_success_rate:.0%} success',
        f'Phase 2: {len(report.phase2)} deep-tested x '
        f'{report.phase2_runs} runs',
        f'Default: success {report.default.success_rate:.0%}, '
        f'score {report.default.score:.1f}',
    ]
    return '\n'.join(sections)


def win_frame(results):
    """Long-form win counts for every ball of every result."""
    return pd.DataFrame([
        {'config': f'#{i + 1}', 'ball': index, 'wins': count}
        for i, result in enumerate(results)
        for index, count in enumerate(result.win_counts)
    ])


def save_chart(report, filename):
    """Save a bar chart of Phase 2 win distributions to filename."""
    data = win_frame(report.phase2)
    fig = sns.catplot(data=data, x='ball', y='wins', col='config',
                      kind='bar', col_wrap=min(len(report.phase2), 3))
    fig.set_titles('{col_name}')
    fig.figure.suptitle('Win distribution by configuration')
    fig.tight_layout()
    fig.savefig(filename)
    plt.close()
