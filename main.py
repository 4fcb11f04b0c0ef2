"""Command line tools for the lottery machine simulator.

    oval-draw draw                  Run one draw and print how it went.
    oval-draw optimize              Search for a fair, lively, reliable tuning.
    oval-draw session NAME [NAME..] Draw winners among named participants.

The optimize command exits with status 1 when no sampled configuration
produces a winner in at least half of its Phase 1 draws.
"""

import argparse
import sys

import constants as c
from optimizer import optimize
from params import DEFAULT_PARAMS, MACHINE_PARAMS, make_params
from session import run_session
from simulator import run_simulation
import visualize


def parse_override(text):
    """Parse a 'key=value' argument into a (key, number) pair."""
    key, sep, value = text.partition('=')
    if not sep:
        raise argparse.ArgumentTypeError(f'expected key=value, got {text!r}')
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f'{key} must be a number, got {value!r}') from None
    return key.strip(), int(number) if number.is_integer() else number


def describe_draw(result):
    winner = result.winner or 'NONE (timeout)'
    return '\n'.join([
        f'Winner:               {winner}',
        f'Selection time:       {result.selection_time_ms / 1000:.1f}s '
        'after gate open',
        f'Total collisions:     {result.total_collisions}',
        f'Ball-ball:            {result.ball_ball_collisions}',
        f'Ball-wall:            {result.ball_wall_collisions}',
    ])


def cmd_draw(args, parser):
    try:
        params = make_params(dict(args.overrides))
    except ValueError as error:
        parser.error(str(error))
    result = run_simulation(params, args.seed)
    print('=== Single Draw ===')
    print(describe_draw(result))
    return 0


def cmd_optimize(args, parser):
    report = optimize(
        seed=args.seed,
        phase1_configs=args.phase1_configs,
        phase1_runs=args.phase1_runs,
        phase2_top=args.phase2_top,
        phase2_runs=args.phase2_runs,
        workers=args.workers)
    print(visualize.format_report(report))
    if not report.viable:
        return 1
    if args.chart:
        visualize.save_chart(report, args.chart)
        print(f'\nSaved chart to {args.chart}')
    return 0


def cmd_session(args, parser):
    params = MACHINE_PARAMS if args.machine else DEFAULT_PARAMS
    draws = run_session(args.names, args.draws, params=params, seed=args.seed)
    for i, draw in enumerate(draws):
        winner = draw.name if draw.name is not None else 'NONE (timeout)'
        print(f'Draw {i + 1}: {winner} '
              f'({draw.result.selection_time_ms / 1000:.1f}s, '
              f'{draw.result.total_collisions} collisions)')
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        prog='oval-draw', description=__doc__.splitlines()[0])
    commands = parser.add_subparsers(dest='command', required=True)

    draw = commands.add_parser('draw', help='run a single draw')
    draw.add_argument('--seed', type=int, default=None)
    draw.add_argument('--set', dest='overrides', type=parse_override,
                      action='append', default=[], metavar='KEY=VALUE',
                      help='override one parameter, may be repeated')
    draw.set_defaults(func=cmd_draw)

    search = commands.add_parser('optimize', help='run the parameter search')
    search.add_argument('--seed', type=int, default=None)
    search.add_argument('--phase1-configs', type=int, default=c.PHASE1_CONFIGS)
    search.add_argument('--phase1-runs', type=int, default=c.PHASE1_RUNS)
    search.add_argument('--phase2-top', type=int, default=c.PHASE2_TOP)
    search.add_argument('--phase2-runs', type=int, default=c.PHASE2_RUNS)
    search.add_argument('--workers', type=int, default=1,
                        help='processes used to run draws in parallel')
    search.add_argument('--chart', default=None, metavar='PATH',
                        help='also save a chart of Phase 2 win counts')
    search.set_defaults(func=cmd_optimize)

    session = commands.add_parser(
        'session', help='draw winners among named participants')
    session.add_argument('names', nargs='+')
    session.add_argument('--draws', type=int, default=1)
    session.add_argument('--seed', type=int, default=None)
    session.add_argument('--machine', action='store_true',
                         help='use the interactive machine tuning')
    session.set_defaults(func=cmd_session)
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args, parser)


if __name__ == '__main__':
    sys.exit(main())
