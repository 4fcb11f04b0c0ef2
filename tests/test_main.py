import argparse
import contextlib
import io
import unittest
from unittest import mock

import main
from optimizer import OptimizationReport


def run_cli(*argv):
    out = io.StringIO()
    with contextlib.redirect_stdout(out):
        status = main.main(list(argv))
    return status, out.getvalue()


class ParseOverrideTests(unittest.TestCase):
    def test_numbers_are_parsed(self):
        self.assertEqual(main.parse_override("num_balls=5"), ("num_balls", 5))
        self.assertEqual(main.parse_override("chaos_x=0.01"),
                         ("chaos_x", 0.01))

    def test_malformed_overrides_are_rejected(self):
        with self.assertRaises(argparse.ArgumentTypeError):
            main.parse_override("num_balls")
        with self.assertRaises(argparse.ArgumentTypeError):
            main.parse_override("num_balls=many")


class CommandTests(unittest.TestCase):
    def test_draw_prints_a_summary(self):
        status, output = run_cli(
            "draw", "--seed", "1", "--set", "num_balls=3",
            "--set", "mix_time=500", "--set", "selection_timeout=1000")
        self.assertEqual(status, 0)
        self.assertIn("Winner:", output)
        self.assertIn("Ball-ball:", output)

    def test_draw_rejects_unknown_params(self):
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                run_cli("draw", "--set", "colour=3")

    def test_optimize_fails_without_viable_configs(self):
        report = OptimizationReport(phase1=[])
        with mock.patch.object(main, "optimize", return_value=report):
            status, output = run_cli("optimize", "--phase1-configs", "1")
        self.assertEqual(status, 1)
        self.assertIn("No configs achieved", output)

    def test_session_lists_each_draw(self):
        status, output = run_cli(
            "session", "ann", "bo", "--draws", "2", "--seed", "3")
        self.assertEqual(status, 0)
        self.assertIn("Draw 1:", output)
        self.assertIn("Draw 2:", output)


if __name__ == "__main__":
    unittest.main()
