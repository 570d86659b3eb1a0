from __future__ import annotations

import unittest

import numpy as np

from chunkplot.scales import color_bar_ticks, format_tick_labels, generate_nice_ticks, nice_step


class ScaleTests(unittest.TestCase):
    def test_nice_step_rounds_to_one_two_five(self) -> None:
        self.assertEqual(nice_step(10.0, 5), 2.0)
        self.assertEqual(nice_step(2.0, 5), 0.5)
        self.assertEqual(nice_step(100.0, 11), 10.0)
        with self.assertRaises(ValueError):
            nice_step(0.0, 5)

    def test_nice_ticks_use_round_steps(self) -> None:
        ticks = generate_nice_ticks(0.0, 10.0, 5)
        self.assertEqual(ticks.tolist(), [0.0, 2.0, 4.0, 6.0, 8.0, 10.0])

    def test_nice_ticks_stay_inside_the_range(self) -> None:
        ticks = generate_nice_ticks(1.0, 9.5, 5)
        self.assertEqual(ticks.tolist(), [2.0, 4.0, 6.0, 8.0])

    def test_nice_ticks_reject_non_positive_target(self) -> None:
        with self.assertRaises(ValueError):
            generate_nice_ticks(0.0, 1.0, 0)

    def test_labels_use_consistent_decimals_from_step(self) -> None:
        ticks = np.asarray([1.5, 2.0, 2.5, 3.0], dtype=np.float64)
        self.assertEqual(format_tick_labels(ticks), ["1.5", "2", "2.5", "3"])

    def test_labels_preserve_integer_trailing_zeros(self) -> None:
        ticks = np.asarray([20.0, 30.0, 40.0], dtype=np.float64)
        self.assertEqual(format_tick_labels(ticks), ["20", "30", "40"])

    def test_labels_snap_near_zero(self) -> None:
        ticks = np.asarray([-1.0, -4.4409e-16, 1.0], dtype=np.float64)
        self.assertEqual(format_tick_labels(ticks)[1], "0")

    def test_color_bar_ticks(self) -> None:
        values, labels = color_bar_ticks(0.0, 10.0)
        self.assertEqual(values, (0.0, 2.0, 4.0, 6.0, 8.0, 10.0))
        self.assertEqual(labels, ("0", "2", "4", "6", "8", "10"))

    def test_color_bar_ticks_accept_reversed_bounds(self) -> None:
        self.assertEqual(color_bar_ticks(2.0, 0.0)[0], (0.0, 0.5, 1.0, 1.5, 2.0))

    def test_color_bar_ticks_for_flat_and_non_finite_ranges(self) -> None:
        self.assertEqual(color_bar_ticks(5.0, 5.0), ((5.0,), ("5",)))
        self.assertEqual(color_bar_ticks(float("nan"), 1.0), ((), ()))


if __name__ == "__main__":
    unittest.main()
