from __future__ import annotations

import unittest

import numpy as np

from chunkplot.series import Point, Series
from chunkplot.stats import BYTES_PER_POINT, aggregate, format_bytes, format_large_number


class AggregateTests(unittest.TestCase):
    def test_empty_input_yields_zero_snapshot(self) -> None:
        stats = aggregate([])
        self.assertEqual(stats.total_points, 0)
        self.assertEqual(stats.series_count, 0)
        self.assertEqual(stats.x_range, (0.0, 0.0))
        self.assertEqual(stats.y_range, (0.0, 0.0))
        self.assertIsNone(stats.z_range)
        self.assertEqual(stats.estimated_bytes, 0)

    def test_ranges_span_every_series(self) -> None:
        series = [
            Series("a", [Point(1, -1), Point(3, 5)]),
            Series("b", [Point(-2, 2, z=7.5)]),
            Series("c", []),
        ]
        stats = aggregate(series)
        self.assertEqual(stats.total_points, 3)
        self.assertEqual(stats.series_count, 3)
        self.assertEqual(stats.x_range, (-2.0, 3.0))
        self.assertEqual(stats.y_range, (-1.0, 5.0))
        self.assertEqual(stats.z_range, (7.5, 7.5))
        self.assertEqual(stats.estimated_bytes, 3 * BYTES_PER_POINT)

    def test_nan_coordinates_count_but_do_not_widen_ranges(self) -> None:
        stats = aggregate([Series("a", [Point(0, float("nan")), Point(1, 4)])])
        self.assertEqual(stats.total_points, 2)
        self.assertEqual(stats.x_range, (0.0, 1.0))
        self.assertEqual(stats.y_range, (4.0, 4.0))

    def test_numpy_scalar_coordinates_are_numbers(self) -> None:
        points = [Point(x, x * 2, z=np.float32(1.5)) for x in np.arange(5)]
        stats = aggregate([Series("a", points)])
        self.assertEqual(stats.x_range, (0.0, 4.0))
        self.assertEqual(stats.y_range, (0.0, 8.0))
        self.assertEqual(stats.z_range, (1.5, 1.5))
        self.assertIsInstance(stats.x_range[1], float)

    def test_memory_helpers(self) -> None:
        stats = aggregate([Series("a", [Point(i, i) for i in range(10)])])
        self.assertEqual(stats.memory_label, "1000 B")
        self.assertAlmostEqual(stats.memory_usage_mb, 1000 / (1024 * 1024))


class FormattingTests(unittest.TestCase):
    def test_format_bytes(self) -> None:
        self.assertEqual(format_bytes(0), "0 B")
        self.assertEqual(format_bytes(100), "100 B")
        self.assertEqual(format_bytes(1024), "1 KB")
        self.assertEqual(format_bytes(1536), "1.5 KB")
        self.assertEqual(format_bytes(1024 * 1024), "1 MB")
        self.assertEqual(format_bytes(-5), "Invalid")
        self.assertEqual(format_bytes(float("inf")), "Invalid")

    def test_format_large_number(self) -> None:
        self.assertEqual(format_large_number(999), "999")
        self.assertEqual(format_large_number(1500), "1.5K")
        self.assertEqual(format_large_number(-1500), "-1.5K")
        self.assertEqual(format_large_number(2_500_000), "2.5M")
        self.assertEqual(format_large_number(3_000_000_000), "3.0B")
        self.assertEqual(format_large_number(float("nan")), "Invalid")


if __name__ == "__main__":
    unittest.main()
