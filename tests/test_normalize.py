from __future__ import annotations

from decimal import Decimal
import importlib.util
import unittest

import numpy as np

from chunkplot import PlotDataError, ValidationWarning, series_from_arrays
from chunkplot.series import SeriesStyle


HAS_PANDAS = importlib.util.find_spec("pandas") is not None
HAS_TORCH = importlib.util.find_spec("torch") is not None


class SeriesFromArraysTests(unittest.TestCase):
    def test_x_defaults_to_sample_index(self) -> None:
        series = series_from_arrays("s", [3, 1, 2])
        self.assertEqual([(p.x, p.y) for p in series.points], [(0.0, 3.0), (1.0, 1.0), (2.0, 2.0)])
        self.assertEqual(series.style, SeriesStyle())

    def test_optional_columns_and_series_options(self) -> None:
        series = series_from_arrays(
            "s",
            np.asarray([1.0, 2.0]),
            x=[10, 20],
            z=[5, 6],
            color=[0.5, float("nan")],
            labels=["a", "b"],
            visible=False,
        )
        first, second = series.points
        self.assertEqual((first.x, first.z, first.color_value, first.label), (10.0, 5.0, 0.5, "a"))
        self.assertIsNone(second.color_value)
        self.assertFalse(series.visible)

    def test_non_finite_points_are_dropped_with_warning(self) -> None:
        with self.assertWarns(ValidationWarning):
            series = series_from_arrays("s", [1.0, float("nan"), 3.0, None], x=[0, 1, float("inf"), 3])
        self.assertEqual([p.x for p in series.points], [0.0])

    def test_decimal_values_are_accepted(self) -> None:
        series = series_from_arrays("s", [Decimal("1.5"), Decimal("2.25")])
        self.assertEqual([p.y for p in series.points], [1.5, 2.25])

    def test_invalid_inputs_raise(self) -> None:
        cases = [
            dict(y=None),
            dict(y=[]),
            dict(y=[1, 2], x=[1]),
            dict(y=[1, 2], z=[1, 2, 3]),
            dict(y=[1, 2], labels=["a"]),
            dict(y=np.ones((2, 2))),
            dict(y=[[1, 2], [3, 4]]),
            dict(y=[float("nan")]),
            dict(y=["a", "b"]),
            dict(y="abc"),
        ]
        for kwargs in cases:
            with self.subTest(kwargs=kwargs), self.assertRaises(PlotDataError):
                series_from_arrays("s", **kwargs)

    @unittest.skipUnless(HAS_PANDAS, "pandas not installed")
    def test_dataframe_columns(self) -> None:
        import pandas as pd

        frame = pd.DataFrame({"t": [0.0, 1.0, 2.0], "v": [4, 5, 6], "c": [1.0, 2.0, 3.0]})
        series = series_from_arrays("s", "v", x="t", color="c", data=frame)
        self.assertEqual([(p.x, p.y, p.color_value) for p in series.points], [(0.0, 4.0, 1.0), (1.0, 5.0, 2.0), (2.0, 6.0, 3.0)])
        with self.assertRaises(PlotDataError):
            series_from_arrays("s", "missing", data=frame)
        with self.assertRaises(PlotDataError):
            series_from_arrays("s", data=frame)

    @unittest.skipUnless(HAS_PANDAS, "pandas not installed")
    def test_single_numeric_column_is_inferred(self) -> None:
        import pandas as pd

        frame = pd.DataFrame({"label": ["a", "b"], "v": [1.0, 2.0]})
        series = series_from_arrays("s", data=frame)
        self.assertEqual([p.y for p in series.points], [1.0, 2.0])

    @unittest.skipUnless(HAS_TORCH, "torch not installed")
    def test_torch_tensor_input(self) -> None:
        import torch

        series = series_from_arrays("s", torch.tensor([1.0, 2.0, 3.0]))
        self.assertEqual([p.y for p in series.points], [1.0, 2.0, 3.0])
        with self.assertRaises(PlotDataError):
            series_from_arrays("s", torch.ones((2, 2)))


if __name__ == "__main__":
    unittest.main()
