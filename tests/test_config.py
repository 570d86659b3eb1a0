from __future__ import annotations

import unittest

from chunkplot.config import DEFAULT_OPTIONS, ProgressiveOptions, apply_defaults, optimal_chunk_size
from chunkplot.errors import ConfigurationError


class ProgressiveOptionsTests(unittest.TestCase):
    def test_defaults(self) -> None:
        opts = apply_defaults(None)
        self.assertEqual(opts, DEFAULT_OPTIONS)
        self.assertFalse(opts.enabled)
        self.assertEqual(opts.chunk_size, 100)
        self.assertEqual(opts.inter_chunk_delay_ms, 50)
        self.assertAlmostEqual(opts.inter_chunk_delay_s, 0.05)

    def test_overrides_merge_over_defaults(self) -> None:
        opts = apply_defaults({"enabled": True, "chunk_size": 7})
        self.assertTrue(opts.enabled)
        self.assertEqual(opts.chunk_size, 7)
        self.assertEqual(opts.inter_chunk_delay_ms, 50)

    def test_options_instance_is_validated_too(self) -> None:
        with self.assertRaisesRegex(ConfigurationError, "chunk_size must be > 0"):
            apply_defaults(ProgressiveOptions(chunk_size=0))

    def test_invalid_values_raise(self) -> None:
        for bad in (
            {"chunk_size": 0},
            {"chunk_size": -3},
            {"chunk_size": 2.5},
            {"chunk_size": True},
            {"enabled": "yes"},
            {"inter_chunk_delay_ms": -1},
            {"large_dataset_threshold": 0},
        ):
            with self.assertRaises(ConfigurationError, msg=repr(bad)):
                apply_defaults(bad)

    def test_unknown_option_raises(self) -> None:
        with self.assertRaisesRegex(ConfigurationError, "Unknown progressive option: chunk"):
            apply_defaults({"chunk": 5})

    def test_optimal_chunk_size(self) -> None:
        self.assertEqual(optimal_chunk_size(0), 1)
        self.assertEqual(optimal_chunk_size(999), 999)
        self.assertEqual(optimal_chunk_size(1_000), 500)
        self.assertEqual(optimal_chunk_size(9_999), 500)
        self.assertEqual(optimal_chunk_size(10_000), 1_000)
        self.assertEqual(optimal_chunk_size(100_000), 2_000)
        with self.assertRaises(ValueError):
            optimal_chunk_size(-1)


if __name__ == "__main__":
    unittest.main()
