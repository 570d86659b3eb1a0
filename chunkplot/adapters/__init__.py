from chunkplot.adapters.normalize import series_from_arrays

__all__ = ["series_from_arrays"]
