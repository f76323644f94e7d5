"""Forecast-scoring losses, array helpers and numerical optimizers."""

__version__ = "0.1.0"