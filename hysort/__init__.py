"""Density-based outlier detection on a grid of hypercubes, with sorted hypercube trees."""

__version__ = "0.1.0"