"""Numba-accelerated geometric and statistical routines."""

from .base import mean_point, median_channel
from .distance import closest_index, delta_phi, euclidean, sqeuclidean
