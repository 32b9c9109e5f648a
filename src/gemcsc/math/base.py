"""Numba JIT compiled reductions over collections of channels and points."""

import numba as nb
import numpy as np

__all__ = ["median_channel", "mean_point"]


@nb.njit(cache=True)
def median_channel(channels: nb.int64[:]) -> nb.int64:
    """Median of a list of integer channels.

    For an even number of channels, the two central values are averaged and
    rounded down.

    Parameters
    ----------
    channels : np.ndarray
        (N) List of channel numbers

    Returns
    -------
    int
        Median channel, -1 if the list is empty
    """
    n = len(channels)
    if n == 0:
        return -1

    ordered = np.sort(channels)
    if n % 2 == 0:
        return (ordered[n // 2 - 1] + ordered[n // 2]) // 2

    return ordered[n // 2]


@nb.njit(cache=True)
def mean_point(points: nb.float64[:, :]) -> nb.float64[:]:
    """Mean of a set of 3D points.

    Parameters
    ----------
    points : np.ndarray
        (N, 3) Point coordinates

    Returns
    -------
    np.ndarray
        (3) Mean coordinates, all zeros if there are no points
    """
    result = np.zeros(3, dtype=np.float64)
    if points.shape[0] == 0:
        return result

    for i in range(points.shape[0]):
        result += points[i]

    return result / points.shape[0]
