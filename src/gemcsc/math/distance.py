"""Numba JIT compiled geometric routines used to select matching candidates.

All points are 3D global positions, stored as (3) or (N, 3) arrays.
"""

import numba as nb
import numpy as np

__all__ = ["euclidean", "sqeuclidean", "closest_index", "delta_phi", "METRICS"]

# Available distance metrics (casting is important for numba optimization)
METRICS = {
    "euclidean": np.int64(0),
    "sqeuclidean": np.int64(1),
}


@nb.njit(cache=True)
def euclidean(x: nb.float64[:], y: nb.float64[:]) -> nb.float64:
    """Compute the Euclidean distance (L2) between two 3D points.

    Parameters
    ----------
    x : np.ndarray
        (3) Coordinates of the first point
    y : np.ndarray
        (3) Coordinates of the second point

    Returns
    -------
    float
        Euclidean distance
    """
    return np.sqrt((y[0] - x[0]) ** 2 + (y[1] - x[1]) ** 2 + (y[2] - x[2]) ** 2)


@nb.njit(cache=True)
def sqeuclidean(x: nb.float64[:], y: nb.float64[:]) -> nb.float64:
    """Compute the squared Euclidean distance between two 3D points.

    Parameters
    ----------
    x : np.ndarray
        (3) Coordinates of the first point
    y : np.ndarray
        (3) Coordinates of the second point

    Returns
    -------
    float
        Squared Euclidean distance
    """
    return (y[0] - x[0]) ** 2 + (y[1] - x[1]) ** 2 + (y[2] - x[2]) ** 2


@nb.njit(cache=True)
def closest_index(points: nb.float64[:, :], ref: nb.float64[:]) -> nb.int64:
    """Finds the point closest to a reference point.

    Ties are resolved in favor of the first point in the input order.

    Parameters
    ----------
    points : np.ndarray
        (N, 3) Candidate point coordinates
    ref : np.ndarray
        (3) Reference point coordinates

    Returns
    -------
    int
        Index of the closest candidate, -1 if there are no candidates
    """
    best, best_dist = -1, np.inf
    for i in range(points.shape[0]):
        dist = sqeuclidean(points[i], ref)
        if dist < best_dist:
            best, best_dist = i, dist

    return best


@nb.njit(cache=True)
def delta_phi(phi1: nb.float64, phi2: nb.float64) -> nb.float64:
    """Difference between two azimuthal angles, folded into [-pi, pi).

    Parameters
    ----------
    phi1 : float
        First angle
    phi2 : float
        Second angle

    Returns
    -------
    float
        Folded angular difference `phi1 - phi2`
    """
    result = phi1 - phi2
    while result >= np.pi:
        result -= 2 * np.pi
    while result < -np.pi:
        result += 2 * np.pi

    return result
