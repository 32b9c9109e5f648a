"""Position-based transverse-momentum estimate from three CSC stations.

The estimate uses the position of the track in stations 1, 2 and 3. Since
consecutive chambers alternate between the front and the back of a disk, the
lever arm depends on the parity of the chambers crossed by the track. The
parity path fixes which parametrization applies.
"""

import math
from abc import ABC, abstractmethod
from typing import Optional, Sequence, Tuple

from gemcsc.utils.enums import Parity
from gemcsc.utils.globals import ESTIMATE_STATIONS

__all__ = [
    "PARITY_PATHS",
    "select_parity_path",
    "DeltaYEstimator",
    "estimate_pt",
]

# Parity of the chambers in stations 1, 2 and 3, in order of preference
PARITY_PATHS = (
    (Parity.ODD, Parity.EVEN, Parity.EVEN),
    (Parity.ODD, Parity.ODD, Parity.ODD),
    (Parity.EVEN, Parity.EVEN, Parity.EVEN),
    (Parity.EVEN, Parity.ODD, Parity.ODD),
)


def select_parity_path(masks: Sequence[int]) -> int:
    """Selects the first parity path with a presence in all three stations.

    Parameters
    ----------
    masks : Sequence[int]
        (3) Parity presence masks in stations 1, 2 and 3

    Returns
    -------
    int
        Index of the parity path, -1 if no path is complete
    """
    for tag, path in enumerate(PARITY_PATHS):
        if all(mask & parity.bit for mask, parity in zip(masks, path)):
            return tag

    return -1


class EstimatorBase(ABC):
    """Base class of all position-based pT estimators.

    Attributes
    ----------
    name : str
        Name of the estimator
    """

    name = None
    aliases = ()

    @abstractmethod
    def __call__(self, points: Tuple, eta: float, path: int) -> float:
        """Estimates the transverse momentum of a track.

        Parameters
        ----------
        points : Tuple[GlobalPoint, GlobalPoint, GlobalPoint]
            Position of the track in stations 1, 2 and 3
        eta : float
            Pseudorapidity of the track
        path : int
            Parity path index

        Returns
        -------
        float
            Transverse momentum estimate
        """
        raise NotImplementedError


class DeltaYEstimator(EstimatorBase):
    """Estimates the pT from the bending between stations 1-2 and 2-3.

    The three points are rotated into the frame where the station 2 point
    sits along the local y axis. The difference between the y displacements
    of the 2-3 and 1-2 segments (the latter scaled by a lever arm ratio) is
    inversely proportional to the transverse momentum.

    Attributes
    ----------
    prop : List[float]
        (4) Lever arm ratio of each parity path
    slope : List[float]
        (4) Slope of the 1/pT dependence of each parity path
    intercept : List[float]
        (4) Offset of each parity path
    """

    name = "delta_y"

    def __init__(
        self,
        prop: Optional[Sequence[float]] = None,
        slope: Optional[Sequence[float]] = None,
        intercept: Optional[Sequence[float]] = None,
    ):
        """Store the parametrization of each parity path.

        Parameters
        ----------
        prop : Sequence[float], optional
            (4) Lever arm ratio of each parity path
        slope : Sequence[float], optional
            (4) Slope of the 1/pT dependence of each parity path
        intercept : Sequence[float], optional
            (4) Offset of each parity path
        """
        num_paths = len(PARITY_PATHS)
        self.prop = list(prop) if prop is not None else [1.0] * num_paths
        self.slope = list(slope) if slope is not None else [1.0] * num_paths
        self.intercept = list(intercept) if intercept is not None else [0.0] * num_paths
        for key in ("prop", "slope", "intercept"):
            assert len(getattr(self, key)) == num_paths, (
                f"Must provide one `{key}` value per parity path. "
                f"Got {len(getattr(self, key))}, but expected {num_paths}."
            )

    def __call__(self, points, eta, path):
        """Estimates the transverse momentum of a track.

        Returns -1 if the parity path is not defined or the track is not bent.
        """
        if path < 0 or path >= len(PARITY_PATHS):
            return -1.0

        phi2 = points[1].phi
        sin_phi, cos_phi = math.sin(phi2), math.cos(phi2)
        y1, y2, y3 = (-p.x * sin_phi + p.y * cos_phi for p in points)

        ddy = (y3 - y2) - self.prop[path] * (y2 - y1)
        if ddy == 0.0:
            return -1.0

        return self.slope[path] / abs(ddy) + self.intercept[path]


def estimate_pt(estimator, records, points, mask_attr, eta):
    """Runs a pT estimator on the first complete parity path of a track.

    Parameters
    ----------
    estimator : EstimatorBase
        Position-based pT estimator
    records : List[PerStationRecord]
        Per-station records of the track
    points : Dict[Tuple[int, Parity], GlobalPoint]
        Position of the track per (logical station, parity) slot
    mask_attr : str
        Name of the presence mask which defines the available slots
    eta : float
        Pseudorapidity of the track

    Returns
    -------
    float
        Transverse momentum estimate, -1 if no parity path is complete
    bool
        Whether a complete parity path was found
    """
    masks = [getattr(records[s], mask_attr) for s in ESTIMATE_STATIONS]
    tag = select_parity_path(masks)
    if tag < 0:
        return -1.0, False

    triple = tuple(
        points[s, parity] for s, parity in zip(ESTIMATE_STATIONS, PARITY_PATHS[tag])
    )

    return estimator(triple, eta, tag), True
