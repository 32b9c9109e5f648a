"""Module with data classes which represent global positions and momenta."""

import math
from dataclasses import dataclass

import numpy as np

from .base import DataBase

__all__ = ["GlobalPoint", "GlobalVector"]


@dataclass(eq=False)
class GlobalPoint(DataBase):
    """Position in the global detector frame.

    The default point sits at the origin, which is what an unset position
    looks like in the upstream matching machinery.

    Attributes
    ----------
    x : float
        x coordinate (cm)
    y : float
        y coordinate (cm)
    z : float
        z coordinate (cm)
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def from_array(cls, array):
        """Builds a point from a (3) array of coordinates.

        Parameters
        ----------
        array : np.ndarray
            (3) Coordinates

        Returns
        -------
        GlobalPoint
            Point object
        """
        return cls(float(array[0]), float(array[1]), float(array[2]))

    @classmethod
    def from_eta_phi(cls, eta, phi, z=None):
        """Builds a point on a plane of constant z from its angular coordinates.

        Parameters
        ----------
        eta : float
            Pseudorapidity
        phi : float
            Azimuthal angle
        z : float, optional
            z coordinate of the plane. If not specified, a unit transverse
            radius is used instead.

        Returns
        -------
        GlobalPoint
            Point object
        """
        perp = 1.0 if z is None else abs(z / math.sinh(eta))
        z = perp * math.sinh(eta) if z is None else z
        return cls(perp * math.cos(phi), perp * math.sin(phi), z)

    def as_array(self):
        """Coordinates as a (3) array.

        Returns
        -------
        np.ndarray
            (3) Coordinates
        """
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    @property
    def perp(self):
        """Transverse distance to the beam axis."""
        return math.hypot(self.x, self.y)

    @property
    def phi(self):
        """Azimuthal angle in [-pi, pi]."""
        return math.atan2(self.y, self.x)

    @property
    def eta(self):
        """Pseudorapidity."""
        perp = self.perp
        if perp == 0.0:
            if self.z == 0.0:
                return 0.0
            return math.copysign(math.inf, self.z)

        return math.asinh(self.z / perp)

    def is_nan(self):
        """Whether any of the coordinates is not a number.

        Returns
        -------
        bool
            `True` if the point is not valid
        """
        return math.isnan(self.x) or math.isnan(self.y) or math.isnan(self.z)


@dataclass(eq=False)
class GlobalVector(GlobalPoint):
    """Momentum vector in the global detector frame.

    Attributes
    ----------
    x : float
        x component (GeV/c)
    y : float
        y component (GeV/c)
    z : float
        z component (GeV/c)
    """
