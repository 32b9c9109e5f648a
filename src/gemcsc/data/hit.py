"""Module with a data class object which represents a simulated hit."""

from dataclasses import dataclass, field
from typing import Any

from .base import DataBase
from .point import GlobalPoint, GlobalVector

__all__ = ["SimHit"]


@dataclass(eq=False)
class SimHit(DataBase):
    """Energy deposition of a simulated particle in a detector layer.

    Attributes
    ----------
    det_id : Any
        Identifier of the layer (or eta partition) which registered the hit
    position : GlobalPoint
        Global position of the hit
    momentum : GlobalVector
        Momentum of the particle at the hit
    strip : float
        Strip (or half-strip) number closest to the hit
    """

    det_id: Any = None
    position: GlobalPoint = field(default_factory=GlobalPoint)
    momentum: GlobalVector = field(default_factory=GlobalVector)
    strip: float = -1.0
