"""Module with a data class object which represents a digitized signal.

The same structure is used for strip/wire digis, GEM pads and copads, RPC
strips and CSC trigger primitives (CLCT, ALCT, LCT). Attributes which do not
apply to a given signal type keep their default values.
"""

from dataclasses import dataclass, field
from typing import Any

from .base import DataBase
from .point import GlobalPoint

__all__ = ["Digi"]


@dataclass(eq=False)
class Digi(DataBase):
    """Digitized signal or trigger primitive.

    Attributes
    ----------
    det_id : Any
        Identifier of the detector unit which produced the signal. An unset
        identifier marks an invalid (default-constructed) digi.
    channel : int
        Strip, wire group, pad or half-strip number
    bx : int
        Bunch crossing
    quality : int
        Trigger primitive quality code
    pattern : int
        Raw trigger primitive pattern ID
    dphi : float
        Bending angle stored in the trigger primitive
    wire_group : int
        Key wire group of an LCT
    gem_dphi : float
        GEM/CSC bending angle attached to a track-finder stub
    position : GlobalPoint
        Global position of the signal
    """

    det_id: Any = None
    channel: int = -1
    bx: int = -9
    quality: int = -1
    pattern: int = 0
    dphi: float = -9.0
    wire_group: int = -1
    gem_dphi: float = -99.0
    position: GlobalPoint = field(default_factory=GlobalPoint)

    @property
    def is_valid(self):
        """Whether the digi was produced by a detector unit."""
        return self.det_id is not None
