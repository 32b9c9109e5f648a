"""Module with data classes which represent simulation truth information."""

from dataclasses import dataclass, field

from gemcsc.utils.globals import MUON_PID

from .base import DataBase
from .point import GlobalPoint, GlobalVector

__all__ = ["SimTrack", "SimVertex", "RunInfo"]


@dataclass(eq=False)
class SimTrack(DataBase):
    """Simulated particle trajectory.

    Attributes
    ----------
    id : int
        Track ID within the event
    pdg_code : int
        PDG code of the particle
    charge : float
        Electric charge
    momentum : GlobalVector
        Initial momentum (GeV/c)
    vertex_index : int
        Index of the originating vertex, -1 if there is none
    gen_index : int
        Index of the generator particle, -1 if there is none
    """

    id: int = -1
    pdg_code: int = 0
    charge: float = 0.0
    momentum: GlobalVector = field(default_factory=GlobalVector)
    vertex_index: int = -1
    gen_index: int = -1

    @property
    def no_vertex(self):
        """Whether the track has no associated vertex."""
        return self.vertex_index < 0

    @property
    def no_genpart(self):
        """Whether the track has no associated generator particle."""
        return self.gen_index < 0

    @property
    def is_muon(self):
        """Whether the track is a muon."""
        return abs(self.pdg_code) == MUON_PID

    @property
    def pt(self):
        """Transverse momentum."""
        return self.momentum.perp

    @property
    def eta(self):
        """Pseudorapidity of the momentum."""
        return self.momentum.eta

    @property
    def phi(self):
        """Azimuthal angle of the momentum."""
        return self.momentum.phi

    @property
    def charge_sign(self):
        """Charge sign code used by the bending cuts (1: positive, 0: else)."""
        return 1 if self.charge > 0 else 0


@dataclass(eq=False)
class SimVertex(DataBase):
    """Simulated vertex.

    Attributes
    ----------
    id : int
        Vertex ID within the event
    position : GlobalPoint
        Vertex position
    """

    id: int = -1
    position: GlobalPoint = field(default_factory=GlobalPoint)


@dataclass(eq=False)
class RunInfo(DataBase):
    """Run information related to a specific event.

    Attributes
    ----------
    run : int
        Run ID
    lumi : int
        Luminosity block ID
    event : int
        Event ID
    """

    run: int = -1
    lumi: int = -1
    event: int = -1
