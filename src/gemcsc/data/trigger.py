"""Module with data classes which represent trigger and HLT objects.

These are the objects matched to a truth track downstream of the local CSC
trigger: track-finder tracks, L1 extra particles and HLT muon objects.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .base import DataBase
from .digi import Digi

__all__ = [
    "TFTrack",
    "L1Extra",
    "RecoTrackExtra",
    "RecoTrack",
    "RecoChargedCandidate",
]


@dataclass(eq=False)
class TFTrack(DataBase):
    """Track-finder track built from CSC trigger stubs.

    The three stub lists are aligned: the i-th identifier, stub and
    (eta, phi) pair describe the same stub.

    Attributes
    ----------
    pt, eta, phi : float
        Track kinematics
    pt_packed, eta_packed, phi_packed, quality_packed : int
        Hardware-encoded kinematics and quality
    dphi12, dphi23 : int
        Packed phi differences between stations 1-2 and 2-3
    has_me1, has_me2 : bool
        Whether the track has a stub in station 1/2
    n_stubs : int
        Number of stubs
    dr : float
        Angular distance to the truth track
    charge_sign : int
        Charge sign code
    trigger_ids : List[CSCDetId]
        Chamber identifier of each stub
    trigger_digis : List[Digi]
        Stubs
    trigger_eta_phis : List[Tuple[float, float]]
        (eta, phi) of each stub
    """

    pt: float = 0.0
    eta: float = 0.0
    phi: float = -9.0
    pt_packed: int = 0
    eta_packed: int = 0
    phi_packed: int = 0
    quality_packed: int = 0
    dphi12: int = 0
    dphi23: int = 0
    has_me1: bool = False
    has_me2: bool = False
    n_stubs: int = 0
    dr: float = 10.0
    charge_sign: int = 99
    trigger_ids: List = field(default_factory=list)
    trigger_digis: List[Digi] = field(default_factory=list)
    trigger_eta_phis: List[Tuple[float, float]] = field(default_factory=list)

    def digi_in_me(self, station: int, ring: int) -> Optional[int]:
        """Finds the stub of the track in a given CSC station and ring.

        Parameters
        ----------
        station : int
            Station number
        ring : int
            Ring number

        Returns
        -------
        int, optional
            Index of the stub in the stub lists, `None` if there is none
        """
        for i, det_id in enumerate(self.trigger_ids):
            if det_id.station == station and det_id.ring == ring:
                return i

        return None


@dataclass(eq=False)
class L1Extra(DataBase):
    """L1 extra muon particle.

    Attributes
    ----------
    pt, eta, phi : float
        Kinematics of the particle
    """

    pt: float = -99.0
    eta: float = -99.0
    phi: float = -99.0


@dataclass(eq=False)
class RecoTrackExtra(DataBase):
    """Extra information of an HLT reconstructed track.

    Attributes
    ----------
    pt_inner, eta_inner, phi_inner : float
        Momentum magnitude and position angles at the innermost hit
    pt_outer, eta_outer, phi_outer : float
        Momentum magnitude and position angles at the outermost hit
    """

    pt_inner: float = -99.0
    eta_inner: float = -99.0
    phi_inner: float = -99.0
    pt_outer: float = -99.0
    eta_outer: float = -99.0
    phi_outer: float = -99.0


@dataclass(eq=False)
class RecoTrack(DataBase):
    """HLT reconstructed track.

    Attributes
    ----------
    pt_outer, eta_outer, phi_outer : float
        Kinematics at the outermost hit
    """

    pt_outer: float = -99.0
    eta_outer: float = -99.0
    phi_outer: float = -99.0


@dataclass(eq=False)
class RecoChargedCandidate(DataBase):
    """HLT muon candidate.

    Attributes
    ----------
    pt, eta, phi : float
        Kinematics of the candidate
    n_valid_dt_hits, n_valid_csc_hits, n_valid_rpc_hits : int
        Number of valid hits of the underlying track in each subdetector
    """

    pt: float = -99.0
    eta: float = -99.0
    phi: float = -99.0
    n_valid_dt_hits: int = 0
    n_valid_csc_hits: int = 0
    n_valid_rpc_hits: int = 0
