"""Abstract per-track accessors over the detector responses of a truth track.

Each class exposes the responses of one category (simulated hits, CSC digis,
CSC stubs, GEM digis, RPC digis, trigger tracks, L1 and HLT objects) which
were associated with a single truth track by the upstream matching
machinery. The aggregation only ever reads from these accessors.

The geometric reductions shared by all implementations (mean positions,
median channels, closest candidates) are implemented here once.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Sequence, Tuple

import numpy as np

from gemcsc.data import Digi, GlobalPoint, GlobalVector, SimHit
from gemcsc.math import closest_index, mean_point, median_channel

__all__ = [
    "SimHitMatcher",
    "CSCDigiMatcher",
    "CSCStubMatcher",
    "GEMDigiMatcher",
    "RPCDigiMatcher",
    "TrackMatcher",
    "L1Matcher",
    "HLTMatcher",
    "MatchManager",
    "closest_candidate",
]


def positions(objects: Sequence) -> np.ndarray:
    """Stacks the global positions of a list of hits or digis.

    Parameters
    ----------
    objects : Sequence[Union[SimHit, Digi]]
        List of objects with a `position` attribute

    Returns
    -------
    np.ndarray
        (N, 3) Positions
    """
    if not len(objects):
        return np.empty((0, 3), dtype=np.float64)

    return np.vstack([obj.position.as_array() for obj in objects])


def closest_candidate(
    candidates: Sequence[Digi], ref: GlobalPoint
) -> Tuple[Digi, GlobalPoint]:
    """Finds the candidate closest to a reference point.

    Ties are resolved in favor of the first candidate in the input order.

    Parameters
    ----------
    candidates : Sequence[Digi]
        List of candidate digis
    ref : GlobalPoint
        Reference point

    Returns
    -------
    Digi
        Closest candidate, an invalid digi if there are no candidates
    GlobalPoint
        Position of the closest candidate
    """
    index = closest_index(positions(candidates), ref.as_array())
    if index < 0:
        return Digi(), GlobalPoint()

    best = candidates[index]
    return best, best.position


class SimHitMatcher(ABC):
    """Simulated hits of a truth track in the CSC, GEM and RPC detectors."""

    @abstractmethod
    def csc_chamber_ids(self) -> List:
        """Identifiers of the CSC chambers with simulated hits."""
        raise NotImplementedError

    @abstractmethod
    def csc_layer_count(self, chamber_id) -> int:
        """Number of layers with simulated hits in a CSC chamber."""
        raise NotImplementedError

    @abstractmethod
    def csc_hits_in_chamber(self, chamber_id) -> List[SimHit]:
        """Simulated hits in a CSC chamber."""
        raise NotImplementedError

    @abstractmethod
    def csc_hits_in_layer(self, layer_id) -> List[SimHit]:
        """Simulated hits in one layer of a CSC chamber."""
        raise NotImplementedError

    @abstractmethod
    def local_bending(self, chamber_id) -> float:
        """Local bending angle of the track in a CSC chamber."""
        raise NotImplementedError

    @abstractmethod
    def gem_superchamber_ids(self) -> List:
        """Identifiers of the GEM superchambers with simulated hits."""
        raise NotImplementedError

    @abstractmethod
    def gem_layer_count(self, superchamber_id) -> int:
        """Number of layers with simulated hits in a GEM superchamber."""
        raise NotImplementedError

    @abstractmethod
    def gem_hits_in_superchamber(self, superchamber_id) -> List[SimHit]:
        """Simulated hits in a GEM superchamber."""
        raise NotImplementedError

    @abstractmethod
    def gem_hits_in_chamber(self, chamber_id) -> List[SimHit]:
        """Simulated hits in one chamber (layer) of a GEM superchamber."""
        raise NotImplementedError

    @abstractmethod
    def rpc_chamber_ids(self) -> List:
        """Identifiers of the RPC rolls with simulated hits."""
        raise NotImplementedError

    @abstractmethod
    def rpc_hits_in_chamber(self, chamber_id) -> List[SimHit]:
        """Simulated hits in an RPC roll."""
        raise NotImplementedError

    def n_pads_with_hits(self) -> int:
        """Number of distinct GEM pads crossed by the simulated hits."""
        return 0

    @staticmethod
    def mean_position(hits: Sequence[SimHit]) -> GlobalPoint:
        """Mean global position of a list of simulated hits.

        Parameters
        ----------
        hits : Sequence[SimHit]
            List of simulated hits

        Returns
        -------
        GlobalPoint
            Mean position, the origin if there are no hits
        """
        return GlobalPoint.from_array(mean_point(positions(hits)))

    @staticmethod
    def mean_momentum(hits: Sequence[SimHit]) -> GlobalVector:
        """Mean momentum of a list of simulated hits.

        Parameters
        ----------
        hits : Sequence[SimHit]
            List of simulated hits

        Returns
        -------
        GlobalVector
            Mean momentum, a null vector if there are no hits
        """
        if not len(hits):
            return GlobalVector()

        moms = np.vstack([hit.momentum.as_array() for hit in hits])
        mean = mean_point(moms)
        return GlobalVector(float(mean[0]), float(mean[1]), float(mean[2]))

    @staticmethod
    def mean_strip(hits: Sequence[SimHit]) -> float:
        """Mean strip number of a list of simulated hits.

        Parameters
        ----------
        hits : Sequence[SimHit]
            List of simulated hits

        Returns
        -------
        float
            Mean strip, -1 if there are no hits
        """
        if not len(hits):
            return -1.0

        return float(np.mean([hit.strip for hit in hits]))


class CSCDigiMatcher(ABC):
    """CSC comparator (strip) and wire digis of a truth track."""

    @abstractmethod
    def strip_chamber_ids(self) -> List:
        """Identifiers of the CSC chambers with strip digis."""
        raise NotImplementedError

    @abstractmethod
    def strip_layer_count(self, chamber_id) -> int:
        """Number of layers with strip digis in a CSC chamber."""
        raise NotImplementedError

    @abstractmethod
    def strip_digis_in_chamber(self, chamber_id) -> List[Digi]:
        """Strip digis in a CSC chamber."""
        raise NotImplementedError

    @abstractmethod
    def wire_chamber_ids(self) -> List:
        """Identifiers of the CSC chambers with wire digis."""
        raise NotImplementedError

    @abstractmethod
    def wire_layer_count(self, chamber_id) -> int:
        """Number of layers with wire digis in a CSC chamber."""
        raise NotImplementedError

    @abstractmethod
    def wire_digis_in_chamber(self, chamber_id) -> List[Digi]:
        """Wire digis in a CSC chamber."""
        raise NotImplementedError

    @abstractmethod
    def median_position(
        self, strip_digis: Sequence[Digi], wire_digis: Sequence[Digi]
    ) -> GlobalPoint:
        """Global position of the median strip and wire digis of a chamber."""
        raise NotImplementedError

    def n_coincidence_strip_chambers(self, min_layers: int) -> int:
        """Number of chambers with strip digis in at least `min_layers` layers.

        Parameters
        ----------
        min_layers : int
            Minimum number of layers

        Returns
        -------
        int
            Number of chambers
        """
        return sum(
            self.strip_layer_count(d) >= min_layers for d in self.strip_chamber_ids()
        )

    def n_coincidence_wire_chambers(self, min_layers: int) -> int:
        """Number of chambers with wire digis in at least `min_layers` layers.

        Parameters
        ----------
        min_layers : int
            Minimum number of layers

        Returns
        -------
        int
            Number of chambers
        """
        return sum(
            self.wire_layer_count(d) >= min_layers for d in self.wire_chamber_ids()
        )


class CSCStubMatcher(ABC):
    """CSC trigger primitives (CLCT, ALCT, LCT) of a truth track."""

    @abstractmethod
    def clct_chamber_ids(self) -> List:
        """Identifiers of the CSC chambers with a matched CLCT."""
        raise NotImplementedError

    @abstractmethod
    def clct_in_chamber(self, chamber_id) -> Digi:
        """Best CLCT matched in a CSC chamber."""
        raise NotImplementedError

    @abstractmethod
    def alct_chamber_ids(self) -> List:
        """Identifiers of the CSC chambers with a matched ALCT."""
        raise NotImplementedError

    @abstractmethod
    def alct_in_chamber(self, chamber_id) -> Digi:
        """Best ALCT matched in a CSC chamber."""
        raise NotImplementedError

    @abstractmethod
    def lct_chamber_ids(self) -> List:
        """Identifiers of the CSC chambers with a matched LCT."""
        raise NotImplementedError

    @abstractmethod
    def lcts_in_chamber(self, chamber_id) -> List[Digi]:
        """All LCTs matched in a CSC chamber."""
        raise NotImplementedError

    @abstractmethod
    def pass_dphi_cut(self, chamber_id, charge_sign: int, dphi: float, pt: float) -> bool:
        """Whether a GEM/CSC bending angle passes the cut for a given pT."""
        raise NotImplementedError

    def lct_in_chamber(self, chamber_id) -> Digi:
        """Best LCT matched in a CSC chamber.

        Parameters
        ----------
        chamber_id : CSCDetId
            Chamber identifier

        Returns
        -------
        Digi
            First matched LCT, an invalid digi if there is none
        """
        lcts = self.lcts_in_chamber(chamber_id)
        return lcts[0] if len(lcts) else Digi()

    def digi_position(self, stub: Digi) -> GlobalPoint:
        """Global position of a trigger primitive."""
        return stub.position

    def check_stub_in_chamber(self, chamber_id, stub: Digi) -> bool:
        """Whether a stub is one of the LCTs matched in a chamber.

        Parameters
        ----------
        chamber_id : CSCDetId
            Chamber identifier
        stub : Digi
            Stub to look for

        Returns
        -------
        bool
            `True` if the stub was matched to the track
        """
        return any(lct == stub for lct in self.lcts_in_chamber(chamber_id))


class GEMDigiMatcher(ABC):
    """GEM digis, pads and copads of a truth track."""

    @abstractmethod
    def superchamber_ids(self) -> List:
        """Identifiers of the GEM superchambers with digis."""
        raise NotImplementedError

    @abstractmethod
    def digis_in_superchamber(self, superchamber_id) -> List[Digi]:
        """Digis in a GEM superchamber."""
        raise NotImplementedError

    @abstractmethod
    def digi_layer_count(self, superchamber_id) -> int:
        """Number of layers with digis in a GEM superchamber."""
        raise NotImplementedError

    @abstractmethod
    def pads_in_chamber(self, chamber_id) -> List[Digi]:
        """Pads in one chamber (layer) of a GEM superchamber."""
        raise NotImplementedError

    @abstractmethod
    def pads_in_superchamber(self, superchamber_id) -> List[Digi]:
        """Pads in a GEM superchamber."""
        raise NotImplementedError

    @abstractmethod
    def pad_layer_count(self, superchamber_id) -> int:
        """Number of layers with pads in a GEM superchamber."""
        raise NotImplementedError

    @abstractmethod
    def copad_superchamber_ids(self) -> List:
        """Identifiers of the GEM superchambers with copads."""
        raise NotImplementedError

    @abstractmethod
    def copads_in_superchamber(self, superchamber_id) -> List[Digi]:
        """Copads in a GEM superchamber."""
        raise NotImplementedError

    @abstractmethod
    def hs_from_pad(self, superchamber_id, pad: int) -> int:
        """CSC half-strip extrapolated from a GEM pad."""
        raise NotImplementedError

    def n_pads(self) -> int:
        """Total number of pads matched to the track."""
        return sum(len(self.pads_in_superchamber(d)) for d in self.superchamber_ids())

    @staticmethod
    def median_strip(digis: Sequence[Digi]) -> int:
        """Median channel of a list of digis (-1 if empty)."""
        channels = np.array([d.channel for d in digis], dtype=np.int64)
        return int(median_channel(channels))

    @staticmethod
    def closest_to(candidates: Sequence[Digi], ref: GlobalPoint):
        """Digi closest to a reference point, with its position."""
        return closest_candidate(candidates, ref)


class RPCDigiMatcher(ABC):
    """RPC digis of a truth track."""

    @abstractmethod
    def chamber_ids(self) -> List:
        """Identifiers of the RPC rolls with digis."""
        raise NotImplementedError

    @abstractmethod
    def digis_in_chamber(self, chamber_id) -> List[Digi]:
        """Digis in an RPC roll."""
        raise NotImplementedError

    @abstractmethod
    def hs_from_strip(self, chamber_id, strip: int) -> int:
        """CSC half-strip extrapolated from an RPC strip."""
        raise NotImplementedError

    @staticmethod
    def median_strip(digis: Sequence[Digi]) -> int:
        """Median channel of a list of digis (-1 if empty)."""
        return GEMDigiMatcher.median_strip(digis)

    @staticmethod
    def closest_to(candidates: Sequence[Digi], ref: GlobalPoint):
        """Digi closest to a reference point, with its position."""
        return closest_candidate(candidates, ref)


class TrackMatcher(ABC):
    """Track-finder objects and truth-track propagation."""

    @abstractmethod
    def tf_tracks(self) -> List:
        """Track-finder tracks matched to the truth track."""
        raise NotImplementedError

    @abstractmethod
    def best_tf_track(self):
        """Best track-finder track matched to the truth track."""
        raise NotImplementedError

    @abstractmethod
    def pass_tf_dphi_cut(self, track, station: int, pt: float) -> bool:
        """Whether the GEM/CSC bending of a track stub passes the cut."""
        raise NotImplementedError

    @abstractmethod
    def tf_cands(self) -> List:
        """Track-finder candidates matched to the truth track."""
        raise NotImplementedError

    @abstractmethod
    def gmt_reg_cands(self) -> List:
        """GMT regional candidates matched to the truth track."""
        raise NotImplementedError

    @abstractmethod
    def gmt_cands(self) -> List:
        """GMT candidates matched to the truth track."""
        raise NotImplementedError

    @abstractmethod
    def propagated_points(self, parity) -> List[Tuple[float, float]]:
        """(eta, phi) of the track propagated to stations 1 to 4.

        Parameters
        ----------
        parity : Parity
            Chamber parity which defines the propagation surface
        """
        raise NotImplementedError

    @abstractmethod
    def interstation_points(self, parity) -> Dict[int, GlobalPoint]:
        """Track propagated in between stations, keyed by station pair."""
        raise NotImplementedError


class L1Matcher(ABC):
    """L1 global muon trigger objects of a truth track."""

    @abstractmethod
    def l1_extras(self) -> List[Tuple]:
        """List of (L1 extra particle, angular distance) matches."""
        raise NotImplementedError


class HLTMatcher(ABC):
    """HLT muon objects of a truth track."""

    @abstractmethod
    def reco_track_extras(self) -> List:
        """Matched reconstructed track extras."""
        raise NotImplementedError

    @abstractmethod
    def reco_tracks(self) -> List:
        """Matched reconstructed tracks."""
        raise NotImplementedError

    @abstractmethod
    def reco_charged_candidates(self) -> List:
        """Matched reconstructed charged candidates."""
        raise NotImplementedError


class MatchManager:
    """Bundle of the per-category accessors of one truth track.

    Attributes
    ----------
    sim_track : SimTrack
        Truth track
    run_info : RunInfo
        Identifiers of the event which contains the track
    sim_hits : SimHitMatcher
        Simulated hits
    csc_digis : CSCDigiMatcher
        CSC strip and wire digis
    csc_stubs : CSCStubMatcher
        CSC trigger primitives
    gem_digis : GEMDigiMatcher
        GEM digis, pads and copads
    rpc_digis : RPCDigiMatcher
        RPC digis
    tracks : TrackMatcher
        Track-finder objects and propagation
    l1 : L1Matcher
        L1 objects
    hlt : HLTMatcher
        HLT objects
    """

    def __init__(
        self,
        sim_track,
        run_info,
        sim_hits: SimHitMatcher,
        csc_digis: CSCDigiMatcher,
        csc_stubs: CSCStubMatcher,
        gem_digis: GEMDigiMatcher,
        rpc_digis: RPCDigiMatcher,
        tracks: TrackMatcher,
        l1: L1Matcher,
        hlt: HLTMatcher,
    ):
        """Store the accessors of one truth track."""
        self.sim_track = sim_track
        self.run_info = run_info
        self.sim_hits = sim_hits
        self.csc_digis = csc_digis
        self.csc_stubs = csc_stubs
        self.gem_digis = gem_digis
        self.rpc_digis = rpc_digis
        self.tracks = tracks
        self.l1 = l1
        self.hlt = hlt
