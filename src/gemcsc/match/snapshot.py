"""In-memory match accessors built from event snapshot dictionaries.

An event snapshot stores, for each truth track, the detector responses that
the upstream matching machinery associated with it. The functions in this
module parse the plain dictionaries of a snapshot (as read from YAML files)
into the data structures of :mod:`gemcsc.data` and wrap them into the
accessors of :mod:`gemcsc.match.base`.
"""

import math
from collections import OrderedDict
from typing import Dict, Optional

import numpy as np

from gemcsc.data import (
    Digi,
    GlobalPoint,
    GlobalVector,
    L1Extra,
    RecoChargedCandidate,
    RecoTrack,
    RecoTrackExtra,
    RunInfo,
    SimHit,
    SimTrack,
    SimVertex,
    TFTrack,
)
from gemcsc.geo import CSCDetId, GEMDetId, RPCDetId
from gemcsc.utils.enums import Parity

from .base import (
    CSCDigiMatcher,
    CSCStubMatcher,
    GEMDigiMatcher,
    HLTMatcher,
    L1Matcher,
    MatchManager,
    RPCDigiMatcher,
    SimHitMatcher,
    TrackMatcher,
)

__all__ = [
    "DPhiCutTable",
    "SnapshotSimHitMatcher",
    "SnapshotCSCDigiMatcher",
    "SnapshotCSCStubMatcher",
    "SnapshotGEMDigiMatcher",
    "SnapshotRPCDigiMatcher",
    "SnapshotTrackMatcher",
    "SnapshotL1Matcher",
    "SnapshotHLTMatcher",
    "build_match_manager",
    "parse_track",
    "parse_vertex",
    "parse_run_info",
]


def group_by(objects, key) -> "OrderedDict":
    """Groups a list of objects by key, in order of first appearance.

    Parameters
    ----------
    objects : Iterable
        Objects to group
    key : callable
        Function which returns the group key of an object

    Returns
    -------
    OrderedDict
        Mapping from each key to the list of its objects
    """
    groups = OrderedDict()
    for obj in objects:
        groups.setdefault(key(obj), []).append(obj)

    return groups


def count_layers(objects) -> int:
    """Number of distinct layers spanned by a list of hits or digis."""
    return len({obj.det_id.layer for obj in objects})


class DPhiCutTable:
    """Charge-symmetric GEM/CSC bending-angle cuts per chamber type.

    The table maps a chamber type (e.g. `ME11`, `ME21`) onto a set of pT
    thresholds, each associated with an (odd, even) pair of maximum bending
    angles. The cut applied for a given pT is that of the largest threshold
    which does not exceed it. If no threshold applies, the cut is passed.
    """

    def __init__(self, cuts: Optional[Dict] = None):
        """Parse the cut table.

        Parameters
        ----------
        cuts : dict, optional
            Dictionary of {chamber type: {pt threshold: [odd cut, even cut]}}
        """
        self.cuts = {}
        for chamber_type, thresholds in (cuts or {}).items():
            self.cuts[chamber_type] = sorted(
                (float(pt), (float(odd), float(even)))
                for pt, (odd, even) in thresholds.items()
            )

    @staticmethod
    def chamber_type(chamber_id: CSCDetId) -> str:
        """Type of a CSC chamber (ME1/1 rings 1 and 4 share one type)."""
        ring = 1 if chamber_id.is_me11 else chamber_id.ring
        return f"ME{chamber_id.station}{ring}"

    def passes(self, chamber_id: CSCDetId, dphi: float, pt: float) -> bool:
        """Checks a bending angle against the cut of a chamber.

        Parameters
        ----------
        chamber_id : CSCDetId
            Chamber identifier
        dphi : float
            GEM/CSC bending angle
        pt : float
            Transverse momentum at which the cut is evaluated

        Returns
        -------
        bool
            `True` if the bending angle is compatible with the momentum
        """
        cut = None
        for threshold, values in self.cuts.get(self.chamber_type(chamber_id), []):
            if threshold <= pt:
                cut = values[Parity.from_chamber(chamber_id.chamber)]

        return cut is None or abs(dphi) <= cut


class SnapshotSimHitMatcher(SimHitMatcher):
    """Simulated hits of one truth track, held in memory."""

    def __init__(self, csc_hits=(), gem_hits=(), rpc_hits=(), local_bending=None):
        """Group the hits by chamber.

        Parameters
        ----------
        csc_hits : List[SimHit]
            CSC simulated hits (layer identifiers)
        gem_hits : List[SimHit]
            GEM simulated hits (eta partition identifiers)
        rpc_hits : List[SimHit]
            RPC simulated hits (roll identifiers)
        local_bending : Dict[CSCDetId, float], optional
            Local bending angle of the track in each CSC chamber
        """
        self._csc = group_by(csc_hits, lambda h: h.det_id.chamber_id())
        self._csc_layers = group_by(csc_hits, lambda h: h.det_id)
        self._gem = group_by(gem_hits, lambda h: h.det_id.superchamber_id())
        self._gem_layers = group_by(gem_hits, lambda h: h.det_id.chamber_id(h.det_id.layer))
        self._rpc = group_by(rpc_hits, lambda h: h.det_id)
        self._bending = dict(local_bending or {})

    def csc_chamber_ids(self):
        return list(self._csc.keys())

    def csc_layer_count(self, chamber_id):
        return count_layers(self._csc.get(chamber_id, []))

    def csc_hits_in_chamber(self, chamber_id):
        return self._csc.get(chamber_id, [])

    def csc_hits_in_layer(self, layer_id):
        return self._csc_layers.get(layer_id, [])

    def local_bending(self, chamber_id):
        return self._bending.get(chamber_id, -10.0)

    def gem_superchamber_ids(self):
        return list(self._gem.keys())

    def gem_layer_count(self, superchamber_id):
        return count_layers(self._gem.get(superchamber_id, []))

    def gem_hits_in_superchamber(self, superchamber_id):
        return self._gem.get(superchamber_id, [])

    def gem_hits_in_chamber(self, chamber_id):
        return self._gem_layers.get(chamber_id, [])

    def rpc_chamber_ids(self):
        return list(self._rpc.keys())

    def rpc_hits_in_chamber(self, chamber_id):
        return self._rpc.get(chamber_id, [])


class SnapshotCSCDigiMatcher(CSCDigiMatcher):
    """CSC strip and wire digis of one truth track, held in memory."""

    def __init__(self, strip_digis=(), wire_digis=()):
        """Group the digis by chamber.

        Parameters
        ----------
        strip_digis : List[Digi]
            Comparator digis (layer identifiers)
        wire_digis : List[Digi]
            Wire digis (layer identifiers)
        """
        self._strips = group_by(strip_digis, lambda d: d.det_id.chamber_id())
        self._wires = group_by(wire_digis, lambda d: d.det_id.chamber_id())

    def strip_chamber_ids(self):
        return list(self._strips.keys())

    def strip_layer_count(self, chamber_id):
        return count_layers(self._strips.get(chamber_id, []))

    def strip_digis_in_chamber(self, chamber_id):
        return self._strips.get(chamber_id, [])

    def wire_chamber_ids(self):
        return list(self._wires.keys())

    def wire_layer_count(self, chamber_id):
        return count_layers(self._wires.get(chamber_id, []))

    def wire_digis_in_chamber(self, chamber_id):
        return self._wires.get(chamber_id, [])

    def median_position(self, strip_digis, wire_digis):
        """Coordinate-wise median of the strip and wire digi positions.

        Parameters
        ----------
        strip_digis : Sequence[Digi]
            Strip digis of a chamber
        wire_digis : Sequence[Digi]
            Wire digis of a chamber

        Returns
        -------
        GlobalPoint
            Median position, the origin if there are no digis
        """
        digis = list(strip_digis) + list(wire_digis)
        if not digis:
            return GlobalPoint()

        points = np.vstack([d.position.as_array() for d in digis])
        return GlobalPoint.from_array(np.median(points, axis=0))


class SnapshotCSCStubMatcher(CSCStubMatcher):
    """CSC trigger primitives of one truth track, held in memory."""

    def __init__(self, clcts=(), alcts=(), lcts=(), dphi_cuts=None):
        """Group the trigger primitives by chamber.

        Parameters
        ----------
        clcts : List[Digi]
            Matched CLCTs (chamber identifiers)
        alcts : List[Digi]
            Matched ALCTs (chamber identifiers)
        lcts : List[Digi]
            Matched LCTs (chamber identifiers)
        dphi_cuts : DPhiCutTable, optional
            Bending-angle cuts
        """
        self._clcts = group_by(clcts, lambda d: d.det_id.chamber_id())
        self._alcts = group_by(alcts, lambda d: d.det_id.chamber_id())
        self._lcts = group_by(lcts, lambda d: d.det_id.chamber_id())
        self.dphi_cuts = dphi_cuts if dphi_cuts is not None else DPhiCutTable()

    def clct_chamber_ids(self):
        return list(self._clcts.keys())

    def clct_in_chamber(self, chamber_id):
        return self._clcts.get(chamber_id, [Digi()])[0]

    def alct_chamber_ids(self):
        return list(self._alcts.keys())

    def alct_in_chamber(self, chamber_id):
        return self._alcts.get(chamber_id, [Digi()])[0]

    def lct_chamber_ids(self):
        return list(self._lcts.keys())

    def lcts_in_chamber(self, chamber_id):
        return self._lcts.get(chamber_id, [])

    def pass_dphi_cut(self, chamber_id, charge_sign, dphi, pt):
        return self.dphi_cuts.passes(chamber_id, dphi, pt)


class SnapshotGEMDigiMatcher(GEMDigiMatcher):
    """GEM digis, pads and copads of one truth track, held in memory."""

    def __init__(self, digis=(), pads=(), copads=(), pad_to_hs=None):
        """Group the GEM responses by superchamber and chamber.

        Parameters
        ----------
        digis : List[Digi]
            Strip digis (eta partition identifiers)
        pads : List[Digi]
            Pads (eta partition identifiers)
        copads : List[Digi]
            Copads (superchamber or eta partition identifiers)
        pad_to_hs : Dict[Tuple[GEMDetId, int], int], optional
            CSC half-strip extrapolated from each (superchamber, pad) pair
        """
        self._digis = group_by(digis, lambda d: d.det_id.superchamber_id())
        self._pads = group_by(pads, lambda d: d.det_id.superchamber_id())
        self._pad_layers = group_by(pads, lambda d: d.det_id.chamber_id(d.det_id.layer))
        self._copads = group_by(copads, lambda d: d.det_id.superchamber_id())
        self._pad_to_hs = dict(pad_to_hs or {})

    def superchamber_ids(self):
        return list(self._digis.keys())

    def digis_in_superchamber(self, superchamber_id):
        return self._digis.get(superchamber_id, [])

    def digi_layer_count(self, superchamber_id):
        return count_layers(self._digis.get(superchamber_id, []))

    def pads_in_chamber(self, chamber_id):
        return self._pad_layers.get(chamber_id, [])

    def pads_in_superchamber(self, superchamber_id):
        return self._pads.get(superchamber_id, [])

    def pad_layer_count(self, superchamber_id):
        return count_layers(self._pads.get(superchamber_id, []))

    def copad_superchamber_ids(self):
        return list(self._copads.keys())

    def copads_in_superchamber(self, superchamber_id):
        return self._copads.get(superchamber_id, [])

    def hs_from_pad(self, superchamber_id, pad):
        return self._pad_to_hs.get((superchamber_id, pad), -1)

    def n_pads(self):
        return sum(len(pads) for pads in self._pads.values())


class SnapshotRPCDigiMatcher(RPCDigiMatcher):
    """RPC digis of one truth track, held in memory."""

    def __init__(self, digis=(), strip_to_hs=None):
        """Group the RPC digis by roll.

        Parameters
        ----------
        digis : List[Digi]
            Strip digis (roll identifiers)
        strip_to_hs : Dict[Tuple[RPCDetId, int], int], optional
            CSC half-strip extrapolated from each (roll, strip) pair
        """
        self._digis = group_by(digis, lambda d: d.det_id)
        self._strip_to_hs = dict(strip_to_hs or {})

    def chamber_ids(self):
        return list(self._digis.keys())

    def digis_in_chamber(self, chamber_id):
        return self._digis.get(chamber_id, [])

    def hs_from_strip(self, chamber_id, strip):
        return self._strip_to_hs.get((chamber_id, strip), 0)


class SnapshotTrackMatcher(TrackMatcher):
    """Track-finder objects and propagated points of one truth track."""

    def __init__(
        self,
        tf_tracks=(),
        tf_cands=(),
        gmt_reg_cands=(),
        gmt_cands=(),
        propagated=None,
        interstation=None,
        dphi_cuts=None,
    ):
        """Store the track-finder objects.

        Parameters
        ----------
        tf_tracks : List[TFTrack]
            Matched track-finder tracks
        tf_cands, gmt_reg_cands, gmt_cands : List
            Matched downstream candidates
        propagated : Dict[Parity, List[Tuple[float, float]]], optional
            (eta, phi) of the track propagated to stations 1 to 4
        interstation : Dict[Parity, Dict[int, GlobalPoint]], optional
            Track propagated in between stations
        dphi_cuts : DPhiCutTable, optional
            Bending-angle cuts
        """
        self._tf_tracks = list(tf_tracks)
        self._tf_cands = list(tf_cands)
        self._gmt_reg_cands = list(gmt_reg_cands)
        self._gmt_cands = list(gmt_cands)
        self._propagated = propagated or {}
        self._interstation = interstation or {}
        self.dphi_cuts = dphi_cuts if dphi_cuts is not None else DPhiCutTable()

    def tf_tracks(self):
        return self._tf_tracks

    def best_tf_track(self):
        """Matched track-finder track closest to the truth track.

        Returns
        -------
        TFTrack
            Track with the smallest angular distance, `None` if there is none
        """
        best = None
        for track in self._tf_tracks:
            if best is None or track.dr < best.dr:
                best = track

        return best

    def pass_tf_dphi_cut(self, track, station, pt):
        """Checks the GEM/CSC bending of the stub of a track in one station.

        The station 1 stub is looked for in ME1/b first, then in ME1/a.
        A track without a stub in the station passes the cut.
        """
        index = track.digi_in_me(station, 1)
        if index is None and station == 1:
            index = track.digi_in_me(1, 4)
        if index is None:
            return True

        stub = track.trigger_digis[index]
        return self.dphi_cuts.passes(track.trigger_ids[index], stub.gem_dphi, pt)

    def tf_cands(self):
        return self._tf_cands

    def gmt_reg_cands(self):
        return self._gmt_reg_cands

    def gmt_cands(self):
        return self._gmt_cands

    def propagated_points(self, parity):
        return self._propagated.get(parity, [(-9.0, -9.0)] * 4)

    def interstation_points(self, parity):
        return self._interstation.get(parity, {})


class SnapshotL1Matcher(L1Matcher):
    """L1 objects of one truth track, held in memory."""

    def __init__(self, l1_extras=()):
        self._l1_extras = list(l1_extras)

    def l1_extras(self):
        return self._l1_extras


class SnapshotHLTMatcher(HLTMatcher):
    """HLT objects of one truth track, held in memory."""

    def __init__(self, reco_track_extras=(), reco_tracks=(), reco_charged_candidates=()):
        self._reco_track_extras = list(reco_track_extras)
        self._reco_tracks = list(reco_tracks)
        self._reco_charged_candidates = list(reco_charged_candidates)

    def reco_track_extras(self):
        return self._reco_track_extras

    def reco_tracks(self):
        return self._reco_tracks

    def reco_charged_candidates(self):
        return self._reco_charged_candidates


def parse_point(values, cls=GlobalPoint):
    """Parses a point from a list of 3 coordinates (the origin if missing)."""
    if values is None:
        return cls()

    return cls(float(values[0]), float(values[1]), float(values[2]))


def parse_hit(data: dict, id_cls) -> SimHit:
    """Parses a simulated hit dictionary."""
    return SimHit(
        det_id=id_cls(**data["id"]),
        position=parse_point(data.get("position")),
        momentum=parse_point(data.get("momentum"), GlobalVector),
        strip=float(data.get("strip", -1.0)),
    )


def parse_digi(data: dict, id_cls) -> Digi:
    """Parses a digi or trigger primitive dictionary."""
    kwargs = {k: v for k, v in data.items() if k not in ("id", "position")}
    return Digi(
        det_id=id_cls(**data["id"]), position=parse_point(data.get("position")), **kwargs
    )


def parse_tf_track(data: dict) -> TFTrack:
    """Parses a track-finder track dictionary.

    The stubs are provided as a list of {id, digi, eta, phi} dictionaries.
    """
    kwargs = {k: v for k, v in data.items() if k != "stubs"}
    track = TFTrack(**kwargs)
    for stub in data.get("stubs", []):
        det_id = CSCDetId(**stub["id"])
        track.trigger_ids.append(det_id)
        digi = parse_digi({"id": stub["id"], **stub.get("digi", {})}, CSCDetId)
        track.trigger_digis.append(digi)
        track.trigger_eta_phis.append((float(stub["eta"]), float(stub["phi"])))

    return track


def parse_track(data: dict) -> SimTrack:
    """Parses a truth track dictionary."""
    return SimTrack(
        id=int(data.get("id", -1)),
        pdg_code=int(data.get("pdg_code", 0)),
        charge=float(data.get("charge", 0.0)),
        momentum=parse_point(data.get("momentum"), GlobalVector),
        vertex_index=int(data.get("vertex_index", -1)),
        gen_index=int(data.get("gen_index", -1)),
    )


def parse_vertex(data: dict) -> SimVertex:
    """Parses a truth vertex dictionary."""
    return SimVertex(id=int(data.get("id", -1)), position=parse_point(data.get("position")))


def parse_run_info(data: dict) -> RunInfo:
    """Parses the event identifiers of an event dictionary."""
    return RunInfo(
        run=int(data.get("run", -1)),
        lumi=int(data.get("lumi", -1)),
        event=int(data.get("event", -1)),
    )


def parse_propagation(data: dict):
    """Parses the propagated points of a track.

    Parameters
    ----------
    data : dict
        Dictionary with optional `odd`/`even` lists of (eta, phi) pairs and
        an optional `interstation` dictionary of {parity: {pair: [x, y, z]}}

    Returns
    -------
    dict
        Propagated (eta, phi) pairs per parity
    dict
        Interstation points per parity
    """
    propagated, interstation = {}, {}
    for parity in Parity:
        points = data.get(parity.suffix)
        if points is not None:
            propagated[parity] = [(float(eta), float(phi)) for eta, phi in points]

        inter = data.get("interstation", {}).get(parity.suffix, {})
        interstation[parity] = {
            int(pair): (
                parse_point(values)
                if values is not None
                else GlobalPoint(math.nan, math.nan, math.nan)
            )
            for pair, values in inter.items()
        }

    return propagated, interstation


def build_match_manager(
    track: SimTrack,
    run_info: RunInfo,
    data: Optional[dict] = None,
    dphi_cuts: Optional[DPhiCutTable] = None,
) -> MatchManager:
    """Builds the match accessors of one truth track from its snapshot.

    Parameters
    ----------
    track : SimTrack
        Truth track
    run_info : RunInfo
        Identifiers of the event
    data : dict, optional
        Snapshot of the responses matched to the track
    dphi_cuts : DPhiCutTable, optional
        Bending-angle cuts

    Returns
    -------
    MatchManager
        Bundle of accessors
    """
    data = data or {}
    dphi_cuts = dphi_cuts if dphi_cuts is not None else DPhiCutTable()

    def hits(key, id_cls):
        return [parse_hit(h, id_cls) for h in data.get(key, [])]

    def digis(key, id_cls):
        return [parse_digi(d, id_cls) for d in data.get(key, [])]

    def lookup(key, id_cls, channel_key, value_key):
        return {
            (id_cls(**e["id"]), int(e[channel_key])): e[value_key]
            for e in data.get(key, [])
        }

    sim_hits = SnapshotSimHitMatcher(
        csc_hits=hits("csc_sim_hits", CSCDetId),
        gem_hits=hits("gem_sim_hits", GEMDetId),
        rpc_hits=hits("rpc_sim_hits", RPCDetId),
        local_bending={
            CSCDetId(**e["id"]): float(e["value"])
            for e in data.get("csc_local_bending", [])
        },
    )
    csc_digis = SnapshotCSCDigiMatcher(
        strip_digis=digis("csc_strip_digis", CSCDetId),
        wire_digis=digis("csc_wire_digis", CSCDetId),
    )
    csc_stubs = SnapshotCSCStubMatcher(
        clcts=digis("clcts", CSCDetId),
        alcts=digis("alcts", CSCDetId),
        lcts=digis("lcts", CSCDetId),
        dphi_cuts=dphi_cuts,
    )
    gem_digis = SnapshotGEMDigiMatcher(
        digis=digis("gem_digis", GEMDetId),
        pads=digis("gem_pads", GEMDetId),
        copads=digis("gem_copads", GEMDetId),
        pad_to_hs=lookup("gem_pad_to_hs", GEMDetId, "pad", "hs"),
    )
    rpc_digis = SnapshotRPCDigiMatcher(
        digis=digis("rpc_digis", RPCDetId),
        strip_to_hs=lookup("rpc_strip_to_hs", RPCDetId, "strip", "hs"),
    )

    propagated, interstation = parse_propagation(data.get("propagation", {}))
    tracks = SnapshotTrackMatcher(
        tf_tracks=[parse_tf_track(t) for t in data.get("tf_tracks", [])],
        tf_cands=data.get("tf_cands", []),
        gmt_reg_cands=data.get("gmt_reg_cands", []),
        gmt_cands=data.get("gmt_cands", []),
        propagated=propagated,
        interstation=interstation,
        dphi_cuts=dphi_cuts,
    )

    l1 = SnapshotL1Matcher(
        [
            (L1Extra(**{k: v for k, v in e.items() if k != "dr"}), float(e.get("dr", -99.0)))
            for e in data.get("l1_extras", [])
        ]
    )
    hlt = SnapshotHLTMatcher(
        reco_track_extras=[RecoTrackExtra(**e) for e in data.get("reco_track_extras", [])],
        reco_tracks=[RecoTrack(**e) for e in data.get("reco_tracks", [])],
        reco_charged_candidates=[
            RecoChargedCandidate(**e) for e in data.get("reco_charged_candidates", [])
        ],
    )

    return MatchManager(
        sim_track=track,
        run_info=run_info,
        sim_hits=sim_hits,
        csc_digis=csc_digis,
        csc_stubs=csc_stubs,
        gem_digis=gem_digis,
        rpc_digis=rpc_digis,
        tracks=tracks,
        l1=l1,
        hlt=hlt,
    )
