"""Fills the track-level summary of the per-station records.

Once the detector responses have been aggregated, the summary record (and,
for the propagated positions, every record in use) is completed with the
position-based pT estimates, the truth-track propagation, the best
track-finder track and its stubs, and the downstream L1/HLT objects.
"""

from gemcsc.config.matching import MatchingConfig
from gemcsc.geo import StationResolver
from gemcsc.utils.enums import Parity
from gemcsc.utils.globals import SUMMARY_SIMHIT_BITS, SUMMARY_STATION, TF_PT_CUTS
from gemcsc.utils.logger import logger

from .estimate import estimate_pt
from .factories import estimator_factory

__all__ = ["TrackSummaryBuilder"]

# Interstation propagation pairs stored for each ME station
INTERSTATION_PAIRS = {2: (12,), 3: (23, 13)}

# Track-finder stubs used to test the GEM/CSC bending (name, station, rings)
TF_STUB_STATIONS = (("1", 1, (4, 1)), ("2", 2, (1,)))


class TrackSummaryBuilder:
    """Completes the records of a truth track with its track-level summary.

    Attributes
    ----------
    config : MatchingConfig
        Matching configuration
    resolver : StationResolver
        Station resolver, which defines the logical stations in use
    estimator : EstimatorBase
        Position-based pT estimator
    """

    def __init__(self, config: MatchingConfig, resolver: StationResolver = None):
        """Initialize the summary builder.

        Parameters
        ----------
        config : MatchingConfig
            Matching configuration
        resolver : StationResolver, optional
            Station resolver
        """
        self.config = config
        self.resolver = resolver or StationResolver(config.csc_stations_to_use)
        self.estimator = estimator_factory(config.pt_estimator)

    def fill(self, state, manager):
        """Fills the track-level quantities of an aggregated track.

        Parameters
        ----------
        state : AggregationState
            Aggregated records and kept positions
        manager : MatchManager
            Accessors over the responses matched to the truth track
        """
        self.fill_estimates(state, manager)
        self.fill_propagation(state, manager)
        self.fill_tf_track(state, manager)
        self.fill_candidates(state, manager)
        self.fill_l1(state, manager)
        self.fill_hlt(state, manager)

    def fill_estimates(self, state, manager):
        """Position-based pT estimates from simulated hits and from LCTs."""
        summary = state.records[SUMMARY_STATION]
        eta = manager.sim_track.eta
        summary.pt_position_sh, summary.hasSt1St2St3_sh = estimate_pt(
            self.estimator, state.records, state.sh_points, "has_csc_sh", eta
        )

        lct_points = {key: position for key, (_, position) in state.lcts.items()}
        summary.pt_position, summary.hasSt1St2St3 = estimate_pt(
            self.estimator, state.records, lct_points, "has_lct", eta
        )

    @staticmethod
    def _propagate(record, tracks, station, parity):
        """Stores the propagated position of the track in one ME station.

        Interstation positions are only stored when they are defined.
        """
        eta, phi = tracks.propagated_points(parity)[station - 1]
        setattr(record, f"eta_propagated_ME{station}", eta)
        setattr(record, f"phi_propagated_ME{station}", phi)

        interstation = tracks.interstation_points(parity)
        for pair in INTERSTATION_PAIRS.get(station, ()):
            point = interstation.get(pair)
            if point is None or point.is_nan():
                continue
            setattr(record, f"eta_interStat{pair}", point.eta)
            setattr(record, f"phi_interStat{pair}", point.phi)

    def fill_propagation(self, state, manager):
        """Propagated position of the track in the station of each record.

        The odd-chamber propagation surface is used by default.
        """
        for s in self.resolver.stations:
            station, _ = self.resolver.index.station_ring(s)
            if station < 1 or station > 4:
                continue
            self._propagate(state.records[s], manager.tracks, station, Parity.ODD)

    def fill_tf_track(self, state, manager):
        """Best matched track-finder track and its stubs."""
        tracks = manager.tracks
        if not len(tracks.tf_tracks()):
            return

        summary = state.records[SUMMARY_STATION]
        best = tracks.best_tf_track()
        summary.has_tfTrack = 1
        summary.trackpt = best.pt
        summary.tracketa = best.eta
        summary.trackphi = best.phi
        summary.pt_packed = best.pt_packed
        summary.eta_packed = best.eta_packed
        summary.phi_packed = best.phi_packed
        summary.quality_packed = best.quality_packed
        summary.deltaphi12 = best.dphi12
        summary.deltaphi23 = best.dphi23
        summary.hasME1 = bool(best.has_me1)
        summary.hasME2 = bool(best.has_me2)
        summary.nstubs = best.n_stubs
        summary.deltaR = best.dr
        summary.chargesign = best.charge_sign

        # GEM/CSC bending of the station 1 and 2 stubs
        for name, station, rings in TF_STUB_STATIONS:
            index = None
            for ring in rings:
                found = best.digi_in_me(station, ring)
                if found is not None:
                    index = found
            if index is None:
                continue
            self._fill_tf_stub(summary, manager, best, index, name, station)

        # Position of every stub, only when the stub lists are consistent
        ids, digis, eta_phis = best.trigger_ids, best.trigger_digis, best.trigger_eta_phis
        if len(ids) == len(eta_phis) and len(digis) == len(ids):
            good = [True] * 4
            for det_id, digi, (eta, phi) in zip(ids, digis, eta_phis):
                st = det_id.station
                parity = Parity.from_chamber(det_id.chamber)
                self._propagate(summary, tracks, st, parity)
                setattr(summary, f"eta_ME{st}_TF", eta)
                setattr(summary, f"phi_ME{st}_TF", phi)
                good[st - 1] = manager.csc_stubs.check_stub_in_chamber(det_id, digi)

            summary.allstubs_matched_TF = all(good)

            # Stations with simulated hits, one bit per station
            for bit, stations in SUMMARY_SIMHIT_BITS:
                if any(state.records[s].has_csc_sh > 0 for s in stations):
                    summary.has_csc_sh |= bit

        if len(eta_phis) > 1:
            summary.lctdphi12 = eta_phis[0][1] - eta_phis[1][1]

    def _fill_tf_stub(self, summary, manager, best, index, name, station):
        """Stores the stub of the best track-finder track in one station."""
        det_id = best.trigger_ids[index]
        stub = best.trigger_digis[index]
        if det_id.station != station:
            logger.warning(
                "Track-finder stub %s should be in station %d.", det_id, station
            )

        tracks = manager.tracks
        gem = f"GE{station}1"
        summary.set_bit(f"chamberME{name}", Parity.from_chamber(det_id.chamber))
        setattr(summary, f"ME{name}_ring", det_id.ring)
        setattr(
            summary,
            f"pass{gem}",
            tracks.pass_tf_dphi_cut(best, station, self.config.bending_cut_pt),
        )
        for pt in TF_PT_CUTS:
            setattr(summary, f"pass{gem}_pt{pt}", tracks.pass_tf_dphi_cut(best, station, pt))

        dphi = stub.gem_dphi
        setattr(summary, f"dphi{gem}", dphi)
        setattr(summary, f"ME{name}_hs", stub.channel)
        setattr(summary, f"ME{name}_wg", stub.wire_group)
        setattr(
            summary,
            f"pass{gem}_simpt",
            manager.csc_stubs.pass_dphi_cut(
                det_id, summary.chargesign, dphi, manager.sim_track.pt
            ),
        )

    def fill_candidates(self, state, manager):
        """Flags the downstream trigger candidates matched to the track."""
        summary = state.records[SUMMARY_STATION]
        tracks = manager.tracks
        if len(tracks.tf_cands()):
            summary.has_tfCand = 1
        if len(tracks.gmt_reg_cands()):
            summary.has_gmtRegCand = 1
        if len(tracks.gmt_cands()):
            summary.has_gmtCand = 1

    def fill_l1(self, state, manager):
        """First L1 extra particle matched to the track."""
        l1_extras = manager.l1.l1_extras()
        if not len(l1_extras):
            return

        summary = state.records[SUMMARY_STATION]
        l1_extra, dr = l1_extras[0]
        summary.has_l1Extra = 1
        summary.l1Extra_pt = l1_extra.pt
        summary.l1Extra_eta = l1_extra.eta
        summary.l1Extra_phi = l1_extra.phi
        summary.l1Extra_dR = dr
        logger.debug(
            "Number of matched L1 extras: %d, first pt %.3f eta %.3f phi %.3f dR %.3f",
            len(l1_extras), l1_extra.pt, l1_extra.eta, l1_extra.phi, dr
        )

    def fill_hlt(self, state, manager):
        """First HLT objects of each kind matched to the track."""
        summary = state.records[SUMMARY_STATION]
        hlt = manager.hlt

        extras = hlt.reco_track_extras()
        if len(extras):
            extra = extras[0]
            summary.has_recoTrackExtra = 1
            summary.recoTrackExtra_pt_inner = extra.pt_inner
            summary.recoTrackExtra_eta_inner = extra.eta_inner
            summary.recoTrackExtra_phi_inner = extra.phi_inner
            summary.recoTrackExtra_pt_outer = extra.pt_outer
            summary.recoTrackExtra_eta_outer = extra.eta_outer
            summary.recoTrackExtra_phi_outer = extra.phi_outer

        reco_tracks = hlt.reco_tracks()
        if len(reco_tracks):
            track = reco_tracks[0]
            summary.has_recoTrack = 1
            summary.recoTrack_pt_outer = track.pt_outer
            summary.recoTrack_eta_outer = track.eta_outer
            summary.recoTrack_phi_outer = track.phi_outer

        candidates = hlt.reco_charged_candidates()
        if len(candidates):
            cand = candidates[0]
            summary.has_recoChargedCandidate = 1
            summary.recoChargedCandidate_pt = cand.pt
            summary.recoChargedCandidate_eta = cand.eta
            summary.recoChargedCandidate_phi = cand.phi
            summary.recoChargedCandidate_nValidDTHits = cand.n_valid_dt_hits
            summary.recoChargedCandidate_nValidCSCHits = cand.n_valid_csc_hits
            summary.recoChargedCandidate_nValidRPCHits = cand.n_valid_rpc_hits
