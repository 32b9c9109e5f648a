"""Aggregates the detector responses of a truth track into station records.

Each response category is drained in a fixed order. Every detector unit is
resolved into the logical-station records it updates (its own record and,
for split-ring stations, the combined record), gated on its number of layers
with signal and summarized into the slot of its chamber parity.
"""

from typing import Dict, List, Tuple

from gemcsc.config.matching import MatchingConfig
from gemcsc.data import Digi, GlobalPoint, PerStationRecord
from gemcsc.geo import StationResolver
from gemcsc.math import delta_phi
from gemcsc.utils.enums import Parity
from gemcsc.utils.globals import (
    CSC_KEY_LAYERS,
    GEM_KEY_LAYERS,
    LCT_BEND_PATTERN,
    SUMMARY_STATION,
)

__all__ = ["FeatureAggregator", "AggregationState"]


class AggregationState:
    """Records of one truth track and the positions kept while filling them.

    Attributes
    ----------
    records : List[PerStationRecord]
        One record per logical station (including stations not in use)
    sh_points : Dict[Tuple[int, Parity], GlobalPoint]
        Mean CSC simulated hit position, per (station, parity)
    lcts : Dict[Tuple[int, Parity], Tuple[Digi, GlobalPoint]]
        Matched LCT and its position, per (station, parity)
    """

    def __init__(self, num_stations: int):
        """Initialize empty records.

        Parameters
        ----------
        num_stations : int
            Number of logical stations
        """
        self.records: List[PerStationRecord] = [
            PerStationRecord() for _ in range(num_stations)
        ]
        self.sh_points: Dict[Tuple[int, Parity], GlobalPoint] = {}
        self.lcts: Dict[Tuple[int, Parity], Tuple[Digi, GlobalPoint]] = {}

    def reset(self):
        """Reinitializes every record and forgets the kept positions."""
        for record in self.records:
            record.reset()
        self.sh_points.clear()
        self.lcts.clear()

    def lct(self, station: int, parity: Parity) -> Tuple[Digi, GlobalPoint]:
        """Returns the LCT kept for a (station, parity) slot.

        Parameters
        ----------
        station : int
            Logical station index
        parity : Parity
            Chamber parity

        Returns
        -------
        Digi
            Matched LCT, an invalid digi if there is none
        GlobalPoint
            Position of the LCT
        """
        return self.lcts.get((station, parity), (Digi(), GlobalPoint()))


class FeatureAggregator:
    """Fills the per-station records of a truth track.

    Attributes
    ----------
    config : MatchingConfig
        Matching configuration
    resolver : StationResolver
        Maps detector units onto the records they update
    """

    def __init__(self, config: MatchingConfig, resolver: StationResolver = None):
        """Initialize the aggregator.

        Parameters
        ----------
        config : MatchingConfig
            Matching configuration
        resolver : StationResolver, optional
            Station resolver. If not specified, one is built from the
            stations in use.
        """
        self.config = config
        self.resolver = resolver or StationResolver(config.csc_stations_to_use)
        self.state = AggregationState(len(self.resolver.index))

    @property
    def records(self) -> List[PerStationRecord]:
        """Records of the last processed track."""
        return self.state.records

    def aggregate(self, manager) -> AggregationState:
        """Resets the records and fills them with the responses of one track.

        Parameters
        ----------
        manager : MatchManager
            Accessors over the responses matched to the truth track

        Returns
        -------
        AggregationState
            Filled records and kept positions
        """
        self.state.reset()
        self.fill_track(manager)
        self.fill_csc_sim_hits(manager)
        self.fill_csc_strips(manager)
        self.fill_csc_wires(manager)
        self.fill_clcts(manager)
        self.fill_alcts(manager)
        self.fill_lcts(manager)
        self.fill_gem_sim_hits(manager)
        self.fill_gem_digis(manager)
        self.fill_gem_copads(manager)
        if self.config.rpc_enabled:
            self.fill_rpc_sim_hits(manager)
            self.fill_rpc_digis(manager)

        return self.state

    def _assign(self, targets, **values):
        """Sets scalar attributes of every targeted record."""
        for s in targets:
            record = self.state.records[s]
            for key, value in values.items():
                setattr(record, key, value)

    def _set(self, targets, parity, **values):
        """Sets the parity slot of attributes of every targeted record."""
        for s in targets:
            record = self.state.records[s]
            for key, value in values.items():
                getattr(record, key)[parity] = value

    def _flag(self, targets, parity, *attrs):
        """Sets the parity presence bit of masks of every targeted record."""
        for s in targets:
            record = self.state.records[s]
            for attr in attrs:
                record.set_bit(attr, parity)

    def fill_track(self, manager):
        """Stores the event identifiers and the truth track kinematics."""
        track, info = manager.sim_track, manager.run_info
        self._assign(
            self.resolver.stations,
            run=info.run,
            lumi=info.lumi,
            event=info.event,
            pt=track.pt,
            eta=track.eta,
            phi=track.phi,
            charge=int(track.charge),
            endcap=1 if track.eta > 0.0 else -1,
        )

    def fill_csc_sim_hits(self, manager):
        """Summarizes the CSC chambers with simulated hits."""
        sh = manager.sim_hits
        summary = self.state.records[SUMMARY_STATION]
        chamber_ids = sh.csc_chamber_ids()
        threshold = self.config.threshold("csc_sim_hit")
        for d in chamber_ids:
            res = self.resolver.resolve_id(d)
            if not res.in_use:
                continue

            # Track-level parity of the station 1/2 chambers
            if d.station == 1:
                summary.set_bit("chamber_ME1_csc_sh", res.parity)
            elif d.station == 2:
                summary.set_bit("chamber_ME2_csc_sh", res.parity)

            # The two halves of ME1/1 count as one chamber
            nlayers = sh.csc_layer_count(d)
            if d.is_me11:
                paired = d.paired_ring_id()
                if paired in chamber_ids:
                    nlayers += sh.csc_layer_count(paired)

            if nlayers < threshold:
                continue

            hits = sh.csc_hits_in_chamber(d)
            momentum = sh.mean_momentum(hits)
            position = sh.mean_position(hits)
            targets, parity = res.targets, res.parity
            self._assign(
                targets,
                pt_sh=momentum.perp,
                pteta_sh=momentum.eta,
                ptphi_sh=momentum.phi,
                bending_sh=sh.local_bending(d),
            )
            self._flag(targets, parity, "has_csc_sh")
            self._set(targets, parity, nlayers_csc_sh=nlayers)
            for s in targets:
                self.state.sh_points[s, parity] = position

            # Position in the first key layer with hits
            for layer in CSC_KEY_LAYERS:
                layer_hits = sh.csc_hits_in_layer(d.layer_id(layer))
                if len(layer_hits):
                    key = sh.mean_position(layer_hits)
                    self._set(targets, parity, eta_cscsh=key.eta, phi_cscsh=key.phi)
                    break

    def fill_csc_strips(self, manager):
        """Summarizes the CSC chambers with comparator digis."""
        cd = manager.csc_digis
        threshold = self.config.threshold("csc_strip_digi")
        for d in cd.strip_chamber_ids():
            res = self.resolver.resolve_id(d)
            if not res.in_use:
                continue

            nlayers = cd.strip_layer_count(d)
            if nlayers < threshold:
                continue

            self._flag(res.targets, res.parity, "has_csc_strips")
            self._set(res.targets, res.parity, nlayers_st_dg=nlayers)

    def fill_csc_wires(self, manager):
        """Summarizes the CSC chambers with wire digis."""
        cd = manager.csc_digis
        threshold = self.config.threshold("csc_wire_digi")
        for d in cd.wire_chamber_ids():
            res = self.resolver.resolve_id(d)
            if not res.in_use:
                continue

            nlayers = cd.wire_layer_count(d)
            if nlayers < threshold:
                continue

            self._flag(res.targets, res.parity, "has_csc_wires")
            self._set(res.targets, res.parity, nlayers_wg_dg=nlayers)

    def fill_clcts(self, manager):
        """Stores the matched cathode trigger primitives."""
        stubs = manager.csc_stubs
        for d in stubs.clct_chamber_ids():
            res = self.resolver.resolve_id(d)
            if not res.in_use:
                continue

            clct = stubs.clct_in_chamber(d)
            self._set(
                res.targets,
                res.parity,
                halfstrip=clct.channel,
                quality_clct=clct.quality,
            )
            self._flag(res.targets, res.parity, "has_clct")

    def fill_alcts(self, manager):
        """Stores the matched anode trigger primitives."""
        stubs = manager.csc_stubs
        for d in stubs.alct_chamber_ids():
            res = self.resolver.resolve_id(d)
            if not res.in_use:
                continue

            alct = stubs.alct_in_chamber(d)
            self._set(
                res.targets,
                res.parity,
                wiregroup=alct.channel,
                quality_alct=alct.quality,
            )
            self._flag(res.targets, res.parity, "has_alct")

    def fill_lcts(self, manager):
        """Stores the matched correlated trigger primitives (LCTs)."""
        stubs, track = manager.csc_stubs, manager.sim_track
        charge_sign, pt = track.charge_sign, track.pt
        for d in stubs.lct_chamber_ids():
            res = self.resolver.resolve_id(d)
            if not res.in_use:
                continue

            targets, parity = res.targets, res.parity
            self._flag(targets, parity, "has_lct")

            lct = stubs.lct_in_chamber(d)
            position = stubs.digi_position(lct)
            self._set(
                targets,
                parity,
                bend_lct=LCT_BEND_PATTERN[lct.pattern],
                phi_lct=position.phi,
                eta_lct=position.eta,
                dphi_lct=lct.dphi,
                bx_lct=lct.bx,
                hs_lct=lct.channel,
                wg_lct=lct.wire_group,
                quality=lct.quality,
                passdphi=stubs.pass_dphi_cut(d, charge_sign, lct.dphi, pt),
            )
            for s in targets:
                self.state.records[s].chamber[parity] |= 2
                self.state.lcts[s, parity] = (lct, position)

    def fill_gem_sim_hits(self, manager):
        """Summarizes the GEM superchambers with simulated hits."""
        sh = manager.sim_hits
        for d in sh.gem_superchamber_ids():
            res = self.resolver.resolve_id(d)
            if not res.in_use:
                continue

            targets, parity = res.targets, res.parity
            hits = sh.gem_hits_in_superchamber(d)
            if len(hits):
                self._flag(targets, parity, "has_gem_sh")

                # Position in the first key layer with hits
                for layer in GEM_KEY_LAYERS:
                    layer_hits = sh.gem_hits_in_chamber(d.chamber_id(layer))
                    if not len(layer_hits):
                        continue

                    key = sh.mean_position(layer_hits)
                    self._set(targets, parity, eta_gemsh=key.eta, phi_gemsh=key.phi)
                    phi_csc = self.state.records[res.primary].phi_cscsh[parity]
                    if phi_csc > -9.0:
                        self._set(targets, parity, dphi_sh=delta_phi(phi_csc, key.phi))
                    break

                self._set(targets, parity, strip_gemsh=sh.mean_strip(hits))

            if sh.gem_layer_count(d) > 1:
                self._flag(targets, parity, "has_gem_sh2")

    def fill_gem_digis(self, manager):
        """Summarizes the GEM superchambers with digis and pads."""
        gd = manager.gem_digis
        for d in gd.superchamber_ids():
            res = self.resolver.resolve_id(d)
            if not res.in_use:
                continue

            targets, parity = res.targets, res.parity
            if gd.digi_layer_count(d) > 1:
                self._flag(targets, parity, "has_gem_dg2")

            digis = gd.digis_in_superchamber(d)
            if len(digis):
                self._flag(targets, parity, "has_gem_dg")
                self._set(targets, parity, strip_gemdg=gd.median_strip(digis))

            if gd.pad_layer_count(d) > 1:
                self._flag(targets, parity, "has_gem_pad2")

            # Pads of the first key layer with pads
            for layer in GEM_KEY_LAYERS:
                pads = gd.pads_in_chamber(d.chamber_id(layer))
                if not len(pads):
                    continue

                channel = pads[0].channel
                self._flag(targets, parity, "has_gem_pad")
                self._set(
                    targets, parity, pad=channel, hsfromgem=gd.hs_from_pad(d, channel)
                )
                for s in targets:
                    self.state.records[s].chamber[parity] |= 1

                # Pad closest to the LCT of the same chamber
                lct, lct_position = self.state.lct(res.primary, parity)
                if lct.is_valid:
                    best, position = gd.closest_to(pads, lct_position)
                    record = self.state.records[res.primary]
                    self._set(
                        targets,
                        parity,
                        bx_pad=best.bx,
                        phi_pad=position.phi,
                        eta_pad=position.eta,
                        dphi_pad=delta_phi(record.phi_lct[parity], position.phi),
                        deta_pad=record.eta_lct[parity] - position.eta,
                    )
                break

    def fill_gem_copads(self, manager):
        """Summarizes the GEM superchambers with copads."""
        gd = manager.gem_digis
        for d in gd.copad_superchamber_ids():
            res = self.resolver.resolve_id(d)
            if not res.in_use:
                continue

            self._flag(res.targets, res.parity, "has_gem_copad")
            copads = gd.copads_in_superchamber(d)
            if len(copads):
                self._set(res.targets, res.parity, copad=copads[0].channel)

    def fill_rpc_sim_hits(self, manager):
        """Summarizes the RPC rolls with simulated hits."""
        sh = manager.sim_hits
        for d in sh.rpc_chamber_ids():
            res = self.resolver.resolve_id(d)
            if not res.in_use:
                continue

            if len(sh.rpc_hits_in_chamber(d)):
                self._flag(res.targets, res.parity, "has_rpc_sh")

    def fill_rpc_digis(self, manager):
        """Summarizes the RPC rolls with digis."""
        rd = manager.rpc_digis
        for d in rd.chamber_ids():
            res = self.resolver.resolve_id(d)
            if not res.in_use:
                continue

            targets, parity = res.targets, res.parity
            digis = rd.digis_in_chamber(d)
            median = rd.median_strip(digis)
            self._flag(targets, parity, "has_rpc_dg")
            self._set(
                targets, parity, strip_rpcdg=median, hsfromrpc=rd.hs_from_strip(d, median)
            )

            # Strip closest to the LCT of the same chamber
            lct, lct_position = self.state.lct(res.primary, parity)
            if lct.is_valid:
                best, position = rd.closest_to(digis, lct_position)
                record = self.state.records[res.primary]
                self._set(
                    targets,
                    parity,
                    bx_rpcstrip=best.bx,
                    phi_rpcstrip=position.phi,
                    eta_rpcstrip=position.eta,
                    dphi_rpcstrip=delta_phi(record.phi_lct[parity], position.phi),
                    deta_rpcstrip=record.eta_lct[parity] - position.eta,
                )
