"""Diagnostic printout of the matching details of one truth track."""

import logging

import numpy as np

from gemcsc.utils.enums import Parity
from gemcsc.utils.logger import logger

__all__ = ["DebugReporter"]


class DebugReporter:
    """Logs every intermediate lookup made for one truth track.

    The reporter only reads from the match accessors, it never modifies a
    record.

    Attributes
    ----------
    level : int
        Logging level of the printout
    """

    def __init__(self, level=logging.INFO):
        """Initialize the reporter.

        Parameters
        ----------
        level : int, default logging.INFO
            Logging level of the printout
        """
        self.level = level

    @staticmethod
    def triggered(records) -> bool:
        """Whether the GEM/CSC bending in the ME1/1 record is suspicious.

        Parameters
        ----------
        records : List[PerStationRecord]
            Per-station records of the track

        Returns
        -------
        bool
            `True` if 0.5 < |dphi_sh| < 9 for either parity
        """
        dphi = np.abs(records[1].dphi_sh)
        return bool(np.any((dphi > 0.5) & (dphi < 9.0)))

    def _log(self, msg, *args):
        logger.log(self.level, msg, *args)

    def report(self, manager, track_id, message=""):
        """Logs the matching details of one truth track.

        Parameters
        ----------
        manager : MatchManager
            Accessors over the responses matched to the truth track
        track_id : int
            Index of the track in the event
        message : str, optional
            Header of the printout
        """
        track = manager.sim_track
        self._log(
            "======================== matching information ========================"
        )
        self._log("%s", message)
        self._log(
            "Track %d: pt %.3f, eta %.3f, phi %.3f, charge %d",
            track_id, track.pt, track.eta, track.phi, int(track.charge)
        )
        self.report_sim_hits(manager)
        self.report_csc_digis(manager)
        self.report_gem_digis(manager)
        self.report_rpc_digis(manager)
        self.report_stubs(manager)
        self.report_tf_track(manager)
        self._log(
            "======================== end of matching information ========================"
        )

    def report_sim_hits(self, manager):
        """CSC and GEM chambers with simulated hits."""
        sh = manager.sim_hits
        for d in sh.csc_chamber_ids():
            hits = sh.csc_hits_in_chamber(d)
            gp = sh.mean_position(hits)
            self._log(
                "CSC simhits in %s: %d layers, %d hits, mean phi %.4f eta %.4f, "
                "mean strip %.2f",
                d, sh.csc_layer_count(d), len(hits), gp.phi, gp.eta, sh.mean_strip(hits)
            )

        for d in sh.gem_superchamber_ids():
            hits = sh.gem_hits_in_superchamber(d)
            gp = sh.mean_position(hits)
            self._log(
                "GEM simhits in %s: %d layers, %d hits, mean phi %.4f eta %.4f, "
                "mean strip %.2f",
                d, sh.gem_layer_count(d), len(hits), gp.phi, gp.eta, sh.mean_strip(hits)
            )

    def report_csc_digis(self, manager):
        """CSC strip and wire digis."""
        cd = manager.csc_digis
        for d in cd.strip_chamber_ids():
            digis = cd.strip_digis_in_chamber(d)
            self._log(
                "CSC strips in %s: %d layers, channels %s",
                d, cd.strip_layer_count(d), [s.channel for s in digis]
            )
        for d in cd.wire_chamber_ids():
            digis = cd.wire_digis_in_chamber(d)
            self._log(
                "CSC wires in %s: %d layers, channels %s",
                d, cd.wire_layer_count(d), [w.channel for w in digis]
            )

    def report_gem_digis(self, manager):
        """GEM digis, pads and copads."""
        gd = manager.gem_digis
        for d in gd.superchamber_ids():
            digis = gd.digis_in_superchamber(d)
            median = gd.median_strip(digis)
            pads = gd.pads_in_superchamber(d)
            self._log(
                "GEM digis in %s: %d layers, median strip %d, pads %s",
                d, gd.digi_layer_count(d), median, [p.channel for p in pads]
            )
            if len(pads):
                self._log(
                    "  half-strip from pad %d: %d",
                    pads[0].channel, gd.hs_from_pad(d, pads[0].channel)
                )

        for d in gd.copad_superchamber_ids():
            copads = gd.copads_in_superchamber(d)
            self._log("GEM copads in %s: %s", d, [c.channel for c in copads])

    def report_rpc_digis(self, manager):
        """RPC digis."""
        rd = manager.rpc_digis
        for d in rd.chamber_ids():
            digis = rd.digis_in_chamber(d)
            median = rd.median_strip(digis)
            self._log(
                "RPC digis in %s: median strip %d, half-strip %d, strips %s",
                d, median, rd.hs_from_strip(d, median), [r.channel for r in digis]
            )

    def report_stubs(self, manager):
        """CSC trigger primitives, all and matched."""
        stubs = manager.csc_stubs
        for d in stubs.clct_chamber_ids():
            self._log("CLCT in %s: %s", d, stubs.clct_in_chamber(d))
        for d in stubs.alct_chamber_ids():
            self._log("ALCT in %s: %s", d, stubs.alct_in_chamber(d))
        for d in stubs.lct_chamber_ids():
            lcts = stubs.lcts_in_chamber(d)
            self._log("All LCTs in %s: %s", d, lcts)
            lct = stubs.lct_in_chamber(d)
            gp = stubs.digi_position(lct)
            self._log(
                "Matched LCT in %s: %s, phi %.4f eta %.4f", d, lct, gp.phi, gp.eta
            )

    def report_tf_track(self, manager):
        """Best track-finder track with the propagated and stub phi."""
        tracks = manager.tracks
        if not len(tracks.tf_tracks()):
            self._log("No matched track-finder track.")
            return

        best = tracks.best_tf_track()
        self._log(
            "Best track-finder track: pt %.3f, eta %.3f, phi %.3f, dR %.3f",
            best.pt, best.eta, best.phi, best.dr
        )
        for det_id, (eta, phi) in zip(best.trigger_ids, best.trigger_eta_phis):
            parity = Parity.from_chamber(det_id.chamber)
            _, phi_prop = tracks.propagated_points(parity)[det_id.station - 1]
            self._log(
                "  stub in %s: phi %.4f eta %.4f, propagated phi (%s) %.4f",
                det_id, phi, eta, parity.suffix, phi_prop
            )
