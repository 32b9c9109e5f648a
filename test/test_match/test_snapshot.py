"""Tests for the in-memory match accessors."""

import math

import pytest

from gemcsc.data import GlobalPoint
from gemcsc.geo import CSCDetId, GEMDetId, RPCDetId
from gemcsc.match import DPhiCutTable
from gemcsc.utils.enums import Parity

ME11_ODD = {"endcap": 1, "station": 1, "ring": 1, "chamber": 1}
GE11_ODD = {"region": 1, "station": 1, "ring": 1, "chamber": 1}


class TestDPhiCutTable:
    """Test suite for :class:`DPhiCutTable`."""

    def test_empty(self):
        """Test that an empty table passes every cut."""
        table = DPhiCutTable()

        assert table.passes(CSCDetId(1, 1, 1, 1), 1.0, 50.0)

    def test_thresholds(self):
        """Test that the largest threshold below the momentum applies."""
        table = DPhiCutTable({"ME11": {5: [0.02, 0.01], 20: [0.005, 0.002]}})
        odd, even = CSCDetId(1, 1, 1, 3), CSCDetId(1, 1, 1, 4)

        assert table.passes(odd, 0.5, 3.0)
        assert table.passes(odd, 0.015, 10.0)
        assert not table.passes(even, 0.015, 10.0)
        assert not table.passes(odd, 0.015, 25.0)
        assert table.passes(odd, -0.004, 25.0)

    def test_me1a_shares_type(self):
        """Test that both halves of ME1/1 share their cuts."""
        table = DPhiCutTable({"ME11": {5: [0.01, 0.01]}})

        assert DPhiCutTable.chamber_type(CSCDetId(1, 1, 4, 2)) == "ME11"
        assert not table.passes(CSCDetId(1, 1, 4, 2), 0.02, 10.0)
        assert table.passes(CSCDetId(1, 2, 1, 2), 0.02, 10.0)


class TestSnapshotMatchers:
    """Test suite for the accessors built from a snapshot dictionary."""

    def test_empty_snapshot(self, sim_track, manager_factory):
        """Test the defaults of the accessors of a track without responses."""
        manager = manager_factory(sim_track)

        assert manager.sim_hits.csc_chamber_ids() == []
        assert manager.sim_hits.local_bending(CSCDetId(1, 1, 1, 1)) == -10.0
        assert manager.gem_digis.hs_from_pad(GEMDetId(1, 1, 1, 1), 3) == -1
        assert manager.rpc_digis.hs_from_strip(RPCDetId(1, 3, 1, 1, 1, 1), 3) == 0
        assert manager.gem_digis.n_pads() == 0
        assert not manager.csc_stubs.lct_in_chamber(CSCDetId(1, 1, 1, 1)).is_valid
        assert manager.tracks.best_tf_track() is None
        assert manager.tracks.propagated_points(Parity.ODD) == [(-9.0, -9.0)] * 4
        assert manager.tracks.interstation_points(Parity.EVEN) == {}

    def test_layer_counts(self, sim_track, manager_factory, layer_entries):
        """Test that hits are grouped per chamber and counted per layer."""
        hits = layer_entries(ME11_ODD, [1, 2, 3, 3], strip=10.0)
        hits += layer_entries({**ME11_ODD, "ring": 4}, [1, 2], strip=20.0)
        manager = manager_factory(sim_track, {"csc_sim_hits": hits})
        sh = manager.sim_hits

        chamber = CSCDetId(**ME11_ODD)
        assert sh.csc_chamber_ids() == [chamber, chamber.paired_ring_id()]
        assert sh.csc_layer_count(chamber) == 3
        assert len(sh.csc_hits_in_chamber(chamber)) == 4
        assert len(sh.csc_hits_in_layer(chamber.layer_id(3))) == 2
        assert sh.mean_strip(sh.csc_hits_in_chamber(chamber)) == 10.0

    def test_closest_pad(self, sim_track, manager_factory, layer_entries):
        """Test that the pad closest to a reference point is selected."""
        pads = []
        for channel, offset in ((10, 0.05), (11, -0.02), (12, 0.10)):
            pads += layer_entries(
                {**GE11_ODD, "roll": 4}, [1], phi=0.1 + offset, z=570.0,
                channel=channel, bx=channel - 10,
            )
        manager = manager_factory(sim_track, {"gem_pads": pads})
        gd = manager.gem_digis

        superchamber = GEMDetId(**GE11_ODD)
        candidates = gd.pads_in_chamber(superchamber.chamber_id(1))
        ref = GlobalPoint.from_eta_phi(1.8, 0.1, 600.0)
        best, position = gd.closest_to(candidates, ref)

        assert gd.n_pads() == 3
        assert gd.pad_layer_count(superchamber) == 1
        assert best.channel == 11
        assert best.bx == 1
        assert position.phi == pytest.approx(0.08)

    def test_closest_no_candidate(self, sim_track, manager_factory):
        """Test that no candidate yields an invalid digi."""
        gd = manager_factory(sim_track).gem_digis
        best, position = gd.closest_to([], GlobalPoint(1.0, 1.0, 1.0))

        assert not best.is_valid
        assert position.z == 0.0

    def test_median_position(self, sim_track, manager_factory, layer_entries):
        """Test the coordinate-wise median of the strip and wire digis."""
        strips = layer_entries(ME11_ODD, [1], z=600.0)
        strips += layer_entries(ME11_ODD, [2], z=602.0)
        wires = layer_entries(ME11_ODD, [3], z=610.0)
        manager = manager_factory(
            sim_track, {"csc_strip_digis": strips, "csc_wire_digis": wires}
        )
        cd = manager.csc_digis
        chamber = CSCDetId(**ME11_ODD)
        median = cd.median_position(
            cd.strip_digis_in_chamber(chamber), cd.wire_digis_in_chamber(chamber)
        )

        assert median.z == pytest.approx(602.0)
        assert cd.n_coincidence_strip_chambers(2) == 1
        assert cd.n_coincidence_wire_chambers(2) == 0

    def test_lookups(self, sim_track, manager_factory):
        """Test the half-strip lookups and the local bending."""
        roll = {"region": 1, "station": 3, "ring": 1, "sector": 1,
                "subsector": 1, "csc_chamber": 2, "roll": 1}
        data = {
            "gem_pad_to_hs": [{"id": GE11_ODD, "pad": 3, "hs": 42}],
            "rpc_strip_to_hs": [{"id": roll, "strip": 7, "hs": 64}],
            "csc_local_bending": [{"id": ME11_ODD, "value": 0.25}],
        }
        manager = manager_factory(sim_track, data)

        assert manager.gem_digis.hs_from_pad(GEMDetId(**GE11_ODD), 3) == 42
        assert manager.gem_digis.hs_from_pad(GEMDetId(**GE11_ODD), 4) == -1
        assert manager.rpc_digis.hs_from_strip(RPCDetId(**roll), 7) == 64
        assert manager.sim_hits.local_bending(CSCDetId(**ME11_ODD)) == 0.25


class TestSnapshotTrackMatcher:
    """Test suite for the track-finder accessors."""

    @staticmethod
    def stub(det_id, gem_dphi=0.005):
        return {
            "id": det_id,
            "digi": {"channel": 40, "wire_group": 10, "gem_dphi": gem_dphi},
            "eta": 1.8,
            "phi": 0.1,
        }

    def test_best_track(self, sim_track, manager_factory):
        """Test that the track closest to the truth track is selected."""
        data = {
            "tf_tracks": [
                {"pt": 8.0, "dr": 0.3},
                {"pt": 12.0, "dr": 0.02},
                {"pt": 20.0, "dr": 0.1},
            ]
        }
        best = manager_factory(sim_track, data).tracks.best_tf_track()

        assert best.pt == 12.0

    def test_stubs(self, sim_track, manager_factory):
        """Test that the stub lists of a track are aligned."""
        data = {"tf_tracks": [{"dr": 0.1, "stubs": [self.stub(ME11_ODD)]}]}
        best = manager_factory(sim_track, data).tracks.best_tf_track()

        assert best.trigger_ids == [CSCDetId(**ME11_ODD)]
        assert best.trigger_digis[0].channel == 40
        assert best.trigger_eta_phis == [(1.8, 0.1)]

    def test_tf_dphi_cut(self, sim_track, manager_factory):
        """Test the bending cut of the station 1 and 2 stubs."""
        me1a = {**ME11_ODD, "ring": 4}
        data = {"tf_tracks": [{"dr": 0.1, "stubs": [self.stub(me1a, 0.005)]}]}
        cuts = DPhiCutTable({"ME11": {10: [0.002, 0.003]}})
        tracks = manager_factory(sim_track, data, cuts).tracks
        best = tracks.best_tf_track()

        assert tracks.pass_tf_dphi_cut(best, 1, 5.0)
        assert not tracks.pass_tf_dphi_cut(best, 1, 10.0)
        assert tracks.pass_tf_dphi_cut(best, 2, 10.0)

    def test_propagation(self, sim_track, manager_factory):
        """Test the propagated and interstation points."""
        data = {
            "propagation": {
                "odd": [[1.8, 0.1], [1.9, 0.2], [2.0, 0.3], [2.1, 0.4]],
                "interstation": {"odd": {12: [1.0, 2.0, 700.0], 23: None}},
            }
        }
        tracks = manager_factory(sim_track, data).tracks

        assert tracks.propagated_points(Parity.ODD)[1] == (1.9, 0.2)
        assert tracks.propagated_points(Parity.EVEN) == [(-9.0, -9.0)] * 4
        inter = tracks.interstation_points(Parity.ODD)
        assert inter[12].z == 700.0
        assert math.isnan(inter[23].x)
