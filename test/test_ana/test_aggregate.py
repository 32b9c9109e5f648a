"""Tests for the aggregation of the detector responses into station records."""

import numpy as np
import pytest

from gemcsc.ana import FeatureAggregator
from gemcsc.config import MatchingConfig
from gemcsc.data import PerStationRecord
from gemcsc.utils.enums import Parity

ODD, EVEN = Parity.ODD, Parity.EVEN

ME11_ODD = {"endcap": 1, "station": 1, "ring": 1, "chamber": 1}
ME1A_EVEN = {"endcap": 1, "station": 1, "ring": 4, "chamber": 2}
ME21_EVEN = {"endcap": 1, "station": 2, "ring": 1, "chamber": 2}
RE31_ODD = {"region": 1, "station": 3, "ring": 1, "sector": 1,
            "subsector": 1, "csc_chamber": 3, "roll": 2}


@pytest.fixture(name="aggregator")
def fixture_aggregator(matching_config):
    """Generates an aggregator which uses every logical station."""
    return FeatureAggregator(matching_config)


class TestAggregateME11:
    """Aggregation of a track crossing the odd ME1/b chamber."""

    def test_csc_sim_hits(self, aggregator, sim_track, manager_factory, me11_data):
        """Test the summary of the CSC simulated hits."""
        state = aggregator.aggregate(manager_factory(sim_track, me11_data))
        rec = state.records[3]

        assert rec.has_csc_sh == 1
        assert rec.nlayers_csc_sh[ODD] == 6
        assert rec.nlayers_csc_sh[EVEN] == -1
        assert rec.eta_cscsh[ODD] == pytest.approx(1.8)
        assert rec.phi_cscsh[ODD] == pytest.approx(0.1)
        assert rec.phi_cscsh[EVEN] == -9.0
        assert rec.pt_sh == pytest.approx(10.0)
        assert rec.pteta_sh == pytest.approx(1.8)
        assert rec.bending_sh == -10.0
        assert (3, ODD) in state.sh_points

    def test_csc_digis(self, aggregator, sim_track, manager_factory, me11_data):
        """Test the summary of the CSC digis and trigger primitives."""
        rec = aggregator.aggregate(manager_factory(sim_track, me11_data)).records[3]

        assert rec.has_csc_strips == 1
        assert rec.has_csc_wires == 1
        assert rec.nlayers_st_dg[ODD] == 4
        assert rec.nlayers_wg_dg[ODD] == 4
        assert rec.has_clct == 1
        assert rec.halfstrip[ODD] == 60
        assert rec.quality_clct[ODD] == 5
        assert rec.has_alct == 1
        assert rec.wiregroup[ODD] == 10
        assert rec.quality_alct[ODD] == 2

    def test_lct(self, aggregator, sim_track, manager_factory, me11_data):
        """Test the summary of the matched LCT."""
        rec = aggregator.aggregate(manager_factory(sim_track, me11_data)).records[3]

        assert rec.has_lct & 1
        assert rec.bend_lct[ODD] == -3
        assert rec.bend_lct[EVEN] == -9
        assert rec.bx_lct[ODD] == 8
        assert rec.hs_lct[ODD] == 60
        assert rec.wg_lct[ODD] == 10
        assert rec.quality[ODD] == 6
        assert rec.dphi_lct[ODD] == pytest.approx(0.01)
        assert rec.passdphi[ODD]
        assert rec.phi_lct[ODD] == pytest.approx(0.1)
        assert rec.chamber[ODD] == 3
        assert rec.chamber[EVEN] == 0

    def test_gem(self, aggregator, sim_track, manager_factory, me11_data):
        """Test the summary of the GEM simulated hits, digis and pads."""
        rec = aggregator.aggregate(manager_factory(sim_track, me11_data)).records[3]

        assert rec.has_gem_sh == 1
        assert rec.has_gem_sh2 == 1
        assert rec.phi_gemsh[ODD] == pytest.approx(0.098)
        assert rec.dphi_sh[ODD] == pytest.approx(0.002)
        assert rec.strip_gemsh[ODD] == 100.0
        assert rec.has_gem_dg == 1
        assert rec.has_gem_dg2 == 1
        assert rec.strip_gemdg[ODD] == 101
        assert rec.has_gem_pad == 1
        assert rec.has_gem_pad2 == 0
        assert rec.pad[ODD] == 10
        assert rec.hsfromgem[ODD] == 55
        assert rec.has_gem_copad == 1
        assert rec.copad[ODD] == 10

    def test_closest_pad(self, aggregator, sim_track, manager_factory, me11_data):
        """Test that the pad closest to the LCT is compared to it."""
        rec = aggregator.aggregate(manager_factory(sim_track, me11_data)).records[3]

        assert rec.bx_pad[ODD] == 1
        assert rec.phi_pad[ODD] == pytest.approx(0.08)
        assert rec.dphi_pad[ODD] == pytest.approx(0.02)
        assert rec.deta_pad[ODD] == pytest.approx(0.0, abs=1e-9)
        assert rec.bx_pad[EVEN] == -9

    def test_no_lct_no_closest_pad(
        self, aggregator, sim_track, manager_factory, me11_data
    ):
        """Test that the pad comparison requires a valid LCT."""
        me11_data["lcts"] = []
        rec = aggregator.aggregate(manager_factory(sim_track, me11_data)).records[3]

        assert rec.has_gem_pad == 1
        assert rec.chamber[ODD] == 1
        assert rec.bx_pad[ODD] == -9
        assert rec.dphi_pad[ODD] == -9.0

    def test_alias_mirror(self, aggregator, sim_track, manager_factory, me11_data):
        """Test that the combined ME1/1 record mirrors the ME1/b record."""
        state = aggregator.aggregate(manager_factory(sim_track, me11_data))
        row_me1b = state.records[3].scalar_dict()
        row_me11 = state.records[1].scalar_dict()

        assert row_me11 == row_me1b

    def test_track_record(self, aggregator, sim_track, manager_factory, me11_data):
        """Test that the track-level record only holds track-level content."""
        state = aggregator.aggregate(manager_factory(sim_track, me11_data))
        rec = state.records[0]

        assert (rec.run, rec.lumi, rec.event) == (1, 2, 3)
        assert rec.charge == -1
        assert rec.endcap == 1
        assert rec.pt == pytest.approx(10.0)
        assert rec.chamber_ME1_csc_sh == 1
        assert rec.chamber_ME2_csc_sh == 0
        assert rec.has_clct == 0
        assert rec.has_lct == 0
        assert rec.bend_lct[ODD] == -9

    def test_other_ring_untouched(
        self, aggregator, sim_track, manager_factory, me11_data
    ):
        """Test that the ME1/a record only holds the track identifiers."""
        state = aggregator.aggregate(manager_factory(sim_track, me11_data))
        rec = state.records[2]

        assert rec.run == 1
        assert rec.has_csc_sh == 0
        assert rec.has_lct == 0
        assert rec.pad[ODD] == -1


class TestAggregateStations:
    """Aggregation across several logical stations."""

    def test_both_rings(
        self, aggregator, sim_track, manager_factory, me11_data, lct_entry
    ):
        """Test that both halves of ME1/1 fill the combined record."""
        me1a_lct = {**lct_entry, "id": ME1A_EVEN, "pattern": 10}
        me11_data["lcts"].append(me1a_lct)
        state = aggregator.aggregate(manager_factory(sim_track, me11_data))

        assert state.records[1].has_lct == 3
        assert state.records[2].has_lct == 2
        assert state.records[3].has_lct == 1
        assert state.records[1].bend_lct[EVEN] == 0
        assert state.records[1].bend_lct[ODD] == -3
        assert state.records[2].bend_lct[ODD] == -9

    def test_me11_layer_merge(self, aggregator, sim_track, manager_factory, layer_entries):
        """Test that the two halves of ME1/1 count as a single chamber."""
        me1a_odd = {**ME11_ODD, "ring": 4}
        data = {
            "csc_sim_hits": (
                layer_entries(ME11_ODD, [1, 2]) + layer_entries(me1a_odd, [3, 4])
            )
        }
        state = aggregator.aggregate(manager_factory(sim_track, data))

        assert state.records[3].has_csc_sh == 1
        assert state.records[3].nlayers_csc_sh[ODD] == 4
        assert state.records[2].has_csc_sh == 1

    def test_sim_hit_threshold(self, aggregator, sim_track, manager_factory, layer_entries):
        """Test that chambers below the layer threshold are not summarized."""
        data = {"csc_sim_hits": layer_entries(ME21_EVEN, [1, 2, 3], z=830.0)}
        state = aggregator.aggregate(manager_factory(sim_track, data))

        assert state.records[6].has_csc_sh == 0
        assert state.records[6].nlayers_csc_sh[EVEN] == -1
        assert state.records[0].chamber_ME2_csc_sh == 2

    def test_stations_not_in_use(
        self, matching_dict, sim_track, manager_factory, me11_data
    ):
        """Test that records of stations not in use are never written."""
        matching_dict["csc_stations_to_use"] = [0, 3]
        aggregator = FeatureAggregator(MatchingConfig.from_config(matching_dict))
        state = aggregator.aggregate(manager_factory(sim_track, me11_data))

        assert state.records[1] == PerStationRecord()
        assert state.records[3].has_lct == 1
        assert state.records[3].run == 1

    def test_unused_primary(self, matching_dict, sim_track, manager_factory, me11_data):
        """Test that the combined record ignores split-ring stations not in use."""
        matching_dict["csc_stations_to_use"] = [0, 1]
        aggregator = FeatureAggregator(MatchingConfig.from_config(matching_dict))
        state = aggregator.aggregate(manager_factory(sim_track, me11_data))

        assert state.records[1].run == 1
        assert state.records[1].has_lct == 0
        assert state.records[1].has_csc_sh == 0
        assert state.records[0].chamber_ME1_csc_sh == 0

    def test_rpc(self, matching_dict, sim_track, manager_factory, layer_entries):
        """Test that the RPC responses are only summarized when enabled."""
        data = {
            "rpc_sim_hits": [{"id": RE31_ODD}],
            "rpc_digis": [
                {"id": RE31_ODD, "channel": c, "bx": 0} for c in (5, 9, 7)
            ],
            "rpc_strip_to_hs": [{"id": RE31_ODD, "strip": 7, "hs": 33}],
        }
        aggregator = FeatureAggregator(MatchingConfig.from_config(matching_dict))
        rec = aggregator.aggregate(manager_factory(sim_track, data)).records[8]
        assert rec.has_rpc_sh == 0
        assert rec.has_rpc_dg == 0

        matching_dict["rpc"] = {"enabled": True}
        aggregator = FeatureAggregator(MatchingConfig.from_config(matching_dict))
        rec = aggregator.aggregate(manager_factory(sim_track, data)).records[8]
        assert rec.has_rpc_sh == 1
        assert rec.has_rpc_dg == 1
        assert rec.strip_rpcdg[ODD] == 7
        assert rec.hsfromrpc[ODD] == 33
        assert rec.hsfromrpc[EVEN] == 0
        assert rec.bx_rpcstrip[ODD] == -9


class TestAggregateReset:
    """Reuse of an aggregator across tracks."""

    def test_idempotent(self, aggregator, sim_track, manager_factory, me11_data):
        """Test that aggregating the same track twice gives the same rows."""
        manager = manager_factory(sim_track, me11_data)
        first = [r.scalar_dict() for r in aggregator.aggregate(manager).records]
        second = [r.scalar_dict() for r in aggregator.aggregate(manager).records]

        assert first == second

    def test_no_leak(self, aggregator, sim_track, manager_factory, me11_data):
        """Test that nothing leaks from one track to the next."""
        aggregator.aggregate(manager_factory(sim_track, me11_data))
        state = aggregator.aggregate(manager_factory(sim_track))

        assert state.records[3].has_lct == 0
        assert state.records[3].pad[ODD] == -1
        np.testing.assert_array_equal(state.records[3].chamber, [0, 0])
        assert state.sh_points == {}
        assert state.lcts == {}
        assert not state.lct(3, ODD)[0].is_valid
