"""Tests for the CSC/GEM chamber delta records."""

import pytest

from gemcsc.ana import DeltaBuilder

GE11_EVEN = {"region": 1, "station": 1, "ring": 1, "chamber": 2, "roll": 3}
GE11_BACKWARD = {"region": -1, "station": 1, "ring": 1, "chamber": 1, "roll": 3}


@pytest.fixture(name="builder")
def fixture_builder(matching_config):
    """Generates a delta builder with the default thresholds."""
    return DeltaBuilder(matching_config)


class TestDeltaBuilder:
    """Test suite for :class:`DeltaBuilder`."""

    def test_single_pair(self, builder, sim_track, manager_factory, me11_data):
        """Test the record of a CSC chamber and its GEM superchamber."""
        records = builder.build(manager_factory(sim_track, me11_data))

        assert len(records) == 1
        rec = records[0]
        assert rec.odd == 1
        assert rec.chamber == 1
        assert rec.endcap == 1
        assert rec.charge == -1
        assert rec.roll == 4
        assert rec.pt == pytest.approx(10.0)
        assert rec.csc_dg_phi == pytest.approx(0.1)
        assert rec.gem_sh_phi == pytest.approx(0.098)
        assert rec.dphi_sh == pytest.approx(0.002)
        assert rec.dphi_pad == pytest.approx(0.02)
        assert rec.gem_pad_phi == pytest.approx(0.08)

    def test_lct_quantities(self, builder, sim_track, manager_factory, me11_data):
        """Test that the LCT quantities are filled from the matched LCT."""
        rec = builder.build(manager_factory(sim_track, me11_data))[0]

        assert rec.bend == -3
        assert rec.csc_lct_phi == pytest.approx(0.1)
        assert rec.dphi_lct_pad == pytest.approx(0.02)
        assert rec.dphi_gem_rh_csc_seg == -99

    def test_no_lct(self, builder, sim_track, manager_factory, me11_data):
        """Test that the LCT quantities keep their default without an LCT."""
        me11_data["lcts"] = []
        rec = builder.build(manager_factory(sim_track, me11_data))[0]

        assert rec.bend == -99
        assert rec.csc_lct_phi == -99
        assert rec.dphi_pad == pytest.approx(0.02)

    def test_no_pad(self, builder, sim_track, manager_factory, me11_data):
        """Test that no record is built without any GEM pad."""
        me11_data["gem_pads"] = []

        assert builder.build(manager_factory(sim_track, me11_data)) == []

    def test_layer_gate(self, builder, sim_track, manager_factory, me11_data):
        """Test that chambers below the comparator layer threshold are skipped."""
        me11_data["csc_strip_digis"] = me11_data["csc_strip_digis"][:3]

        assert builder.build(manager_factory(sim_track, me11_data)) == []

    def test_chamber_mismatch(
        self, builder, sim_track, manager_factory, me11_data, layer_entries
    ):
        """Test that only superchambers of the same region and chamber pair."""
        me11_data["gem_sim_hits"] += layer_entries(GE11_EVEN, [1], z=570.0)
        me11_data["gem_digis"] += layer_entries(GE11_EVEN, [1], z=570.0, channel=5)
        me11_data["gem_pads"] += layer_entries(GE11_EVEN, [1], z=570.0, channel=2)
        me11_data["gem_sim_hits"] += layer_entries(GE11_BACKWARD, [1], z=-570.0)
        me11_data["gem_digis"] += layer_entries(
            GE11_BACKWARD, [1], z=-570.0, channel=5
        )
        me11_data["gem_pads"] += layer_entries(GE11_BACKWARD, [1], z=-570.0, channel=2)

        records = builder.build(manager_factory(sim_track, me11_data))

        assert len(records) == 1
        assert records[0].roll == 4

    def test_missing_gem_hits(self, builder, sim_track, manager_factory, me11_data):
        """Test that superchambers without simulated hits are skipped."""
        me11_data["gem_sim_hits"] = []

        assert builder.build(manager_factory(sim_track, me11_data)) == []
