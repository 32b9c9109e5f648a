"""Tests for the flat output record data structures."""

import numpy as np
import pytest

from gemcsc.data import Digi, GlobalPoint, PerStationRecord, TFTrack, TrackChamberDeltaRecord
from gemcsc.geo import CSCDetId
from gemcsc.utils.enums import Parity


class TestPerStationRecord:
    """Test suite for :class:`PerStationRecord`."""

    def test_default_sentinels(self):
        """Test that a fresh record holds the out-of-range sentinels."""
        rec = PerStationRecord()

        assert rec.run == -99
        assert rec.charge == -9
        assert rec.bending_sh == -10.0
        assert rec.has_tfTrack == -99
        assert rec.chargesign == 99
        assert rec.deltaR == 10.0
        assert rec.pt_position == -1.0
        np.testing.assert_array_equal(rec.bend_lct, [-9, -9])
        np.testing.assert_array_equal(rec.phi_cscsh, [-9.0, -9.0])
        np.testing.assert_array_equal(rec.pad, [-1, -1])
        np.testing.assert_array_equal(rec.hsfromrpc, [0, 0])
        np.testing.assert_array_equal(rec.passdphi, [False, False])

    def test_parity_arrays_not_shared(self):
        """Test that two records never share their parity arrays."""
        rec_a, rec_b = PerStationRecord(), PerStationRecord()
        rec_a.pad[Parity.ODD] = 12

        assert rec_b.pad[Parity.ODD] == -1

    def test_column_names(self):
        """Test the emission order and the historical column names."""
        columns = PerStationRecord.columns()

        assert columns[:8] == [
            "lumi", "run", "event", "pt", "eta", "phi", "charge", "endcap"
        ]
        assert "Copad_odd" in columns
        assert "copad_even" in columns
        assert "copad_odd" not in columns
        assert columns.index("phi_cscsh_even") < columns.index("phi_cscsh_odd")
        assert columns.index("wg_lct_even") < columns.index("wg_lct_odd")
        assert columns[-1] == "hasSt1St2St3_sh"
        assert len(columns) == len(set(columns))

    def test_scalar_dict(self):
        """Test that the record is flattened into plain scalars."""
        rec = PerStationRecord()
        rec.copad[Parity.ODD] = 7
        rec.bend_lct[Parity.EVEN] = 3
        rec.passGE11 = True

        row = rec.scalar_dict()

        assert list(row.keys()) == PerStationRecord.columns()
        assert row["Copad_odd"] == 7
        assert row["bend_lct_even"] == 3
        assert row["passGE11"] is True
        assert all(not isinstance(v, np.generic) for v in row.values())

    def test_every_attribute_emitted(self):
        """Test that each parity slot and scalar has exactly one column."""
        rec = PerStationRecord()
        parity_attrs = dict(rec._parity_attrs)
        expected = 0
        for key in rec.__dict__:
            expected += len(Parity) if key in parity_attrs else 1

        assert len(rec.scalar_dict()) == expected

    def test_bits(self):
        """Test the parity presence bits of the masks."""
        rec = PerStationRecord()
        rec.set_bit("has_lct", Parity.EVEN)

        assert rec.has_lct == 2
        assert rec.has_bit("has_lct", Parity.EVEN)
        assert not rec.has_bit("has_lct", Parity.ODD)

        rec.set_bit("has_lct", Parity.ODD)
        assert rec.has_lct == 3

    def test_reset(self):
        """Test that a reset restores every default value."""
        rec = PerStationRecord()
        rec.run = 5
        rec.has_csc_sh = 3
        rec.pad[Parity.EVEN] = 4
        rec.reset()

        assert rec == PerStationRecord()


class TestTrackChamberDeltaRecord:
    """Test suite for :class:`TrackChamberDeltaRecord`."""

    def test_defaults(self):
        """Test that every quantity defaults to the reserved value."""
        row = TrackChamberDeltaRecord().scalar_dict()

        assert len(row) == 33
        assert all(v == -99 for v in row.values())
        assert list(row.keys())[:3] == ["odd", "charge", "chamber"]
        assert list(row.keys())[-1] == "dphi_gem_rh_csc_seg"


class TestTFTrack:
    """Test suite for :class:`TFTrack`."""

    def test_digi_in_me(self):
        """Test the lookup of a stub by station and ring."""
        track = TFTrack()
        track.trigger_ids = [CSCDetId(1, 1, 4, 3), CSCDetId(1, 2, 1, 2)]
        track.trigger_digis = [Digi(), Digi()]

        assert track.digi_in_me(1, 4) == 0
        assert track.digi_in_me(2, 1) == 1
        assert track.digi_in_me(1, 1) is None


class TestGlobalPoint:
    """Test suite for :class:`GlobalPoint`."""

    def test_angles(self):
        """Test the angular coordinates of a point."""
        point = GlobalPoint.from_eta_phi(1.8, 0.3, 600.0)

        assert point.z == 600.0
        assert point.eta == pytest.approx(1.8)
        assert point.phi == pytest.approx(0.3)

    def test_origin(self):
        """Test the angular coordinates of the origin."""
        point = GlobalPoint()

        assert point.eta == 0.0
        assert point.phi == 0.0
        assert not point.is_nan()
        assert GlobalPoint(np.nan, 0.0, 0.0).is_nan()
