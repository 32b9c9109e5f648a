"""Tests for the position-based momentum estimate."""

import pytest

from gemcsc.ana.estimate import (
    PARITY_PATHS,
    DeltaYEstimator,
    estimate_pt,
    select_parity_path,
)
from gemcsc.ana.factories import estimator_factory
from gemcsc.data import GlobalPoint, PerStationRecord
from gemcsc.utils.enums import Parity


def points_at(phis, zs=(600.0, 830.0, 935.0), eta=1.8):
    """Position of a track in stations 1, 2 and 3."""
    return tuple(GlobalPoint.from_eta_phi(eta, phi, z) for phi, z in zip(phis, zs))


class TestParityPath:
    """Test the selection of the parity path."""

    @pytest.mark.parametrize(
        "masks, path",
        [((1, 2, 2), 0), ((1, 1, 1), 1), ((2, 2, 2), 2), ((2, 1, 1), 3),
         ((3, 3, 3), 0), ((3, 1, 1), 1), ((1, 2, 1), -1), ((0, 3, 3), -1)],
    )
    def test_select(self, masks, path):
        """Test that the first complete path in order of preference is used."""
        assert select_parity_path(masks) == path

    def test_paths(self):
        """Test the parity of the first path."""
        assert PARITY_PATHS[0] == (Parity.ODD, Parity.EVEN, Parity.EVEN)


class TestDeltaYEstimator:
    """Test suite for :class:`DeltaYEstimator`."""

    def test_bent_track(self):
        """Test that a bent track yields a positive estimate."""
        estimator = DeltaYEstimator()
        pt = estimator(points_at((0.1, 0.11, 0.13)), 1.8, 0)

        assert pt > 0.0

    def test_stronger_bending(self):
        """Test that a stronger bending yields a lower estimate."""
        estimator = DeltaYEstimator()
        pt_soft = estimator(points_at((0.1, 0.11, 0.13)), 1.8, 0)
        pt_hard = estimator(points_at((0.1, 0.13, 0.19)), 1.8, 0)

        assert pt_hard < pt_soft

    def test_undefined(self):
        """Test that an unknown path or a track without bending yields -1."""
        estimator = DeltaYEstimator()
        straight = points_at((0.1, 0.1, 0.1), zs=(600.0, 600.0, 600.0))

        assert estimator(points_at((0.1, 0.11, 0.13)), 1.8, -1) == -1.0
        assert estimator(straight, 1.8, 0) == -1.0

    def test_parametrization(self):
        """Test that the parametrization of the path is applied."""
        points = points_at((0.1, 0.11, 0.13))
        reference = DeltaYEstimator()(points, 1.8, 2)
        scaled = DeltaYEstimator(
            slope=[1.0, 1.0, 2.0, 1.0], intercept=[0.0, 0.0, 3.0, 0.0]
        )(points, 1.8, 2)

        assert scaled == pytest.approx(2 * reference + 3.0)

    def test_wrong_length(self):
        """Test that one parameter per path is required."""
        with pytest.raises(AssertionError):
            DeltaYEstimator(prop=[1.0])

    def test_factory(self):
        """Test that the estimator is built from its configuration block."""
        estimator = estimator_factory({"name": "delta_y", "slope": [2.0] * 4})

        assert isinstance(estimator, DeltaYEstimator)
        assert estimator.slope == [2.0] * 4


class TestEstimatePt:
    """Test the estimate from the records of a track."""

    def test_complete_path(self):
        """Test the estimate when stations 1, 2 and 3 are present."""
        records = [PerStationRecord() for _ in range(12)]
        records[1].has_csc_sh = 1
        records[6].has_csc_sh = 2
        records[8].has_csc_sh = 2
        p1, p2, p3 = points_at((0.1, 0.11, 0.13))
        points = {(1, Parity.ODD): p1, (6, Parity.EVEN): p2, (8, Parity.EVEN): p3}

        pt, found = estimate_pt(DeltaYEstimator(), records, points, "has_csc_sh", 1.8)

        assert found
        assert pt == pytest.approx(DeltaYEstimator()((p1, p2, p3), 1.8, 0))

    def test_incomplete_path(self):
        """Test that a missing station yields -1."""
        records = [PerStationRecord() for _ in range(12)]
        records[1].has_lct = 1
        records[6].has_lct = 2

        pt, found = estimate_pt(DeltaYEstimator(), records, {}, "has_lct", 1.8)

        assert pt == -1.0
        assert not found
