"""Tests for the validation of the matching configuration block."""

import pytest

from gemcsc.config import ConfigValidationError, MatchingConfig
from gemcsc.config.matching import THRESHOLD_KEYS


class TestMatchingConfigValidation:
    """Test suite for :class:`MatchingConfig`."""

    def test_default_block(self, matching_dict):
        """Test that a complete block is accepted as is."""
        cfg = MatchingConfig.from_config(matching_dict)

        assert cfg.csc_stations_to_use == tuple(range(12))
        assert cfg.station_name(3) == "ME1b"
        assert all(cfg.threshold(key) == 4 for key in THRESHOLD_KEYS)
        assert cfg.sim_track.min_eta == 1.45
        assert not cfg.rpc_enabled

    def test_stations_are_sorted(self, matching_dict):
        """Test that the stations in use are stored in increasing order."""
        matching_dict["csc_stations_to_use"] = [6, 1, 3]
        cfg = MatchingConfig.from_config(matching_dict)

        assert cfg.csc_stations_to_use == (1, 3, 6)

    def test_rpc_block(self, matching_dict):
        """Test that the RPC aggregation is toggled by its own block."""
        matching_dict["rpc"] = {"enabled": True}
        cfg = MatchingConfig.from_config(matching_dict)

        assert cfg.rpc_enabled

    @pytest.mark.parametrize("key", THRESHOLD_KEYS)
    def test_missing_threshold(self, matching_dict, key):
        """Test that every layer-count threshold is required."""
        del matching_dict[key]
        with pytest.raises(ConfigValidationError, match=key):
            MatchingConfig.from_config(matching_dict)

    def test_threshold_without_value(self, matching_dict):
        """Test that a threshold block must provide its value."""
        matching_dict["csc_lct"] = {}
        with pytest.raises(ConfigValidationError, match="min_n_hits_chamber"):
            MatchingConfig.from_config(matching_dict)

    @pytest.mark.parametrize("value", [-1, 2.5, "4", True])
    def test_invalid_threshold(self, matching_dict, value):
        """Test that thresholds must be non-negative integers."""
        matching_dict["csc_sim_hit"]["min_n_hits_chamber"] = value
        with pytest.raises(ConfigValidationError):
            MatchingConfig.from_config(matching_dict)

    @pytest.mark.parametrize("stations", [[12], [-1], [1, 1], "1", [1.0]])
    def test_invalid_stations(self, matching_dict, stations):
        """Test that the stations in use must be unique valid indexes."""
        matching_dict["csc_stations_to_use"] = stations
        with pytest.raises(ConfigValidationError):
            MatchingConfig.from_config(matching_dict)

    def test_station_without_name(self, matching_dict):
        """Test that every station in use must have a name."""
        matching_dict["csc_stations"] = ["ALL", "ME11"]
        matching_dict["csc_stations_to_use"] = [0, 1, 2]
        with pytest.raises(ConfigValidationError, match="no name"):
            MatchingConfig.from_config(matching_dict)

    def test_inverted_eta_window(self, matching_dict):
        """Test that the track selection window must be ordered."""
        matching_dict["sim_track"]["min_eta"] = 2.6
        with pytest.raises(ConfigValidationError, match="min_eta"):
            MatchingConfig.from_config(matching_dict)

    def test_unknown_key(self, matching_dict):
        """Test that unknown parameters are reported as validation errors."""
        matching_dict["unknown_parameter"] = 1
        with pytest.raises(ConfigValidationError, match="Invalid"):
            MatchingConfig.from_config(matching_dict)

    def test_not_a_dictionary(self):
        """Test that the block itself must be a dictionary."""
        with pytest.raises(ConfigValidationError):
            MatchingConfig.from_config([1, 2, 3])
