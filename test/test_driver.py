"""Test that the driver runs the full chain, from events to records."""

import os

import pytest
import yaml

from gemcsc.bin.cli import main
from gemcsc.driver import Driver

ME11_ODD = {"endcap": 1, "station": 1, "ring": 1, "chamber": 1}


@pytest.fixture(name="event_file")
def fixture_event_file(tmp_path, sim_track, layer_entries):
    """Writes a YAML file with two events, each with one matched muon."""
    momentum = sim_track.momentum
    lct = layer_entries(ME11_ODD, [3], channel=60, wire_group=10, pattern=5)[0]
    lct["id"].pop("layer")
    track = {
        "id": 1,
        "pdg_code": 13,
        "charge": -1,
        "momentum": [momentum.x, momentum.y, momentum.z],
        "vertex_index": 0,
        "gen_index": 0,
        "match": {
            "csc_sim_hits": layer_entries(ME11_ODD, range(1, 7), strip=30.0),
            "lcts": [lct],
        },
    }
    events = [
        {"run": 1, "lumi": 1, "event": i, "tracks": [track, {"id": 2, "pdg_code": 11}]}
        for i in range(2)
    ]

    path = os.path.join(tmp_path, "events.yaml")
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump({"events": events}, f)

    return path


@pytest.fixture(name="cfg")
def fixture_cfg(event_file, matching_dict):
    """Generates a complete driver configuration."""
    matching_dict["csc_stations_to_use"] = [0, 1, 3]
    return {
        "base": {"iterations": -1},
        "io": {
            "reader": {"name": "yaml", "file_keys": event_file},
            "writer": "memory",
        },
        "matching": matching_dict,
    }


class TestDriver:
    """Test suite for :class:`Driver`."""

    def test_run(self, cfg):
        """Test that every event is processed and written."""
        driver = Driver(cfg)
        assert len(driver) == 2
        driver.run()

        rows = driver.writer.rows("trk_eff_ME1b")
        assert len(rows) == 2
        assert [row["event"] for row in rows] == [0, 1]
        assert rows[0]["has_csc_sh"] == 1
        assert rows[0]["has_lct"] == 1
        assert rows[0]["bend_lct_odd"] == -3
        assert driver.writer.rows("trk_delta") == []
        assert driver.emitter.counts == {
            "trk_eff_ALL": 2, "trk_eff_ME11": 2, "trk_eff_ME1b": 2
        }

    def test_iterations(self, cfg):
        """Test that the number of iterations is bounded by the reader."""
        cfg["base"]["iterations"] = 1
        driver = Driver(cfg)
        driver.run()
        assert len(driver.writer.rows("trk_eff_ALL")) == 1

        cfg["base"]["iterations"] = 3
        with pytest.raises(AssertionError):
            Driver(cfg)

    def test_no_reader(self, cfg):
        """Test that a reader must be configured."""
        del cfg["io"]["reader"]

        with pytest.raises(AssertionError):
            Driver(cfg)


class TestCommandLine:
    """Test suite for the command line entry point."""

    def test_main(self, tmp_path, cfg, event_file):
        """Test that the command line arguments override the configuration."""
        cfg["io"]["reader"]["file_keys"] = "missing.yaml"
        cfg["io"]["writer"] = {"name": "csv"}
        cfg_path = os.path.join(tmp_path, "config.yaml")
        with open(cfg_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(cfg, f)

        output = os.path.join(tmp_path, "out")
        main(
            config=cfg_path,
            source=[event_file],
            source_list=None,
            output=output,
            n=1,
            nskip=1,
            config_overrides=["matching.rpc.enabled=true"],
        )

        assert sorted(os.listdir(output)) == [
            "trk_eff_ALL.csv", "trk_eff_ME11.csv", "trk_eff_ME1b.csv"
        ]
        with open(os.path.join(output, "trk_eff_ME1b.csv"), encoding="utf-8") as f:
            lines = f.read().splitlines()
        header = lines[0].split(",")
        assert len(lines) == 2
        assert lines[1].split(",")[header.index("event")] == "1"

    def test_missing_reader(self, tmp_path):
        """Test that the configuration must define a reader."""
        cfg_path = os.path.join(tmp_path, "config.yaml")
        with open(cfg_path, "w", encoding="utf-8") as f:
            yaml.safe_dump({"io": {"writer": "memory"}}, f)

        with pytest.raises(KeyError):
            main(cfg_path, None, None, None, None, None, None)

    def test_invalid_override(self, tmp_path, cfg):
        """Test that overrides must be of the form key=value."""
        cfg_path = os.path.join(tmp_path, "config.yaml")
        with open(cfg_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(cfg, f)

        with pytest.raises(ValueError):
            main(cfg_path, None, None, None, None, None, ["matching.verbose"])
