"""Sets up fixtures general to the entire test suite of this package.

This file is read during the collection phase of pytest when running anything
inside this directory.
"""

import math

import pytest

from gemcsc.config import MatchingConfig
from gemcsc.data import GlobalPoint, GlobalVector, RunInfo, SimTrack
from gemcsc.match import build_match_manager

# Pseudorapidity and azimuth of the reference truth track
TRACK_ETA = 1.8
TRACK_PHI = 0.1

# Approximate z position of the detector layers used in the tests (cm)
STATION_Z = {1: 600.0, 2: 830.0, 3: 935.0, 4: 1020.0}


def point(eta=TRACK_ETA, phi=TRACK_PHI, z=STATION_Z[1]):
    """Global position on a plane of constant z, as a list of coordinates."""
    gp = GlobalPoint.from_eta_phi(eta, phi, z)
    return [gp.x, gp.y, gp.z]


@pytest.fixture(name="matching_dict")
def fixture_matching_dict():
    """Generates a complete `matching` configuration block."""
    cfg = {
        "verbose": 0,
        "csc_stations_to_use": list(range(12)),
        "sim_track": {
            "min_pt": 3.0,
            "min_eta": 1.45,
            "max_eta": 2.5,
            "only_muon": True,
        },
        "pt_estimator": {"name": "delta_y"},
    }
    for key in (
        "csc_sim_hit",
        "csc_wire_digi",
        "csc_strip_digi",
        "csc_clct",
        "csc_alct",
        "csc_lct",
        "csc_mplct",
    ):
        cfg[key] = {"min_n_hits_chamber": 4}

    return cfg


@pytest.fixture(name="matching_config")
def fixture_matching_config(matching_dict):
    """Generates the validated matching configuration of the default block."""
    return MatchingConfig.from_config(matching_dict)


@pytest.fixture(name="sim_track")
def fixture_sim_track():
    """Generates a 10 GeV negative muon in the forward endcap."""
    pt = 10.0
    momentum = GlobalVector(
        pt * math.cos(TRACK_PHI), pt * math.sin(TRACK_PHI), pt * math.sinh(TRACK_ETA)
    )
    return SimTrack(
        id=1, pdg_code=13, charge=-1.0, momentum=momentum, vertex_index=0, gen_index=0
    )


@pytest.fixture(name="layer_entries")
def fixture_layer_entries():
    """Provides a function which builds one snapshot entry per layer.

    The returned function takes a decoded identifier (as a dictionary
    without a layer), a list of layers and, optionally, the position of the
    entries and extra keys copied into each entry.
    """

    def _entries(det_id, layers, eta=TRACK_ETA, phi=TRACK_PHI, z=STATION_Z[1], **extra):
        return [
            {"id": {**det_id, "layer": layer}, "position": point(eta, phi, z), **extra}
            for layer in layers
        ]

    return _entries


@pytest.fixture(name="manager_factory")
def fixture_manager_factory():
    """Provides a function which builds the match manager of a track."""

    def _manager(track, data=None, dphi_cuts=None):
        return build_match_manager(
            track, RunInfo(run=1, lumi=2, event=3), data, dphi_cuts
        )

    return _manager
