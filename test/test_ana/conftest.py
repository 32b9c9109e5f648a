"""Fixtures shared by the aggregation tests."""

import pytest

from gemcsc.data import GlobalPoint

# Odd ME1/b chamber and the GE1/1 superchamber in front of it
ME11_ODD = {"endcap": 1, "station": 1, "ring": 1, "chamber": 1}
GE11_ODD = {"region": 1, "station": 1, "ring": 1, "chamber": 1}


def point(eta, phi, z):
    """Global position on a plane of constant z, as a list of coordinates."""
    gp = GlobalPoint.from_eta_phi(eta, phi, z)
    return [gp.x, gp.y, gp.z]


@pytest.fixture(name="lct_entry")
def fixture_lct_entry():
    """Generates the LCT matched in the odd ME1/b chamber."""
    return {
        "id": dict(ME11_ODD),
        "channel": 60,
        "wire_group": 10,
        "pattern": 5,
        "quality": 6,
        "bx": 8,
        "dphi": 0.01,
        "gem_dphi": 0.005,
        "position": point(1.8, 0.1, 600.0),
    }


@pytest.fixture(name="me11_data")
def fixture_me11_data(sim_track, layer_entries, lct_entry):
    """Generates the full response of a track crossing ME1/b and GE1/1.

    The GE1/1 pads of layer 1 sit at phi offsets of +0.05, -0.02 and +0.10
    with respect to the LCT.
    """
    momentum = [sim_track.momentum.x, sim_track.momentum.y, sim_track.momentum.z]
    gem_roll = {**GE11_ODD, "roll": 4}

    pads = []
    for channel, offset in ((10, 0.05), (11, -0.02), (12, 0.10)):
        pads += layer_entries(
            gem_roll, [1], phi=0.1 + offset, z=570.0, channel=channel, bx=channel - 10
        )

    return {
        "csc_sim_hits": layer_entries(
            ME11_ODD, range(1, 7), strip=30.0, momentum=momentum
        ),
        "csc_strip_digis": layer_entries(ME11_ODD, range(1, 5), channel=30),
        "csc_wire_digis": layer_entries(ME11_ODD, range(1, 5), channel=10),
        "clcts": [{"id": dict(ME11_ODD), "channel": 60, "quality": 5}],
        "alcts": [{"id": dict(ME11_ODD), "channel": 10, "quality": 2}],
        "lcts": [lct_entry],
        "gem_sim_hits": layer_entries(gem_roll, [1, 2], phi=0.098, z=570.0, strip=100.0),
        "gem_digis": (
            layer_entries(gem_roll, [1], phi=0.098, z=570.0, channel=100)
            + layer_entries(gem_roll, [2], phi=0.098, z=572.0, channel=102)
        ),
        "gem_pads": pads,
        "gem_pad_to_hs": [{"id": dict(GE11_ODD), "pad": 10, "hs": 55}],
        "gem_copads": [{"id": gem_roll, "channel": 10}],
    }
