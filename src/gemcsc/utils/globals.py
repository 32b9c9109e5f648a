"""Defines constants shared across the package."""

import numpy as np

# Muon particle ID
MUON_PID = 13

# Signed LCT bend code, indexed by the raw LCT pattern ID
LCT_BEND_PATTERN = np.array([-99, -5, 4, -4, 3, -3, 2, -2, 1, -1, 0], dtype=np.int64)

# Ordered (station, ring) pairs which define the logical station indexes
CSC_STATION_TABLE = (
    (-99, -99),
    (1, -99),
    (1, 4),
    (1, 1),
    (1, 2),
    (1, 3),
    (2, 1),
    (2, 2),
    (3, 1),
    (3, 2),
    (4, 1),
    (4, 2),
)

# Default names of the logical stations (used to name the output tables)
CSC_STATION_NAMES = (
    "ALL",
    "ME11",
    "ME1a",
    "ME1b",
    "ME12",
    "ME13",
    "ME21",
    "ME22",
    "ME31",
    "ME32",
    "ME41",
    "ME42",
)

# Index assigned to (station, ring) pairs absent from the station table
UNUSED_STATION = len(CSC_STATION_TABLE)

# Logical station which summarizes the whole track
SUMMARY_STATION = 0

# Split-ring logical stations which are merged into a combined record
STATION_ALIASES = {2: 1, 3: 1}

# Logical stations used by the three-station momentum estimate
ESTIMATE_STATIONS = (1, 6, 8)

# Logical stations summarized in each bit of the track-level simhit mask
SUMMARY_SIMHIT_BITS = ((1, (1, 4, 5)), (2, (6, 7)), (4, (8, 9)), (8, (10, 11)))

# GEM station to ME station mapping (None means no ME counterpart)
GEM_TO_ME_STATION = {2: None, 3: 2}

# Key layers used to extract single-layer positions, in order of preference
CSC_KEY_LAYERS = (3, 4)
GEM_KEY_LAYERS = (1, 2)

# Track momentum thresholds at which the trigger-track bending cut is tested
TF_PT_CUTS = (5, 7, 10, 15, 20, 30, 40)

# Positions closer to the origin than this along z are considered unset
MIN_POSITION_Z = 1e-3

# Default value of reserved or unset delta-record quantities
DELTA_DEFAULT = -99
