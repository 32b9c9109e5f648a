"""Per-track accessors over the detector responses matched to a truth track.

This module contains:
- Abstract accessors, one per response category, and their bundle
- An in-memory implementation built from event snapshot dictionaries
"""

from .base import (
    CSCDigiMatcher,
    CSCStubMatcher,
    GEMDigiMatcher,
    HLTMatcher,
    L1Matcher,
    MatchManager,
    RPCDigiMatcher,
    SimHitMatcher,
    TrackMatcher,
    closest_candidate,
)
from .snapshot import DPhiCutTable, build_match_manager
