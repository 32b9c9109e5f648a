"""Detector identifiers and logical station bookkeeping.

This module contains:
- Decoded CSC, GEM and RPC detector identifiers
- The table of logical stations and the resolver which maps a detector unit
  onto the logical-station records it updates
"""

from .detid import CSCDetId, GEMDetId, RPCDetId
from .stations import Resolution, StationIndex, StationResolver
