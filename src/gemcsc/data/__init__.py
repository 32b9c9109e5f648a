"""Module with all the data structures produced or consumed by the matching.

It contains the following data structures:
- :class:`GlobalPoint`, :class:`GlobalVector` for global positions/momenta
- :class:`SimTrack`, :class:`SimVertex`, :class:`RunInfo` for truth information
- :class:`SimHit`, :class:`Digi` for detector responses
- :class:`TFTrack` and the L1/HLT objects for downstream trigger objects
- :class:`PerStationRecord`, :class:`TrackChamberDeltaRecord` for the output
"""

from .delta import TrackChamberDeltaRecord
from .digi import Digi
from .hit import SimHit
from .point import GlobalPoint, GlobalVector
from .record import PerStationRecord
from .track import RunInfo, SimTrack, SimVertex
from .trigger import L1Extra, RecoChargedCandidate, RecoTrack, RecoTrackExtra, TFTrack
