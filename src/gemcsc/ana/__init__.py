"""Truth-track analysis.

- `select`: truth-track acceptance
- `aggregate`: per-station aggregation of the matched detector responses
- `estimate`: position-based pT estimate
- `summary`: track-level summary (trigger tracks, propagation, L1/HLT)
- `delta`: CSC/GEM chamber delta records
- `report`: diagnostic printout
- `process`: per-event processing
"""

from .aggregate import AggregationState, FeatureAggregator
from .delta import DeltaBuilder
from .process import EventProcessor, process_event
from .report import DebugReporter
from .select import TrackSelector
from .summary import TrackSummaryBuilder
