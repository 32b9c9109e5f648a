"""Input and output of the matching records.

- Readers which load event snapshots
- Writers which store the flat per-station and delta records
"""

from .emit import DELTA_TABLE, RecordEmitter
from .factories import reader_factory, writer_factory
