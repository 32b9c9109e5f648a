"""Commits the flat records of processed events to a writer."""

from gemcsc.utils.logger import logger

__all__ = ["RecordEmitter", "DELTA_TABLE"]

# Name of the table which receives the chamber delta records
DELTA_TABLE = "trk_delta"


class RecordEmitter:
    """Forwards per-station and delta rows to the tables of a writer.

    Attributes
    ----------
    writer : object
        Writer which provides an `append(table, row)` method
    counts : Dict[str, int]
        Number of rows emitted so far, per table
    """

    def __init__(self, writer):
        """Initialize the emitter.

        Parameters
        ----------
        writer : object
            Writer which provides an `append(table, row)` method
        """
        self.writer = writer
        self.counts = {}

    def _append(self, table, row):
        self.writer.append(table, row)
        self.counts[table] = self.counts.get(table, 0) + 1

    def emit(self, station_rows, delta_rows):
        """Commits the rows of one event.

        Parameters
        ----------
        station_rows : Dict[str, List[dict]]
            Per-station rows, keyed by table name
        delta_rows : List[dict]
            Chamber delta rows
        """
        for row in delta_rows:
            self._append(DELTA_TABLE, row)

        for table, rows in station_rows.items():
            for row in rows:
                self._append(table, row)

        logger.debug(
            "Emitted %d delta rows and %d per-station rows.",
            len(delta_rows), sum(len(rows) for rows in station_rows.values())
        )
