"""Module to keep flat records in memory."""

from collections import OrderedDict

__all__ = ["MemoryWriter"]


class MemoryWriter:
    """Keeps the rows of every table in memory.

    Typical configuration should look like:

    .. code-block:: yaml

        io:
          ...
          writer:
            name: memory
    """

    name = "memory"

    def __init__(self):
        """Initialize an empty set of tables."""
        self.tables = OrderedDict()

    def append(self, table, row):
        """Store one row of a table.

        Parameters
        ----------
        table : str
            Name of the table
        row : dict
            Dictionary which maps each column name onto a scalar
        """
        self.tables.setdefault(table, []).append(dict(row))

    def rows(self, table):
        """Rows stored so far in a table (empty if never written to)."""
        return self.tables.get(table, [])
