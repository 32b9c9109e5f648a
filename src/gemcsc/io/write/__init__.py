"""Record writers."""

from .csv import CSVWriter
from .memory import MemoryWriter

__all__ = ["CSVWriter", "MemoryWriter"]
