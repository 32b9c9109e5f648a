"""Event readers."""

from .snapshot import EventSnapshot, YAMLEventReader

__all__ = ["EventSnapshot", "YAMLEventReader"]
