"""Top-level module of the GEM/CSC matching source code."""

# Import main workflow entry point
from .driver import Driver
from .version import __version__

# Import the per-event processing
from .ana import EventProcessor, process_event
