"""GEM/CSC matching driver class.

Takes care of everything in one centralized place:
- Event loading
- Truth-track selection and matching aggregation
- Writing output records to file
"""

import yaml

from .ana import EventProcessor
from .config import MatchingConfig
from .io import RecordEmitter, reader_factory, writer_factory
from .utils.logger import logger, set_verbosity
from .utils.stopwatch import StopwatchManager
from .version import __version__

__all__ = ["Driver"]


class Driver:
    """Central GEM/CSC matching driver.

    Processes global configuration and runs the appropriate modules:
      1. Load an event snapshot
      2. Aggregate the responses matched to each accepted truth track
      3. Write the per-station and delta records to file

    It takes a configuration dictionary of the form:

    .. code-block:: yaml

        base:
          <Base driver configuration>
        io:
          <Input/output configuration>
        matching:
          <Matching configuration>
    """

    def __init__(self, cfg):
        """Initializes the class attributes.

        Parameters
        ----------
        cfg : dict
            Global configuration dictionary
        """
        # Initialize the timers
        self.watch = StopwatchManager()
        self.watch.initialize(["iteration", "read", "process", "write"])

        # Process the full configuration dictionary and store it
        base, io, matching = self.process_config(**cfg)

        # Initialize the base driver configuration parameters
        self.iterations = base.get("iterations", None)

        # Initialize the matching
        self.config = MatchingConfig.from_config(matching)
        set_verbosity(self.config.verbose)
        self.processor = EventProcessor(self.config)

        # Initialize the input/output
        self.reader = reader_factory(io["reader"])
        self.emitter = RecordEmitter(writer_factory(io.get("writer", "memory")))
        if self.iterations is None or self.iterations < 0:
            self.iterations = len(self.reader)
        assert self.iterations <= len(self.reader), (
            f"Cannot process {self.iterations} entries, the reader only "
            f"provides {len(self.reader)}."
        )

    def process_config(self, io, matching, base=None):
        """Reads the configuration and dumps it to the logger.

        Parameters
        ----------
        io : dict
            I/O configuration dictionary
        matching : dict
            Matching configuration dictionary
        base : dict, optional
            Base driver configuration dictionary

        Returns
        -------
        dict
            Base configuration
        dict
            I/O configuration
        dict
            Matching configuration
        """
        # If there is no base configuration, make it empty (will use defaults)
        if base is None:
            base = {}

        assert "reader" in io, "Must provide a reader configuration under `io`."

        # Rebuild global configuration dictionary
        self.cfg = {"base": base, "io": io, "matching": matching}

        # Log the release and the configuration
        logger.info("Release version: %s\n", __version__)
        logger.info(yaml.dump(self.cfg, default_flow_style=None, sort_keys=False))

        return base, io, matching

    @property
    def writer(self):
        """Writer which receives the output records."""
        return self.emitter.writer

    def __len__(self):
        """Returns the number of events in the underlying reader object.

        Returns
        -------
        int
            Number of events in the underlying reader
        """
        return len(self.reader)

    def run(self):
        """Loop over the requested number of entries, process them."""
        for entry in range(self.iterations):
            self.process(entry)

        logger.info(
            "Processed %d entries. Rows written per table: %s",
            self.iterations, self.emitter.counts
        )

    def process(self, entry):
        """Process one event.

        Parameters
        ----------
        entry : int
            Entry number to load

        Returns
        -------
        Dict[str, List[dict]]
            Per-station rows, keyed by table name
        List[dict]
            Delta rows
        """
        self.watch.start("iteration")

        # 1. Load the event
        self.watch.start("read")
        event = self.reader[entry]
        self.watch.stop("read")

        # 2. Aggregate the tracks of the event
        self.watch.start("process")
        station_rows, delta_rows = self.processor.process(event.tracks, event.manager)
        self.watch.stop("process")

        # 3. Write the records
        self.watch.start("write")
        self.emitter.emit(station_rows, delta_rows)
        self.watch.stop("write")

        self.watch.stop("iteration")
        logger.debug(
            "Entry %d (run %d, event %d) processed in %.3f s",
            entry, event.run_info.run, event.run_info.event,
            self.watch.time("iteration").wall
        )

        return station_rows, delta_rows
