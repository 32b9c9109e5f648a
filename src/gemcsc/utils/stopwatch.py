"""Timing utilities used to profile the processing of each event."""

import time
from dataclasses import dataclass

__all__ = ["Time", "Stopwatch", "StopwatchManager"]


@dataclass
class Time:
    """Simple dataclass to hold time information.

    Attributes
    ----------
    wall : float, optional
         Wall time
    cpu : float, optional
         CPU time
    """

    wall: float = None
    cpu: float = None

    def __add__(self, other):
        return Time(wall=self.wall + other.wall, cpu=self.cpu + other.cpu)

    def __sub__(self, other):
        return Time(wall=self.wall - other.wall, cpu=self.cpu - other.cpu)

    @classmethod
    def current(cls):
        """Returns the current time (wall and cpu).

        Returns
        -------
        Time
           Current time
        """
        return cls(time.time(), time.process_time())


class Stopwatch:
    """Holds timing information for one specific process."""

    def __init__(self):
        """Give default values to the underlying class attributes."""
        self._start = None
        self._time = Time(0.0, 0.0)
        self._total = Time(0.0, 0.0)
        self.count = 0

    @property
    def running(self):
        """Whether the stopwatch is currently running."""
        return self._start is not None

    def start(self):
        """Starts the stopwatch."""
        if self.running:
            raise ValueError("Cannot restart a watch that has not been stopped.")

        self._start = Time.current()

    def stop(self):
        """Stops the stopwatch, records the elapsed time."""
        if not self.running:
            raise ValueError("Cannot stop a watch that has not been started.")

        self._time = Time.current() - self._start
        self._total += self._time
        self._start = None
        self.count += 1

    @property
    def time(self):
        """Time between the last start and the last stop."""
        return self._time

    @property
    def time_sum(self):
        """Sum of times between all watch starts and stops."""
        return self._total


class StopwatchManager:
    """Organizes various time measurements under named stopwatches."""

    def __init__(self):
        """Initalize the basic private stopwatch attributes."""
        self._watch = {}

    def keys(self):
        """Get the list of all initialized stopwatch tags."""
        return self._watch.keys()

    def items(self):
        """Get the list of (tag, stopwatch) pairs."""
        return self._watch.items()

    def initialize(self, key):
        """Initialize one or more stopwatches.

        Parameters
        ----------
        key : Union[str, List[str]]
            Key or list of keys to initialize a `Stopwatch` for
        """
        keys = [key] if isinstance(key, str) else key
        for k in keys:
            self._watch[k] = Stopwatch()

    def start(self, key):
        """Starts a stopwatch.

        Parameters
        ----------
        key : str
            Name of the stopwatch to start
        """
        self._get(key).start()

    def stop(self, key):
        """Stops a stopwatch.

        Parameters
        ----------
        key : str
            Name of the stopwatch to stop
        """
        self._get(key).stop()

    def time(self, key):
        """Returns the last measured time of a stopwatch.

        Parameters
        ----------
        key : str
            Name of the stopwatch

        Returns
        -------
        Time
            Time elapsed between the last start and stop
        """
        return self._get(key).time

    def _get(self, key):
        if key not in self._watch:
            raise KeyError(f"No stopwatch initialized under the name: {key}")

        return self._watch[key]
