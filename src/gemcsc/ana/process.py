"""Per-event processing: selection, aggregation and summary of truth tracks."""

from collections import OrderedDict
from typing import Callable, Dict, List, Sequence, Tuple

from gemcsc.config.matching import MatchingConfig
from gemcsc.geo import StationResolver
from gemcsc.utils.logger import logger

from .aggregate import FeatureAggregator
from .delta import DeltaBuilder
from .report import DebugReporter
from .select import TrackSelector
from .summary import TrackSummaryBuilder

__all__ = ["EventProcessor", "process_event"]


class EventProcessor:
    """Turns the truth tracks of an event into flat output rows.

    Attributes
    ----------
    config : MatchingConfig
        Matching configuration
    resolver : StationResolver
        Maps detector units onto logical-station records
    selector : TrackSelector
        Truth-track acceptance
    aggregator : FeatureAggregator
        Fills the per-station records
    summary : TrackSummaryBuilder
        Fills the track-level summary
    delta : DeltaBuilder
        Builds the chamber delta records
    reporter : DebugReporter
        Logs the matching details of suspicious tracks
    """

    def __init__(self, config: MatchingConfig):
        """Initialize the processing stages.

        Parameters
        ----------
        config : MatchingConfig
            Matching configuration
        """
        self.config = config
        self.resolver = StationResolver(config.csc_stations_to_use)
        self.selector = TrackSelector.from_config(config.sim_track)
        self.aggregator = FeatureAggregator(config, self.resolver)
        self.summary = TrackSummaryBuilder(config, self.resolver)
        self.delta = DeltaBuilder(config)
        self.reporter = DebugReporter()

    def table_name(self, station: int) -> str:
        """Name of the output table of a logical station."""
        return f"trk_eff_{self.config.station_name(station)}"

    def process_track(self, manager, track_id: int):
        """Produces the output rows of one accepted truth track.

        Parameters
        ----------
        manager : MatchManager
            Accessors over the responses matched to the truth track
        track_id : int
            Index of the track among the accepted tracks of the event

        Returns
        -------
        Dict[str, dict]
            One row per logical station in use, keyed by table name
        List[dict]
            Delta rows
        """
        delta_rows = []
        if self.config.ntuple_track_chamber_delta:
            delta_rows = [rec.scalar_dict() for rec in self.delta.build(manager)]

        station_rows = {}
        if self.config.ntuple_track_eff:
            state = self.aggregator.aggregate(manager)
            self.summary.fill(state, manager)
            for s in self.resolver.stations:
                station_rows[self.table_name(s)] = state.records[s].scalar_dict()

            if self.config.matchprint and self.reporter.triggered(state.records):
                self.reporter.report(manager, track_id, "Large GEM/CSC bending")

        return station_rows, delta_rows

    def process(
        self, tracks: Sequence, managers: Callable
    ) -> Tuple[Dict[str, List[dict]], List[dict]]:
        """Processes every truth track of an event.

        A track whose processing raises is skipped entirely: none of its rows
        are returned.

        Parameters
        ----------
        tracks : Sequence[SimTrack]
            Truth tracks of the event
        managers : Callable
            Function which builds the match manager of a truth track

        Returns
        -------
        Dict[str, List[dict]]
            Per-station rows, keyed by table name
        List[dict]
            Delta rows
        """
        station_rows = OrderedDict(
            (self.table_name(s), []) for s in self.resolver.stations
        )
        delta_rows = []
        if self.config.sim_track.verbose:
            logger.info("Total number of truth tracks in this event: %d", len(tracks))

        track_id = 0
        for track in tracks:
            if not self.selector.accept(track):
                continue

            try:
                manager = managers(track)
                rows, deltas = self.process_track(manager, track_id)
            except Exception as err:
                logger.warning(
                    "Skipping truth track %d after an error: %s: %s",
                    track.id, type(err).__name__, err
                )
                continue
            finally:
                track_id += 1

            for name, row in rows.items():
                station_rows[name].append(row)
            delta_rows.extend(deltas)

        return station_rows, delta_rows


def process_event(
    tracks: Sequence, managers: Callable, config: MatchingConfig
) -> Tuple[Dict[str, List[dict]], List[dict]]:
    """Processes every truth track of an event.

    Parameters
    ----------
    tracks : Sequence[SimTrack]
        Truth tracks of the event
    managers : Callable
        Function which builds the match manager of a truth track
    config : MatchingConfig
        Matching configuration

    Returns
    -------
    Dict[str, List[dict]]
        Per-station rows, keyed by table name
    List[dict]
        Delta rows
    """
    return EventProcessor(config).process(tracks, managers)
