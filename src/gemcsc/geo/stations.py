"""Maps detector identifiers onto logical station records."""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from gemcsc.utils.enums import Parity, Subdetector, enum_factory
from gemcsc.utils.globals import (
    CSC_STATION_NAMES,
    CSC_STATION_TABLE,
    GEM_TO_ME_STATION,
    STATION_ALIASES,
    UNUSED_STATION,
)

from .detid import CSCDetId, GEMDetId, RPCDetId

__all__ = ["StationIndex", "StationResolver", "Resolution"]


class StationIndex:
    """Ordered table of (station, ring) pairs which define logical stations.

    The table is built once and never modified. Lookups are linear, which is
    more than sufficient for a table of a dozen entries.
    """

    def __init__(
        self,
        table: Sequence[Tuple[int, int]] = CSC_STATION_TABLE,
        names: Sequence[str] = CSC_STATION_NAMES,
    ):
        """Initialize the station table.

        Parameters
        ----------
        table : Sequence[Tuple[int, int]], optional
            Ordered (station, ring) pairs
        names : Sequence[str], optional
            Name of each of the logical stations
        """
        assert len(names) >= len(table), (
            "Must provide a name for each logical station. "
            f"Got {len(names)}, but expected {len(table)}."
        )
        self._table = tuple(tuple(pair) for pair in table)
        self._names = tuple(names)

    def __len__(self):
        """Number of logical stations."""
        return len(self._table)

    @property
    def unused(self) -> int:
        """Index assigned to (station, ring) pairs absent from the table."""
        return len(self._table)

    def index(self, station: int, ring: int) -> int:
        """Finds the logical station of a (station, ring) pair.

        Parameters
        ----------
        station : int
            Station number
        ring : int
            Ring number

        Returns
        -------
        int
            Logical station index, or the unused sentinel if not found
        """
        for i, pair in enumerate(self._table):
            if pair == (station, ring):
                return i

        return self.unused

    def station_ring(self, index: int) -> Tuple[int, int]:
        """Returns the (station, ring) pair of a logical station.

        Parameters
        ----------
        index : int
            Logical station index

        Returns
        -------
        Tuple[int, int]
            (station, ring) pair
        """
        return self._table[index]

    def name(self, index: int) -> str:
        """Returns the name of a logical station.

        Parameters
        ----------
        index : int
            Logical station index

        Returns
        -------
        str
            Name of the logical station
        """
        return self._names[index]


@dataclass(frozen=True)
class Resolution:
    """Logical records targeted by one detector unit.

    Attributes
    ----------
    primary : int
        Logical station of the detector unit
    alias : int, optional
        Combined logical station which mirrors the primary one
    parity : Parity
        Parity of the chamber
    targets : Tuple[int, ...]
        Records to write into (primary first, then the alias if in use)
    in_use : bool
        Whether the primary logical station is in use
    """

    primary: int
    alias: Optional[int]
    parity: Parity
    targets: Tuple[int, ...]
    in_use: bool


class StationResolver:
    """Determines which logical-station records a detector unit updates.

    Attributes
    ----------
    index : StationIndex
        Table of logical stations
    stations : List[int]
        Sorted list of logical stations in use
    aliases : dict
        Mapping from split-ring logical stations to their combined station
    """

    def __init__(
        self,
        stations_to_use: Sequence[int],
        index: Optional[StationIndex] = None,
        aliases: Optional[dict] = None,
    ):
        """Initialize the resolver.

        Parameters
        ----------
        stations_to_use : Sequence[int]
            Logical stations for which records are produced
        index : StationIndex, optional
            Table of logical stations
        aliases : dict, optional
            Mapping from split-ring logical stations to their combined station
        """
        self.index = index if index is not None else StationIndex()
        self.aliases = dict(aliases if aliases is not None else STATION_ALIASES)
        self.stations: List[int] = sorted(set(stations_to_use))
        self._in_use = frozenset(self.stations)

    def in_use(self, station: int) -> bool:
        """Whether a logical station is in use.

        Parameters
        ----------
        station : int
            Logical station index

        Returns
        -------
        bool
            `True` if records are produced for this logical station
        """
        return station in self._in_use

    def resolve(self, kind, station: int, ring: int, chamber: int) -> Resolution:
        """Resolves the records targeted by a detector unit.

        Parameters
        ----------
        kind : Union[str, Subdetector]
            Subdetector technology of the unit
        station : int
            Station number of the unit
        ring : int
            Ring number of the unit
        chamber : int
            Chamber number (for RPC rolls, the overlapping CSC chamber)

        Returns
        -------
        Resolution
            Records to update. The resolution is not in use if the unit does
            not map onto a logical station in use.
        """
        kind = enum_factory("subdetector", kind)
        parity = Parity.from_chamber(chamber)

        # GEM stations are first mapped onto their CSC counterpart
        if kind == Subdetector.GEM:
            station = GEM_TO_ME_STATION.get(station, station)
            if station is None:
                return Resolution(UNUSED_STATION, None, parity, (), False)

        primary = self.index.index(station, ring)
        if not self.in_use(primary):
            return Resolution(primary, None, parity, (), False)

        alias = self.aliases.get(primary)
        targets = (primary,)
        if alias is not None and self.in_use(alias):
            targets = (primary, alias)

        return Resolution(primary, alias, parity, targets, True)

    def resolve_id(self, det_id) -> Resolution:
        """Resolves the records targeted by a decoded detector identifier.

        Parameters
        ----------
        det_id : Union[CSCDetId, GEMDetId, RPCDetId]
            Decoded detector identifier

        Returns
        -------
        Resolution
            Records to update
        """
        if isinstance(det_id, CSCDetId):
            return self.resolve(Subdetector.CSC, det_id.station, det_id.ring, det_id.chamber)
        if isinstance(det_id, GEMDetId):
            return self.resolve(Subdetector.GEM, det_id.station, det_id.ring, det_id.chamber)
        if isinstance(det_id, RPCDetId):
            return self.resolve(
                Subdetector.RPC, det_id.station, det_id.ring, det_id.csc_chamber
            )

        raise TypeError(
            f"Detector identifier type not recognized: {type(det_id).__name__}."
        )
