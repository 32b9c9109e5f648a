"""Contains a reader class dedicated to loading event snapshots from YAML files.

Each file holds a single YAML document with an `events` list. An event reads:

.. code-block:: yaml

    events:
      - run: 1
        lumi: 1
        event: 42
        vertices:
          - {id: 0, position: [0., 0., 0.]}
        tracks:
          - id: 1
            pdg_code: 13
            charge: -1
            momentum: [3.2, 1.1, 12.5]
            vertex_index: 0
            gen_index: 0
            match:
              csc_sim_hits: [...]
              lcts: [...]

The `match` block of each track holds the detector responses associated with
it by the upstream matching machinery (see :mod:`gemcsc.match.snapshot`).
"""

from dataclasses import dataclass, field
from typing import Dict, List

import yaml

from gemcsc.data import RunInfo, SimTrack, SimVertex
from gemcsc.match.snapshot import (
    DPhiCutTable,
    build_match_manager,
    parse_run_info,
    parse_track,
    parse_vertex,
)
from gemcsc.utils.logger import logger

from .base import ReaderBase

__all__ = ["EventSnapshot", "YAMLEventReader"]


@dataclass
class EventSnapshot:
    """Truth content of one event and the responses matched to its tracks.

    Attributes
    ----------
    run_info : RunInfo
        Event identifiers
    tracks : List[SimTrack]
        Truth tracks
    vertices : List[SimVertex]
        Truth vertices
    matches : Dict[int, dict]
        Responses matched to each truth track, keyed by track ID
    dphi_cuts : DPhiCutTable
        Bending-angle cuts used by the trigger-primitive accessors
    """

    run_info: RunInfo = field(default_factory=RunInfo)
    tracks: List[SimTrack] = field(default_factory=list)
    vertices: List[SimVertex] = field(default_factory=list)
    matches: Dict[int, dict] = field(default_factory=dict)
    dphi_cuts: DPhiCutTable = field(default_factory=DPhiCutTable)

    @classmethod
    def from_dict(cls, data, dphi_cuts=None):
        """Parses an event snapshot dictionary.

        Parameters
        ----------
        data : dict
            Event dictionary
        dphi_cuts : DPhiCutTable, optional
            Bending-angle cuts

        Returns
        -------
        EventSnapshot
            Parsed event
        """
        tracks, matches = [], {}
        for track_data in data.get("tracks", []):
            track = parse_track(track_data)
            tracks.append(track)
            matches[track.id] = track_data.get("match", {}) or {}

        return cls(
            run_info=parse_run_info(data),
            tracks=tracks,
            vertices=[parse_vertex(v) for v in data.get("vertices", [])],
            matches=matches,
            dphi_cuts=dphi_cuts if dphi_cuts is not None else DPhiCutTable(),
        )

    def manager(self, track):
        """Builds the match manager of one truth track.

        Parameters
        ----------
        track : SimTrack
            Truth track of this event

        Returns
        -------
        MatchManager
            Accessors over the responses matched to the track
        """
        return build_match_manager(
            track, self.run_info, self.matches.get(track.id), self.dphi_cuts
        )


class YAMLEventReader(ReaderBase):
    """Class which reads event snapshots stored in YAML files.

    This class inherits from the :class:`ReaderBase` class. Each file must
    contain a single document with an `events` list. Typical configuration
    should look like:

    .. code-block:: yaml

        io:
          reader:
            name: yaml
            file_keys: events_*.yaml
    """

    name = "yaml"

    def __init__(
        self,
        file_keys,
        limit_num_files=None,
        max_print_files=10,
        n_entry=None,
        n_skip=None,
        entry_list=None,
        skip_entry_list=None,
        dphi_cuts=None,
    ):
        """Initalize the YAML event reader.

        Parameters
        ----------
        file_keys : Union[str, List[str]]
            Path(s) or glob pattern(s) of the YAML files to be read
        limit_num_files : int, optional
            Integer limiting number of files to be taken per data directory
        max_print_files : int, default 10
            Maximum number of loaded file names to be printed
        n_entry : int, optional
            Maximum number of entries to load
        n_skip : int, optional
            Number of entries to skip at the beginning
        entry_list : list, optional
            List of integer entry IDs to add to the index
        skip_entry_list : list, optional
            List of integer entry IDs to skip from the index
        dphi_cuts : dict, optional
            GEM/CSC bending-angle cuts, as {chamber type: {pt: [odd, even]}}
        """
        # Process the list of files
        self.process_file_paths(file_keys, limit_num_files, max_print_files)
        self.dphi_cuts = DPhiCutTable(dphi_cuts)

        # Load the events of every file
        self.events = []
        for path in self.file_paths:
            with open(path, "r", encoding="utf-8") as f:
                content = yaml.safe_load(f) or {}
            if not isinstance(content, dict) or "events" not in content:
                raise KeyError(f"The file {path} does not contain an `events` list.")
            self.events.extend(content["events"] or [])
            logger.debug("Loaded %d events from %s", len(content["events"] or []), path)

        self.num_entries = len(self.events)

        # Build the entry index
        self.process_entry_list(n_entry, n_skip, entry_list, skip_entry_list)

    def get(self, idx):
        """Returns one event snapshot.

        Parameters
        ----------
        idx : int
            Global index of the event in the loaded files

        Returns
        -------
        EventSnapshot
            Parsed event
        """
        return EventSnapshot.from_dict(self.events[idx], self.dphi_cuts)
