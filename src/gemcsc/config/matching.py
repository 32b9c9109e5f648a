"""Validated view of the `matching` configuration block."""

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from gemcsc.utils.globals import CSC_STATION_NAMES, CSC_STATION_TABLE

from .errors import ConfigValidationError

__all__ = ["MatchingConfig", "THRESHOLD_KEYS"]

# Configuration blocks which must each provide a `min_n_hits_chamber` value
THRESHOLD_KEYS = (
    "csc_sim_hit",
    "csc_wire_digi",
    "csc_strip_digi",
    "csc_clct",
    "csc_alct",
    "csc_lct",
    "csc_mplct",
)


@dataclass
class SimTrackConfig:
    """Truth-track acceptance parameters.

    Attributes
    ----------
    verbose : int
        If positive, log every accepted track
    min_pt : float
        Minimum transverse momentum (GeV/c)
    min_eta : float
        Minimum absolute pseudorapidity
    max_eta : float
        Maximum absolute pseudorapidity
    only_muon : bool
        If `True`, only accept muons
    """

    verbose: int = 0
    min_pt: float = 3.0
    min_eta: float = 1.45
    max_eta: float = 2.5
    only_muon: bool = True


@dataclass
class MatchingConfig:
    """Parameters of the track/station matching.

    Attributes
    ----------
    thresholds : Dict[str, int]
        Minimum number of layers with signal, per response category
    csc_stations : Tuple[str]
        Name of each logical station, used to name the output tables
    csc_stations_to_use : Tuple[int]
        Sorted logical stations for which records are produced
    sim_track : SimTrackConfig
        Truth-track acceptance parameters
    ntuple_track_eff : bool
        Whether to produce the per-station records
    ntuple_track_chamber_delta : bool
        Whether to produce the CSC/GEM chamber delta records
    matchprint : bool
        Whether to log the matching details of suspicious tracks
    bending_cut_pt : float
        Momentum at which the trigger-track bending cut is evaluated
    rpc_enabled : bool
        Whether to aggregate the RPC responses
    pt_estimator : dict
        Configuration of the position-based momentum estimator
    verbose : int
        Verbosity level of the package logger
    """

    thresholds: Dict[str, int]
    csc_stations: Tuple[str, ...] = CSC_STATION_NAMES
    csc_stations_to_use: Tuple[int, ...] = tuple(range(len(CSC_STATION_TABLE)))
    sim_track: SimTrackConfig = field(default_factory=SimTrackConfig)
    ntuple_track_eff: bool = True
    ntuple_track_chamber_delta: bool = True
    matchprint: bool = False
    bending_cut_pt: float = 10.0
    rpc_enabled: bool = False
    pt_estimator: dict = field(default_factory=lambda: {"name": "delta_y"})
    verbose: int = 0

    def __post_init__(self):
        """Checks the consistency of the configuration parameters."""
        # Check the thresholds
        for key in THRESHOLD_KEYS:
            if key not in self.thresholds:
                raise ConfigValidationError(
                    f"Missing required `min_n_hits_chamber` threshold for `{key}`."
                )
            value = self.thresholds[key]
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigValidationError(
                    f"The `{key}` threshold must be a non-negative integer, "
                    f"got {value!r}."
                )

        # Check the station names
        names = self.csc_stations
        if isinstance(names, str) or not all(isinstance(n, str) for n in names):
            raise ConfigValidationError("`csc_stations` must be a list of names.")
        self.csc_stations = tuple(names)

        # Check the stations to use
        stations = self.csc_stations_to_use
        if isinstance(stations, (str, int)):
            raise ConfigValidationError(
                "`csc_stations_to_use` must be a list of station indexes."
            )
        for s in stations:
            if isinstance(s, bool) or not isinstance(s, int):
                raise ConfigValidationError(
                    f"Station indexes must be integers, got {s!r}."
                )
            if s < 0 or s >= len(CSC_STATION_TABLE):
                raise ConfigValidationError(
                    f"Station index {s} is outside of the station table "
                    f"[0, {len(CSC_STATION_TABLE)})."
                )
            if s >= len(self.csc_stations):
                raise ConfigValidationError(
                    f"Station index {s} has no name in `csc_stations`."
                )
        if len(set(stations)) != len(stations):
            raise ConfigValidationError(
                f"Duplicate entries in `csc_stations_to_use`: {list(stations)}."
            )
        self.csc_stations_to_use = tuple(sorted(stations))

        # Check the track selection window
        if self.sim_track.min_eta > self.sim_track.max_eta:
            raise ConfigValidationError(
                "The track selection requires `min_eta` <= `max_eta`."
            )

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "MatchingConfig":
        """Builds the matching configuration from a `matching` block.

        Parameters
        ----------
        cfg : dict
            Content of the `matching` configuration block

        Returns
        -------
        MatchingConfig
            Validated matching configuration
        """
        if not isinstance(cfg, dict):
            raise ConfigValidationError("The `matching` block must be a dictionary.")

        cfg = dict(cfg)
        thresholds = {}
        for key in THRESHOLD_KEYS:
            block = cfg.pop(key, None)
            if block is None:
                continue
            if not isinstance(block, dict) or "min_n_hits_chamber" not in block:
                raise ConfigValidationError(
                    f"The `{key}` block must provide `min_n_hits_chamber`."
                )
            thresholds[key] = block["min_n_hits_chamber"]

        sim_track = cfg.pop("sim_track", {}) or {}
        rpc = cfg.pop("rpc", {}) or {}
        try:
            return cls(
                thresholds=thresholds,
                sim_track=SimTrackConfig(**sim_track),
                rpc_enabled=bool(rpc.get("enabled", False)),
                **cfg,
            )
        except TypeError as err:
            raise ConfigValidationError(
                f"Invalid `matching` configuration: {err}"
            ) from err

    def threshold(self, key: str) -> int:
        """Returns the layer-count threshold of one response category.

        Parameters
        ----------
        key : str
            Name of the response category (e.g. "csc_strip_digi")

        Returns
        -------
        int
            Minimum number of layers with signal
        """
        return self.thresholds[key]

    def station_name(self, index: int) -> str:
        """Returns the name of a logical station.

        Parameters
        ----------
        index : int
            Logical station index

        Returns
        -------
        str
            Station name
        """
        return self.csc_stations[index]
