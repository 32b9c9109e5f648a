"""Decoded muon detector identifiers.

Raw detector IDs are decoded upstream. These classes hold the decoded
coordinates and provide the few transformations needed to move between the
layer, chamber and superchamber levels of a detector unit.
"""

from dataclasses import dataclass, replace

from gemcsc.utils.globals import GEM_TO_ME_STATION

__all__ = ["CSCDetId", "GEMDetId", "RPCDetId"]


@dataclass(frozen=True)
class CSCDetId:
    """Identifier of a CSC chamber or chamber layer.

    Attributes
    ----------
    endcap : int
        Endcap (1: forward, 2: backward)
    station : int
        Station number (1-4)
    ring : int
        Ring number (1-4)
    chamber : int
        Chamber number within the ring
    layer : int
        Layer number (1-6), 0 for the whole chamber
    """

    endcap: int
    station: int
    ring: int
    chamber: int
    layer: int = 0

    def __str__(self):
        """Human-readable representation of the identifier."""
        sign = "+" if self.endcap == 1 else "-"
        name = f"ME{sign}{self.station}/{self.ring}/{self.chamber}"
        if self.layer:
            name += f" L{self.layer}"
        return name

    @property
    def region(self) -> int:
        """Region sign associated with the endcap (+1 or -1)."""
        return 1 if self.endcap == 1 else -1

    def chamber_id(self) -> "CSCDetId":
        """Identifier of the chamber which contains this layer."""
        return replace(self, layer=0)

    def layer_id(self, layer: int) -> "CSCDetId":
        """Identifier of one layer of this chamber.

        Parameters
        ----------
        layer : int
            Layer number

        Returns
        -------
        CSCDetId
            Layer identifier
        """
        return replace(self, layer=layer)

    def paired_ring_id(self) -> "CSCDetId":
        """Identifier of the same chamber in the other half of ME1/1.

        ME1/1 is split into ring 1 (ME1/b) and ring 4 (ME1/a) which share
        their chamber numbering.

        Returns
        -------
        CSCDetId
            Chamber identifier in the paired ring
        """
        assert self.is_me11, f"Only ME1/1 chambers have a paired ring, got {self}."
        return replace(self, ring=1 if self.ring == 4 else 4, layer=0)

    @property
    def is_me11(self) -> bool:
        """Whether this identifier belongs to ME1/1 (ring 1 or 4)."""
        return self.station == 1 and self.ring in (1, 4)


@dataclass(frozen=True)
class GEMDetId:
    """Identifier of a GEM superchamber, chamber or eta partition.

    Attributes
    ----------
    region : int
        Region (+1 or -1)
    station : int
        GEM station number
    ring : int
        Ring number
    chamber : int
        Chamber number within the ring
    layer : int
        Layer number (1-2), 0 for the superchamber
    roll : int
        Eta partition, 0 for the whole chamber
    """

    region: int
    station: int
    ring: int
    chamber: int
    layer: int = 0
    roll: int = 0

    def __str__(self):
        """Human-readable representation of the identifier."""
        sign = "+" if self.region > 0 else "-"
        name = f"GE{sign}{self.station}/{self.ring}/{self.chamber}"
        if self.layer:
            name += f" L{self.layer}"
        if self.roll:
            name += f" R{self.roll}"
        return name

    def superchamber_id(self) -> "GEMDetId":
        """Identifier of the superchamber which contains this unit."""
        return replace(self, layer=0, roll=0)

    def chamber_id(self, layer: int) -> "GEMDetId":
        """Identifier of one chamber (layer) of this superchamber.

        Parameters
        ----------
        layer : int
            Layer number

        Returns
        -------
        GEMDetId
            Chamber identifier
        """
        return replace(self, layer=layer, roll=0)

    @property
    def me_station(self):
        """CSC station which shares the GEM station position, if any.

        Returns
        -------
        int or None
            ME station number, `None` if there is no CSC counterpart
        """
        return GEM_TO_ME_STATION.get(self.station, self.station)


@dataclass(frozen=True)
class RPCDetId:
    """Identifier of an endcap RPC roll.

    Attributes
    ----------
    region : int
        Region (+1 or -1)
    station : int
        Station number
    ring : int
        Ring number
    sector : int
        Trigger sector
    subsector : int
        Trigger subsector
    csc_chamber : int
        Number of the CSC chamber which overlaps this roll
    roll : int
        Eta partition
    """

    region: int
    station: int
    ring: int
    sector: int
    subsector: int
    csc_chamber: int
    roll: int = 0

    def __str__(self):
        """Human-readable representation of the identifier."""
        sign = "+" if self.region > 0 else "-"
        return (
            f"RE{sign}{self.station}/{self.ring} S{self.sector}"
            f"/{self.subsector} R{self.roll}"
        )
