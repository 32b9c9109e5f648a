"""Enumerated types used throughout the package."""

from enum import IntEnum

__all__ = ["Parity", "Subdetector", "enum_factory"]


def enum_factory(enum, value):
    """Parses an enumerated object from string name(s) to member(s).

    Parameters
    ----------
    enum : str
        Name of the enumerated type
    value : Union[str, IntEnum, List[str]]
        Name or names of the enumerated objects (from config)

    Returns
    -------
    Union[IntEnum, List[IntEnum]]
        Enumerated member or members
    """
    # Get the enumerated type
    ENUM_DICT = {"parity": Parity, "subdetector": Subdetector}
    if enum not in ENUM_DICT:
        raise ValueError(
            f"Enumerated type not recognized: {enum}. Must be one of "
            f"{list(ENUM_DICT.keys())}."
        )
    enum = ENUM_DICT[enum]

    # Translate enumerated strings into members
    single = isinstance(value, (str, IntEnum))
    members = []
    for v in [value] if single else value:
        if isinstance(v, enum):
            members.append(v)
            continue

        if not hasattr(enum, v.upper()):
            raise ValueError(
                f"Enumerated object not recognized: {v}. Must be one "
                f"of {[e.name for e in enum]}."
            )
        members.append(getattr(enum, v.upper()))

    return members[0] if single else members


class Parity(IntEnum):
    """Chamber parity, used to index the duplicated record slots."""

    ODD = 0
    EVEN = 1

    @classmethod
    def from_chamber(cls, chamber):
        """Returns the parity of a chamber number.

        Parameters
        ----------
        chamber : int
            Chamber number

        Returns
        -------
        Parity
            Parity of the chamber
        """
        return cls.ODD if chamber % 2 == 1 else cls.EVEN

    @property
    def bit(self):
        """Presence bit associated with this parity (1: odd, 2: even)."""
        return 1 << int(self)

    @property
    def suffix(self):
        """Column suffix associated with this parity."""
        return self.name.lower()


class Subdetector(IntEnum):
    """Enumerates the muon subdetector technologies."""

    CSC = 0
    GEM = 1
    RPC = 2
