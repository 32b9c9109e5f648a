"""Module with a parent class of all data structures."""

from dataclasses import MISSING, asdict, dataclass, fields

import numpy as np

from gemcsc.utils.enums import Parity


@dataclass(eq=False)
class DataBase:
    """Base class of all data structures.

    Defines basic methods shared by all data structures.
    """

    # Parity-duplicated attributes as (key, (dtype, default)) pairs
    _parity_attrs = ()

    # Column names which differ from the `<key>_<parity>` convention
    _column_names = {}

    # Emission order of the flattened columns. If empty, the attribute
    # declaration order is used.
    _column_order = ()

    # Boolean attributes
    _bool_attrs = ()

    # Attributes that must never be stored to file
    _skip_attrs = ()

    def __post_init__(self):
        """Immediately called after building the class attributes.

        Gives default values to the parity-duplicated array attributes. If a
        default value was provided in the attribute definition, all instances
        of this class would point to the same memory location.
        """
        for attr, (dtype, default) in self._parity_attrs:
            if getattr(self, attr) is None:
                setattr(self, attr, np.full(len(Parity), default, dtype=dtype))

        # Cast stored 8-bit unsigned integers back to booleans
        for attr in self._bool_attrs:
            if isinstance(getattr(self, attr), (np.bool_, np.uint8)):
                setattr(self, attr, bool(getattr(self, attr)))

    def __eq__(self, other):
        """Checks that all attributes of two class instances are the same.

        This overloads the default dataclass `__eq__` method to include an
        appopriate check for vector (numpy) attributes.

        Parameters
        ----------
        other : obj
            Other instance of the same object class

        Returns
        -------
        bool
            `True` if all attributes of both objects are identical
        """
        if self.__class__ != other.__class__:
            return False

        for k, v in self.__dict__.items():
            v_other = getattr(other, k)
            if isinstance(v, np.ndarray):
                if v.shape != v_other.shape or (v_other != v).any():
                    return False
            elif v_other != v:
                return False

        return True

    def reset(self):
        """Reinitializes every attribute to its default value, in place."""
        for f in fields(self):
            if f.default_factory is not MISSING:
                setattr(self, f.name, f.default_factory())
            else:
                setattr(self, f.name, f.default)
        self.__post_init__()

    def as_dict(self):
        """Returns the data class as dictionary of (key, value) pairs.

        Returns
        -------
        dict
            Dictionary of attribute names and their values
        """
        return {k: v for k, v in asdict(self).items() if k not in self._skip_attrs}

    @classmethod
    def column_name(cls, attr, parity):
        """Name of the column which stores one parity slot of an attribute.

        Parameters
        ----------
        attr : str
            Name of the parity-duplicated attribute
        parity : Parity
            Parity slot

        Returns
        -------
        str
            Column name
        """
        return cls._column_names.get((attr, parity), f"{attr}_{parity.suffix}")

    @classmethod
    def columns(cls):
        """Ordered list of the flattened column names.

        Returns
        -------
        List[str]
            Column names, in emission order
        """
        if cls._column_order:
            return list(cls._column_order)

        parity_attrs = dict(cls._parity_attrs)
        columns = []
        for f in fields(cls):
            if f.name in cls._skip_attrs:
                continue
            if f.name in parity_attrs:
                columns.extend(cls.column_name(f.name, p) for p in Parity)
            else:
                columns.append(f.name)

        return columns

    def scalar_dict(self):
        """Returns the data class attributes as an ordered dictionary of scalars.

        This is useful when storing data classes in CSV files, which expect
        a single scalar per column in the table. Parity-duplicated attributes
        are expanded into one column per parity.

        Returns
        -------
        dict
            Dictionary which maps each column name onto a scalar
        """
        # Map each flattened column onto its source
        sources = {}
        parity_attrs = dict(self._parity_attrs)
        for f in fields(self):
            if f.name in parity_attrs:
                for p in Parity:
                    sources[self.column_name(f.name, p)] = (f.name, p)
            else:
                sources[f.name] = (f.name, None)

        # Build the dictionary in the emission order
        result = {}
        for column in self.columns():
            if column not in sources:
                raise AttributeError(
                    f"Column `{column}` does not appear in "
                    f"`{self.__class__.__name__}`."
                )
            attr, parity = sources[column]
            value = getattr(self, attr)
            if parity is not None:
                value = value[parity]
            if isinstance(value, np.generic):
                value = value.item()
            result[column] = value

        return result
