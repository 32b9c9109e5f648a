"""Module to write flat records to CSV files."""

import os

__all__ = ["CSVWriter"]


class CSVWriter:
    """Writes rows to one CSV file per table.

    Builds a CSV file for each table the first time a row is appended to it.
    It can only be used to store relatively basic quantities (scalars,
    strings, etc.).

    Typical configuration should look like:

    .. code-block:: yaml

        io:
          ...
          writer:
            name: csv
            directory: output
            prefix: run1_
    """

    name = "csv"

    def __init__(self, directory=".", prefix="", overwrite=False, append=False):
        """Initialize the basics of the output files.

        Parameters
        ----------
        directory : str, default '.'
            Directory in which to write the CSV files
        prefix : str, default ''
            Prefix of every output file name
        overwrite : bool, default False
            If True, overwrite the output files if they already exist
        append : bool, default False
            If True, add more rows to existing CSV files
        """
        # Store persistent attributes
        self.directory = directory
        self.prefix = prefix
        self.overwrite = overwrite
        self.append_file = append
        self.result_keys = {}

        # Make sure the output directory exists
        os.makedirs(self.directory, exist_ok=True)

    def file_name(self, table):
        """Path to the CSV file of a table.

        Parameters
        ----------
        table : str
            Name of the table

        Returns
        -------
        str
            Path to the CSV file
        """
        return os.path.join(self.directory, f"{self.prefix}{table}.csv")

    def create(self, table, row):
        """Initialize the header of a CSV file, record the keys to be stored.

        Parameters
        ----------
        table : str
            Name of the table
        row : dict
            First row of the table
        """
        file_name = self.file_name(table)

        # If appending, read the header of the existing file
        if self.append_file:
            if not os.path.isfile(file_name):
                raise FileNotFoundError(
                    f"File not found at path: {file_name}. When using "
                    "`append=True` in CSVWriter, the file must exist at "
                    "the prescribed path before data is written to it."
                )

            with open(file_name, "r", encoding="utf-8") as out_file:
                self.result_keys[table] = out_file.readline().rstrip("\n").split(",")
            return

        # Check that output file does not already exist, if requested
        if not self.overwrite and os.path.isfile(file_name):
            raise FileExistsError(f"File with name {file_name} already exists.")

        # Save the list of keys to store
        self.result_keys[table] = list(row.keys())

        # Create a header and write it to file
        with open(file_name, "w", encoding="utf-8") as out_file:
            header_str = ",".join(self.result_keys[table])
            out_file.write(header_str + "\n")

    def append(self, table, row):
        """Append one row to the CSV file of a table.

        Parameters
        ----------
        table : str
            Name of the table
        row : dict
            Dictionary which maps each column name onto a scalar
        """
        # If this table has never been written to, initialize its CSV file
        if table not in self.result_keys:
            self.create(table, row)

        # Check that the list of keys is identical
        keys = self.result_keys[table]
        if list(row.keys()) != keys:
            missing = self.array_diff(keys, row.keys())
            excess = self.array_diff(row.keys(), keys)
            raise AssertionError(
                f"The columns of this row do not match those of table `{table}`. "
                f"Missing columns: {sorted(missing)}, new columns: {sorted(excess)}"
            )

        # Append file
        with open(self.file_name(table), "a", encoding="utf-8") as out_file:
            result_str = ",".join([str(row[k]) for k in keys])
            out_file.write(result_str + "\n")

    @staticmethod
    def array_diff(array_x, array_y):
        """Compare the content of two arrays.

        This functions returns the elements of the first array that
        do not appear in the second array.

        Parameters
        ----------
        array_x : List[str]
            First array of strings
        array_y : List[str]
            Second array of strings

        Returns
        -------
        Set[str]
            Set of keys that appear in `array_x` but not in `array_y`.
        """
        return set(array_x).difference(set(array_y))
