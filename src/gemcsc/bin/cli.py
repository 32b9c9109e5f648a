#!/usr/bin/env python3
"""Command line entry point of the GEM/CSC matching."""

import argparse
import os
from typing import List

from gemcsc.config import load_config_file
from gemcsc.config.load import resolve_config_path
from gemcsc.config.operations import parse_value, set_nested_value
from gemcsc.version import __version__


def main(
    config: str,
    source: List[str],
    source_list: str,
    output: str,
    n: int,
    nskip: int,
    config_overrides: List[str],
):
    """Main driver of the matching aggregation.

    Performs these basic functions:
    - Update the configuration with the command-line arguments
    - Run the driver over the requested events

    Parameters
    ----------
    config : str
        Path to the configuration file
    source : List[str]
        List of paths to the input files
    source_list : str
        Path to a text file containing a list of data file paths
    output : str
        Path to the output directory
    n : int
        Number of entries to process
    nskip : int
        Number of entries to skip
    config_overrides : List[str]
        List of config overrides in the form "key.path=value"
    """
    # Load the configuration file
    cfg_file = resolve_config_path(config, current_dir=os.getcwd())
    cfg = load_config_file(cfg_file)

    # The configuration must minimally contain an IO block with a reader
    if "io" not in cfg or cfg["io"].get("reader") is None:
        raise KeyError("Configuration file must contain an `io.reader` block.")

    # Override the input command-line information into the configuration
    io_mapping = {
        "file_keys": source if source is not None else source_list,
        "n_entry": n,
        "n_skip": nskip,
    }
    for io_key, io_value in io_mapping.items():
        if io_value is not None:
            cfg["io"]["reader"][io_key] = io_value

    # Override the output directory if provided
    if output is not None:
        writer = cfg["io"].get("writer")
        if writer is None or isinstance(writer, str):
            writer = {"name": writer or "csv"}
        writer["directory"] = output
        cfg["io"]["writer"] = writer

    # Apply the command-line configuration overrides
    for override in config_overrides or []:
        if "=" not in override:
            raise ValueError(
                f"Invalid override '{override}'. Expected format: key.path=value"
            )
        key, value = override.split("=", 1)
        set_nested_value(cfg, key.strip(), parse_value(value.strip()))

    # Import the driver only once the configuration is complete
    from gemcsc.driver import Driver

    driver = Driver(cfg)
    driver.run()


def cli():
    """Parses the command line arguments and runs the driver."""
    parser = argparse.ArgumentParser(
        description="GEM/CSC truth-track matching aggregation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  gemcsc -c config.yaml                                 Run with a config file
  gemcsc -c config.yaml -s events_*.yaml -o output      Override inputs/output
  gemcsc -c config.yaml --set matching.rpc.enabled=true Override config parameters
""",
    )

    parser.add_argument(
        "--version", "-v", action="version", version=f"gemcsc {__version__}"
    )

    parser.add_argument(
        "-c", "--config", required=True, help="Path to the configuration file"
    )

    # Add mutually exclusive group for source input
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "-s", "--source", nargs="+", type=str, help="List of paths to the input files"
    )
    group.add_argument(
        "-S",
        "--source-list",
        help="Path to a text file containing a list of data file paths",
    )

    parser.add_argument("-o", "--output", help="Path to the output directory")

    parser.add_argument("-n", "--iterations", type=int, help="Number of entries to run")

    parser.add_argument("--nskip", type=int, help="Number of entries to skip")

    parser.add_argument(
        "--set",
        action="append",
        dest="config_overrides",
        metavar="KEY=VALUE",
        help="Override any config parameter using dot notation "
        "(e.g., --set matching.csc_sim_hit.min_n_hits_chamber=3). "
        "Can be used multiple times for multiple overrides.",
    )

    args = parser.parse_args()

    main(
        config=args.config,
        source=args.source,
        source_list=args.source_list,
        output=args.output,
        n=args.iterations,
        nskip=args.nskip,
        config_overrides=args.config_overrides,
    )


if __name__ == "__main__":
    cli()
