"""Command line interface of the GEM/CSC matching."""
