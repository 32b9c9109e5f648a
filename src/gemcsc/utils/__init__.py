"""Utility functions and tools used across the package.

- `logger`: package logger and verbosity control
- `globals`: station table, aliases and other constants
- `enums`: parity and subdetector enumerations
- `factory`: generic factory pattern implementation
- `stopwatch`: timing utilities
"""
