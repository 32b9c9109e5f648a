"""Simple module which define logging module style and returns it."""

import logging
import sys

# Configure the formatting of the logger
logging.basicConfig(format="%(message)s", stream=sys.stdout)

# Capture warning messages and redirect them through the logger
logging.captureWarnings(True)

# Initialize logger
logger = logging.getLogger("gemcsc")

# Verbosity levels accepted in the configuration
VERBOSITY_LEVELS = {0: logging.WARNING, 1: logging.INFO, 2: logging.DEBUG}


def set_verbosity(verbose):
    """Sets the level of the package logger from an integer verbosity.

    Parameters
    ----------
    verbose : int
        Verbosity level (0: warnings only, 1: info, 2 or more: debug)
    """
    level = VERBOSITY_LEVELS[min(max(int(verbose), 0), 2)]
    logger.setLevel(level)
