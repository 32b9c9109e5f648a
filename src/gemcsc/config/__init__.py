"""Configuration loading and validation.

- `load`: YAML loading with include/override/remove directives
- `operations`: nested dictionary helpers
- `errors`: typed configuration exceptions
- `matching`: validated view of the `matching` block
"""

from .errors import ConfigError, ConfigValidationError
from .load import load_config, load_config_file
from .matching import MatchingConfig

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "MatchingConfig",
    "load_config",
    "load_config_file",
]
