"""Helpers used to merge and edit nested configuration dictionaries."""

import warnings
from copy import deepcopy
from typing import Any, Dict, List, Tuple

import yaml

from .errors import ConfigOperationError, ConfigPathError, ConfigTypeError

__all__ = [
    "deep_merge",
    "parse_value",
    "set_nested_value",
    "extract_directives",
]


def deep_merge(
    base_dict: Dict[str, Any], override_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """Recursively merge `override_dict` into a copy of `base_dict`.

    Parameters
    ----------
    base_dict : Dict[str, Any]
        Base dictionary
    override_dict : Dict[str, Any]
        Override dictionary

    Returns
    -------
    Dict[str, Any]
        Merged dictionary (new copy)
    """
    result = deepcopy(base_dict)
    for key, value in override_dict.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def parse_value(value_str: Any) -> Any:
    """Parse a string value into the appropriate Python type.

    Parameters
    ----------
    value_str : Any
        Value to parse (if string, attempts YAML parsing)

    Returns
    -------
    Any
        Parsed value
    """
    if not isinstance(value_str, str) or value_str.strip() == "":
        return value_str

    try:
        return yaml.safe_load(value_str)
    except yaml.YAMLError:
        return value_str


def set_nested_value(
    config: Dict[str, Any],
    key_path: str,
    value: Any,
    delete: bool = False,
    strict: str = "error",
    only_if_exists: bool = False,
) -> Tuple[Dict[str, Any], bool]:
    """Set or delete a nested value using dot notation.

    Parameters
    ----------
    config : Dict[str, Any]
        Configuration dictionary
    key_path : str
        Dot-separated path (e.g. "matching.csc_sim_hit.min_n_hits_chamber")
    value : Any
        Value to set (ignored if `delete` is `True`)
    delete : bool, default False
        If `True`, delete the key
    strict : str, default "error"
        "error" or "warn" for missing keys (when deleting)
    only_if_exists : bool, default False
        If `True`, only set the value if its parent path exists

    Returns
    -------
    Tuple[Dict[str, Any], bool]
        (modified config, whether the operation was applied)

    Raises
    ------
    ConfigPathError
        If `strict` is "error" and the key path does not exist (when deleting)
    ConfigTypeError
        If the path traverses a non-dictionary value
    """
    keys = key_path.split(".")
    current = config

    # Navigate to parent
    for i, key in enumerate(keys[:-1]):
        if key not in current:
            if delete:
                if strict == "error":
                    raise ConfigPathError(
                        f"Cannot delete '{key_path}': path "
                        f"'{'.'.join(keys[: i + 1])}' does not exist"
                    )
                return config, False
            if only_if_exists:
                return config, False
            current[key] = {}
        elif not isinstance(current[key], dict):
            raise ConfigTypeError(
                f"Cannot set '{key_path}': '{key}' is not a dictionary"
            )
        current = current[key]

    # Set or delete final value
    final_key = keys[-1]
    if not delete:
        current[final_key] = value
        return config, True

    if final_key in current:
        del current[final_key]
        return config, True
    if strict == "error":
        raise ConfigPathError(f"Cannot delete '{key_path}': key does not exist")
    warnings.warn(f"Key '{key_path}' not found, skipping deletion")

    return config, False


def extract_directives(
    config_dict: Any,
) -> Tuple[List[str], Dict[str, Any], List[str], Dict[str, Any]]:
    """Extract the include/override/remove directives from a loaded block.

    Parameters
    ----------
    config_dict : Any
        Loaded YAML configuration

    Returns
    -------
    Tuple[List[str], Dict[str, Any], List[str], Dict[str, Any]]
        (includes, overrides, removals, cleaned config)

    Raises
    ------
    ConfigOperationError
        If a directive has an invalid type
    """
    if not isinstance(config_dict, dict):
        return [], {}, [], config_dict

    includes, overrides, removals, cleaned = [], {}, [], {}
    for key, value in config_dict.items():
        if key in ("include", "remove"):
            target = includes if key == "include" else removals
            if isinstance(value, str):
                target.append(value)
            elif isinstance(value, list):
                target.extend(value)
            else:
                raise ConfigOperationError(
                    f"'{key}' must be a string or list of strings, got {type(value)}"
                )
        elif key == "override":
            if not isinstance(value, dict):
                raise ConfigOperationError(
                    f"'override' must be a dictionary, got {type(value)}"
                )
            overrides = value
        else:
            cleaned[key] = value

    return includes, overrides, removals, cleaned
