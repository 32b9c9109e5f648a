"""Configuration loading functions.

Configuration files are YAML documents which may use three directives on top
of the regular content:

.. code-block:: yaml

    include: base.yaml               # str or list of files merged first
    override:
      matching.csc_sim_hit.min_n_hits_chamber: 3
    remove: matching.rpc             # str or list of key paths deleted

Included files are resolved relative to the including file, then through the
directories listed in the `GEMCSC_CONFIG_PATH` environment variable.
"""

import os
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigCycleError, ConfigIncludeError
from .operations import deep_merge, extract_directives, parse_value, set_nested_value

__all__ = ["load_config", "load_config_file", "resolve_config_path"]


def resolve_config_path(
    filename: str, current_dir: str, search_paths: Optional[List[str]] = None
) -> str:
    """Resolve a configuration file path.

    Resolution order:
    1. If absolute path, return as-is
    2. Relative to `current_dir`, with or without a .yaml/.yml extension
    3. Relative to each `GEMCSC_CONFIG_PATH` directory, same extensions

    Parameters
    ----------
    filename : str
        Config file name or path to resolve
    current_dir : str
        Directory of the config file doing the including
    search_paths : List[str], optional
        List of search paths (defaults to the GEMCSC_CONFIG_PATH variable)

    Returns
    -------
    str
        Resolved absolute path

    Raises
    ------
    ConfigIncludeError
        If the file cannot be found in any location
    """
    if os.path.isabs(filename):
        if os.path.exists(filename):
            return filename
        raise ConfigIncludeError(f"Absolute path not found: {filename}")

    if search_paths is None:
        env_paths = os.environ.get("GEMCSC_CONFIG_PATH", "")
        search_paths = [p.strip() for p in env_paths.split(":") if p.strip()]

    for directory in [current_dir, *search_paths]:
        base_path = os.path.join(directory, filename)
        for path in (base_path, base_path + ".yaml", base_path + ".yml"):
            if os.path.isfile(path):
                return os.path.abspath(path)

    raise ConfigIncludeError(
        f"Config file '{filename}' not found. Searched in: "
        f"{', '.join([current_dir, *search_paths])}"
    )


def _load_recursive(
    cfg_path: Optional[str] = None,
    config_string: Optional[str] = None,
    root_dir: Optional[str] = None,
    include_stack: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """Recursively load a configuration with cycle detection.

    Parameters
    ----------
    cfg_path : str, optional
        Path to configuration file (mutually exclusive with `config_string`)
    config_string : str, optional
        YAML configuration string (mutually exclusive with `cfg_path`)
    root_dir : str, optional
        Root directory for resolving relative include paths
    include_stack : List[str], optional
        Stack of files currently being loaded

    Returns
    -------
    Dict[str, Any]
        Loaded configuration with all directives applied
    """
    if (cfg_path is None) == (config_string is None):
        raise ValueError("Must provide exactly one of cfg_path or config_string")

    # Cycle detection
    include_stack = include_stack or []
    if cfg_path is not None:
        cfg_path = os.path.abspath(cfg_path)
        if cfg_path in include_stack:
            raise ConfigCycleError(include_stack + [cfg_path])
        include_stack = include_stack + [cfg_path]
        root_dir = root_dir or os.path.dirname(cfg_path)
    else:
        root_dir = root_dir or os.getcwd()

    # Load YAML
    source = cfg_path or "<string>"
    try:
        if cfg_path is not None:
            with open(cfg_path, "r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        else:
            content = yaml.safe_load(config_string)
    except FileNotFoundError as exc:
        raise ConfigIncludeError(f"Configuration file not found: {source}") from exc
    except yaml.YAMLError as exc:
        raise ConfigIncludeError(f"Error loading {source}: {exc}") from exc

    if content is None:
        return {}

    # Merge the included files first, then the content of this file
    includes, overrides, removals, cleaned = extract_directives(content)
    config = {}
    for include in includes:
        include_path = resolve_config_path(include, root_dir)
        included = _load_recursive(cfg_path=include_path, include_stack=include_stack)
        config = deep_merge(config, included)

    config = deep_merge(config, cleaned)

    # Apply removals, then overrides
    for key_path in removals:
        config, _ = set_nested_value(config, key_path, None, delete=True)
    for key_path, value in overrides.items():
        config, _ = set_nested_value(config, key_path, parse_value(value))

    return config


def load_config(config_str: str, root_dir: Optional[str] = None) -> Dict[str, Any]:
    """Load a configuration from a YAML string.

    Parameters
    ----------
    config_str : str
        YAML configuration string
    root_dir : str, optional
        Root directory for resolving relative include paths. Defaults to the
        current working directory.

    Returns
    -------
    Dict[str, Any]
        Loaded and merged configuration

    Raises
    ------
    ConfigCycleError
        If a circular include is detected
    ConfigIncludeError
        If an included file is not found or cannot be parsed
    ConfigPathError
        If a removal targets a non-existent path
    ConfigTypeError
        If an override traverses a non-dictionary value
    ConfigOperationError
        If a directive is malformed
    """
    return _load_recursive(config_string=config_str, root_dir=root_dir)


def load_config_file(cfg_path: str) -> Dict[str, Any]:
    """Load a configuration from a file.

    The directory of the file is used to resolve relative includes.

    Parameters
    ----------
    cfg_path : str
        Path to configuration file

    Returns
    -------
    Dict[str, Any]
        Loaded and merged configuration

    See Also
    --------
    load_config : Load a configuration from a YAML string
    """
    return _load_recursive(cfg_path=cfg_path)
