"""Functions needed to instantiate a class from a configuration block.

A YAML block such as

.. code-block:: yaml

    writer:
      name: csv
      directory: output

is converted into an instance of the class registered under `csv`, with the
remaining keys passed as keyword arguments.
"""

from copy import deepcopy

from .logger import logger

__all__ = ["module_dict", "instantiate"]


def module_dict(module, class_name=None, pattern=None):
    """Converts a module into a dictionary which maps names onto classes.

    Parameters
    ----------
    module : module
        Module from which to fetch the classes
    class_name : str, optional
        If specified, warn when this name is only known as an alias
    pattern : str, optional
        If specified, only keep classes with this pattern in their name

    Returns
    -------
    dict
        Dictionary which maps acceptable class names to classes themselves
    """
    # Loop over the public objects of the module
    classes = {}
    for cls_name in getattr(module, "__all__", dir(module)):
        if cls_name[0] == "_":
            continue

        cls = getattr(module, cls_name)
        if not isinstance(cls, type):
            continue
        if pattern is not None and pattern not in cls.__name__:
            continue

        # Only consider classes defined in the module of interest
        if module.__name__ not in cls.__module__:
            continue

        # Register the class under its own name and its short name
        classes[cls_name] = cls
        if getattr(cls, "name", ""):
            classes[cls.name] = cls

        # Aliases are accepted, but discouraged
        for alias in getattr(cls, "aliases", ()):
            if class_name is not None and class_name == alias:
                logger.warning(
                    "This name (%s) is deprecated. Use %s instead.", alias, cls.name
                )
            classes[alias] = cls

    return classes


def instantiate(module_dict, cfg, alt_name=None, **kwargs):
    """Instantiates a class from a configuration dictionary.

    Parameters
    ----------
    module_dict : dict
        Dictionary which maps a class name onto an object class
    cfg : Union[str, dict]
        Configuration dictionary, or simply the name of the class
    alt_name : str, optional
        Key under which the class name can be specified, beside `name`
    **kwargs : dict, optional
        Additional parameters to pass to the class

    Returns
    -------
    object
        Instantiated object
    """
    # A bare string is the name of a class with no parameters
    if isinstance(cfg, str):
        cfg = {"name": cfg}

    # Get the name of the class, check that it exists
    config = deepcopy(cfg)
    name = "name"
    if alt_name is not None and alt_name in config:
        name = alt_name
    if name not in config:
        raise KeyError(f"Could not find the name of the class under `{name}`")

    class_name = config.pop(name)
    if class_name not in module_dict:
        raise ValueError(
            f"Could not find '{class_name}' in the dictionary which maps names "
            f"to classes. Available names: {list(module_dict.keys())}"
        )

    # Merge the configuration parameters with the additional ones
    for key in config:
        if key in kwargs:
            raise ValueError(
                f"The keyword argument {key} is provided in the configuration "
                "and as an explicit argument. Ambiguous."
            )
    kwargs.update(config)

    # Intialize
    cls = module_dict[class_name]
    try:
        return cls(**kwargs)

    except Exception as err:
        logger.error(
            "Failed to instantiate %s with these arguments:\n  - kwargs: %s",
            cls.__name__,
            kwargs,
        )
        raise err
