"""Construct an estimator class from its name."""

from gemcsc.utils.factory import instantiate, module_dict

from . import estimate

# Build a dictionary of available pT estimators
ESTIMATOR_DICT = module_dict(estimate)


def estimator_factory(cfg):
    """Instantiates a position-based pT estimator from a configuration block.

    Parameters
    ----------
    cfg : Union[str, dict]
        Name of the estimator or its configuration dictionary

    Returns
    -------
    object
        Initialized estimator
    """
    return instantiate(ESTIMATOR_DICT, cfg)
