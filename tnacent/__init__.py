"""tnacent - centrality analysis of transition networks.

Computes centrality measures of transition networks (weighted directed
graphs of state-to-state transition probabilities), following the
conventions of the R tna package.

Example
-------
>>> import numpy as np
>>> import tnacent
>>>
>>> model = tnacent.build_model(
...     np.array([[0.0, 0.5, 0.5], [0.2, 0.0, 0.8], [0.1, 0.1, 0.8]]),
...     labels=["A", "B", "C"],
... )
>>> cent = tnacent.centralities(model, measures=["OutStrength", "betw"])
"""

from .model import TNA, build_model, build_mixture
from .centralities import centralities, match_measures, AVAILABLE_MEASURES
from .measures import (
    DEFAULT_BETA,
    out_strength,
    in_strength,
    closeness,
    diffusion,
    rsp_betweenness,
    signed_clustering,
)
from .exceptions import TNAError, ValidationError, NumericError
from .utils import as_adjacency, minmax_scale

__version__ = "0.1.0"

__all__ = [
    # Model
    "TNA",
    "build_model",
    "build_mixture",
    # Centralities
    "centralities",
    "match_measures",
    "AVAILABLE_MEASURES",
    # Measure kernels
    "DEFAULT_BETA",
    "out_strength",
    "in_strength",
    "closeness",
    "diffusion",
    "rsp_betweenness",
    "signed_clustering",
    # Errors
    "TNAError",
    "ValidationError",
    "NumericError",
    # Utilities
    "as_adjacency",
    "minmax_scale",
]
