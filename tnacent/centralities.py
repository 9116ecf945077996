"""Centrality measures for TNA models.

Builds a state-by-measure table from one or more transition matrices,
following the conventions of the R tna package.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

import numpy as np
import pandas as pd

from .exceptions import ValidationError
from .measures import (
    closeness,
    diffusion,
    in_strength,
    out_strength,
    rsp_betweenness,
    signed_clustering,
)
from .model import TNA, build_mixture, build_model
from .utils import check_flag, drop_loops, minmax_scale

logger = logging.getLogger(__name__)


# Available centrality measures, in default column order
AVAILABLE_MEASURES = (
    'OutStrength',
    'InStrength',
    'ClosenessIn',
    'ClosenessOut',
    'Closeness',
    'Betweenness',
    'Diffusion',
    'Clustering',
)

_MEASURE_FUNCS = {
    'OutStrength': out_strength,
    'InStrength': in_strength,
    'ClosenessIn': lambda w: closeness(w, mode='in'),
    'ClosenessOut': lambda w: closeness(w, mode='out'),
    'Closeness': lambda w: closeness(w, mode='all'),
    'Betweenness': rsp_betweenness,
    'Diffusion': diffusion,
    'Clustering': lambda w: signed_clustering(w + w.T),
}


def _match_one(name: str) -> str | None:
    """Resolve one name: exact (case-insensitive) match, else unique prefix."""
    lower = name.lower()
    for measure in AVAILABLE_MEASURES:
        if measure.lower() == lower:
            return measure
    candidates = [m for m in AVAILABLE_MEASURES if m.lower().startswith(lower)]
    if len(candidates) == 1:
        return candidates[0]
    return None


def match_measures(measures: Iterable[str] | str | None = None) -> list[str]:
    """Resolve requested measure names against the available measures.

    Matching ignores case and accepts unambiguous prefixes, so ``"betw"``
    gives ``"Betweenness"`` while ``"close"`` is rejected.

    Parameters
    ----------
    measures : iterable of str or str, optional
        Requested names. ``None`` selects every measure.

    Returns
    -------
    list of str
        Canonical names in request order, without duplicates.

    Raises
    ------
    ValidationError
        Listing every name that is unknown or ambiguous.
    """
    if measures is None:
        return list(AVAILABLE_MEASURES)
    if isinstance(measures, str):
        measures = [measures]
    measures = list(measures)

    not_str = [m for m in measures if not isinstance(m, str)]
    if not_str:
        raise ValidationError(
            f"Argument 'measures' must contain strings, got {not_str}"
        )
    if not measures:
        raise ValidationError("Argument 'measures' must not be empty")

    resolved = []
    invalid = []
    for name in measures:
        match = _match_one(name) if name else None
        if match is None:
            invalid.append(name)
        elif match not in resolved:
            resolved.append(match)

    if invalid:
        raise ValidationError(
            f"Unknown measures: {invalid}. Available: {list(AVAILABLE_MEASURES)}"
        )
    return resolved


def _resolve_input(x: Any) -> TNA:
    """Turn the supported input kinds into a TNA model."""
    if isinstance(x, TNA):
        return x
    if isinstance(x, Mapping):
        return build_mixture(x)
    return build_model(x)


def _centralities_single(
    weights: np.ndarray,
    labels: list[str],
    loops: bool,
    normalize: bool,
    measures: list[str],
) -> pd.DataFrame:
    """Compute the requested measures for one transition matrix."""
    if loops:
        weights = np.array(weights, dtype=float)
    else:
        weights = drop_loops(np.asarray(weights, dtype=float))

    results = {}
    for measure in measures:
        results[measure] = _MEASURE_FUNCS[measure](weights)

    df = pd.DataFrame(results, index=pd.Index(labels, name='State'), columns=measures)

    # R: ranger function - min-max normalization
    if normalize:
        for col in df.columns:
            df[col] = minmax_scale(df[col].values)

    return df


def centralities(
    x: TNA | pd.DataFrame | np.ndarray | Mapping[str, Any],
    loops: bool = False,
    cluster: int | str | None = None,
    normalize: bool = False,
    measures: Iterable[str] | str | None = None,
) -> pd.DataFrame:
    """Compute centrality measures for a TNA model or transition matrix.

    The measures are

    * ``OutStrength`` / ``InStrength``: total weight of outgoing / incoming
      edges.
    * ``ClosenessIn`` / ``ClosenessOut`` / ``Closeness``: inverse summed
      shortest-path distance (weights as distances) along incoming,
      outgoing or undirected paths.
    * ``Betweenness``: randomized shortest path betweenness
      (Kivimäki et al. 2016).
    * ``Diffusion``: diffusion centrality (Banerjee et al. 2014).
    * ``Clustering``: signed clustering coefficient (Zhang and Horvath 2005)
      of the symmetrized matrix ``A + A.T``.

    Parameters
    ----------
    x : TNA, np.ndarray, pd.DataFrame or mapping
        A TNA model, a square weight matrix, or a mapping of cluster name
        to weight matrix.
    loops : bool
        If True, include self-loops in calculations
    cluster : int or str, optional
        Position (0-based) or name of the single cluster to compute for.
        Ignored when the model has only one cluster.
    normalize : bool
        If True, min-max normalize each measure to [0, 1]. Constant
        measures become 0.
    measures : iterable of str, optional
        Which measures to compute, matched ignoring case and allowing
        unambiguous prefixes. If None, computes all available measures.

    Returns
    -------
    pd.DataFrame
        States as rows (index ``State``) and measures as columns, in the
        requested order. When several clusters are computed their tables
        are stacked and tagged by a categorical ``Cluster`` column.

    Raises
    ------
    ValidationError
        For invalid arguments.
    NumericError
        When betweenness cannot be computed for a cluster; the whole call
        fails.
    """
    loops = check_flag(loops, 'loops')
    normalize = check_flag(normalize, 'normalize')
    measures = match_measures(measures)
    model = _resolve_input(x)

    logger.debug(
        "Computing %s for %d cluster(s), loops=%s, normalize=%s",
        measures, model.n_clusters, loops, normalize,
    )

    if model.n_clusters == 1:
        return _centralities_single(
            model.transits[0], model.labels, loops, normalize, measures
        )

    if cluster is not None:
        idx = model.cluster_index(cluster)
        return _centralities_single(
            model.transits[idx], model.labels, loops, normalize, measures
        )

    tables = []
    for name, weights in model.items():
        logger.debug("Computing centralities for cluster %r", name)
        df = _centralities_single(weights, model.labels, loops, normalize, measures)
        df['Cluster'] = name
        tables.append(df)

    out = pd.concat(tables)
    out['Cluster'] = pd.Categorical(out['Cluster'], categories=model.cluster_names)
    return out
