"""TNA model class and build functions."""

from __future__ import annotations

import logging
import warnings
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import pandas as pd

from .exceptions import ValidationError
from .utils import as_adjacency, get_labels

logger = logging.getLogger(__name__)


@dataclass
class TNA:
    """Transition Network Analysis model.

    Holds one transition matrix per cluster. A plain model has a single
    cluster; mixture models have several, all over the same states.

    Attributes
    ----------
    transits : list of np.ndarray
        Adjacency/transition matrices (n_states x n_states), one per cluster
    inits : list of np.ndarray or None
        Initial state probabilities per cluster (``None`` where unknown)
    labels : list of str
        State labels
    colors : list of str or None
        Display colors of the states, stored as given
    cluster_names : list of str
        Cluster names, parallel to ``transits``
    """

    transits: list[np.ndarray]
    inits: list[np.ndarray | None]
    labels: list[str]
    colors: list[str] | None = None
    cluster_names: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.transits:
            raise ValidationError("A TNA model needs at least one transition matrix")
        self.transits = [
            as_adjacency(mat, arg=f"transits[{i}]")
            for i, mat in enumerate(self.transits)
        ]
        sizes = {mat.shape[0] for mat in self.transits}
        if len(sizes) > 1:
            raise ValidationError(
                f"All cluster matrices must have the same size, got sizes {sorted(sizes)}"
            )
        n = self.transits[0].shape[0]
        self.labels = get_labels(None, n, self.labels)

        if len(self.inits) != len(self.transits):
            raise ValidationError(
                f"Expected {len(self.transits)} initial probability vectors, "
                f"got {len(self.inits)}"
            )
        for init in self.inits:
            if init is not None and len(init) != n:
                raise ValidationError(
                    f"Initial probability vectors must have {n} entries, got {len(init)}"
                )

        if not self.cluster_names:
            self.cluster_names = _default_cluster_names(len(self.transits))
        if len(self.cluster_names) != len(self.transits):
            raise ValidationError(
                f"Expected {len(self.transits)} cluster names, "
                f"got {len(self.cluster_names)}"
            )

    # ------------------------------------------------------------------
    # Cluster access
    # ------------------------------------------------------------------

    @property
    def weights(self) -> np.ndarray:
        """Transition matrix of the first (or only) cluster."""
        return self.transits[0]

    @property
    def n_clusters(self) -> int:
        return len(self.transits)

    def __getitem__(self, key: int | str) -> np.ndarray:
        return self.transits[self.cluster_index(key)]

    def __iter__(self):
        return iter(self.cluster_names)

    def __len__(self) -> int:
        return len(self.transits)

    def items(self):
        return zip(self.cluster_names, self.transits)

    def cluster_index(self, key: int | str) -> int:
        """Resolve a cluster position (0-based) or name to a position."""
        if isinstance(key, (bool, np.bool_)):
            raise ValidationError(f"Invalid cluster: {key!r}")
        if isinstance(key, (int, np.integer)):
            if not 0 <= key < len(self.transits):
                raise ValidationError(
                    f"Cluster index {key} out of range for "
                    f"{len(self.transits)} clusters"
                )
            return int(key)
        if isinstance(key, str):
            if key not in self.cluster_names:
                raise ValidationError(
                    f"Unknown cluster: {key!r}. Available: {self.cluster_names}"
                )
            return self.cluster_names.index(key)
        raise ValidationError(f"Invalid cluster: {key!r}")

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __repr__(self) -> str:
        n = len(self.labels)
        return f"TNA(states={n}, clusters={self.cluster_names})"

    def __str__(self) -> str:
        lines = ["TNA Model", f"  States: {self.labels}"]
        for i, name in enumerate(self.cluster_names):
            if self.n_clusters > 1:
                lines.extend(["", f"Cluster: {name}"])
            lines.extend(["", "Transition Matrix:", self.to_dataframe(i).to_string()])
            if self.inits[i] is not None:
                init_df = pd.DataFrame({'prob': self.inits[i]}, index=self.labels)
                lines.extend(["", "Initial Probabilities:", init_df.to_string()])
        return '\n'.join(lines)

    def to_dataframe(self, cluster: int | str = 0) -> pd.DataFrame:
        """Convert a cluster's weight matrix to a labeled DataFrame."""
        mat = self.transits[self.cluster_index(cluster)]
        return pd.DataFrame(mat, index=self.labels, columns=self.labels)

    def summary(self) -> pd.DataFrame:
        """Return summary statistics, one row per cluster."""
        rows = []
        n = len(self.labels)
        for name, w in self.items():
            rows.append({
                'cluster': name,
                'n_states': n,
                'n_edges': int(np.sum(w > 0)),
                'density': np.sum(w > 0) / (n ** 2),
                'mean_weight': np.mean(w[w > 0]) if np.any(w > 0) else 0.0,
                'max_weight': np.max(w),
                'has_self_loops': bool(np.any(np.diag(w) > 0)),
            })
        return pd.DataFrame(rows).set_index('cluster')


def _default_cluster_names(k: int) -> list[str]:
    return [f"Cluster {i + 1}" for i in range(k)]


def _check_inits(inits: Any, n: int) -> np.ndarray:
    """Validate initial probabilities and scale them to unity."""
    try:
        vec = np.array(inits, dtype=float).ravel()
    except (TypeError, ValueError) as exc:
        raise ValidationError(
            "Argument 'inits' must be coercible to numeric"
        ) from exc
    if len(vec) < n:
        raise ValidationError(
            "Argument 'inits' must provide initial probabilities for all states"
        )
    if np.any(vec < 0) or np.any(np.isnan(vec)):
        raise ValidationError("Elements of 'inits' must be non-negative")
    if len(vec) > n:
        warnings.warn(
            f"Argument 'inits' contains more values than the number of states. "
            f"Only the first {n} values will be used.",
            UserWarning,
            stacklevel=3,
        )
        vec = vec[:n]
    total = vec.sum()
    if total > 0:
        vec = vec / total
    return vec


def build_model(
    x: pd.DataFrame | np.ndarray,
    inits: Any = None,
    labels: list[str] | None = None,
    colors: list[str] | None = None,
) -> TNA:
    """Build a TNA model from a transition matrix.

    Parameters
    ----------
    x : pd.DataFrame or np.ndarray
        Square weight matrix; element (i, j) is the transition probability
        (or weight) from state i to state j.
    inits : array-like, optional
        Initial state probabilities, scaled to sum to one. Extra values
        beyond the number of states are dropped with a warning.
    labels : list of str, optional
        State labels (defaults to the DataFrame columns or positions)
    colors : list of str, optional
        State colors, stored on the model

    Returns
    -------
    TNA
        Single-cluster model

    Examples
    --------
    >>> import numpy as np
    >>> import tnacent
    >>> model = tnacent.build_model(np.array([[0.2, 0.8], [0.6, 0.4]]),
    ...                             labels=['A', 'B'])
    >>> model.labels
    ['A', 'B']
    """
    mat = as_adjacency(x)
    n = mat.shape[0]
    state_labels = get_labels(x, n, labels)
    init_vec = None if inits is None else _check_inits(inits, n)
    return TNA(
        transits=[mat],
        inits=[init_vec],
        labels=state_labels,
        colors=None if colors is None else list(colors),
    )


def build_mixture(
    transits: Mapping[str, Any] | Sequence[Any],
    inits: Mapping[str, Any] | Sequence[Any] | None = None,
    labels: list[str] | None = None,
    colors: list[str] | None = None,
) -> TNA:
    """Build a clustered TNA model from one matrix per cluster.

    Parameters
    ----------
    transits : mapping or sequence
        Cluster transition matrices. A mapping's keys become the cluster
        names; a sequence gets ``"Cluster 1"``, ``"Cluster 2"``, ...
    inits : mapping or sequence, optional
        Initial probabilities per cluster, in the same form as ``transits``
    labels : list of str, optional
        State labels shared by all clusters
    colors : list of str, optional
        State colors, stored on the model

    Returns
    -------
    TNA
    """
    if isinstance(transits, Mapping):
        names = [str(k) for k in transits.keys()]
        mats = list(transits.values())
    elif isinstance(transits, Sequence) and not isinstance(transits, str):
        mats = list(transits)
        names = _default_cluster_names(len(mats))
    else:
        raise ValidationError(
            f"Argument 'transits' must be a mapping or sequence of matrices, "
            f"got {type(transits).__name__}"
        )
    if not mats:
        raise ValidationError("Argument 'transits' must contain at least one matrix")

    arrays = [as_adjacency(m, arg=f"transits[{name!r}]") for name, m in zip(names, mats)]
    n = arrays[0].shape[0]
    sizes = {a.shape[0] for a in arrays}
    if len(sizes) > 1:
        raise ValidationError(
            f"All cluster matrices must have the same size, got sizes {sorted(sizes)}"
        )
    state_labels = get_labels(mats[0], n, labels)

    if inits is None:
        init_list = [None] * len(arrays)
    else:
        if isinstance(inits, Mapping):
            missing = [name for name in names if name not in inits]
            if missing:
                raise ValidationError(f"Missing 'inits' for clusters: {missing}")
            init_values = [inits[name] for name in names]
        else:
            init_values = list(inits)
        if len(init_values) != len(arrays):
            raise ValidationError(
                f"Expected {len(arrays)} initial probability vectors, "
                f"got {len(init_values)}"
            )
        init_list = [_check_inits(v, n) for v in init_values]

    logger.debug("Built mixture model with %d clusters over %d states", len(arrays), n)
    return TNA(
        transits=arrays,
        inits=init_list,
        labels=state_labels,
        colors=None if colors is None else list(colors),
        cluster_names=names,
    )
