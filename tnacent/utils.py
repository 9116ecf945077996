"""Helper functions for the tnacent package."""

from __future__ import annotations

from typing import Any

import numpy as np
import pandas as pd

from .exceptions import ValidationError


def as_adjacency(x: Any, arg: str = "x") -> np.ndarray:
    """Convert input to a square float matrix of transition weights.

    Parameters
    ----------
    x : array-like or pd.DataFrame
        Weight matrix, row i / column j holding the weight of i -> j.
    arg : str
        Argument name used in error messages.

    Returns
    -------
    np.ndarray
        A fresh float copy of the matrix.

    Raises
    ------
    ValidationError
        If ``x`` is not numeric, not two-dimensional, not square or has
        fewer than two states.
    """
    if isinstance(x, pd.DataFrame):
        values = x.values
    else:
        values = x
    try:
        mat = np.array(values, dtype=float)
    except (TypeError, ValueError) as exc:
        raise ValidationError(
            f"Argument '{arg}' must be coercible to a numeric matrix"
        ) from exc

    if mat.ndim != 2:
        raise ValidationError(
            f"Argument '{arg}' must be a matrix, got {mat.ndim} dimension(s)"
        )
    if not is_square_matrix(mat):
        raise ValidationError(
            f"Argument '{arg}' must be a square matrix, got shape {mat.shape}"
        )
    if mat.shape[0] < 2:
        raise ValidationError(
            f"Argument '{arg}' must have at least two columns"
        )
    return mat


def get_labels(x: Any, n: int, labels: list[str] | None = None) -> list[str]:
    """Extract or generate labels for states.

    Explicit labels win, then DataFrame columns, then positional names
    ``"1"`` .. ``"n"``.
    """
    if labels is not None:
        labels = [str(label) for label in labels]
    elif isinstance(x, pd.DataFrame):
        labels = [str(col) for col in x.columns]
    else:
        labels = [str(i + 1) for i in range(n)]

    if len(labels) != n:
        raise ValidationError(
            f"Expected {n} state labels, got {len(labels)}"
        )
    if len(set(labels)) != n:
        dupes = sorted({label for label in labels if labels.count(label) > 1})
        raise ValidationError(f"State labels must be unique, duplicated: {dupes}")
    return labels


def is_square_matrix(x: np.ndarray) -> bool:
    """Check if array is a square matrix."""
    return x.ndim == 2 and x.shape[0] == x.shape[1]


def check_flag(value: Any, arg: str) -> bool:
    """Validate a single boolean argument."""
    if not isinstance(value, (bool, np.bool_)):
        raise ValidationError(
            f"Argument '{arg}' must be a single logical value, got {value!r}"
        )
    return bool(value)


def drop_loops(mat: np.ndarray) -> np.ndarray:
    """Return a copy of the matrix with a zero diagonal."""
    out = mat.copy()
    np.fill_diagonal(out, 0)
    return out


def minmax_scale(values: np.ndarray | pd.Series) -> np.ndarray:
    """Min-max normalization to [0, 1].

    Constant input maps to all zeros. Non-finite entries are ignored when
    locating the extremes and stay non-finite.
    """
    arr = np.asarray(values, dtype=float)
    finite = arr[np.isfinite(arr)]
    if finite.size == 0:
        return arr.copy()
    min_val = finite.min()
    max_val = finite.max()
    if max_val == min_val:
        out = np.zeros_like(arr)
        out[~np.isfinite(arr)] = arr[~np.isfinite(arr)]
        return out
    return (arr - min_val) / (max_val - min_val)
