"""Centrality measure kernels for transition networks.

Each function takes a weight matrix (rows = from, columns = to) and returns
one value per state. Loop handling is left to the caller.
"""

from __future__ import annotations

import logging

import numpy as np
import networkx as nx
from scipy import linalg

from .exceptions import NumericError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_BETA = 0.01

CLOSENESS_MODES = ('out', 'in', 'all')


def out_strength(weights: np.ndarray) -> np.ndarray:
    """Compute out-strength (sum of outgoing edge weights).

    R equivalent: igraph::strength(g, mode = "out")
    """
    return weights.sum(axis=1)


def in_strength(weights: np.ndarray) -> np.ndarray:
    """Compute in-strength (sum of incoming edge weights).

    R equivalent: igraph::strength(g, mode = "in")
    """
    return weights.sum(axis=0)


def _create_graph(weights: np.ndarray) -> nx.DiGraph:
    """Create NetworkX DiGraph from weight matrix."""
    n = weights.shape[0]
    G = nx.DiGraph()
    G.add_nodes_from(range(n))
    for i in range(n):
        for j in range(n):
            if weights[i, j] > 0:
                G.add_edge(i, j, weight=weights[i, j])
    return G


def _create_undirected(G: nx.DiGraph) -> nx.Graph:
    """Collapse a DiGraph, keeping the cheaper of two opposite edges."""
    U = nx.Graph()
    U.add_nodes_from(G.nodes)
    for u, v, w in G.edges(data='weight'):
        if U.has_edge(u, v):
            w = min(w, U[u][v]['weight'])
        U.add_edge(u, v, weight=w)
    return U


def closeness(weights: np.ndarray, mode: str = 'all') -> np.ndarray:
    """Compute weighted closeness centrality.

    R equivalent: igraph::closeness(g, mode = mode)

    Edge weights are used as distances. For each node the closeness is the
    inverse of the summed shortest-path distances to the nodes it can
    reach; unreachable nodes are left out of the sum. A node that reaches
    no other node gets NaN.

    Parameters
    ----------
    weights : np.ndarray
        Weight matrix. Only positive entries are edges.
    mode : str
        ``'out'`` follows edges, ``'in'`` follows them backwards and
        ``'all'`` ignores direction.

    Returns
    -------
    np.ndarray
        Closeness per state.
    """
    if mode not in CLOSENESS_MODES:
        raise ValidationError(
            f"Unknown closeness mode: {mode!r}. Available: {list(CLOSENESS_MODES)}"
        )
    n = weights.shape[0]
    G = _create_graph(weights)
    if mode == 'in':
        G = G.reverse(copy=True)
    elif mode == 'all':
        G = _create_undirected(G)

    result = np.full(n, np.nan)
    for i in range(n):
        lengths = nx.single_source_dijkstra_path_length(G, i, weight='weight')
        total_dist = sum(d for j, d in lengths.items() if j != i)
        if len(lengths) > 1 and total_dist > 0:
            result[i] = 1.0 / total_dist
    return result


def diffusion(weights: np.ndarray) -> np.ndarray:
    """Compute diffusion centrality (Banerjee et al. 2014).

    Sums the powers ``A, A^2, ..., A^n`` and returns the row sums, i.e. the
    weighted reachability of every state over walks of up to ``n`` steps.
    """
    n = weights.shape[0]

    s = np.zeros((n, n))
    p = np.eye(n)

    for _ in range(n):
        p = p @ weights
        s = s + p

    return s.sum(axis=1)


def rsp_betweenness(weights: np.ndarray, beta: float = DEFAULT_BETA) -> np.ndarray:
    """Compute Randomized Shortest Path betweenness (Kivimäki et al. 2016).

    Parameters
    ----------
    weights : np.ndarray
        Transition probability (or weight) matrix.
    beta : float
        Inverse temperature of the random walk. Small values approach
        random-walk betweenness, large values shortest-path betweenness.

    Returns
    -------
    np.ndarray
        Rounded betweenness values shifted so that the smallest is 1.

    Raises
    ------
    NumericError
        If ``I - W`` is singular or the result is not finite.
    """
    if not np.isfinite(beta) or beta <= 0:
        raise ValidationError(f"Argument 'beta' must be a positive number, got {beta!r}")

    n = weights.shape[0]
    mat = np.asarray(weights, dtype=float)

    # W = A * exp(-beta / A), zero where there is no edge
    edges = mat != 0
    W = np.zeros_like(mat)
    W[edges] = mat[edges] * np.exp(-beta / mat[edges])

    try:
        Z = linalg.inv(np.eye(n) - W)
    except linalg.LinAlgError as exc:
        logger.debug("I - W is singular for a %d-state network", n)
        raise NumericError(
            "Cannot compute betweenness: the matrix I - W is singular"
        ) from exc

    Z_recip = np.zeros_like(Z)
    nonzero = Z != 0
    Z_recip[nonzero] = 1.0 / Z[nonzero]

    Z_recip_diag = np.diag(np.diag(Z_recip))

    # diag(Z (Z_recip - n * D)^T Z)
    out = np.diag(Z @ (Z_recip - n * Z_recip_diag).T @ Z)
    if not np.all(np.isfinite(out)):
        raise NumericError("Cannot compute betweenness: result is not finite")

    out = np.round(out)
    return out - out.min() + 1


def signed_clustering(mat: np.ndarray) -> np.ndarray:
    """Compute signed clustering coefficient (Zhang and Horvath 2005).

    Expects a symmetric matrix, usually ``A + A.T``. The diagonal is
    ignored. States without two distinct neighbours divide by zero and
    yield NaN or inf.
    """
    mat = np.array(mat, dtype=float)
    np.fill_diagonal(mat, 0)

    num = np.diag(mat @ mat @ mat)

    col_sums = mat.sum(axis=0)
    col_sums_sq = (mat ** 2).sum(axis=0)
    den = col_sums ** 2 - col_sums_sq

    with np.errstate(divide='ignore', invalid='ignore'):
        return num / den
