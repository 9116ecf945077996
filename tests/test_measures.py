"""Tests for the centrality measure kernels."""

import numpy as np
import pytest
from scipy import linalg

import tnacent
from tnacent.measures import _create_graph, _create_undirected


@pytest.fixture
def three_state():
    """Three-state transition matrix without loops."""
    return np.array([
        [0.0, 0.5, 0.5],
        [0.2, 0.0, 0.8],
        [0.1, 0.1, 0.0],
    ])


class TestStrength:
    """Tests for in- and out-strength."""

    def test_out_strength_is_row_sum(self, three_state):
        np.testing.assert_array_almost_equal(
            tnacent.out_strength(three_state), [1.0, 1.0, 0.2]
        )

    def test_in_strength_is_column_sum(self, three_state):
        np.testing.assert_array_almost_equal(
            tnacent.in_strength(three_state), [0.3, 0.6, 1.3]
        )


class TestCloseness:
    """Tests for weighted closeness (weights used as distances)."""

    def test_closeness_out(self, three_state):
        # 1 -> 2 is cheaper through 0 (0.2 + 0.5) than directly (0.8)
        result = tnacent.closeness(three_state, mode='out')
        np.testing.assert_array_almost_equal(result, [1.0, 1 / 0.9, 5.0])

    def test_closeness_in(self, three_state):
        result = tnacent.closeness(three_state, mode='in')
        np.testing.assert_array_almost_equal(result, [1 / 0.3, 1 / 0.6, 1 / 1.2])

    def test_closeness_all(self, three_state):
        # Undirected edges keep the cheaper direction: 0-1 0.2, 0-2 0.1, 1-2 0.1
        result = tnacent.closeness(three_state, mode='all')
        np.testing.assert_array_almost_equal(result, [1 / 0.3, 1 / 0.3, 5.0])

    def test_unreachable_nodes_excluded(self):
        """Only reachable nodes enter the sum."""
        mat = np.array([
            [0.0, 0.5, 0.0],
            [0.0, 0.0, 0.0],
            [0.0, 0.0, 0.0],
        ])
        result = tnacent.closeness(mat, mode='out')
        assert result[0] == pytest.approx(2.0)
        assert np.isnan(result[1])
        assert np.isnan(result[2])

    def test_isolated_node_is_nan(self):
        mat = np.array([
            [0.0, 1.0, 0.0],
            [1.0, 0.0, 0.0],
            [0.0, 0.0, 0.0],
        ])
        result = tnacent.closeness(mat, mode='all')
        assert result[0] == pytest.approx(1.0)
        assert np.isnan(result[2])

    def test_invalid_mode(self, three_state):
        with pytest.raises(tnacent.ValidationError, match="closeness mode"):
            tnacent.closeness(three_state, mode='both')

    def test_undirected_keeps_cheaper_edge(self, three_state):
        U = _create_undirected(_create_graph(three_state))
        assert U[0][1]['weight'] == pytest.approx(0.2)
        assert U[1][2]['weight'] == pytest.approx(0.1)


class TestDiffusion:
    """Tests for diffusion centrality."""

    def test_two_state_swap(self):
        # A + A^2 = A + I
        mat = np.array([[0.0, 1.0], [1.0, 0.0]])
        np.testing.assert_array_almost_equal(tnacent.diffusion(mat), [2.0, 2.0])

    def test_matches_power_sum(self, three_state):
        n = three_state.shape[0]
        expected = sum(
            np.linalg.matrix_power(three_state, k) for k in range(1, n + 1)
        ).sum(axis=1)
        np.testing.assert_array_almost_equal(tnacent.diffusion(three_state), expected)

    def test_permutation_equivariant(self):
        rng = np.random.default_rng(7)
        mat = rng.random((5, 5))
        mat = mat / mat.sum(axis=1, keepdims=True)
        perm = np.array([3, 0, 4, 1, 2])

        base = tnacent.diffusion(mat)
        permuted = tnacent.diffusion(mat[np.ix_(perm, perm)])
        np.testing.assert_array_almost_equal(permuted, base[perm])

    def test_input_not_modified(self, three_state):
        before = three_state.copy()
        tnacent.diffusion(three_state)
        np.testing.assert_array_equal(three_state, before)


class TestRSPBetweenness:
    """Tests for randomized shortest path betweenness."""

    def test_positive_integers_starting_at_one(self, three_state):
        result = tnacent.rsp_betweenness(three_state)
        assert result.shape == (3,)
        assert np.all(result >= 1)
        assert result.min() == 1
        np.testing.assert_array_equal(result, np.round(result))

    def test_random_matrices(self):
        rng = np.random.default_rng(42)
        for _ in range(5):
            mat = rng.random((6, 6))
            np.fill_diagonal(mat, 0)
            mat = mat / mat.sum(axis=1, keepdims=True)
            result = tnacent.rsp_betweenness(mat)
            assert np.all(np.isfinite(result))
            assert result.min() == 1
            np.testing.assert_array_equal(result, np.round(result))

    def test_zero_weights_do_not_produce_nan(self):
        """Missing edges and a state without transitions stay finite."""
        mat = np.array([
            [0.0, 1.0, 0.0],
            [1.0, 0.0, 0.0],
            [0.0, 0.0, 0.0],
        ])
        result = tnacent.rsp_betweenness(mat)
        assert np.all(np.isfinite(result))
        assert result.min() == 1

    def test_singular_system_raises(self):
        # With a vanishing beta, W equals the swap matrix and I - W is singular
        mat = np.array([[0.0, 1.0], [1.0, 0.0]])
        with pytest.raises(tnacent.NumericError, match="singular"):
            tnacent.rsp_betweenness(mat, beta=1e-300)

    @pytest.mark.parametrize("beta", [0, -1.0, np.inf, np.nan])
    def test_invalid_beta(self, three_state, beta):
        with pytest.raises(tnacent.ValidationError, match="beta"):
            tnacent.rsp_betweenness(three_state, beta=beta)

    @pytest.mark.parametrize("seed", [0, 5, 11])
    def test_matches_formula(self, seed):
        """Values equal round(diag(Z (Zrecip - n D)^T Z)) shifted to start at 1."""
        rng = np.random.default_rng(seed)
        mat = rng.random((6, 6))
        np.fill_diagonal(mat, 0)
        mat = mat / mat.sum(axis=1, keepdims=True)
        n, beta = 6, 0.01

        W = mat * np.exp(-beta / np.where(mat > 0, mat, 1.0))
        W[mat == 0] = 0
        Z = linalg.inv(np.eye(n) - W)
        Z_recip = 1.0 / Z
        X = Z_recip - n * np.diag(np.diag(Z_recip))
        expected = np.round(np.diag(Z @ X.T @ Z))
        expected = expected - expected.min() + 1

        np.testing.assert_array_equal(tnacent.rsp_betweenness(mat, beta=beta), expected)

    def test_two_state_values(self):
        """Two states: both values collapse to 1 after the shift."""
        mat = np.array([[0.0, 0.5], [0.5, 0.0]])
        np.testing.assert_array_equal(tnacent.rsp_betweenness(mat), [1.0, 1.0])

    def test_default_beta(self):
        assert tnacent.DEFAULT_BETA == 0.01


class TestSignedClustering:
    """Tests for the signed clustering coefficient."""

    def test_complete_graph_is_one(self):
        mat = np.ones((3, 3))
        np.fill_diagonal(mat, 0)
        np.testing.assert_array_almost_equal(
            tnacent.signed_clustering(mat), [1.0, 1.0, 1.0]
        )

    def test_diagonal_ignored(self):
        mat = np.ones((3, 3))
        np.testing.assert_array_almost_equal(
            tnacent.signed_clustering(mat), [1.0, 1.0, 1.0]
        )

    def test_matches_formula(self, three_state):
        sym = three_state + three_state.T
        num = np.diag(sym @ sym @ sym)
        den = sym.sum(axis=0) ** 2 - (sym ** 2).sum(axis=0)
        np.testing.assert_array_almost_equal(
            tnacent.signed_clustering(sym), num / den
        )

    def test_isolated_state_is_not_finite(self):
        mat = np.array([
            [0.0, 1.0, 0.0],
            [1.0, 0.0, 0.0],
            [0.0, 0.0, 0.0],
        ])
        result = tnacent.signed_clustering(mat + mat.T)
        assert not np.any(np.isfinite(result))

    def test_input_not_modified(self):
        mat = np.ones((3, 3))
        tnacent.signed_clustering(mat)
        assert np.all(np.diag(mat) == 1.0)
