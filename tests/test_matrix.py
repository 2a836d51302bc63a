"""Tests for the dense tagged adjacency store."""
import math

import numpy as np
import pytest

from atria.matrix import (
    ABSENT,
    PRESENT,
    REMOVED,
    SENTINEL,
    MatrixStore,
    expand_signed_pairs,
    pair_of,
)


class TestMatrixStore:
    def test_tags_follow_weights(self, fourway: np.ndarray) -> None:
        store = MatrixStore(fourway)
        assert store.size() == 4
        assert store.state[0, 1] == PRESENT
        assert store.state[0, 3] == ABSENT
        assert store.get(1, 3) == pytest.approx(0.25)

    @pytest.mark.parametrize(
        "weights",
        [np.zeros((2, 3)), np.zeros(4), np.zeros((2, 2, 2))],
    )
    def test_rejects_non_square(self, weights: np.ndarray) -> None:
        with pytest.raises(ValueError, match="square"):
            MatrixStore(weights)

    def test_rejects_nan_and_inf(self) -> None:
        with pytest.raises(ValueError, match="non-finite"):
            MatrixStore([[0.0, math.nan], [1.0, 0.0]])
        with pytest.raises(ValueError, match="non-finite"):
            MatrixStore([[0.0, math.inf], [1.0, 0.0]])

    def test_set_and_get_with_sentinel(self, fourway: np.ndarray) -> None:
        store = MatrixStore(fourway)
        store.set(0, 1, SENTINEL)
        assert store.get(0, 1) == SENTINEL
        assert store.state[0, 1] == REMOVED
        assert store.dense()[0, 1] == 0.0

        store.set(0, 1, 0.0)
        assert store.state[0, 1] == ABSENT
        store.set(0, 1, -0.75)
        assert store.state[0, 1] == PRESENT
        assert store.get(0, 1) == pytest.approx(-0.75)

        with pytest.raises(ValueError):
            store.set(0, 1, -math.inf)

    def test_out_of_range_is_assertion(self, fourway: np.ndarray) -> None:
        store = MatrixStore(fourway)
        with pytest.raises(AssertionError):
            store.get(4, 0)
        with pytest.raises(AssertionError):
            store.set(-1, 0, 1.0)

    def test_snapshot_is_independent(self, fourway: np.ndarray) -> None:
        store = MatrixStore(fourway)
        copy = store.snapshot()
        copy.set(0, 2, SENTINEL)
        copy.set(1, 3, 2.0)
        assert store.state[0, 2] == PRESENT
        assert store.get(1, 3) == pytest.approx(0.25)
        assert copy.size() == store.size()

    def test_input_array_is_copied(self, fourway: np.ndarray) -> None:
        store = MatrixStore(fourway)
        fourway[0, 1] = 9.0
        assert store.get(0, 1) == pytest.approx(-0.5)

    def test_state_view_is_read_only(self, fourway: np.ndarray) -> None:
        store = MatrixStore(fourway)
        with pytest.raises(ValueError):
            store.state[0, 0] = REMOVED

    def test_mark_removed_is_idempotent(self, fourway: np.ndarray) -> None:
        store = MatrixStore(fourway)
        assert store.mark_removed([0, 2, 0], [2, 0, 2]) == 2
        before = store.state.copy()
        assert store.mark_removed([0, 2], [2, 0]) == 0
        np.testing.assert_array_equal(store.state, before)
        assert store.count(REMOVED) == 2

    def test_mark_removed_counts_only_present_cells(self, fourway: np.ndarray) -> None:
        store = MatrixStore(fourway)
        assert store.mark_removed([0], [3]) == 0
        assert store.state[0, 3] == REMOVED

    def test_sweep_diagonal(self, fourway: np.ndarray) -> None:
        store = MatrixStore(fourway)
        store.set(2, 2, SENTINEL)
        store.set(0, 1, SENTINEL)
        assert store.sweep_diagonal() == 1
        assert store.state[2, 2] == ABSENT
        assert store.state[0, 1] == REMOVED
        assert not (np.diagonal(store.state) == REMOVED).any()


class TestPairs:
    def test_pair_of(self) -> None:
        assert pair_of(0, 4) == (0, 1)
        assert pair_of(1, 4) == (0, 1)
        assert pair_of(3, 4) == (2, 3)
        assert pair_of(4, 5) == (4,)

    def test_expand_signed_pairs(self) -> None:
        table = np.array([[1.0, 0.5], [-0.25, 1.0]], dtype=np.float32)
        G, labels = expand_signed_pairs(table, ["x", "y"])
        assert labels == ["x+", "x-", "y+", "y-"]
        assert G.shape == (4, 4)
        np.testing.assert_array_equal(np.diagonal(G), np.ones(4, dtype=np.float32))
        # positive (x, y): same-sign members
        assert G[0, 2] == 0.5 and G[1, 3] == 0.5
        assert G[1, 2] == 0.0 and G[0, 3] == 0.0
        # negative (y, x): cross-sign members
        assert G[3, 0] == -0.25 and G[2, 1] == -0.25
        assert G[2, 0] == 0.0 and G[3, 1] == 0.0
        # positive cells land on even index sums, negative on odd
        i, j = np.nonzero(G > 0)
        assert ((i + j) % 2 == 0).all()
        i, j = np.nonzero(G < 0)
        assert ((i + j) % 2 == 1).all()

    def test_expand_signed_pairs_label_mismatch(self) -> None:
        with pytest.raises(ValueError):
            expand_signed_pairs(np.eye(2), ["only-one"])
