"""Tests for payoff scoring and max-node selection."""
import numpy as np
import pytest

from atria.payoff import is_converged, payoffs, select_max


class TestPayoffs:
    def test_row_sum_minus_one(self) -> None:
        H = np.array(
            [
                [1.0, -0.5, 0.5, -0.125],
                [-0.5, 1.0, -0.25, 0.25],
                [0.5, -0.25, 1.0, -0.25],
                [-0.125, 0.25, -0.25, 1.0],
            ],
            dtype=np.float32,
        )
        np.testing.assert_array_equal(
            payoffs(H), np.array([-0.125, -0.5, 0.0, -0.125], dtype=np.float32)
        )

    def test_float32_left_to_right(self) -> None:
        row = np.array([[1e8, 1.0, -1e8, 1.0]], dtype=np.float32)
        # 1e8 + 1 rounds back to 1e8 in float32, so only the last 1 survives
        assert payoffs(row)[0] == np.float32(0.0)
        assert payoffs(row).dtype == np.float32

    def test_identity_is_zero(self) -> None:
        np.testing.assert_array_equal(payoffs(np.eye(5, dtype=np.float32)), np.zeros(5))


class TestSelectMax:
    def test_by_magnitude(self) -> None:
        node, value = select_max(np.array([0.1, -0.7, 0.5], dtype=np.float32))
        assert node == 1
        assert value == np.float32(-0.7)

    def test_ties_keep_first(self) -> None:
        node, value = select_max(np.array([0.0, 0.5, -0.5, 0.5], dtype=np.float32))
        assert node == 1
        assert value == np.float32(0.5)

    def test_nan_is_never_selected(self) -> None:
        node, _ = select_max(np.array([np.nan, 0.25, np.nan], dtype=np.float32))
        assert node == 1

    def test_relabeling_moves_selection_with_node(self) -> None:
        pay = np.array([0.1, -0.9, 0.3, 0.2], dtype=np.float32)
        perm = np.array([2, 0, 3, 1])
        node, value = select_max(pay[perm])
        assert perm[node] == 1
        assert value == np.float32(-0.9)

    def test_empty(self) -> None:
        with pytest.raises(ValueError):
            select_max(np.array([], dtype=np.float32))

    def test_convergence(self) -> None:
        node, value = select_max(np.zeros(3, dtype=np.float32))
        assert node == 0
        assert is_converged(value)
        assert is_converged(-0.0)
        assert not is_converged(1e-30)
