"""Shared fixtures."""
import os

import numpy as np
import pytest

DATA_DIR = os.path.join(os.path.dirname(__file__), "data")


@pytest.fixture
def data_dir() -> str:
    return DATA_DIR


@pytest.fixture
def fourway() -> np.ndarray:
    """4-node table already in the paired sign convention (even cells >= 0, odd <= 0)."""
    return np.array(
        [
            [1.0, -0.5, 0.5, 0.0],
            [-0.5, 1.0, 0.0, 0.25],
            [0.5, 0.0, 1.0, -0.25],
            [0.0, 0.25, -0.25, 1.0],
        ],
        dtype=np.float32,
    )


@pytest.fixture
def fourway_labels() -> list:
    return ["A", "B", "C", "D"]
