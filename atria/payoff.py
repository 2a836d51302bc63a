# atria/payoff.py
from __future__ import annotations
from typing import Tuple
import numpy as np


def payoffs(H: np.ndarray) -> np.ndarray:
    """每个节点的 payoff = 行和 - 1（减掉对角线自项）。float32 从左到右累加。"""
    H = np.asarray(H, dtype=np.float32)
    if H.shape[1] == 0:
        return np.full(H.shape[0], -1.0, dtype=np.float32)
    # cumsum 是顺序累加；sum 在 numpy 里是 pairwise，结果末位可能不同
    rows = np.cumsum(H, axis=1, dtype=np.float32)[:, -1]
    return (rows - np.float32(1.0)).astype(np.float32)


def select_max(pay: np.ndarray) -> Tuple[int, np.float32]:
    """按 |payoff| 取最大节点；并列时取下标最小的，NaN 不参与。"""
    pay = np.asarray(pay, dtype=np.float32)
    if pay.size == 0:
        raise ValueError("empty payoff vector")
    mags = np.abs(pay)
    mags = np.where(np.isnan(mags), np.float32(-1.0), mags)
    node = int(np.argmax(mags))
    return node, pay[node]


def is_converged(value) -> bool:
    return bool(np.abs(np.float32(value)) == 0)
