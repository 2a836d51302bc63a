# atria/matrix.py
from __future__ import annotations
import math
from typing import List, Sequence, Tuple
import numpy as np

# 每个格子的状态：无边 / 有边 / 已被三元组删除
ABSENT, PRESENT, REMOVED = 0, 1, 2

# get() 对已删除格子返回的值；合法权重只能是有限 float32，所以不会撞车
SENTINEL = math.inf


def pair_of(node: int, n: int) -> Tuple[int, ...]:
    """符号配对：(2k, 2k+1)，越界的成员去掉。"""
    lo = node & ~1
    return tuple(i for i in (lo, lo | 1) if i < n)


class MatrixStore:
    """
    稠密 NxN 邻接矩阵（float32 权重 + uint8 状态）。
    - 权重 0 表示无边
    - 删除用状态位 REMOVED 表示，不占用数值域
    - 尺寸在构造后不再改变
    """

    def __init__(self, weights, state=None):
        W = np.array(weights, dtype=np.float32)
        if W.ndim != 2 or W.shape[0] != W.shape[1]:
            raise ValueError(f"adjacency matrix must be square, got shape={W.shape}")
        if not np.isfinite(W).all():
            bad = np.argwhere(~np.isfinite(W))[:5].tolist()
            raise ValueError(f"adjacency matrix has non-finite weights, e.g. cells {bad}")
        if state is None:
            S = np.where(W != 0, PRESENT, ABSENT).astype(np.uint8)
        else:
            S = np.array(state, dtype=np.uint8)
            if S.shape != W.shape:
                raise ValueError(f"state shape {S.shape} != weights shape {W.shape}")
        self._w = W
        self._s = S

    def size(self) -> int:
        return int(self._w.shape[0])

    def __len__(self) -> int:
        return self.size()

    def _check(self, i: int, j: int) -> None:
        n = self.size()
        assert 0 <= i < n and 0 <= j < n, f"cell ({i}, {j}) out of range for n={n}"

    def get(self, i: int, j: int) -> float:
        self._check(i, j)
        if self._s[i, j] == REMOVED:
            return SENTINEL
        return float(self._w[i, j])

    def set(self, i: int, j: int, weight: float) -> None:
        """写一个格子；weight=SENTINEL 表示标记删除，0 表示无边。"""
        self._check(i, j)
        if weight == SENTINEL:
            self._w[i, j] = 0.0
            self._s[i, j] = REMOVED
            return
        if not math.isfinite(weight):
            raise ValueError(f"weight must be finite or SENTINEL, got {weight}")
        self._w[i, j] = weight
        self._s[i, j] = PRESENT if weight != 0 else ABSENT

    def snapshot(self) -> "MatrixStore":
        return MatrixStore(self._w, self._s)

    @property
    def state(self) -> np.ndarray:
        v = self._s.view()
        v.flags.writeable = False
        return v

    def count(self, tag: int) -> int:
        return int(np.count_nonzero(self._s == tag))

    def dense(self) -> np.ndarray:
        """闭包计算用的数值矩阵：只有 PRESENT 的格子带权重。"""
        return np.where(self._s == PRESENT, self._w, np.float32(0.0)).astype(np.float32)

    def mark_removed(self, rows, cols) -> int:
        """把 (rows[k], cols[k]) 标记为删除，返回此前为 PRESENT 的格子数。"""
        rows = np.asarray(rows, dtype=np.intp)
        cols = np.asarray(cols, dtype=np.intp)
        if rows.size == 0:
            return 0
        n = self.size()
        flat = np.unique(np.ravel_multi_index((rows, cols), (n, n)))
        r, c = np.unravel_index(flat, (n, n))
        fresh = int(np.count_nonzero(self._s[r, c] == PRESENT))
        self._w[r, c] = 0.0
        self._s[r, c] = REMOVED
        return fresh

    def sweep_diagonal(self) -> int:
        """对角线只是工作区：REMOVED 的对角格恢复为 ABSENT。"""
        d = np.flatnonzero(np.diagonal(self._s) == REMOVED)
        self._s[d, d] = ABSENT
        return int(d.size)


def expand_signed_pairs(weights, labels: Sequence[str]) -> Tuple[np.ndarray, List[str]]:
    """
    NxN 有符号表 -> 2Nx2N 配对编码：
      - w>0: (2a,2b) 与 (2a+1,2b+1)
      - w<0: (2a+1,2b) 与 (2a,2b+1)
      - 对角线为 1
    标签变为 name+ / name-。
    """
    W = np.asarray(weights, dtype=np.float32)
    n = W.shape[0]
    if W.ndim != 2 or W.shape[1] != n:
        raise ValueError(f"signed table must be square, got shape={W.shape}")
    if len(labels) != n:
        raise ValueError(f"{len(labels)} labels for a {n}x{n} table")
    off = ~np.eye(n, dtype=bool)
    pos = np.where(off & (W > 0), W, np.float32(0.0))
    neg = np.where(off & (W < 0), W, np.float32(0.0))
    G = np.zeros((2 * n, 2 * n), dtype=np.float32)
    G[0::2, 0::2] = pos
    G[1::2, 1::2] = pos
    G[1::2, 0::2] = neg
    G[0::2, 1::2] = neg
    np.fill_diagonal(G, 1.0)
    out_labels: List[str] = []
    for name in labels:
        out_labels += [f"{name}+", f"{name}-"]
    return G, out_labels
