# atria/triad.py
from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Tuple
import numpy as np

from .closure import DEFAULT_PARTITION_SIZE, partitions
from .matrix import ABSENT, MatrixStore, pair_of


def triad_cells(state: np.ndarray, max_node: int, bounds: Tuple[int, int]) -> Tuple[np.ndarray, np.ndarray]:
    """
    一个分块要删除的格子（只读 state，返回行/列下标）：
      - 外层 i 在 [lo, hi) 内，i 不属于 max_node 的配对，且与配对中任一成员相邻
      - 内层 j 扫全范围：j > i 且满足同样条件、(i,j) 有边 -> 删 (i,j) 与 (j,i)
      - 配对成员与 i 之间的直连边，两个方向都删
    相邻指状态不是 ABSENT（已删除的边仍算相邻）。
    """
    n = state.shape[0]
    lo, hi = bounds
    pair = list(pair_of(max_node, n))
    cols = np.arange(n)
    adj = (state[pair] != ABSENT).any(axis=0)
    eligible = adj & (cols // 2 != max_node // 2)
    rows = cols[lo:hi][eligible[lo:hi]]
    if rows.size == 0:
        empty = np.empty(0, dtype=np.intp)
        return empty, empty

    hit = eligible[None, :] & (cols[None, :] > rows[:, None]) & (state[rows] != ABSENT)
    r, c = np.nonzero(hit)
    ii, jj = rows[r], cols[c]
    out_r, out_c = [ii, jj], [jj, ii]
    for p in pair:
        direct = rows[state[p, rows] != ABSENT]
        mate = np.full(direct.shape, p, dtype=np.intp)
        out_r += [mate, direct]
        out_c += [direct, mate]
    return np.concatenate(out_r).astype(np.intp), np.concatenate(out_c).astype(np.intp)


def remove_triads(
    store: MatrixStore,
    max_node: int,
    partition_size: int = DEFAULT_PARTITION_SIZE,
    *,
    max_workers: Optional[int] = None,
) -> int:
    """
    删除以 max_node 为中心的三元组（就地修改 store）。
    各分块并行读取同一份状态，汇合后统一写回，然后清理对角线。
    返回新删除的格子数。
    """
    n = store.size()
    assert 0 <= max_node < n, f"max_node={max_node} out of range for n={n}"
    state = store.state
    parts = partitions(n, partition_size)

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        found = list(pool.map(lambda b: triad_cells(state, max_node, b), parts))

    removed = 0
    if found:
        rows = np.concatenate([r for r, _ in found])
        cols = np.concatenate([c for _, c in found])
        removed = store.mark_removed(rows, cols)
    store.sweep_diagonal()
    return removed
