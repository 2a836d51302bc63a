# atria/closure.py
from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Tuple
import numpy as np

DEFAULT_PARTITION_SIZE = 25


def partitions(n: int, partition_size: int = DEFAULT_PARTITION_SIZE) -> List[Tuple[int, int]]:
    """把 0..n 切成宽度 partition_size 的连续块，最后一块可以更短。"""
    if partition_size < 1:
        raise ValueError(f"partition_size must be >= 1, got {partition_size}")
    return [(lo, min(lo + partition_size, n)) for lo in range(0, n, partition_size)]


def relax_block(block: np.ndarray, offset: int = 0) -> np.ndarray:
    """
    块内的修正 Floyd–Warshall（在私有副本上做，返回新数组）：

        for k, i, j in block:
            if i != j and j != k:
                c = M[i,k] * M[k,j]
                (i+j) 偶数且 M[i,j] < c -> M[i,j] = c
                (i+j) 奇数且 M[i,j] > c -> M[i,j] = c

    对每个 k 按行向量化。第 k 行只会在 i == k 时被改写，
    所以按 i<k / i==k / i>k 三段依次更新，与逐元素的顺序完全一致。
    offset 是块在全局中的起始下标（奇偶按全局下标算）。
    """
    M = np.array(block, dtype=np.float32)
    n = M.shape[0]
    idx = np.arange(offset, offset + n)
    even = (idx[:, None] + idx[None, :]) % 2 == 0
    off_diag = ~np.eye(n, dtype=bool)

    with np.errstate(over="ignore", invalid="ignore"):
        for k in range(n):
            valid = off_diag.copy()
            valid[:, k] = False
            for rows in (slice(0, k), slice(k, k + 1), slice(k + 1, n)):
                cur = M[rows]
                if cur.shape[0] == 0:
                    continue
                cand = np.multiply.outer(M[rows, k], M[k])
                ev = even[rows]
                upd = valid[rows] & ((ev & (cur < cand)) | (~ev & (cur > cand)))
                M[rows] = np.where(upd, cand, cur)
    return M


def closure(
    matrix: np.ndarray,
    partition_size: int = DEFAULT_PARTITION_SIZE,
    *,
    max_workers: Optional[int] = None,
) -> np.ndarray:
    """
    分块闭包：每个对角块各自松弛（块之间不合并），
    各块在独立副本上并行计算，全部完成后按下标范围写回。
    块外的格子原样保留。
    """
    A = np.asarray(matrix, dtype=np.float32)
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise ValueError(f"closure expects a square matrix, got shape={A.shape}")
    n = A.shape[0]
    out = A.copy()
    parts = partitions(n, partition_size)
    if not parts:
        return out

    def _run(bounds: Tuple[int, int]) -> np.ndarray:
        lo, hi = bounds
        return relax_block(A[lo:hi, lo:hi], offset=lo)

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        # map 按提交顺序返回，写回顺序固定
        for (lo, hi), block in zip(parts, pool.map(_run, parts)):
            out[lo:hi, lo:hi] = block
    return out
