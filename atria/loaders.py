# atria/loaders.py
from __future__ import annotations
import os
from typing import List, Tuple
import numpy as np, pandas as pd


def load_table(path: str) -> Tuple[List[str], np.ndarray]:
    """
    读取相关性表（CSV）：
      - 第一列是行名，表头（去掉第一格）是节点标签
      - 必须是 NxN，行名与表头一致且不重复，没有空值
      - 对角线统一写成 1（payoff 里的 -1 抵消的就是它）
    返回 (labels, float32 NxN)。
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"input table not found: {path}")
    # header=None + dtype=str：表头原样保留（read_csv 会把重复列名改成 A.1）
    raw = pd.read_csv(path, header=None, dtype=str, keep_default_na=False)
    labels = [str(c) for c in raw.iloc[0, 1:]]
    rows = [str(r) for r in raw.iloc[1:, 0]]
    body = raw.iloc[1:, 1:]
    n_rows, n_cols = body.shape
    if n_rows != n_cols:
        raise ValueError(f"table must be square: {n_rows} rows x {n_cols} columns in {path}")

    dup = pd.Index(labels)[pd.Index(labels).duplicated()].unique().tolist()
    if dup:
        raise ValueError(f"duplicate column labels in {path}: {dup[:5]}")
    if rows != labels:
        bad = [(r, c) for r, c in zip(rows, labels) if r != c][:5]
        raise ValueError(f"row names do not match column labels in {path}, e.g. {bad}")

    # 拿一份自己的数组：pandas 的 copy-on-write 下 to_numpy 可能是只读视图
    num = body.apply(pd.to_numeric, errors="coerce")
    W = np.array(num.to_numpy(dtype=np.float64, na_value=np.nan), dtype=np.float32)
    if np.isnan(W).any():
        bad = [(labels[i], labels[j]) for i, j in np.argwhere(np.isnan(W))[:5]]
        raise ValueError(f"{int(np.isnan(W).sum())} empty or non-numeric cells in {path}, e.g. {bad}")
    np.fill_diagonal(W, 1.0)
    return labels, W
