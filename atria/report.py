# atria/report.py
from __future__ import annotations
import os
from typing import Sequence
import numpy as np, networkx as nx

from .engine import rank_scores

NOA_HEADER = "Name\tCentrality\tRank\n"


def format_centrality(x) -> str:
    """float32 的最短十进制写法，不用科学计数法：2.0 -> '2'，0.5 -> '0.5'。"""
    return np.format_float_positional(np.float32(x), trim="-")


def render_noa(scores, labels: Sequence[str]) -> str:
    """
    NOA（Cytoscape 节点属性）文本：
      Name<TAB>Centrality<TAB>Rank
      label<TAB>|score|<TAB><TAB>rank
    按 |score| 降序，rank = N - 行号。
    Centrality 与 Rank 之间的双 TAB 沿用旧报告格式；早期的报告文件少了最后一行，这里 N 行全部写出。
    """
    s, names = rank_scores(scores, labels)
    n = len(names)
    lines = [NOA_HEADER]
    for i, (name, v) in enumerate(zip(names, s)):
        lines.append(f"{name}\t{format_centrality(np.abs(v))}\t\t{n - i}\n")
    return "".join(lines)


def write_noa(path: str, scores, labels: Sequence[str]) -> str:
    d = os.path.dirname(os.path.abspath(path))
    os.makedirs(d, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(render_noa(scores, labels))
    return path


def to_networkx(weights, labels: Sequence[str], scores) -> nx.Graph:
    """
    原始加权图 + 中心性节点属性（centrality=|score|，rank 同 NOA）。
    只保留非对角的非零边；(i,j) 为 0 时取 (j,i) 的权重。
    """
    W = np.asarray(weights, dtype=np.float32)
    s = np.asarray(scores, dtype=np.float32)
    n = W.shape[0]
    if len(labels) != n or s.shape[0] != n:
        raise ValueError(f"labels={len(labels)} scores={s.shape[0]} for a {n}x{n} matrix")

    order = np.argsort(-np.abs(s), kind="stable")
    rank = np.empty(n, dtype=int)
    rank[order] = n - np.arange(n)

    G = nx.Graph()
    for i, name in enumerate(labels):
        G.add_node(str(name), index=int(i), centrality=float(abs(s[i])), rank=int(rank[i]))
    rows, cols = np.nonzero(np.triu((W != 0) | (W.T != 0), k=1))
    for i, j in zip(rows, cols):
        w = W[i, j] if W[i, j] != 0 else W[j, i]
        G.add_edge(str(labels[i]), str(labels[j]), weight=float(w))
    return G


def write_gexf(path: str, weights, labels: Sequence[str], scores) -> str:
    G = to_networkx(weights, labels, scores)
    d = os.path.dirname(os.path.abspath(path))
    os.makedirs(d, exist_ok=True)
    nx.write_gexf(G, path)
    return path
