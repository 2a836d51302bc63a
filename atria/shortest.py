# atria/shortest.py
"""
单源最短路（贪心版 Dijkstra），作为松弛规则的参照夹具。
- inf 表示无边
- 每次取“未处理且距离 <= 当前最小值”的最后一个节点，共 n-1 轮
允许负权；结果就是这个贪心过程给出的值，不保证是真正的最短路。
"""
from __future__ import annotations
import numpy as np


def _min_distance(dist: np.ndarray, processed: np.ndarray) -> int:
    best, index = np.inf, 0
    for v in range(dist.shape[0]):
        if not processed[v] and dist[v] <= best:
            best, index = dist[v], v
    return index


def dijkstra(graph, source: int) -> np.ndarray:
    G = np.asarray(graph, dtype=np.float32)
    n = G.shape[0]
    if G.ndim != 2 or G.shape[1] != n:
        raise ValueError(f"graph must be square, got shape={G.shape}")
    assert 0 <= source < n, f"source={source} out of range for n={n}"

    dist = np.full(n, np.inf, dtype=np.float32)
    processed = np.zeros(n, dtype=bool)
    dist[source] = 0.0
    for _ in range(n - 1):
        u = _min_distance(dist, processed)
        processed[u] = True
        for v in range(n):
            w = G[u, v]
            if not processed[v] and w != np.inf and dist[u] + w < dist[v]:
                dist[v] = dist[u] + w
    return dist


def all_sources(graph) -> np.ndarray:
    """每个源点一行。"""
    G = np.asarray(graph, dtype=np.float32)
    return np.vstack([dijkstra(G, s) for s in range(G.shape[0])]) if G.shape[0] else np.zeros((0, 0), np.float32)
