# atria/engine.py
from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional, Sequence, Tuple
import numpy as np

from .closure import DEFAULT_PARTITION_SIZE, closure
from .matrix import MatrixStore
from .payoff import is_converged, payoffs, select_max
from .triad import remove_triads


class Phase(str, Enum):
    READY = "ready"
    ITERATING = "iterating"
    CONVERGED = "converged"
    EXHAUSTED = "exhausted"


TERMINAL = (Phase.CONVERGED, Phase.EXHAUSTED)


@dataclass(frozen=True)
class RoundRecord:
    round: int
    node: int
    payoff: float
    removed: int


@dataclass(frozen=True)
class EngineState:
    """
    一轮迭代的完整状态。step() 返回新的 EngineState，旧状态（包括其矩阵）保持不变。
      - output[i] 只在 i 第一次被选中时写入
      - max_rounds 默认为 N
    """
    store: MatrixStore
    labels: Tuple[str, ...]
    output: np.ndarray
    scored: np.ndarray
    max_rounds: int
    round: int = 0
    phase: Phase = Phase.READY
    history: Tuple[RoundRecord, ...] = field(default=())

    @property
    def size(self) -> int:
        return self.store.size()

    @property
    def done(self) -> bool:
        return self.phase in TERMINAL


def init_state(matrix, labels: Sequence[str], *, max_rounds: Optional[int] = None) -> EngineState:
    store = matrix.snapshot() if isinstance(matrix, MatrixStore) else MatrixStore(matrix)
    n = store.size()
    if len(labels) != n:
        raise ValueError(f"{len(labels)} labels for a {n}x{n} matrix")
    if max_rounds is None:
        max_rounds = n
    if max_rounds < 0:
        raise ValueError(f"max_rounds must be >= 0, got {max_rounds}")
    return EngineState(
        store=store,
        labels=tuple(str(x) for x in labels),
        output=np.zeros(n, dtype=np.float32),
        scored=np.zeros(n, dtype=bool),
        max_rounds=int(max_rounds),
    )


def step(
    state: EngineState,
    *,
    partition_size: int = DEFAULT_PARTITION_SIZE,
    max_workers: Optional[int] = None,
    verbose: bool = False,
) -> EngineState:
    """闭包 -> payoff -> 记分 -> 删除三元组，推进一轮。"""
    if state.done:
        return state
    if state.round >= state.max_rounds:
        if verbose:
            print(f"[atria] exhausted after {state.round} rounds")
        return replace(state, phase=Phase.EXHAUSTED)

    live = state.store.snapshot()
    H = closure(live.dense(), partition_size, max_workers=max_workers)
    node, value = select_max(payoffs(H))
    r = state.round + 1

    if is_converged(value):
        if verbose:
            print(f"[atria] round={r} max |payoff| = 0, converged")
        return replace(state, round=r, phase=Phase.CONVERGED)

    output, scored = state.output, state.scored
    rescored = bool(scored[node])
    if not rescored:
        output = output.copy(); scored = scored.copy()
        output[node] = value
        scored[node] = True

    removed = remove_triads(live, node, partition_size, max_workers=max_workers)
    rec = RoundRecord(round=r, node=node, payoff=float(value), removed=removed)
    if verbose:
        print(f"[atria] round={r} node={node} ({state.labels[node]}) payoff={float(value):.6g} removed={removed}")

    # 重复选中且没有新删除的边：矩阵不再变化，之后每轮结果都一样
    phase = Phase.CONVERGED if (rescored and removed == 0) else Phase.ITERATING
    if phase is Phase.CONVERGED and verbose:
        print(f"[atria] round={r} node={node} reselected with nothing left to remove, converged")
    return replace(
        state,
        store=live,
        output=output,
        scored=scored,
        round=r,
        phase=phase,
        history=state.history + (rec,),
    )


def run_engine(
    state: EngineState,
    *,
    partition_size: int = DEFAULT_PARTITION_SIZE,
    max_workers: Optional[int] = None,
    verbose: bool = False,
) -> EngineState:
    while not state.done:
        state = step(state, partition_size=partition_size, max_workers=max_workers, verbose=verbose)
    return state


def rank_scores(scores, labels: Sequence[str]) -> Tuple[np.ndarray, List[str]]:
    """按 |score| 降序稳定排序，标签跟着一起排。"""
    s = np.asarray(scores, dtype=np.float32)
    if len(labels) != s.shape[0]:
        raise ValueError(f"{len(labels)} labels for {s.shape[0]} scores")
    order = np.argsort(-np.abs(s), kind="stable")
    return s[order], [labels[i] for i in order]


def run_atria(
    matrix,
    labels: Sequence[str],
    *,
    partition_size: int = DEFAULT_PARTITION_SIZE,
    max_workers: Optional[int] = None,
    max_rounds: Optional[int] = None,
    verbose: bool = False,
) -> Tuple[np.ndarray, List[str]]:
    """
    入口：run(initial_matrix, labels) -> (scores, labels)，两者按排名顺序。
    需要逐节点分数或迭代历史时直接用 init_state / run_engine。
    """
    state = run_engine(
        init_state(matrix, labels, max_rounds=max_rounds),
        partition_size=partition_size,
        max_workers=max_workers,
        verbose=verbose,
    )
    if verbose:
        print(f"[atria] {state.phase.value} after {state.round} rounds, scored {int(state.scored.sum())}/{state.size} nodes")
    return rank_scores(state.output, list(state.labels))
