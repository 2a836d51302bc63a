#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
运行 ATria（Ablatio Triadum）中心性：
- 读取相关性表 CSV（第一列行名，表头为节点名）
- 可选 --signed-pairs：把 NxN 有符号表展开成 2Nx2N 配对编码
- 导出 NOA（Name/Centrality/Rank），可选 GEXF（节点属性 centrality/rank）
环境变量 ATRIA_PARTITION_SIZE / ATRIA_WORKERS 可改默认值。
"""
from __future__ import annotations
import os, argparse, sys, time
sys.path.append(os.path.join(os.path.dirname(__file__), ".."))
from atria.engine import init_state, run_engine  # type: ignore
from atria.loaders import load_table  # type: ignore
from atria.matrix import expand_signed_pairs  # type: ignore
from atria.report import write_noa, write_gexf  # type: ignore


def _env_int(name: str, default):
    v = os.environ.get(name)
    return int(v) if v not in (None, "") else default


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="ATria centrality for signed, weighted networks")
    ap.add_argument("--input", required=True, help="NxN correlation table (CSV)")
    ap.add_argument("--output", default=None, help="NOA report path (default: <input>.noa)")
    ap.add_argument("--gexf", default=None, help="also write graph with centrality attributes")
    ap.add_argument("--partition-size", type=int, default=_env_int("ATRIA_PARTITION_SIZE", 25))
    ap.add_argument("--workers", type=int, default=_env_int("ATRIA_WORKERS", None))
    ap.add_argument("--max-rounds", type=int, default=None)
    ap.add_argument("--signed-pairs", action="store_true")
    ap.add_argument("--quiet", action="store_true")
    return ap


def main(argv=None):
    args = build_parser().parse_args(argv)
    verbose = not args.quiet
    out_noa = args.output or os.path.splitext(args.input)[0] + ".noa"

    labels, W = load_table(args.input)
    if verbose:
        print(f"[read] table nodes={len(labels)} file={args.input}")
    if args.signed_pairs:
        W, labels = expand_signed_pairs(W, labels)
        if verbose:
            print(f"[read] signed pairs -> {W.shape[0]}x{W.shape[1]}")

    t0 = time.time()
    state = run_engine(
        init_state(W, labels, max_rounds=args.max_rounds),
        partition_size=args.partition_size,
        max_workers=args.workers,
        verbose=verbose,
    )
    if verbose:
        print(f"[atria] {state.phase.value} after {state.round} rounds ({time.time()-t0:.1f}s)")

    write_noa(out_noa, state.output, list(state.labels))
    if verbose:
        print(f"[ok] write noa  -> {out_noa}")
    if args.gexf:
        write_gexf(args.gexf, W, list(state.labels), state.output)
        if verbose:
            print(f"[ok] write gexf -> {args.gexf}")
    return state


if __name__ == "__main__":
    main()
