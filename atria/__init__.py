# atria/__init__.py
from .matrix import MatrixStore, expand_signed_pairs, pair_of, ABSENT, PRESENT, REMOVED, SENTINEL
from .closure import closure, relax_block, partitions, DEFAULT_PARTITION_SIZE
from .payoff import payoffs, select_max, is_converged
from .triad import remove_triads, triad_cells
from .engine import EngineState, Phase, RoundRecord, init_state, step, run_engine, rank_scores, run_atria
from .shortest import dijkstra, all_sources
from .loaders import load_table
from .report import format_centrality, render_noa, write_noa, to_networkx, write_gexf
