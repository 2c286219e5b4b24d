"""
lightsgraph: Lights Out on arbitrary graphs, solved exactly over GF(2).
"""

from .algebra import (
    build_influence_matrix,
    gf2_matvec,
    gf2_min_weight,
    gf2_min_weight_solution,
    gf2_nullity,
    gf2_rank,
    gf2_rref_augmented,
    gf2_solve_with_nullspace,
    target_vector,
)
from .config import SolverConfig, load_config, load_puzzle, puzzle_from_dict
from .graph import Edge, Goal, GraphSnapshot, Node
from .session import SolverSession
from .solver import (
    AlgorithmType,
    MatrixInfo,
    SolutionReport,
    compute_matrix_info,
    compute_solution,
)

__all__ = [
    # Graph
    "Node",
    "Edge",
    "Goal",
    "GraphSnapshot",
    # Algebra
    "build_influence_matrix",
    "target_vector",
    "gf2_matvec",
    "gf2_rank",
    "gf2_nullity",
    "gf2_rref_augmented",
    "gf2_solve_with_nullspace",
    "gf2_min_weight",
    "gf2_min_weight_solution",
    # Solver
    "AlgorithmType",
    "MatrixInfo",
    "SolutionReport",
    "compute_matrix_info",
    "compute_solution",
    # Session & config
    "SolverSession",
    "SolverConfig",
    "load_config",
    "load_puzzle",
    "puzzle_from_dict",
]
