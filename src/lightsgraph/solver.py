from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from .algebra import (
    build_influence_matrix,
    gf2_min_weight,
    gf2_rank,
    gf2_solve_with_nullspace,
    target_vector,
)
from .graph import Goal, GraphSnapshot

logger = logging.getLogger(__name__)

MSG_NO_NODES = "No nodes to solve."
MSG_NO_SOLUTION = "Failed: No solution exists."
MSG_UNIQUE = "Success: Unique solution found."
MSG_ARBITRARY = "Success: Arbitrary solution found."
MSG_MIN_MOVE = "Success: Min-Move solution found."
MSG_SOLVING = "Solving..."


class AlgorithmType(str, Enum):
    ANY = "any"
    MIN_WEIGHT = "min_weight"


def parse_algorithm(value) -> AlgorithmType:
    try:
        return AlgorithmType(value)
    except ValueError:
        raise ValueError(f"Unknown algorithm: {value!r}") from None


def parse_goal(value) -> Goal:
    try:
        return Goal(value)
    except ValueError:
        raise ValueError(f"Unknown goal: {value!r}") from None


@dataclass(frozen=True)
class MatrixInfo:
    n: int = 0
    k: int = 0

    @property
    def rank(self) -> int:
        return self.n - self.k

    def complexity_label(self) -> str:
        """Cost of a min-weight solve on this matrix, as shown to the player."""
        return f"O(n^3 + n*2^k) with n={self.n}, k={self.k}"


@dataclass(frozen=True)
class SolutionReport:
    # None while a solve is still running
    has_solution: Optional[bool] = None
    nodes_to_press: Tuple[str, ...] = ()
    message: str = ""

    @property
    def weight(self) -> int:
        return len(self.nodes_to_press)


def compute_matrix_info(graph: GraphSnapshot) -> MatrixInfo:
    """Node count and nullity of the graph's influence matrix."""
    N = len(graph.nodes)
    if N == 0:
        return MatrixInfo(0, 0)
    A = build_influence_matrix(graph.node_ids, graph.edges)
    rank = gf2_rank(A)
    logger.debug("matrix info: n=%d rank=%d", N, rank)
    return MatrixInfo(N, N - rank)


def _presses(node_ids: list[str], x: np.ndarray) -> Tuple[str, ...]:
    return tuple(nid for nid, bit in zip(node_ids, x) if bit)


def compute_solution(
    graph: GraphSnapshot,
    algorithm: AlgorithmType = AlgorithmType.MIN_WEIGHT,
    goal: Goal = Goal.ON,
) -> SolutionReport:
    """Solve the puzzle on `graph`.

    "any" returns the particular solution, "min_weight" searches the null
    space for the press set with fewest presses. A unique solution is
    reported as such regardless of the algorithm.
    """
    algorithm = parse_algorithm(algorithm)
    goal = parse_goal(goal)
    N = len(graph.nodes)
    if N == 0:
        return SolutionReport(False, (), MSG_NO_NODES)

    node_ids = graph.node_ids
    A = build_influence_matrix(node_ids, graph.edges)
    b = target_vector(graph.nodes, goal)
    x0, basis, ok = gf2_solve_with_nullspace(A, b)
    if not ok or x0 is None:
        logger.debug("no solution for n=%d", N)
        return SolutionReport(False, (), MSG_NO_SOLUTION)

    if not basis:
        return SolutionReport(True, _presses(node_ids, x0), MSG_UNIQUE)

    if algorithm is AlgorithmType.ANY:
        return SolutionReport(True, _presses(node_ids, x0), MSG_ARBITRARY)

    logger.debug("min-weight search over 2^%d combinations", len(basis))
    best = gf2_min_weight(x0, basis)
    return SolutionReport(True, _presses(node_ids, best), MSG_MIN_MOVE)
