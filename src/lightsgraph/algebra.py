from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .graph import Edge, Goal, Node

logger = logging.getLogger(__name__)

# masks evaluated per numpy batch in the min-weight search
MIN_WEIGHT_CHUNK = 4096


def build_influence_matrix(
    node_ids: Sequence[str], edges: Iterable[Edge]
) -> np.ndarray:
    """Return the n×n influence matrix A = I + Adjacency over GF(2).

    Column j encodes the nodes toggled when pressing node j. Edges whose
    endpoints are not in `node_ids` are ignored.
    """
    N = len(node_ids)
    A = np.eye(N, dtype=np.uint8)  # use 0/1 ints for XOR via mod2
    idx = {nid: i for i, nid in enumerate(node_ids)}
    for edge in edges:
        u = idx.get(edge.source)
        v = idx.get(edge.target)
        if u is None or v is None:
            continue
        A[u, v] = 1
        A[v, u] = 1
    return A


def target_vector(nodes: Sequence[Node], goal: Goal = Goal.ON) -> np.ndarray:
    """Toggle parity each node still needs: 1 where `on` differs from the goal."""
    want = Goal(goal) is Goal.ON
    return np.array([int(node.on != want) for node in nodes], dtype=np.uint8)


def _check_square(A: np.ndarray) -> None:
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise ValueError(f"Expected a square matrix, got shape {A.shape}")


def gf2_matvec(A: np.ndarray, x: np.ndarray) -> np.ndarray:
    """A·x over GF(2)."""
    A = np.asarray(A, dtype=np.int64) % 2
    x = np.asarray(x, dtype=np.int64) % 2
    return ((A @ x) % 2).astype(np.uint8)


def gf2_rank(A: np.ndarray) -> int:
    """Rank of A over GF(2) by forward elimination (no back-substitution)."""
    A = (np.asarray(A) % 2).astype(np.uint8)
    _check_square(A)
    M = A.copy()
    n = M.shape[0]
    rank = 0
    for col in range(n):
        if rank == n:
            break
        hits = np.flatnonzero(M[rank:, col])
        if hits.size == 0:
            # free column, contributes to nullity
            continue
        pivot = rank + int(hits[0])
        if pivot != rank:
            M[[rank, pivot]] = M[[pivot, rank]]
        below = rank + 1 + np.flatnonzero(M[rank + 1 :, col])
        M[below, :] ^= M[rank, :]
        rank += 1
    return rank


def gf2_nullity(A: np.ndarray) -> int:
    return int(np.asarray(A).shape[0]) - gf2_rank(A)


def gf2_rref_augmented(
    A: np.ndarray, b: np.ndarray
) -> Tuple[np.ndarray, list[int]]:
    """Return RREF of augmented matrix [A|b] over GF(2) and list of pivot columns.

    Only the n coefficient columns are used as pivots; the last column just
    follows the row operations.
    """
    A = (np.asarray(A) % 2).astype(np.uint8)
    _check_square(A)
    b = (np.asarray(b) % 2).astype(np.uint8).reshape(-1, 1)
    n = A.shape[0]
    if b.shape[0] != n:
        raise ValueError(f"Expected target of length {n}, got {b.shape[0]}")
    M = np.concatenate([A.copy(), b.copy()], axis=1)  # shape (n, n+1)

    row = 0
    pivcols: list[int] = []
    for col in range(n):
        if row == n:
            break
        # find a pivot in/under current row
        hits = np.flatnonzero(M[row:, col])
        if hits.size == 0:
            continue
        pivot = row + int(hits[0])
        # swap pivot row up
        if pivot != row:
            M[[row, pivot]] = M[[pivot, row]]
        # eliminate ALL other rows (Gauss-Jordan)
        others = np.flatnonzero(M[:, col])
        others = others[others != row]
        M[others, :] ^= M[row, :]
        pivcols.append(col)
        row += 1
    return M, pivcols


def gf2_solve_with_nullspace(
    A: np.ndarray, b: np.ndarray
) -> Tuple[Optional[np.ndarray], List[np.ndarray], bool]:
    """Solve A x = b over GF(2), and return a nullspace basis of A.

    Returns:
        x0: one particular solution (length n, uint8) or None if inconsistent
        basis: list of nullspace basis vectors v (length n, uint8) with A v = 0
        solvable: bool
    """
    R, pivcols = gf2_rref_augmented(A, b)  # R is [RREF(A) | r]
    n = R.shape[0]
    rank = len(pivcols)
    R_A = R[:, :n]
    R_b = R[:, n]

    # Inconsistency check: 0...0 | 1 rows below the pivots
    if np.any(R_b[rank:]):
        logger.debug("inconsistent system: n=%d rank=%d", n, rank)
        return None, [], False

    # Particular solution: free vars = 0, pivot vars read off the RREF
    x0 = np.zeros((n,), dtype=np.uint8)
    for ri, pc in enumerate(pivcols):
        x0[pc] = R_b[ri]

    # Nullspace basis: one vector per free column f, with x_f = 1
    pivset = set(pivcols)
    frees = [j for j in range(n) if j not in pivset]
    basis: list[np.ndarray] = []
    for f in frees:
        v = np.zeros((n,), dtype=np.uint8)
        v[f] = 1
        for ri, pc in enumerate(pivcols):
            if R_A[ri, f]:
                v[pc] = 1
        basis.append(v)

    logger.debug("solved: n=%d rank=%d free=%d", n, rank, len(frees))
    return x0, basis, True


def gf2_min_weight(
    x0: np.ndarray,
    basis: Sequence[np.ndarray],
    chunk_size: int = MIN_WEIGHT_CHUNK,
) -> np.ndarray:
    """Lightest vector of the form x0 XOR (any subset of `basis`).

    Masks are visited in increasing order and a candidate only replaces the
    current best when strictly lighter, so the earliest minimum wins. The
    search is exhaustive over 2^k masks and is not capped.
    """
    x0 = (np.asarray(x0) % 2).astype(np.uint8)
    if len(basis) == 0:
        return x0.copy()

    B = np.asarray(basis, dtype=np.int64) % 2  # shape (k, n)
    k = B.shape[0]
    shifts = np.arange(k, dtype=np.int64)
    total = 1 << k

    best = x0.copy()
    best_w = int(best.sum())
    for lo in range(0, total, chunk_size):
        masks = np.arange(lo, min(lo + chunk_size, total), dtype=np.int64)
        bits = (masks[:, None] >> shifts) & 1  # shape (chunk, k)
        cands = ((bits @ B) % 2).astype(np.uint8) ^ x0
        weights = cands.sum(axis=1)
        i = int(np.argmin(weights))
        if weights[i] < best_w:
            best, best_w = cands[i].copy(), int(weights[i])
    return best


def gf2_min_weight_solution(
    A: np.ndarray, b: np.ndarray
) -> Tuple[Optional[np.ndarray], bool]:
    """Return the minimum-Hamming-weight solution to A x = b (if solvable)."""
    x0, basis, ok = gf2_solve_with_nullspace(A, b)
    if not ok or x0 is None:
        return None, False
    return gf2_min_weight(x0, basis), True
