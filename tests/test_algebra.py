"""Tests for the GF(2) routines in lightsgraph.algebra."""
import itertools

import numpy as np
import pytest

from lightsgraph.algebra import (
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
from lightsgraph.graph import Edge, Goal, GraphSnapshot, Node


def _matrix(edges, n):
    """Helper: influence matrix for nodes 0..n-1 named by their index."""
    ids = [str(i) for i in range(n)]
    return build_influence_matrix(ids, [Edge(str(u), str(v)) for u, v in edges])


def _random_matrix(rng, n, p=0.4):
    edges = [(u, v) for u in range(n) for v in range(u + 1, n) if rng.random() < p]
    return _matrix(edges, n)


def _brute_force(A, b):
    """Every press vector x with A x = b, by exhaustive search."""
    n = A.shape[0]
    sols = []
    for bits in itertools.product([0, 1], repeat=n):
        x = np.array(bits, dtype=np.uint8)
        if np.array_equal(gf2_matvec(A, x), b):
            sols.append(x)
    return sols


def test_build_influence_matrix_symmetric_unit_diagonal():
    A = _matrix([(0, 1), (1, 2), (1, 2), (2, 1)], 4)
    assert A.dtype == np.uint8
    assert np.array_equal(A, A.T)
    assert np.all(np.diag(A) == 1)
    # repeated edges are idempotent
    assert A[1, 2] == 1
    assert A[0, 3] == 0
    assert int(A.sum()) == 4 + 4


def test_build_influence_matrix_ignores_self_loops_and_unknown_ids():
    A = build_influence_matrix(
        ["a", "b"], [Edge("a", "a"), Edge("a", "zz"), Edge("b", "a")]
    )
    assert A.tolist() == [[1, 1], [1, 1]]


def test_build_influence_matrix_empty():
    A = build_influence_matrix([], [])
    assert A.shape == (0, 0)
    assert gf2_rank(A) == 0


def test_target_vector_goals():
    nodes = [Node("a", on=True), Node("b", on=False)]
    assert target_vector(nodes, Goal.ON).tolist() == [0, 1]
    assert target_vector(nodes, Goal.OFF).tolist() == [1, 0]
    assert target_vector(nodes, "off").tolist() == [1, 0]


def test_gf2_rank_examples():
    assert gf2_rank(np.eye(3, dtype=np.uint8)) == 3
    assert gf2_rank(np.ones((3, 3), dtype=np.uint8)) == 1
    # path a-b-c is invertible
    assert gf2_rank(_matrix([(0, 1), (1, 2)], 3)) == 3


def test_gf2_rank_rejects_non_square():
    with pytest.raises(ValueError):
        gf2_rank(np.zeros((2, 3), dtype=np.uint8))


def test_classic_board_nullities():
    # well-known nullities of the n x n Lights Out board
    expected = {1: 0, 2: 0, 3: 0, 4: 4, 5: 2}
    for n, k in expected.items():
        g = GraphSnapshot.grid(n)
        A = build_influence_matrix(g.node_ids, g.edges)
        assert gf2_nullity(A) == k


def test_rref_is_reduced():
    rng = np.random.default_rng(7)
    for _ in range(10):
        A = _random_matrix(rng, 7)
        b = rng.integers(0, 2, size=7, dtype=np.uint8)
        M, pivcols = gf2_rref_augmented(A, b)
        for ri, pc in enumerate(pivcols):
            column = M[:, pc]
            assert column[ri] == 1
            assert int(column.sum()) == 1
        assert pivcols == sorted(pivcols)


def test_rref_length_mismatch():
    with pytest.raises(ValueError):
        gf2_rref_augmented(np.eye(3, dtype=np.uint8), np.zeros(2, dtype=np.uint8))


def test_solve_with_nullspace_matches_brute_force():
    rng = np.random.default_rng(123)
    for _ in range(25):
        n = int(rng.integers(1, 8))
        A = _random_matrix(rng, n)
        b = rng.integers(0, 2, size=n, dtype=np.uint8)
        x0, basis, ok = gf2_solve_with_nullspace(A, b)
        sols = _brute_force(A, b)

        assert ok == bool(sols)
        if ok:
            # rank/nullity consistency
            assert len(basis) == gf2_nullity(A)
            for v in basis:
                assert not gf2_matvec(A, v).any()
            assert np.array_equal(gf2_matvec(A, x0), b)
            # the affine space has exactly 2^k elements
            assert len(sols) == 2 ** len(basis)
        else:
            assert x0 is None
            assert basis == []
            # the homogeneous system is always solvable and carries the basis
            _, null_basis, null_ok = gf2_solve_with_nullspace(
                A, np.zeros(n, dtype=np.uint8)
            )
            assert null_ok
            assert len(null_basis) == gf2_nullity(A)
            for v in null_basis:
                assert not gf2_matvec(A, v).any()


def test_inconsistent_system_returns_empty_basis():
    # one lit, one dark, joined by an edge: nullity 1 but no solution
    A = _matrix([(0, 1)], 2)
    x0, basis, ok = gf2_solve_with_nullspace(A, np.array([1, 0], dtype=np.uint8))
    assert not ok
    assert x0 is None
    assert basis == []
    assert gf2_nullity(A) == 1


def test_nullspace_basis_independent():
    g = GraphSnapshot.grid(4)
    A = build_influence_matrix(g.node_ids, g.edges)
    _, basis, ok = gf2_solve_with_nullspace(A, np.zeros(16, dtype=np.uint8))
    assert ok
    assert len(basis) == 4
    # pad the 4 x 16 basis with zero rows so the square routine applies
    square = np.zeros((16, 16), dtype=np.uint8)
    square[:4, :] = np.array(basis)
    assert gf2_rank(square) == 4


def test_min_weight_no_basis_returns_copy():
    x0 = np.array([1, 0, 1], dtype=np.uint8)
    best = gf2_min_weight(x0, [])
    assert best.tolist() == [1, 0, 1]
    best[0] = 0
    assert x0[0] == 1


def test_min_weight_first_seen_wins_ties():
    x0 = np.array([1, 0], dtype=np.uint8)
    best = gf2_min_weight(x0, [np.array([1, 1], dtype=np.uint8)])
    # [1, 0] and [0, 1] weigh the same; mask 0 comes first
    assert best.tolist() == [1, 0]


def test_min_weight_matches_brute_force():
    rng = np.random.default_rng(2024)
    for _ in range(25):
        n = int(rng.integers(1, 9))
        A = _random_matrix(rng, n, p=0.6)
        b = rng.integers(0, 2, size=n, dtype=np.uint8)
        x, ok = gf2_min_weight_solution(A, b)
        sols = _brute_force(A, b)
        assert ok == bool(sols)
        if ok:
            assert np.array_equal(gf2_matvec(A, x), b)
            assert int(x.sum()) == min(int(s.sum()) for s in sols)


def test_min_weight_small_chunks_same_answer():
    g = GraphSnapshot.grid(4)
    A = build_influence_matrix(g.node_ids, g.edges)
    b = np.ones(16, dtype=np.uint8)
    x0, basis, ok = gf2_solve_with_nullspace(A, b)
    assert ok
    full = gf2_min_weight(x0, basis)
    chunked = gf2_min_weight(x0, basis, chunk_size=3)
    assert np.array_equal(full, chunked)
    assert int(full.sum()) <= int(x0.sum())


def test_min_weight_classic_5x5_all_lit():
    # the all-lit 5x5 board needs 15 presses
    g = GraphSnapshot.grid(5)
    A = build_influence_matrix(g.node_ids, g.edges)
    x, ok = gf2_min_weight_solution(A, np.ones(25, dtype=np.uint8))
    assert ok
    assert int(x.sum()) == 15
    assert gf2_matvec(A, x).all()
