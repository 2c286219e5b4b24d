from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Callable, List, Optional

from .config import SolverConfig
from .graph import GraphSnapshot
from .solver import (
    MSG_SOLVING,
    AlgorithmType,
    MatrixInfo,
    SolutionReport,
    compute_matrix_info,
    compute_solution,
    parse_algorithm,
    parse_goal,
)

logger = logging.getLogger(__name__)

Listener = Callable[["SolverSession"], None]


class SolverSession:
    """
    Holds the latest matrix info and solution for whoever displays them.

    The session never owns the graph: every call gets the snapshot to work on.
    Listeners are called after each state change. `submit_solution` runs the
    solve on an executor, and only the most recent request may publish.
    """

    def __init__(
        self,
        config: SolverConfig | None = None,
        executor: Executor | None = None,
    ):
        self.config = config or SolverConfig()
        self.algorithm: AlgorithmType = self.config.algorithm
        self.goal = self.config.goal
        self.matrix_info = MatrixInfo()
        self.solution = SolutionReport(None, (), "")

        self._listeners: List[Listener] = []
        self._lock = threading.RLock()
        self._generation = 0
        self._pending: Optional[Future] = None
        self._executor = executor
        self._owns_executor = executor is None

    # -- listeners ---------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(self)

    # -- mutators ----------------------------------------------------------

    def set_algorithm(self, algorithm) -> None:
        with self._lock:
            self.algorithm = parse_algorithm(algorithm)
        self._notify()

    def set_goal(self, goal) -> None:
        with self._lock:
            self.goal = parse_goal(goal)
        self._notify()

    def set_matrix_info(self, graph: GraphSnapshot) -> MatrixInfo:
        info = compute_matrix_info(graph)
        if info.k > self.config.max_nullity_warning:
            logger.warning(
                "nullity k=%d exceeds %d: min-weight search will try 2^%d "
                "combinations",
                info.k,
                self.config.max_nullity_warning,
                info.k,
            )
        with self._lock:
            self.matrix_info = info
        self._notify()
        return info

    def set_solution(self, graph: GraphSnapshot) -> SolutionReport:
        """Solve synchronously, superseding any solve still in flight."""
        with self._lock:
            self._generation += 1
            self._cancel_pending()
            algorithm, goal = self.algorithm, self.goal
        report = compute_solution(graph, algorithm, goal)
        with self._lock:
            self.solution = report
        self._notify()
        return report

    def submit_solution(self, graph: GraphSnapshot) -> Future:
        """Solve in the background.

        The returned future resolves to the report once it has been published,
        or to the report it computed if a newer request superseded it first.
        """
        with self._lock:
            self._generation += 1
            generation = self._generation
            self._cancel_pending()
            algorithm, goal = self.algorithm, self.goal
            self.solution = SolutionReport(None, (), MSG_SOLVING)
            executor = self._get_executor()
        self._notify()

        future = executor.submit(
            self._run_solve, generation, graph, algorithm, goal
        )
        with self._lock:
            if generation == self._generation:
                self._pending = future
        return future

    def _run_solve(self, generation, graph, algorithm, goal) -> SolutionReport:
        report = compute_solution(graph, algorithm, goal)
        with self._lock:
            current = generation == self._generation
            if current:
                self.solution = report
                self._pending = None
        if current:
            self._notify()
        else:
            logger.debug("discarding superseded solve #%d", generation)
        return report

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _get_executor(self) -> Executor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix="lightsgraph-solver"
            )
        return self._executor

    def remove_node_from_solution(self, node_id: str) -> None:
        with self._lock:
            sol = self.solution
            self.solution = SolutionReport(
                sol.has_solution,
                tuple(nid for nid in sol.nodes_to_press if nid != node_id),
                sol.message,
            )
        self._notify()

    # -- player actions ----------------------------------------------------

    def solve_by(self, graph: GraphSnapshot, algorithm) -> SolutionReport:
        self.set_algorithm(algorithm)
        return self.set_solution(graph)

    def press(self, graph: GraphSnapshot, node_id: str) -> GraphSnapshot:
        """Apply a player press and keep the displayed solution in step.

        Pressing a node from the current solution just crosses it off;
        pressing any other node invalidates the plan, so it is recomputed.
        """
        with self._lock:
            sol = self.solution
        was_in_solution = bool(sol.has_solution) and node_id in sol.nodes_to_press
        new_graph = graph.press(node_id)
        if sol.has_solution:
            if was_in_solution:
                self.remove_node_from_solution(node_id)
            else:
                self.set_solution(new_graph)
        return new_graph

    def restart(self, graph: GraphSnapshot) -> GraphSnapshot:
        """Put every light back to its initial state and solve again."""
        new_graph = graph.reset()
        self.set_matrix_info(new_graph)
        self.set_solution(new_graph)
        return new_graph

    # -- lifecycle ---------------------------------------------------------

    def close(self) -> None:
        with self._lock:
            self._cancel_pending()
            executor = self._executor if self._owns_executor else None
            if self._owns_executor:
                self._executor = None
        if executor is not None:
            executor.shutdown(wait=True)

    def __enter__(self) -> "SolverSession":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
