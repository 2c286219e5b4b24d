from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Optional, Tuple


class Goal(str, Enum):
    """Configuration the player is trying to reach."""

    ON = "on"
    OFF = "off"


@dataclass(frozen=True)
class Node:
    id: str
    on: bool = False
    initial_on: bool = False
    # drawing hint only, the solver never looks at it
    pos: Optional[Tuple[float, float]] = None


@dataclass(frozen=True)
class Edge:
    source: str
    target: str


def _neighbors_open(rows, cols, r, c):
    neigh = []
    if r > 0:
        neigh.append((r - 1, c))
    if r < rows - 1:
        neigh.append((r + 1, c))
    if c > 0:
        neigh.append((r, c - 1))
    if c < cols - 1:
        neigh.append((r, c + 1))
    return neigh


def grid_id(r: int, c: int) -> str:
    return f"r{r}c{c}"


@dataclass(frozen=True)
class GraphSnapshot:
    """Read-only view of a puzzle: nodes in index order plus undirected edges.

    Every operation that changes light states returns a new snapshot.
    """

    nodes: Tuple[Node, ...] = ()
    edges: Tuple[Edge, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "edges", tuple(self.edges))

    @staticmethod
    def grid(
        rows: int, cols: int | None = None, on: Iterable[str] = ()
    ) -> "GraphSnapshot":
        """Classic rectangular board where each cell touches its 4 neighbours."""
        cols = rows if cols is None else cols
        lit = set(on)
        nodes = []
        edges = []
        for r in range(rows):
            for c in range(cols):
                nid = grid_id(r, c)
                nodes.append(
                    Node(
                        nid,
                        on=nid in lit,
                        initial_on=nid in lit,
                        pos=(float(c), float(-r)),
                    )
                )
                # only link right and down so each edge appears once
                for rr, cc in _neighbors_open(rows, cols, r, c):
                    if (rr, cc) > (r, c):
                        edges.append(Edge(nid, grid_id(rr, cc)))
        return GraphSnapshot(tuple(nodes), tuple(edges))

    @property
    def node_ids(self) -> list[str]:
        return [node.id for node in self.nodes]

    def index_of(self) -> dict[str, int]:
        return {node.id: i for i, node in enumerate(self.nodes)}

    def neighbors(self, node_id: str) -> list[str]:
        out = []
        for edge in self.edges:
            if edge.source == node_id and edge.target != node_id:
                out.append(edge.target)
            elif edge.target == node_id and edge.source != node_id:
                out.append(edge.source)
        # parallel edges still toggle a neighbour only once
        return list(dict.fromkeys(out))

    def press(self, node_id: str) -> "GraphSnapshot":
        """Toggle `node_id` and every node adjacent to it."""
        if node_id not in self.index_of():
            raise ValueError(f"Unknown node: {node_id}")
        flipped = {node_id, *self.neighbors(node_id)}
        nodes = tuple(
            replace(node, on=not node.on) if node.id in flipped else node
            for node in self.nodes
        )
        return GraphSnapshot(nodes, self.edges)

    def press_all(self, node_ids: Iterable[str]) -> "GraphSnapshot":
        g = self
        for nid in node_ids:
            g = g.press(nid)
        return g

    def reset(self) -> "GraphSnapshot":
        nodes = tuple(replace(node, on=node.initial_on) for node in self.nodes)
        return GraphSnapshot(nodes, self.edges)

    def count_on(self) -> int:
        return sum(1 for node in self.nodes if node.on)

    def is_solved(self, goal: Goal = Goal.ON) -> bool:
        want = Goal(goal) is Goal.ON
        return all(node.on == want for node in self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    def __repr__(self):
        return (
            f"GraphSnapshot(n={len(self.nodes)}, edges={len(self.edges)}, "
            f"on={self.count_on()})"
        )
