from __future__ import annotations

from typing import Iterable, Sequence

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.patches import Rectangle

from .graph import GraphSnapshot


def _circular_layout(n: int) -> np.ndarray:
    if n == 0:
        return np.zeros((0, 2))
    angles = np.linspace(0.0, 2 * np.pi, n, endpoint=False)
    return np.column_stack([np.cos(angles), np.sin(angles)])


def node_positions(graph: GraphSnapshot) -> np.ndarray:
    """Positions from the nodes' `pos` hints, or a circle if any is missing."""
    if graph.nodes and all(node.pos is not None for node in graph.nodes):
        return np.array([node.pos for node in graph.nodes], dtype=float)
    return _circular_layout(len(graph.nodes))


def show_influence_matrix(
    A: np.ndarray,
    ax=None,
    pivots: Sequence[int] | None = None,
    labels: Sequence[str] | None = None,
    pivot_color="red",
    cmap="Greys",
    title="Influence matrix",
):
    """
    Heatmap of a GF(2) matrix. Pivot columns, when given, are outlined so
    the free columns (the null space directions) stand out.
    """
    A = np.asarray(A, dtype=np.uint8)
    if ax is None:
        _, ax = plt.subplots(figsize=(3.5, 3.5))
    rows, cols = A.shape
    ax.imshow(A, cmap=cmap, vmin=0, vmax=1)
    for col in pivots or ():
        ax.add_patch(
            Rectangle(
                (col - 0.5, -0.5),
                1,
                rows,
                edgecolor=pivot_color,
                facecolor="none",
                linewidth=1.5,
            )
        )
    ax.set_xticks(range(cols))
    ax.set_yticks(range(rows))
    if labels is not None:
        ax.set_xticklabels(labels, rotation=90)
        ax.set_yticklabels(labels)
    ax.set_title(title)
    return ax


def show_solution(
    graph: GraphSnapshot,
    nodes_to_press: Iterable[str] = (),
    ax=None,
    on_color="gold",
    off_color="dimgray",
    pressed_color="red",
    title=None,
):
    """Draw the graph with lit nodes highlighted and nodes to press outlined."""
    if ax is None:
        _, ax = plt.subplots(figsize=(4.0, 4.0))
    xy = node_positions(graph)
    idx = graph.index_of()

    for edge in graph.edges:
        u = idx.get(edge.source)
        v = idx.get(edge.target)
        if u is None or v is None:
            continue
        ax.plot(
            [xy[u, 0], xy[v, 0]],
            [xy[u, 1], xy[v, 1]],
            color="black",
            linewidth=1.0,
            zorder=1,
        )

    if graph.nodes:
        colors = [on_color if node.on else off_color for node in graph.nodes]
        ax.scatter(xy[:, 0], xy[:, 1], s=300, c=colors, zorder=2)

    pressed = [idx[nid] for nid in nodes_to_press if nid in idx]
    if pressed:
        ax.scatter(
            xy[pressed, 0],
            xy[pressed, 1],
            s=500,
            facecolors="none",
            edgecolors=pressed_color,
            linewidths=2,
            zorder=3,
        )

    ax.set_aspect("equal")
    ax.set_axis_off()
    if title:
        ax.set_title(title)
    return ax
