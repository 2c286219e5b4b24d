from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from .graph import Edge, Goal, GraphSnapshot, Node
from .solver import AlgorithmType, parse_algorithm, parse_goal

DEFAULT_MAX_NULLITY_WARNING = 20


def _goal_value(raw):
    # YAML 1.1 reads bare on/off as booleans
    if raw is True:
        return "on"
    if raw is False:
        return "off"
    return raw


@dataclass(frozen=True)
class SolverConfig:
    algorithm: AlgorithmType = AlgorithmType.MIN_WEIGHT
    goal: Goal = Goal.ON
    max_nullity_warning: int = DEFAULT_MAX_NULLITY_WARNING

    @staticmethod
    def from_dict(cfg: dict | None) -> "SolverConfig":
        cfg = dict(cfg or {})
        unknown = set(cfg) - {"algorithm", "goal", "max_nullity_warning"}
        if unknown:
            raise ValueError(f"Unknown solver options: {sorted(unknown)}")
        limit = int(cfg.get("max_nullity_warning", DEFAULT_MAX_NULLITY_WARNING))
        if limit < 0:
            raise ValueError(f"max_nullity_warning must be >= 0, got {limit}")
        return SolverConfig(
            algorithm=parse_algorithm(
                cfg.get("algorithm", AlgorithmType.MIN_WEIGHT.value)
            ),
            goal=parse_goal(_goal_value(cfg.get("goal", Goal.ON.value))),
            max_nullity_warning=limit,
        )


def load_config(path: str | Path) -> SolverConfig:
    """Read the `solver:` block of a YAML file."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid config file: {path}")
    return SolverConfig.from_dict(data.get("solver"))


def _yaml_keys(mapping: dict) -> dict:
    """Undo YAML 1.1 reading bare on/off keys as booleans."""
    return {_goal_value(key): value for key, value in mapping.items()}


def _node_id(raw) -> str:
    if isinstance(raw, bool):
        raise ValueError(
            f"Node id {raw!r} was read as a boolean; quote ids such as 'on' or 'off'"
        )
    return str(raw)


def _parse_edge(item) -> Edge:
    if isinstance(item, dict):
        item = _yaml_keys(item)
    if isinstance(item, dict) and "source" in item and "target" in item:
        return Edge(_node_id(item["source"]), _node_id(item["target"]))
    if isinstance(item, (list, tuple)) and len(item) == 2:
        return Edge(_node_id(item[0]), _node_id(item[1]))
    raise ValueError(f"Invalid edge spec: {item}")


def _parse_node(item) -> Node:
    if isinstance(item, (str, int)):
        return Node(_node_id(item))
    if isinstance(item, dict):
        item = _yaml_keys(item)
    if isinstance(item, dict) and "id" in item:
        initial_on = bool(item.get("initial_on", item.get("on", False)))
        on = bool(item.get("on", initial_on))
        pos = item.get("pos")
        if pos is not None:
            pos = (float(pos[0]), float(pos[1]))
        return Node(_node_id(item["id"]), on=on, initial_on=initial_on, pos=pos)
    raise ValueError(f"Invalid node spec: {item}")


def puzzle_from_dict(puzzle: dict) -> GraphSnapshot:
    """Build a snapshot from a `puzzle:` mapping.

    Either `grid: {rows, cols, on}` or explicit `nodes` and `edges`.
    """
    if not isinstance(puzzle, dict):
        raise ValueError(f"Invalid puzzle spec: {puzzle}")

    if "grid" in puzzle:
        grid = puzzle["grid"]
        if isinstance(grid, int):
            return GraphSnapshot.grid(grid)
        grid = _yaml_keys(grid)
        rows = int(grid["rows"])
        cols = int(grid.get("cols", rows))
        lit = [_node_id(nid) for nid in grid.get("on", []) or []]
        return GraphSnapshot.grid(rows, cols, on=lit)

    nodes = [_parse_node(item) for item in puzzle.get("nodes", []) or []]
    ids = [node.id for node in nodes]
    if len(set(ids)) != len(ids):
        dupes = sorted({nid for nid in ids if ids.count(nid) > 1})
        raise ValueError(f"Duplicate node ids: {dupes}")

    known = set(ids)
    edges = []
    for item in puzzle.get("edges", []) or []:
        edge = _parse_edge(item)
        for end in (edge.source, edge.target):
            if end not in known:
                raise ValueError(f"Edge {item} references unknown node {end!r}")
        edges.append(edge)
    return GraphSnapshot(tuple(nodes), tuple(edges))


def load_puzzle(path: str | Path) -> GraphSnapshot:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict) or "puzzle" not in data:
        raise ValueError(f"Missing 'puzzle' section in {path}")
    return puzzle_from_dict(data["puzzle"])
