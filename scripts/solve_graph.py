import argparse
import logging
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from lightsgraph.config import SolverConfig, load_config, load_puzzle
from lightsgraph.graph import GraphSnapshot
from lightsgraph.session import SolverSession

logger = logging.getLogger("solve_graph")


def parse_args(argv=None):
    ap = argparse.ArgumentParser(
        description="Solve a Lights Out puzzle on an arbitrary graph."
    )
    src = ap.add_mutually_exclusive_group(required=True)
    src.add_argument("--puzzle", help="YAML file with a 'puzzle' section")
    src.add_argument(
        "--grid", type=int, help="Classic N x N board with every light off"
    )
    ap.add_argument(
        "--config",
        default=str(ROOT / "configs" / "solver.yaml"),
        help="YAML file with a 'solver' section",
    )
    ap.add_argument("--algorithm", choices=["any", "min_weight"], default=None)
    ap.add_argument("--goal", choices=["on", "off"], default=None)
    ap.add_argument("--plot", default=None, help="Save a figure to this path")
    ap.add_argument("--log-level", default="WARNING")
    return ap.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cfg_path = Path(args.config)
    cfg = load_config(cfg_path) if cfg_path.exists() else SolverConfig()
    logger.info("config: %s", cfg)

    if args.puzzle:
        graph = load_puzzle(args.puzzle)
    else:
        graph = GraphSnapshot.grid(args.grid)

    with SolverSession(cfg) as session:
        if args.algorithm:
            session.set_algorithm(args.algorithm)
        if args.goal:
            session.set_goal(args.goal)

        info = session.set_matrix_info(graph)
        print(f"\nNodes: {info.n} | rank: {info.rank} | nullity k: {info.k}")
        print(f"Complexity: {info.complexity_label()}")

        start_time = time.perf_counter()
        report = session.set_solution(graph)
        time_ms = (time.perf_counter() - start_time) * 1000

    print(f"{report.message} ({time_ms:.1f} ms)")
    if report.has_solution:
        print(f"Presses ({report.weight}): {' '.join(report.nodes_to_press)}")

    if args.plot:
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt

        from lightsgraph.viz import show_solution

        ax = show_solution(graph, report.nodes_to_press, title=report.message)
        ax.figure.savefig(args.plot, bbox_inches="tight")
        plt.close(ax.figure)
        print(f"Figure: {args.plot}")

    return 0 if report.has_solution else 1


if __name__ == "__main__":
    sys.exit(main())
