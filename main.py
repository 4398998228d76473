"""
Workflow DAG - Command-line demo.
Workflow DAG —— 命令行演示入口。

Generates a random DAG, computes its topological order and execution
layers, rebuilds it as a linear chain and as an explicit layered DAG, and
exports all three graphs as Graphviz diagrams.
生成随机 DAG，计算拓扑顺序与执行层，再分别重建为线性链和显式分层 DAG，
并将三张图导出为 Graphviz 图示。

Usage:
    python main.py -n 8 -p 0.4 --seed 42 --print
    python main.py --no-render      # only write .dot files / 只写 .dot 文件
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
import time
from uuid import UUID

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

import config
from dag.analysis import compute_layers, topological_sort
from dag.builders import build_layered_dag, build_linear_chain
from dag.export import DiagramExportError, prepare_output_dir, save_dag
from dag.generator import generate_random_dag
from dag.graph import Digraph
from schema import Node

console = Console()
logger = logging.getLogger(__name__)


# ======================================================================
# Display helpers
# 展示辅助函数
# ======================================================================

def _display_names(g: Digraph, use_names: bool) -> dict[UUID, str]:
    """node id -> display name (T<i> or identity label)."""
    return {
        node.id: (f"T{i}" if use_names else node.label())
        for i, node in enumerate(g.all_nodes())
    }


def print_edges(g: Digraph, names: dict[UUID, str]) -> None:
    console.print("[bold]Edges (initial DAG):[/bold]")
    for u, v in g.edges():
        console.print(f"  {names[u.id]} -> {names[v.id]}")


def print_order(order: list[Node], names: dict[UUID, str]) -> None:
    console.print(Panel(
        " -> ".join(names[n.id] for n in order) or "[dim](empty)[/dim]",
        title="[bold cyan]Topological order[/bold cyan]",
        border_style="cyan",
    ))


def print_layers(layers: list[list[Node]], names: dict[UUID, str]) -> None:
    table = Table(title="Execution layers", border_style="magenta", show_lines=True)
    table.add_column("Layer", style="magenta", width=6)
    table.add_column("Nodes (parallel)", style="white")
    for i, layer in enumerate(layers):
        table.add_row(str(i), " ".join(names[n.id] for n in layer))
    console.print(table)


# ======================================================================
# Main
# 主函数
# ======================================================================

def setup_logging(verbose: bool = False) -> None:
    """
    Configure logging with rich handler.
    使用 Rich 处理器配置日志系统，verbose=True 时启用 DEBUG 级别。
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, rich_tracebacks=True)],
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate, analyse and draw a random workflow DAG.")
    parser.add_argument("-n", type=int, default=config.DEFAULT_NODE_COUNT, help="number of nodes")
    parser.add_argument("-p", type=float, default=config.DEFAULT_EDGE_PROBABILITY,
                        help="probability of each allowed edge")
    parser.add_argument("--seed", type=int, default=config.DEFAULT_SEED,
                        help="random seed (0 -> time-based)")
    parser.add_argument("--print", dest="print_edges", action="store_true", help="print graph edges")
    parser.add_argument("--names", action=argparse.BooleanOptionalAction, default=True,
                        help="use names T0..Tn-1")
    parser.add_argument("--output-dir", default=config.OUTPUT_DIR, help="where diagrams are written")
    parser.add_argument("--no-render", dest="render", action="store_false",
                        help="only write .dot files, do not call Graphviz")
    parser.add_argument("-v", "--verbose", action="store_true")

    args = parser.parse_args(argv)
    if args.n <= 0:
        parser.error("n must be > 0")
    if not 0.0 <= args.p <= 1.0:
        parser.error("p must be in [0,1]")
    return args


def run(args: argparse.Namespace) -> int:
    """
    Run the full pipeline; returns the process exit code.
    执行完整流程，返回进程退出码。
    """
    seed = args.seed or time.time_ns()
    rng = random.Random(seed)
    logger.debug("Using seed %d", seed)

    g = generate_random_dag(args.n, args.p, rng)
    names = _display_names(g, args.names)
    console.print(f"  [dim]{g.summary()}[/dim]")

    if args.print_edges:
        print_edges(g, names)

    try:
        # 只清理本工具生成的 dag_* 文件
        out_dir = prepare_output_dir(args.output_dir)

        # 1) initial / 初始随机 DAG
        save_dag(g, out_dir / "dag_initial", use_names=args.names, render=args.render)

        order, ok = topological_sort(g)
        if not ok:
            console.print("[red]ERROR: Cycle detected (shouldn't happen with generator).[/red]")
            return 1
        print_order(order, names)

        layers = compute_layers(g)
        print_layers(layers, names)

        # 2) final (linear) / 串行化的线性链
        g_linear = build_linear_chain(order)
        save_dag(g_linear, out_dir / "dag_final_linear", use_names=args.names, render=args.render)

        # 3) final (parallel) / 显式分层的并行图
        g_parallel = build_layered_dag(layers)
        save_dag(
            g_parallel, out_dir / "dag_final_parallel",
            ranks=layers, use_names=args.names, render=args.render,
        )
    except DiagramExportError as exc:
        console.print(f"\n[red]Error: {exc}[/red]")
        return 1

    return 0


def main() -> None:
    args = parse_args()
    setup_logging(args.verbose)
    sys.exit(run(args))


if __name__ == "__main__":
    main()
