"""
Topological analysis - Kahn's algorithm over a Digraph.
拓扑分析 —— 基于 Digraph 的 Kahn 算法。

Two views are computed:
  - topological_sort(): one total execution order (FIFO frontier)
  - compute_layers():   execution layers, i.e. sets of nodes that can run
                        in parallel once every earlier layer is done

计算两种视图：
  - topological_sort(): 一个全序执行顺序（FIFO 队列）
  - compute_layers():   执行层，即前面各层完成后可以并行执行的节点集合

Both only use the Digraph's public methods and keep their own in-degree
bookkeeping; the graph passed in is never mutated.
两者只使用 Digraph 的公开方法，入度统计保存在私有字典中，不修改传入的图。

Tie-breaking is deterministic: the frontier is seeded in node order and
grows in successor-list order.
并列顺序是确定的：初始队列按节点顺序，后续按后继列表顺序入队。
"""

from __future__ import annotations

import logging
from collections import deque
from uuid import UUID

from dag.graph import Digraph
from schema import Node

logger = logging.getLogger(__name__)


def _in_degrees(g: Digraph) -> dict[UUID, int]:
    # 先把所有节点的入度初始化为 0，再扫描每条边累加
    in_degree: dict[UUID, int] = {u.id: 0 for u in g.all_nodes()}
    for u in g.all_nodes():
        for v in g.adjacency_from(u):
            in_degree[v.id] = in_degree.get(v.id, 0) + 1
    return in_degree


def topological_sort(g: Digraph) -> tuple[list[Node], bool]:
    """
    Kahn's algorithm — returns (order, ok).
    Kahn 算法 —— 返回 (order, ok)。

    `ok` is False iff some node was never peeled, i.e. the graph has a cycle;
    the partial order is discarded and an empty list returned. Callers must
    check `ok` before trusting the order.
    当存在未被剥离的节点（即图中有环）时 ok 为 False，
    此时丢弃部分结果并返回空列表。调用方必须先检查 ok。
    """
    in_degree = _in_degrees(g)

    # 将入度为 0 的节点按节点顺序加入队列
    queue: deque[Node] = deque(u for u in g.all_nodes() if in_degree[u.id] == 0)
    order: list[Node] = []

    while queue:
        u = queue.popleft()
        order.append(u)
        for v in g.adjacency_from(u):
            in_degree[v.id] -= 1
            if in_degree[v.id] == 0:
                queue.append(v)

    if len(order) < g.node_count():
        logger.warning(
            "[DAG] Cycle detected! Topological sort reached %d of %d nodes.",
            len(order), g.node_count(),
        )
        return [], False
    return order, True


def compute_layers(g: Digraph) -> list[list[Node]]:
    """
    Layer-batched Kahn's algorithm — returns execution layers.
    分层批处理的 Kahn 算法 —— 返回执行层列表。

    Layer 0 holds every node with no incoming edge. Layer k+1 holds the nodes
    whose in-degree drops to zero once all edges out of layers 0..k have been
    removed. Stops when a step yields an empty frontier.
    第 0 层是所有入度为 0 的节点；第 k+1 层是移除 0..k 层全部出边后
    入度变为 0 的节点。当新一轮前沿为空时停止。

    Cycles are not reported: on cyclic input the layers simply cover fewer
    nodes than the graph holds. Use topological_sort() or layers_cover_graph()
    when a strict guarantee is needed.
    不会报告环：有环时各层覆盖的节点会少于图的节点数。
    需要严格保证时请使用 topological_sort() 或 layers_cover_graph()。
    """
    in_degree = _in_degrees(g)

    frontier = [u for u in g.all_nodes() if in_degree[u.id] == 0]
    layers: list[list[Node]] = []

    while frontier:
        layers.append(frontier)
        next_frontier: list[Node] = []
        for u in frontier:
            for v in g.adjacency_from(u):
                in_degree[v.id] -= 1
                if in_degree[v.id] == 0:
                    next_frontier.append(v)
        frontier = next_frontier

    covered = sum(len(layer) for layer in layers)
    if covered < g.node_count():
        logger.warning(
            "[DAG] Layers cover %d of %d nodes; graph is not acyclic.",
            covered, g.node_count(),
        )
    return layers


def layers_cover_graph(g: Digraph, layers: list[list[Node]]) -> bool:
    """
    True if `layers` place every node of `g` exactly once.
    当 layers 恰好覆盖 g 中每个节点一次时返回 True。
    """
    seen: set[UUID] = set()
    for layer in layers:
        for node in layer:
            if node.id in seen:
                return False
            seen.add(node.id)
    return seen == {u.id for u in g.all_nodes()}
