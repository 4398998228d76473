"""
Graph builders - materialize a new Digraph from an ordering or a layering.
图构建器 —— 根据顺序或分层结果构造新的 Digraph。

Both builders return an independent graph; their inputs are never mutated.
Node values are shared with the caller, since nodes are immutable.
两个构建器都返回独立的新图，不修改输入。节点不可变，因此直接共享。
"""

from __future__ import annotations

from collections.abc import Sequence

from dag.graph import Digraph
from schema import Node


def build_linear_chain(order: Sequence[Node]) -> Digraph:
    """
    Chain that follows `order` exactly: u0 -> u1 -> ... -> uk.
    严格按给定顺序串联成链：u0 -> u1 -> ... -> uk。

    Given a topological order of some graph G, the chain is a stricter
    serialization of G: a total order where G may only have a partial one.
    若 order 是某图 G 的拓扑序，则链图是 G 的串行化版本（全序约束）。
    """
    g = Digraph()
    for node in order:
        g.add_node(node)
    for u, v in zip(order, order[1:]):
        g.add_edge(u, v)
    return g


def build_layered_dag(layers: Sequence[Sequence[Node]]) -> Digraph:
    """
    Layered DAG: every node of layer i points to every node of layer i+1.
    分层 DAG：第 i 层的每个节点连向第 i+1 层的每个节点（完全二部连接）。

    Only layer membership survives; finer edge structure of the graph the
    layers came from is discarded.
    只保留分层归属信息，原图中更细的边结构会被丢弃。
    """
    g = Digraph()
    for layer in layers:
        for node in layer:
            g.add_node(node)
    for from_layer, to_layer in zip(layers, layers[1:]):
        for u in from_layer:
            for v in to_layer:
                g.add_edge(u, v)
    return g
