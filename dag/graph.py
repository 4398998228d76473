"""
Digraph - Directed graph of workflow nodes.
Digraph —— 工作流节点的有向图。

The Digraph holds:
  - nodes:     ordered list of nodes (insertion order preserved)
  - adjacency: node id -> ordered list of successor nodes

Digraph 包含：
  - nodes:     有序节点列表（保持插入顺序）
  - adjacency: 节点 ID -> 有序后继节点列表

Adjacency is keyed by node identity (UUID), not by structural equality, so
node models can grow fields without changing how edges are looked up.
Successor order is preserved and drives tie-breaking in the Kahn-based
analysis (see dag/analysis.py).
邻接表以节点身份（UUID）为键，而不是结构相等性。
后继列表保持插入顺序，它决定了拓扑分析中并列情况的先后次序。

There is no node deletion, only edge deletion. No operation checks for
cycles or duplicate edges; callers that need a DAG must keep it acyclic.
不支持删除节点，只支持删除边。所有操作都不检查环和重复边，
需要 DAG 的调用方自行保证无环。
"""

from __future__ import annotations

import logging
from uuid import UUID

from schema import Node, SimpleNode

logger = logging.getLogger(__name__)


class NodeNotFoundError(KeyError):
    """
    Raised when a node id is not present in the graph.
    当图中不存在指定节点 ID 时抛出。
    """

    def __init__(self, node_id: UUID):
        super().__init__(node_id)
        self.node_id = node_id

    def __str__(self) -> str:
        return f"could not find node {self.node_id} in graph"


class Digraph:
    """
    Directed graph with ordered nodes and ordered successor lists.
    带有序节点列表和有序后继列表的有向图。
    """

    def __init__(self) -> None:
        self._nodes: list[Node] = []
        self._adj: dict[UUID, list[Node]] = {}

    @classmethod
    def with_size(cls, n: int) -> Digraph:
        """
        Create a graph holding `n` fresh SimpleNodes and no edges.
        创建包含 n 个新 SimpleNode、没有任何边的图。
        """
        g = cls()
        for _ in range(n):
            g.add_node(SimpleNode())
        return g

    # ------------------------------------------------------------------
    # Node operations
    # 节点操作
    # ------------------------------------------------------------------

    def add_node(self, node: Node) -> None:
        """
        Append `node` and give it an empty successor list.
        追加节点并为其创建空的后继列表。

        Adding the same identity twice is not guarded against.
        重复添加相同 ID 的节点不会被拦截，调用方需自行避免。
        """
        self._nodes.append(node)
        self._adj[node.id] = []

    def get_node(self, node_id: UUID) -> Node:
        """
        Linear scan for the node with `node_id`.
        线性扫描查找指定 ID 的节点，找不到时抛出 NodeNotFoundError。
        """
        for node in self._nodes:
            if node.id == node_id:
                return node
        raise NodeNotFoundError(node_id)

    def node_count(self) -> int:
        return len(self._nodes)

    def all_nodes(self) -> list[Node]:
        """Live backing list, not a copy. 返回内部列表本身，不是副本。"""
        return self._nodes

    # ------------------------------------------------------------------
    # Edge operations
    # 边操作
    # ------------------------------------------------------------------

    def add_edge(self, source: Node, target: Node) -> None:
        self._adj.setdefault(source.id, []).append(target)

    def remove_edge(self, source: Node, target: Node) -> None:
        """
        Remove every occurrence of `target` from `source`'s successors.
        从 source 的后继列表中删除所有 target（不只是第一个）。
        """
        successors = self._adj.get(source.id)
        if successors is None:
            return
        self._adj[source.id] = [v for v in successors if v.id != target.id]

    def has_edge(self, source: Node, target: Node) -> bool:
        return any(v.id == target.id for v in self._adj.get(source.id, []))

    def edges(self) -> list[tuple[Node, Node]]:
        """
        All edges as (source, target) pairs, in node order then successor order.
        按节点顺序、再按后继顺序返回所有 (source, target) 边。
        """
        return [(u, v) for u in self._nodes for v in self.adjacency_from(u)]

    def edge_count(self) -> int:
        return sum(len(self.adjacency_from(u)) for u in self._nodes)

    # ------------------------------------------------------------------
    # Adjacency access
    # 邻接表访问
    # ------------------------------------------------------------------

    def adjacency(self) -> dict[UUID, list[Node]]:
        return self._adj

    def adjacency_from(self, node: Node) -> list[Node]:
        """
        Successors of `node`; an unknown node has none.
        返回 node 的后继列表；未知节点返回空列表（不会报错，也不会创建条目）。
        """
        return self._adj.get(node.id, [])

    # ------------------------------------------------------------------
    # Graph properties
    # 图属性
    # ------------------------------------------------------------------

    def is_directed(self) -> bool:
        return True

    def summary(self) -> str:
        """
        One-line summary for logging, e.g. Digraph[6 nodes, 7 edges].
        生成单行摘要，用于日志输出。
        """
        return f"Digraph[{self.node_count()} nodes, {self.edge_count()} edges]"

    def __repr__(self) -> str:
        return self.summary()
