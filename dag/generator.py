"""
Random DAG generator.
随机 DAG 生成器。

Acyclicity is enforced structurally: a random permutation fixes a total
order, and edges only ever go from a lower to a higher rank. The
permutation is therefore itself a valid topological order of the result.
通过结构保证无环：先用随机排列确定全序，边只从低位次指向高位次，
因此该排列本身就是结果图的一个合法拓扑序。
"""

from __future__ import annotations

import logging
import random
import uuid

from dag.graph import Digraph
from schema import SimpleNode

logger = logging.getLogger(__name__)


def _random_node(rng: random.Random) -> SimpleNode:
    # 节点 ID 同样取自 rng，保证同一种子生成完全相同的图
    return SimpleNode(id=uuid.UUID(int=rng.getrandbits(128), version=4))


def generate_random_dag(n: int, p: float, rng: random.Random) -> Digraph:
    """
    Build an `n`-node DAG where each allowed edge is kept with probability `p`.
    生成 n 个节点的 DAG，每条允许的边以概率 p 独立保留。

    Args:
        n:   number of nodes (>= 0)
        p:   per-edge inclusion probability in [0, 1]
        rng: seeded random source; the same seed yields the same graph
        n:   节点数（>= 0）
        p:   每条边的保留概率，取值 [0, 1]
        rng: 注入的随机源；相同种子生成相同的图
    """
    g = Digraph()
    for _ in range(n):
        g.add_node(_random_node(rng))

    # position[i] = rank of node i in the random permutation
    # position[i] = 节点 i 在随机排列中的位次
    perm = list(range(n))
    rng.shuffle(perm)
    position = [0] * n
    for rank, i in enumerate(perm):
        position[i] = rank

    nodes = g.all_nodes()
    for u in range(n):
        for v in range(n):
            if u != v and position[u] < position[v] and rng.random() < p:
                g.add_edge(nodes[u], nodes[v])

    logger.debug("[DAG] Generated random DAG (n=%d, p=%.2f): %s", n, p, g.summary())
    return g
