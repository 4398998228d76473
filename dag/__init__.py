"""
DAG module - Workflow graph structure and scheduling analysis.
DAG 模块 —— 工作流图结构与调度分析。

Components:
  - graph.py:     Digraph data structure
  - generator.py: random DAG generation (permutation-ordered)
  - builders.py:  linear chain / layered DAG construction
  - analysis.py:  Kahn's topological sort and execution layers
  - export.py:    Graphviz DOT export and rendering

模块组成：
  - graph.py:     Digraph 有向图数据结构
  - generator.py: 基于随机排列的 DAG 生成
  - builders.py:  链式 / 分层 DAG 构建
  - analysis.py:  Kahn 拓扑排序与执行层划分
  - export.py:    Graphviz DOT 导出与渲染
"""

from dag.graph import Digraph, NodeNotFoundError              # 有向图
from dag.generator import generate_random_dag                 # 随机 DAG 生成
from dag.builders import build_layered_dag, build_linear_chain  # 图构建器
from dag.analysis import compute_layers, layers_cover_graph, topological_sort  # 拓扑分析
