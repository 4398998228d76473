"""
Pydantic data models for the Workflow DAG.
Defines the node types consumed by the graph, the builders and the analysis.
Workflow DAG 的 Pydantic 数据模型。
定义了被图结构、构建器和拓扑分析共同使用的节点类型。

Graph code only relies on the `Node` capability (an `id` and a `label()`),
so any model that provides both can live in a Digraph.
图相关代码只依赖 `Node` 能力接口（`id` + `label()`），
任何提供这两者的模型都可以放入 Digraph。
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from actions.base import ActionOutput, ActionStatus, BaseAction  # noqa: F401

LABEL_LENGTH = 8  # 显示标签长度：UUID 字符串的前 8 位


# ======================================================================
# Node capability
# 节点能力接口
# ======================================================================

@runtime_checkable
class Node(Protocol):
    """
    Anything with a stable identity and a short display label.
    任何拥有稳定身份标识和简短显示标签的对象。
    """

    @property
    def id(self) -> UUID: ...

    def label(self) -> str: ...


class SimpleNode(BaseModel):
    """
    Identity-only node. Immutable once created.
    只有身份标识的最简节点，创建后不可变。
    """
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4, description="Globally unique node identity")  # 节点唯一 ID

    def label(self) -> str:
        return str(self.id)[:LABEL_LENGTH]


# ======================================================================
# Task models (extension point, no executor yet)
# 任务模型（扩展点，暂无执行器）
# ======================================================================

class TaskNode(BaseModel):
    """
    A workflow task: a node that also carries an ordered tuple of actions.
    工作流任务：携带有序动作元组的节点。

    Structurally a task graph is just a Digraph of TaskNodes; nothing here
    runs the actions.
    从结构上看，任务图就是由 TaskNode 组成的 Digraph；这里不负责执行动作。
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    id: UUID = Field(default_factory=uuid4)
    description: str = ""                                          # 任务描述
    actions: tuple[BaseAction, ...] = ()                           # 有序的 BaseAction 元组，冻结后可哈希

    def label(self) -> str:
        return str(self.id)[:LABEL_LENGTH]
