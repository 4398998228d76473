"""
Base Action - Abstract interface for the steps a workflow task performs.
BaseAction —— 工作流任务中单个执行步骤的抽象接口。

A TaskNode carries an ordered tuple of actions. The graph layer only computes
the scheduling metadata (topological order, execution layers) an executor
would need; conducting actions is left to concrete subclasses.
TaskNode 携带有序的动作元组。图层只负责计算执行器所需的调度信息
（拓扑顺序、执行层），动作的具体执行由子类实现。
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class ActionStatus(str, Enum):
    """
    Lifecycle states of a single action inside a task.
    任务中单个动作的生命周期状态。
    """
    QUEUED = "queued"       # 排队等待
    RUNNING = "running"     # 执行中
    WAITING = "waiting"     # 等待外部条件
    FINISHED = "finished"   # 已完成
    FAILED = "failed"       # 失败


class ActionOutput(BaseModel):
    """Result reported by an action after it has been conducted.
    动作执行后返回的结果。"""
    action_id: UUID
    status: ActionStatus
    data: dict[str, str] = Field(default_factory=dict)


class BaseAction(ABC):
    """
    Abstract base class for task actions.
    所有任务动作的抽象基类。
    """

    def __init__(self, action_id: UUID | None = None):
        self.action_id = action_id or uuid4()

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Short action name used in logs and diagrams.
        动作名称，用于日志和图示。
        """

    @abstractmethod
    def conduct(self, inputs: dict[str, str]) -> ActionOutput:
        """
        Perform the action and report its outcome.
        执行动作并返回结果。
        """

    def __str__(self) -> str:
        return f"{self.name}({str(self.action_id)[:8]})"
