from .base import ActionOutput, ActionStatus, BaseAction

__all__ = ["ActionOutput", "ActionStatus", "BaseAction"]
