"""Normalized snapshot of an Asana project, rebuilt on every sync."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional


@dataclass
class ExternalTask:
    gid: str
    name: str
    notes: str = ""
    completed: bool = False
    completed_at: Optional[datetime] = None
    assignee_name: Optional[str] = None
    assignee_gid: Optional[str] = None
    due_on: Optional[date] = None
    permalink_url: Optional[str] = None
    parent_gid: Optional[str] = None
    subtasks: List["ExternalTask"] = field(default_factory=list)


@dataclass
class ExternalSection:
    gid: str
    name: str
    tasks: List[ExternalTask] = field(default_factory=list)

    def task_count(self) -> int:
        return sum(1 + len(task.subtasks) for task in self.tasks)


__all__ = ["ExternalSection", "ExternalTask"]
