# processhub/models/task.py
from typing import Any, Mapping, Optional
from datetime import date, datetime

from sqlalchemy import CheckConstraint, UniqueConstraint
from sqlmodel import SQLModel, Field

from datetime_utils import utc_now

CATEGORIES = ("plan", "execute", "evaluate", "improve")
ORIGINS = ("external", "ai_generated", "user_created")
STATUSES = ("pending", "active", "completed", "exported")

DEFAULT_CATEGORY = "plan"

_ALLOWED = {
    "category": CATEGORIES,
    "origin": ORIGINS,
    "status": STATUSES,
}


def _in_check(column: str, values) -> CheckConstraint:
    quoted = ", ".join(f"'{value}'" for value in values)
    return CheckConstraint(f"{column} IN ({quoted})", name=f"ck_process_task_{column}")


def validate_task_fields(fields: Mapping[str, Any]) -> None:
    """Raise ``ValueError`` when an enumerated column carries an unknown value."""
    for column, allowed in _ALLOWED.items():
        if column in fields and fields[column] not in allowed:
            raise ValueError(f"invalid {column} {fields[column]!r}; expected one of {', '.join(allowed)}")


class ProcessTask(SQLModel, table=True):
    __tablename__ = "process_task"
    __table_args__ = (
        UniqueConstraint("process_id", "external_task_id", name="ux_process_task_external"),
        *(_in_check(column, allowed) for column, allowed in _ALLOWED.items()),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    process_id: int = Field(index=True)
    title: str
    description: Optional[str] = None
    category: str = DEFAULT_CATEGORY  # plan / execute / evaluate / improve
    origin: str = "user_created"      # external / ai_generated / user_created
    status: str = "active"            # pending / active / completed / exported
    assignee_name: Optional[str] = None
    assignee_email: Optional[str] = None
    assignee_external_id: Optional[str] = None
    due_date: Optional[date] = None
    completed: bool = False
    completed_at: Optional[datetime] = None
    section_name: Optional[str] = None
    section_external_id: Optional[str] = None
    parent_external_id: Optional[str] = None
    is_subtask: bool = False
    external_task_id: Optional[str] = Field(default=None, index=True)
    external_url: Optional[str] = None
    last_synced_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utc_now)
