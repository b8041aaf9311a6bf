"""ORM models and sync snapshot types exposed by ProcessHub."""
from .external_task import ExternalSection, ExternalTask
from .process import Process
from .task import CATEGORIES, ORIGINS, STATUSES, ProcessTask, validate_task_fields

__all__ = [
    "CATEGORIES",
    "ORIGINS",
    "STATUSES",
    "ExternalSection",
    "ExternalTask",
    "Process",
    "ProcessTask",
    "validate_task_fields",
]
