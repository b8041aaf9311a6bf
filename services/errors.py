"""Exceptions raised by the Asana task sync.

    SyncError
    ├── SourceFetchError         project hierarchy could not be fetched
    ├── AssigneeResolutionError  one assignee email lookup failed
    └── RepositoryWriteError     one insert/update/delete failed
"""
from __future__ import annotations

from typing import Optional


class SyncError(Exception):
    def __init__(self, message: str, **context: object) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        return self.message


class SourceFetchError(SyncError):
    """Network or authorization failure talking to Asana. Fatal for one process."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, **context: object) -> None:
        super().__init__(message, status_code=status_code, **context)
        self.status_code = status_code


class AssigneeResolutionError(SyncError):
    def __init__(self, assignee_gid: str, message: str, **context: object) -> None:
        super().__init__(message, assignee_gid=assignee_gid, **context)
        self.assignee_gid = assignee_gid


class RepositoryWriteError(SyncError):
    def __init__(self, operation: str, message: str, **context: object) -> None:
        super().__init__(message, operation=operation, **context)
        self.operation = operation


__all__ = [
    "AssigneeResolutionError",
    "RepositoryWriteError",
    "SourceFetchError",
    "SyncError",
]
