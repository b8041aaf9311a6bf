from __future__ import annotations

from typing import Any, Callable, List, Mapping, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from models.process import Process
from models.task import ProcessTask, validate_task_fields
from services.errors import RepositoryWriteError
from storage.db import get_session


class TaskRepository(Protocol):
    """Persistence operations the reconciler depends on."""

    def list_synced(self, process_id: int) -> List[ProcessTask]: ...

    def insert(self, fields: Mapping[str, Any]) -> int: ...

    def update(self, task_id: int, fields: Mapping[str, Any]) -> None: ...

    def delete(self, task_id: int) -> None: ...


class SqlTaskRepository:
    def __init__(self, session_factory: Callable[[], Session] = get_session) -> None:
        self._session_factory = session_factory

    def list_synced(self, process_id: int) -> List[ProcessTask]:
        with self._session_factory() as session:
            stmt = (
                select(ProcessTask)
                .where(ProcessTask.process_id == process_id)
                .where(ProcessTask.external_task_id != None)  # noqa: E711
                .order_by(ProcessTask.id)
            )
            return list(session.exec(stmt).all())

    def list_for_process(self, process_id: int) -> List[ProcessTask]:
        with self._session_factory() as session:
            stmt = (
                select(ProcessTask)
                .where(ProcessTask.process_id == process_id)
                .order_by(ProcessTask.id)
            )
            return list(session.exec(stmt).all())

    def insert(self, fields: Mapping[str, Any]) -> int:
        try:
            validate_task_fields(fields)
        except ValueError as exc:
            raise RepositoryWriteError("insert", str(exc)) from exc
        try:
            with self._session_factory() as session:
                task = ProcessTask(**dict(fields))
                session.add(task)
                session.commit()
                session.refresh(task)
                return int(task.id)
        except SQLAlchemyError as exc:
            raise RepositoryWriteError("insert", str(exc)) from exc

    def update(self, task_id: int, fields: Mapping[str, Any]) -> None:
        try:
            validate_task_fields(fields)
        except ValueError as exc:
            raise RepositoryWriteError("update", str(exc), task_id=task_id) from exc
        try:
            with self._session_factory() as session:
                obj = session.get(ProcessTask, task_id)
                if not obj:
                    raise RepositoryWriteError("update", "Task not found", task_id=task_id)
                for key, value in fields.items():
                    setattr(obj, key, value)
                session.add(obj)
                session.commit()
        except SQLAlchemyError as exc:
            raise RepositoryWriteError("update", str(exc), task_id=task_id) from exc

    def delete(self, task_id: int) -> None:
        try:
            with self._session_factory() as session:
                obj = session.get(ProcessTask, task_id)
                if obj:
                    session.delete(obj)
                    session.commit()
        except SQLAlchemyError as exc:
            raise RepositoryWriteError("delete", str(exc), task_id=task_id) from exc


class ProcessRepository:
    def __init__(self, session_factory: Callable[[], Session] = get_session) -> None:
        self._session_factory = session_factory

    def get(self, process_id: int) -> Process | None:
        with self._session_factory() as session:
            return session.get(Process, process_id)

    def list_linked(self) -> List[Process]:
        with self._session_factory() as session:
            stmt = (
                select(Process)
                .where(Process.asana_project_gid != None)  # noqa: E711
                .order_by(Process.name)
            )
            return list(session.exec(stmt).all())


__all__ = ["ProcessRepository", "SqlTaskRepository", "TaskRepository"]
