"""One-way reconciliation of an Asana project into the local task store.

A pass runs in a fixed order: fetch the project snapshot, flatten and
classify it, resolve assignee emails, load the rows that already carry an
Asana gid, upsert every candidate, and finally delete the rows whose gid is
no longer in the snapshot. Deletion never starts before all upserts are done.

Rows without an ``external_task_id`` are never read or written here.
"""
from __future__ import annotations

import logging
import threading
import weakref
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from core.classifier import TaskClassifier
from core.settings import SYNC
from datetime_utils import to_rfc3339_utc, utc_now
from models.external_task import ExternalSection, ExternalTask
from services.asana_client import AsanaClient
from services.assignee_resolver import AssigneeResolver
from services.errors import RepositoryWriteError, SourceFetchError
from services.source_adapter import AsanaSourceAdapter
from services.sync_log import get_sync_logger
from services.task_repository import TaskRepository


@dataclass
class SyncResult:
    process_id: int
    process_name: str
    imported: int = 0
    updated: int = 0
    removed: int = 0
    total: int = 0
    last_synced_at: datetime = field(default_factory=utc_now)
    error: Optional[str] = None
    failed: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, process_id: int, process_name: str, error: str) -> "SyncResult":
        return cls(process_id=process_id, process_name=process_name, error=error or "Unknown error")

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "processId": self.process_id,
            "processName": self.process_name,
            "imported": self.imported,
            "updated": self.updated,
            "removed": self.removed,
            "total": self.total,
            "lastSyncedAt": to_rfc3339_utc(self.last_synced_at),
        }
        if self.failed:
            payload["failed"] = self.failed
        if self.error is not None:
            payload["error"] = self.error
        return payload


@dataclass
class SyncCandidate:
    task: ExternalTask
    section_name: str
    section_gid: str
    category: str
    parent_gid: Optional[str]
    is_subtask: bool
    permalink_url: Optional[str]


def collect_candidates(
    sections: List[ExternalSection], classifier: TaskClassifier
) -> Tuple[List[SyncCandidate], List[str]]:
    """Flatten sections into candidates and gather their assignee gids.

    Documentation tasks are dropped together with their subtasks. A gid seen
    twice keeps its first position.
    """
    candidates: List[SyncCandidate] = []
    assignee_gids: List[str] = []
    seen: Set[str] = set()

    def add(task: ExternalTask, section: ExternalSection, category: str, parent: Optional[ExternalTask]) -> None:
        if task.gid in seen:
            return
        seen.add(task.gid)
        candidates.append(
            SyncCandidate(
                task=task,
                section_name=section.name,
                section_gid=section.gid,
                category=category,
                parent_gid=parent.gid if parent else None,
                is_subtask=parent is not None,
                permalink_url=None if parent else task.permalink_url,
            )
        )
        if task.assignee_gid:
            assignee_gids.append(task.assignee_gid)

    for section in sections:
        category = classifier.category_for_section(section.name)
        for task in section.tasks:
            if classifier.is_documentation_task(task.name):
                continue
            add(task, section, category, None)
            for sub in task.subtasks:
                if classifier.is_documentation_task(sub.name):
                    continue
                add(sub, section, category, task)

    return candidates, assignee_gids


def build_row(
    candidate: SyncCandidate,
    emails: Dict[str, str],
    synced_at: datetime,
) -> Dict[str, Any]:
    task = candidate.task
    return {
        "title": task.name,
        "description": task.notes or None,
        "category": candidate.category,
        "origin": "external",
        "status": "completed" if task.completed else "active",
        "assignee_name": task.assignee_name,
        "assignee_email": emails.get(task.assignee_gid) if task.assignee_gid else None,
        "assignee_external_id": task.assignee_gid,
        "due_date": task.due_on,
        "completed": task.completed,
        "completed_at": task.completed_at,
        "section_name": candidate.section_name,
        "section_external_id": candidate.section_gid,
        "parent_external_id": candidate.parent_gid,
        "is_subtask": candidate.is_subtask,
        "external_url": candidate.permalink_url,
        "last_synced_at": synced_at,
    }


class TaskReconciler:
    def __init__(
        self,
        repository: TaskRepository,
        *,
        client_factory: Callable[[str], AsanaClient] = AsanaClient,
        classifier: Optional[TaskClassifier] = None,
        resolver_workers: int = SYNC.assignee_workers,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.repository = repository
        self.client_factory = client_factory
        self.classifier = classifier or TaskClassifier()
        self.resolver_workers = resolver_workers
        self.clock = clock
        self.logger = get_sync_logger()
        # Entries disappear once no sync holds the lock.
        self._locks: "weakref.WeakValueDictionary[int, threading.Lock]" = weakref.WeakValueDictionary()
        self._locks_guard = threading.Lock()

    def _lock_for(self, process_id: int) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(process_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[process_id] = lock
            return lock

    # ------------------------------------------------------------------
    # Public API
    def sync(self, process_id: int, process_name: str, project_gid: str, token: str) -> SyncResult:
        with self._lock_for(process_id):
            return self._sync(process_id, process_name, project_gid, token)

    def _sync(self, process_id: int, process_name: str, project_gid: str, token: str) -> SyncResult:
        self.logger.info("Sync started: process %s (%s) <- project %s", process_id, process_name, project_gid)
        try:
            client = self.client_factory(token)
        except SourceFetchError as exc:
            self.logger.error("Sync aborted for process %s: %s", process_id, exc)
            return SyncResult.failure(process_id, process_name, str(exc))

        with client:
            try:
                sections = AsanaSourceAdapter(client).fetch_project_sections(project_gid)
            except SourceFetchError as exc:
                self.logger.error("Snapshot fetch failed for process %s: %s", process_id, exc)
                return SyncResult.failure(process_id, process_name, str(exc))

            candidates, assignee_gids = collect_candidates(sections, self.classifier)
            resolver = AssigneeResolver(client, max_workers=self.resolver_workers)
            emails = resolver.resolve(assignee_gids)

        existing = self.repository.list_synced(process_id)
        existing_by_gid: Dict[str, int] = {}
        removable: Set[str] = set()
        for row in existing:
            if row.external_task_id and row.id is not None:
                existing_by_gid[row.external_task_id] = row.id
                if row.origin == "external":
                    removable.add(row.external_task_id)

        result = SyncResult(process_id=process_id, process_name=process_name, total=len(candidates))
        synced_at = self.clock()
        result.last_synced_at = synced_at
        seen: Set[str] = set()

        for candidate in candidates:
            gid = candidate.task.gid
            seen.add(gid)
            fields = build_row(candidate, emails, synced_at)
            existing_id = existing_by_gid.get(gid)
            try:
                if existing_id is not None:
                    self.repository.update(existing_id, fields)
                    result.updated += 1
                else:
                    fields.update(process_id=process_id, external_task_id=gid)
                    self.repository.insert(fields)
                    result.imported += 1
            except RepositoryWriteError as exc:
                result.failed += 1
                self.logger.warning("Process %s: %s of task %s failed: %s", process_id, exc.operation, gid, exc)

        for gid, row_id in existing_by_gid.items():
            if gid in seen or gid not in removable:
                continue
            try:
                self.repository.delete(row_id)
                result.removed += 1
            except RepositoryWriteError as exc:
                result.failed += 1
                self.logger.warning("Process %s: delete of task %s failed: %s", process_id, gid, exc)

        self.logger.info(
            "Sync finished: process %s imported=%s updated=%s removed=%s total=%s failed=%s",
            process_id,
            result.imported,
            result.updated,
            result.removed,
            result.total,
            result.failed,
        )
        return result


def sync_process_tasks(
    process_id: int,
    process_name: str,
    project_gid: str,
    token: str,
    repository: TaskRepository,
    **options: Any,
) -> SyncResult:
    return TaskReconciler(repository, **options).sync(process_id, process_name, project_gid, token)


__all__ = [
    "SyncCandidate",
    "SyncResult",
    "TaskReconciler",
    "build_row",
    "collect_candidates",
    "sync_process_tasks",
]
