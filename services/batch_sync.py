"""Sequential sync of every process linked to an Asana project."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional

from core.settings import SYNC
from models.process import Process
from services.reconciler import SyncResult, TaskReconciler
from services.sync_log import get_sync_logger
from services.task_repository import TaskRepository


@dataclass
class BatchSummary:
    results: List[SyncResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def synced(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.ok)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": [r.to_dict() for r in self.results],
            "summary": {"total": self.total, "synced": self.synced, "failed": self.failed},
        }


def sync_all_processes(
    processes: Iterable[Process],
    token: str,
    repository: TaskRepository,
    *,
    delay_sec: float = SYNC.batch_delay_sec,
    reconciler: Optional[TaskReconciler] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> BatchSummary:
    """Sync processes one by one, pausing ``delay_sec`` between them.

    A failure in one process is recorded in its result and does not stop the
    batch.
    """
    logger = get_sync_logger()
    engine = reconciler or TaskReconciler(repository)
    linked = [p for p in processes if p.asana_project_gid]
    summary = BatchSummary()

    for index, proc in enumerate(linked):
        try:
            result = engine.sync(proc.id, proc.name, proc.asana_project_gid, token)
        except Exception as exc:
            logger.error("Sync crashed for process %s: %s", proc.id, exc)
            result = SyncResult.failure(proc.id, proc.name, str(exc))
        summary.results.append(result)

        if delay_sec > 0 and index < len(linked) - 1:
            sleep(delay_sec)

    logger.info(
        "Batch sync finished: total=%s synced=%s failed=%s",
        summary.total,
        summary.synced,
        summary.failed,
    )
    return summary


__all__ = ["BatchSummary", "sync_all_processes"]
