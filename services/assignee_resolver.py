"""Resolve Asana assignee gids to email addresses for one sync run."""
from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Dict, Iterable, List, Optional, Protocol

from core.settings import SYNC
from services.errors import AssigneeResolutionError, SyncError
from services.sync_log import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)


class UserEmailSource(Protocol):
    def user_email(self, user_gid: str) -> Optional[str]: ...


class AssigneeResolver:
    """Looks every gid up at most once per instance.

    Lookups fan out over a bounded thread pool. A failed lookup only drops
    that gid from the result.
    """

    def __init__(self, source: UserEmailSource, *, max_workers: int = SYNC.assignee_workers) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        self.source = source
        self.max_workers = max_workers
        self._cache: Dict[str, Optional[str]] = {}

    def resolve(self, assignee_gids: Iterable[Optional[str]]) -> Dict[str, str]:
        requested = {gid for gid in assignee_gids if gid}
        unique: List[str] = sorted(gid for gid in requested if gid not in self._cache)

        if unique:
            workers = min(self.max_workers, len(unique))
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures: Dict[Future[Optional[str]], str] = {
                    executor.submit(self._lookup, gid): gid for gid in unique
                }
                for future in as_completed(futures):
                    gid = futures[future]
                    try:
                        self._cache[gid] = future.result()
                    except AssigneeResolutionError as exc:
                        logger.warning("Assignee %s not resolved: %s", gid, exc)
                        self._cache[gid] = None

        return {
            gid: email
            for gid, email in self._cache.items()
            if email and gid in requested
        }

    def _lookup(self, gid: str) -> Optional[str]:
        try:
            return self.source.user_email(gid)
        except SyncError as exc:
            raise AssigneeResolutionError(gid, str(exc)) from exc
        except Exception as exc:
            raise AssigneeResolutionError(gid, f"{type(exc).__name__}: {exc}") from exc


__all__ = ["AssigneeResolver", "UserEmailSource"]
