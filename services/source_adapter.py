"""Fetches an Asana project tree and normalises it into snapshot types."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from datetime_utils import parse_due, parse_rfc3339
from models.external_task import ExternalSection, ExternalTask
from services.asana_client import AsanaClient
from services.errors import SourceFetchError

_MALFORMED = (AttributeError, KeyError, TypeError, ValueError)


def _nested(item: Dict[str, Any], key: str, field: str) -> Optional[str]:
    value = item.get(key)
    if isinstance(value, dict):
        nested = value.get(field)
        return str(nested) if nested else None
    return None


def normalize_task(item: Dict[str, Any], parent_gid: Optional[str] = None) -> ExternalTask:
    """Map a raw Asana task payload onto :class:`ExternalTask`.

    Subtasks are attached separately by the adapter.
    """
    return ExternalTask(
        gid=str(item["gid"]),
        name=item.get("name") or "",
        notes=item.get("notes") or "",
        completed=bool(item.get("completed")),
        completed_at=parse_rfc3339(item.get("completed_at")),
        assignee_name=_nested(item, "assignee", "name"),
        assignee_gid=_nested(item, "assignee", "gid"),
        due_on=parse_due(item.get("due_on") or item.get("due_at")),
        permalink_url=item.get("permalink_url") or None,
        parent_gid=parent_gid,
    )


class AsanaSourceAdapter:
    """Section -> task -> subtask tree for one project.

    Client errors propagate unchanged and payloads that cannot be normalised
    raise :class:`SourceFetchError`; there is no retry here.
    """

    def __init__(self, client: AsanaClient) -> None:
        self.client = client

    def fetch_project_sections(self, project_gid: str) -> List[ExternalSection]:
        sections: List[ExternalSection] = []
        for raw_section in self.client.project_sections(project_gid):
            try:
                section = ExternalSection(
                    gid=str(raw_section["gid"]),
                    name=raw_section.get("name") or "",
                )
            except _MALFORMED as exc:
                raise SourceFetchError(
                    "malformed Asana payload", path=f"/projects/{project_gid}/sections"
                ) from exc
            for raw_task in self.client.section_tasks(section.gid):
                section.tasks.append(self._task_with_subtasks(raw_task, section.gid))
            sections.append(section)
        return sections

    def _task_with_subtasks(self, raw_task: Dict[str, Any], section_gid: str) -> ExternalTask:
        try:
            task = normalize_task(raw_task)
            has_subtasks = int(raw_task.get("num_subtasks") or 0) > 0
        except _MALFORMED as exc:
            raise SourceFetchError(
                "malformed Asana payload", path=f"/sections/{section_gid}/tasks"
            ) from exc
        if not has_subtasks:
            return task
        raw_subtasks = self.client.subtasks(task.gid)
        try:
            task.subtasks = [normalize_task(raw_sub, parent_gid=task.gid) for raw_sub in raw_subtasks]
        except _MALFORMED as exc:
            raise SourceFetchError(
                "malformed Asana payload", path=f"/tasks/{task.gid}/subtasks"
            ) from exc
        return task


__all__ = ["AsanaSourceAdapter", "normalize_task"]
