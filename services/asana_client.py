"""Minimal Asana REST client used by the task synchronisation."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from core.settings import ASANA
from services.errors import SourceFetchError


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        errors = payload.get("errors") or []
        if errors and isinstance(errors[0], dict) and errors[0].get("message"):
            return str(errors[0]["message"])
    return f"Asana API error: {response.status_code}"


class AsanaClient:
    def __init__(
        self,
        token: str,
        *,
        base_url: str = ASANA.api_base,
        timeout: float = ASANA.timeout_sec,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        if not token:
            raise SourceFetchError("Asana access token is missing")
        self.base_url = base_url.rstrip("/")
        self._http = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/json",
            },
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "AsanaClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Requests
    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        try:
            response = self._http.get(path, params=params)
        except httpx.HTTPError as exc:
            raise SourceFetchError(f"Asana request failed: {exc}", path=path) from exc

        if response.is_error:
            raise SourceFetchError(
                _error_message(response),
                status_code=response.status_code,
                path=path,
            )
        try:
            body = response.json()
        except ValueError as exc:
            raise SourceFetchError("Asana returned a non-JSON body", path=path) from exc
        if not isinstance(body, dict):
            raise SourceFetchError("Asana returned an unexpected body", path=path)
        return body

    def get_all_pages(self, path: str, params: Optional[Dict[str, Any]] = None) -> List[Dict]:
        query: Dict[str, Any] = dict(params or {})
        query["limit"] = ASANA.page_limit

        items: List[Dict] = []
        while True:
            response = self.get(path, query)
            data = response.get("data") or []
            next_page = response.get("next_page") or {}
            if not isinstance(data, list) or not isinstance(next_page, dict):
                raise SourceFetchError("malformed Asana payload", path=path)
            items.extend(data)
            offset = next_page.get("offset")
            if not offset:
                break
            query["offset"] = offset
        return items

    # ------------------------------------------------------------------
    # Resources
    def project_sections(self, project_gid: str) -> List[Dict]:
        return self.get_all_pages(
            f"/projects/{project_gid}/sections", {"opt_fields": "name"}
        )

    def section_tasks(self, section_gid: str) -> List[Dict]:
        return self.get_all_pages(
            f"/sections/{section_gid}/tasks",
            {"opt_fields": ",".join(ASANA.task_fields)},
        )

    def subtasks(self, task_gid: str) -> List[Dict]:
        return self.get_all_pages(
            f"/tasks/{task_gid}/subtasks",
            {"opt_fields": ",".join(ASANA.subtask_fields)},
        )

    def user_email(self, user_gid: str) -> Optional[str]:
        response = self.get(f"/users/{user_gid}", {"opt_fields": "email"})
        data = response.get("data") or {}
        email = (data.get("email") or "").strip()
        return email or None


__all__ = ["AsanaClient"]
