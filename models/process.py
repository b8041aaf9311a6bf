"""Processes that may be linked to an Asana project."""
from __future__ import annotations

from typing import Optional

from sqlmodel import Field, SQLModel


class Process(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    asana_project_gid: Optional[str] = Field(default=None, index=True)
    asana_project_url: Optional[str] = None


__all__ = ["Process"]
