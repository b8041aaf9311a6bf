"""Ad-hoc database migrations for ProcessHub."""

from __future__ import annotations

from sqlalchemy import text


def _column_exists(conn, table: str, column: str) -> bool:
    result = conn.execute(text(f"PRAGMA table_info('{table}')"))
    return any(row[1] == column for row in result)


def ensure_process_task_columns(conn) -> None:
    columns = {
        "origin": "TEXT NOT NULL DEFAULT 'user_created'",
        "assignee_name": "TEXT",
        "assignee_email": "TEXT",
        "assignee_external_id": "TEXT",
        "due_date": "DATE",
        "completed": "BOOLEAN NOT NULL DEFAULT 0",
        "completed_at": "DATETIME",
        "section_name": "TEXT",
        "section_external_id": "TEXT",
        "parent_external_id": "TEXT",
        "is_subtask": "BOOLEAN NOT NULL DEFAULT 0",
        "external_task_id": "TEXT",
        "external_url": "TEXT",
        "last_synced_at": "DATETIME",
    }
    for name, ddl_type in columns.items():
        if not _column_exists(conn, "process_task", name):
            conn.execute(text(f"ALTER TABLE process_task ADD COLUMN {name} {ddl_type}"))


def ensure_process_link_columns(conn) -> None:
    for name in ("asana_project_gid", "asana_project_url"):
        if not _column_exists(conn, "process", name):
            conn.execute(text(f"ALTER TABLE process ADD COLUMN {name} TEXT"))


def ensure_sync_indexes(conn) -> None:
    conn.execute(
        text(
            """
            CREATE INDEX IF NOT EXISTS ix_process_task_process_origin
            ON process_task (process_id, origin)
            """
        )
    )
    conn.execute(
        text(
            """
            CREATE UNIQUE INDEX IF NOT EXISTS ux_process_task_process_external
            ON process_task (process_id, external_task_id)
            WHERE external_task_id IS NOT NULL
            """
        )
    )


def run_all(engine) -> None:
    with engine.begin() as conn:
        ensure_process_task_columns(conn)
        ensure_process_link_columns(conn)
        ensure_sync_indexes(conn)


__all__ = ["run_all"]
