import pytest
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.pool import StaticPool

import main
from models import ProcessTask
from services.errors import RepositoryWriteError
from services.task_repository import SqlTaskRepository
from storage import migrations


def test_migrations_upgrade_legacy_tables():
    engine = create_engine("sqlite://", poolclass=StaticPool)
    with engine.begin() as conn:
        conn.execute(text("CREATE TABLE process (id INTEGER PRIMARY KEY, name TEXT NOT NULL)"))
        conn.execute(
            text(
                "CREATE TABLE process_task (id INTEGER PRIMARY KEY, process_id INTEGER NOT NULL,"
                " title TEXT NOT NULL, category TEXT, status TEXT)"
            )
        )
        conn.execute(text("INSERT INTO process_task (process_id, title) VALUES (1, 'legacy')"))

    migrations.run_all(engine)
    migrations.run_all(engine)

    inspector = inspect(engine)
    task_columns = {c["name"] for c in inspector.get_columns("process_task")}
    assert {"origin", "external_task_id", "parent_external_id", "last_synced_at"} <= task_columns
    process_columns = {c["name"] for c in inspector.get_columns("process")}
    assert "asana_project_gid" in process_columns

    with engine.connect() as conn:
        origin = conn.execute(text("SELECT origin FROM process_task")).scalar_one()
    assert origin == "user_created"


def test_cli_requires_token(monkeypatch, capsys):
    monkeypatch.delenv("ASANA_ACCESS_TOKEN", raising=False)
    monkeypatch.setattr(main, "resolve_asana_token", lambda: None)

    assert main.main(["sync-all"]) == 2
    assert "Asana not connected" in capsys.readouterr().err


def test_repository_rejects_unknown_enum_values(session_factory):
    repo = SqlTaskRepository(session_factory)

    with pytest.raises(RepositoryWriteError) as excinfo:
        repo.insert({"process_id": 1, "title": "Ship it", "category": "deploy", "origin": "bogus"})
    assert excinfo.value.operation == "insert"
    assert "deploy" in str(excinfo.value)
    assert repo.list_for_process(1) == []

    task_id = repo.insert({"process_id": 1, "title": "Ship it", "origin": "external"})
    with pytest.raises(RepositoryWriteError) as excinfo:
        repo.update(task_id, {"status": "archived"})
    assert excinfo.value.operation == "update"
    assert repo.list_for_process(1)[0].status == "active"


@pytest.mark.parametrize(
    "fields",
    [{"category": "deploy"}, {"origin": "bogus"}, {"status": "archived"}],
)
def test_check_constraints_reject_direct_writes(session_factory, fields):
    with session_factory() as session:
        session.add(ProcessTask(process_id=1, title="Ship it", **fields))
        with pytest.raises(IntegrityError):
            session.commit()
