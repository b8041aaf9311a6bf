"""Console entry point for syncing Asana projects into ProcessHub."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from core.settings import SYNC
from datetime_utils import to_rfc3339_utc, utc_now
from services.batch_sync import sync_all_processes
from services.reconciler import TaskReconciler
from services.task_repository import ProcessRepository, SqlTaskRepository
from storage.config import resolve_asana_token, update_config
from storage.db import init_db


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__ or "")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log to stderr as well")
    sub = parser.add_subparsers(dest="command", required=True)

    one = sub.add_parser("sync", help="Sync tasks of one linked process")
    one.add_argument("--process-id", type=int, required=True)

    batch = sub.add_parser("sync-all", help="Sync every process linked to an Asana project")
    batch.add_argument(
        "--delay",
        type=float,
        default=SYNC.batch_delay_sec,
        help="Seconds to wait between processes (default: %(default)s)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")

    token = resolve_asana_token()
    if not token:
        print("Asana not connected: set ASANA_ACCESS_TOKEN or asana_access_token in config.json", file=sys.stderr)
        return 2

    init_db()
    tasks = SqlTaskRepository()
    processes = ProcessRepository()

    if args.command == "sync":
        proc = processes.get(args.process_id)
        if proc is None:
            print(f"Process {args.process_id} not found", file=sys.stderr)
            return 1
        if not proc.asana_project_gid:
            print(f"Process {args.process_id} is not linked to an Asana project", file=sys.stderr)
            return 1
        result = TaskReconciler(tasks).sync(proc.id, proc.name, proc.asana_project_gid, token)
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        return 0 if result.ok else 1

    summary = sync_all_processes(processes.list_linked(), token, tasks, delay_sec=args.delay)
    update_config(last_sync_all_at=to_rfc3339_utc(utc_now()))
    print(json.dumps(summary.to_dict(), ensure_ascii=False, indent=2))
    return 0 if summary.failed == 0 else 1


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
