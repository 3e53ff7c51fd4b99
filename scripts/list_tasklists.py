"""Утилита для получения списков задач Google Tasks пользователя."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Iterable, Tuple

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from todo_name_sync.clients import GoogleTasksClient
from todo_name_sync.config import AppConfig
from todo_name_sync.models import GOOGLE
from todo_name_sync.services.rule_store import RuleStore


def _format_table(title: str, rows: Iterable[Tuple[str, str]]) -> str:
    rows = list(rows)
    if not rows:
        return f"{title}: нет данных"
    id_width = max(len(r[0]) for r in rows)
    name_width = max(len(r[1]) for r in rows)
    header = (
        f"{title}:\n"
        f"  {'ID'.ljust(id_width)}  |  {'Title'.ljust(name_width)}\n"
        f"  {'-' * id_width}--+-{'-' * name_width}"
    )
    body = "\n".join(f"  {list_id.ljust(id_width)}  |  {name}" for list_id, name in rows)
    return f"{header}\n{body}"


def main() -> None:
    parser = argparse.ArgumentParser(description="Выводит списки задач Google Tasks пользователя")
    parser.add_argument("user_id", help="Идентификатор пользователя")
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("config.yaml"),
        help="Путь к YAML конфигурации",
    )
    args = parser.parse_args()

    config = AppConfig.load(args.config)
    store = RuleStore(config.state_db)
    try:
        credentials = store.get_credentials(args.user_id, GOOGLE)
    finally:
        store.close()
    if credentials is None:
        sys.exit(f"Пользователь {args.user_id} не привязал аккаунт Google")

    client = GoogleTasksClient(config.google_tasks, timeout=config.sync.request_timeout)
    tasklists = client.list_tasklists(credentials)
    print(_format_table("Google Tasks lists", ((item.id, item.title) for item in tasklists)))


if __name__ == "__main__":
    main()
