"""CLI-интерфейс для синхронизации имени профиля."""
from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Optional

import typer

from todo_name_sync.clients import GoogleTasksClient, TwitterProfileClient
from todo_name_sync.config import AppConfig
from todo_name_sync.models import GOOGLE, TWITTER, Credentials, RuleDraft
from todo_name_sync.services.rule_store import RuleStore
from todo_name_sync.services.rules import RuleService
from todo_name_sync.services.sync import NameSyncService

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

app = typer.Typer(help="Синхронизация имени профиля Twitter со списком задач Google Tasks")


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format=LOG_FORMAT)


def load_config(config_path: Path, *, dry_run_override: Optional[bool] = None) -> AppConfig:
    config = AppConfig.load(config_path)
    if dry_run_override is not None:
        config.sync.dry_run = dry_run_override
    config.ensure_runtime_dirs()
    return config


def build_clients(config: AppConfig) -> tuple[GoogleTasksClient, TwitterProfileClient]:
    timeout = config.sync.request_timeout
    return (
        GoogleTasksClient(config.google_tasks, timeout=timeout),
        TwitterProfileClient(config.twitter, timeout=timeout),
    )


def build_rule_service(config: AppConfig) -> tuple[RuleService, RuleStore]:
    store = RuleStore(config.state_db)
    tasks, profile = build_clients(config)
    return RuleService(tasks, profile, store), store


@app.command("run-once")
def run_once(
    config_path: Path = typer.Option(Path("config.yaml"), "--config", "-c", help="Путь к YAML конфигурации"),
    verbosity: int = typer.Option(0, "--verbose", "-v", count=True, help="Уровень логирования"),
    dry_run: Optional[bool] = typer.Option(
        None,
        "--dry-run/--no-dry-run",
        help="Не менять имя в профиле (по умолчанию берётся из конфигурации)",
    ),
) -> None:
    """Один прогон синхронизации по всем включённым правилам."""
    configure_logging(verbosity)
    config = load_config(config_path, dry_run_override=dry_run)
    store = RuleStore(config.state_db)
    tasks, profile = build_clients(config)
    try:
        report = NameSyncService(config, tasks, profile, store).run_once()
        typer.echo(json.dumps(report.as_dict(), indent=2, ensure_ascii=False))
    finally:
        store.close()


@app.command("save-rule")
def save_rule(
    user_id: str = typer.Argument(..., help="Идентификатор пользователя"),
    tasklist: str = typer.Option(..., "--tasklist", help="ID списка задач Google Tasks"),
    normal_name: str = typer.Option(..., "--normal-name", help="Имя, когда задач нет"),
    beginning_text: str = typer.Option("", "--beginning-text", help="Текст перед задачами"),
    separator: str = typer.Option("", "--separator", help="Разделитель задач"),
    end_text: str = typer.Option("", "--end-text", help="Текст после задач"),
    config_path: Path = typer.Option(Path("config.yaml"), "--config", "-c"),
    verbosity: int = typer.Option(0, "--verbose", "-v", count=True),
) -> None:
    """Сохраняет правило, применяет его к профилю и включает автоматизацию."""
    configure_logging(verbosity)
    service, store = build_rule_service(load_config(config_path))
    draft = RuleDraft(
        tasklist_id=tasklist,
        beginning_text=beginning_text,
        separator=separator,
        end_text=end_text,
        normal_name=normal_name,
    )
    try:
        rule = service.save_rule(user_id, draft)
        typer.echo(rule.last_generated_name)
    finally:
        store.close()


@app.command("disable-rule")
def disable_rule(
    user_id: str = typer.Argument(..., help="Идентификатор пользователя"),
    config_path: Path = typer.Option(Path("config.yaml"), "--config", "-c"),
    verbosity: int = typer.Option(0, "--verbose", "-v", count=True),
) -> None:
    """Выключает автоматизацию для пользователя."""
    configure_logging(verbosity)
    service, store = build_rule_service(load_config(config_path))
    try:
        service.disable_rule(user_id)
        typer.echo("Автоматизация выключена")
    finally:
        store.close()


@app.command("show-rule")
def show_rule(
    user_id: str = typer.Argument(..., help="Идентификатор пользователя"),
    config_path: Path = typer.Option(Path("config.yaml"), "--config", "-c"),
    verbosity: int = typer.Option(0, "--verbose", "-v", count=True),
) -> None:
    """Выводит сохранённое правило пользователя."""
    configure_logging(verbosity)
    service, store = build_rule_service(load_config(config_path))
    try:
        rule = service.get_rule(user_id)
        typer.echo(json.dumps(asdict(rule), indent=2, ensure_ascii=False, default=str))
    finally:
        store.close()


@app.command("preview")
def preview(
    user_id: str = typer.Argument(..., help="Идентификатор пользователя"),
    config_path: Path = typer.Option(Path("config.yaml"), "--config", "-c"),
    verbosity: int = typer.Option(0, "--verbose", "-v", count=True),
) -> None:
    """Показывает имя, которое получится из текущих задач."""
    configure_logging(verbosity)
    service, store = build_rule_service(load_config(config_path))
    try:
        typer.echo(service.preview(user_id))
    finally:
        store.close()


@app.command("link-account")
def link_account(
    user_id: str = typer.Argument(..., help="Идентификатор пользователя"),
    provider: str = typer.Option(..., "--provider", help=f"{GOOGLE} или {TWITTER}"),
    token: str = typer.Option(..., "--token", help="Access token провайдера"),
    scope: Optional[str] = typer.Option(None, "--scope", help="Выданный scope"),
    config_path: Path = typer.Option(Path("config.yaml"), "--config", "-c"),
) -> None:
    """Сохраняет токен доступа пользователя к провайдеру."""
    if provider not in (GOOGLE, TWITTER):
        raise typer.BadParameter(f"Неизвестный провайдер {provider}", param_hint="--provider")
    config = load_config(config_path)
    store = RuleStore(config.state_db)
    try:
        store.save_credentials(user_id, Credentials(provider=provider, access_token=token, scope=scope))
        typer.echo("Аккаунт привязан")
    finally:
        store.close()


@app.command("verify")
def verify(
    user_id: str = typer.Argument(..., help="Идентификатор пользователя"),
    config_path: Path = typer.Option(Path("config.yaml"), "--config", "-c"),
    verbosity: int = typer.Option(0, "--verbose", "-v", count=True),
) -> None:
    """Проверяет, что оба провайдера принимают токены пользователя."""
    configure_logging(verbosity)
    config = load_config(config_path)
    store = RuleStore(config.state_db)
    tasks, profile = build_clients(config)
    try:
        google = store.get_credentials(user_id, GOOGLE)
        twitter = store.get_credentials(user_id, TWITTER)
        if google is None or twitter is None:
            typer.echo("Не привязан один из аккаунтов", err=True)
            raise typer.Exit(code=1)
        tasklists = tasks.list_tasklists(google)
        name = profile.read_current_name(twitter)
        typer.echo(f"Соединение успешно: списков задач {len(tasklists)}, имя профиля {name!r}")
    finally:
        store.close()


if __name__ == "__main__":
    app()
