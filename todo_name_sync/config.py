"""Загрузка и валидация конфигурации приложения."""
from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator


class GoogleTasksSettings(BaseModel):
    """Настройки подключения к Google Tasks API."""

    base_url: str = Field(
        "https://tasks.googleapis.com",
        description="Базовый URL Google Tasks API",
    )


class TwitterSettings(BaseModel):
    """Настройки подключения к Twitter API."""

    base_url: str = Field("https://api.twitter.com", description="Базовый URL Twitter API")


class SyncOptions(BaseModel):
    """Параметры синхронизации имён."""

    workers: int = Field(4, description="Сколько правил обрабатывать параллельно")
    request_timeout: float = Field(30.0, description="Таймаут одного HTTP-запроса, секунды")
    show_progress: bool = Field(False, description="Показывать ли прогресс-бар при прогоне")
    dry_run: bool = Field(False, description="Если True, имя в профиле не меняется")

    @field_validator("workers")
    @classmethod
    def _positive_workers(cls, value: int) -> int:
        if value < 1:
            raise ValueError("workers должен быть не меньше 1")
        return value

    @field_validator("request_timeout")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("request_timeout должен быть больше 0")
        return value


class AppConfig(BaseModel):
    """Корневая конфигурация приложения."""

    google_tasks: GoogleTasksSettings = Field(default_factory=GoogleTasksSettings)
    twitter: TwitterSettings = Field(default_factory=TwitterSettings)
    sync: SyncOptions = Field(default_factory=SyncOptions)
    state_db: Path = Field(Path(".name_sync.sqlite"), description="Путь к SQLite-базе правил")

    @field_validator("state_db", mode="before")
    @classmethod
    def _state_db_path(cls, value: Path | str) -> Path:
        return Path(value)

    @classmethod
    def load(cls, path: Path | str) -> "AppConfig":
        """Загружает конфигурацию из YAML-файла."""
        path = Path(path)
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        try:
            return cls.model_validate(raw)
        except ValidationError as exc:
            raise ValueError(f"Конфигурация {path} некорректна: {exc}") from exc

    def ensure_runtime_dirs(self) -> None:
        """Создаёт каталог для базы состояния."""
        self.state_db.parent.mkdir(parents=True, exist_ok=True)


__all__ = ["AppConfig", "GoogleTasksSettings", "TwitterSettings", "SyncOptions"]
