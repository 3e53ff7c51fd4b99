"""Определения доменных сущностей."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

GOOGLE = "google"
TWITTER = "twitter"


@dataclass(slots=True)
class Task:
    """Невыполненная задача из списка Google Tasks."""

    title: str
    position: str
    id: Optional[str] = None
    status: str = "needsAction"
    updated_at: Optional[datetime] = None
    due_at: Optional[datetime] = None


@dataclass(slots=True)
class TaskList:
    """Список задач пользователя."""

    id: str
    title: str


@dataclass(slots=True)
class Rule:
    """Правило построения имени профиля из задач.

    ``last_generated_name`` хранит имя, которое синхронизация записала
    последним; по нему определяется ручное изменение имени в профиле.
    """

    user_id: str
    tasklist_id: str
    beginning_text: str = ""
    separator: str = ""
    end_text: str = ""
    normal_name: str = ""
    last_generated_name: Optional[str] = None
    enabled: bool = True
    updated_at: Optional[datetime] = None
    last_synced_at: Optional[datetime] = None

    @property
    def is_eligible(self) -> bool:
        return self.enabled and self.last_generated_name is not None


@dataclass(slots=True)
class RuleDraft:
    """Параметры правила, присланные пользователем."""

    tasklist_id: str
    beginning_text: str = ""
    separator: str = ""
    end_text: str = ""
    normal_name: str = ""


@dataclass(slots=True)
class Credentials:
    """Токен доступа к одному из провайдеров."""

    provider: str
    access_token: str
    token_type: str = "Bearer"
    scope: Optional[str] = None

    @property
    def authorization(self) -> str:
        return f"{self.token_type} {self.access_token}"


__all__ = ["GOOGLE", "TWITTER", "Task", "TaskList", "Rule", "RuleDraft", "Credentials"]
