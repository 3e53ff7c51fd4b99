"""Маппинг ответов Google Tasks во внутренние модели."""
from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional

from dateutil import parser

from todo_name_sync.models import Task, TaskList

COMPLETED_STATUS = "completed"


class TaskMapper:
    """Конвертация данных между API и внутренними моделями."""

    @staticmethod
    def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
        if not value:
            return None
        return parser.isoparse(value)

    @staticmethod
    def is_outstanding(payload: Dict) -> bool:
        """Задача не выполнена, не удалена и не скрыта."""
        if payload.get("status") == COMPLETED_STATUS or payload.get("completed"):
            return False
        return not (payload.get("deleted") or payload.get("hidden"))

    def map_task(self, payload: Dict) -> Task:
        # position не приводится к строке: его проверяет рендерер
        return Task(
            id=payload.get("id"),
            title=payload.get("title") or "",
            position=payload.get("position"),
            status=payload.get("status") or "needsAction",
            updated_at=self._parse_datetime(payload.get("updated")),
            due_at=self._parse_datetime(payload.get("due")),
        )

    def map_tasklist(self, payload: Dict) -> TaskList:
        return TaskList(id=str(payload.get("id") or ""), title=payload.get("title") or "")


__all__ = ["TaskMapper"]
