"""Построение имени профиля из задач."""
from __future__ import annotations

from typing import Iterable

from todo_name_sync.clients.errors import ProtocolError
from todo_name_sync.models import GOOGLE, Rule, Task


def _position(task: Task) -> str:
    if not isinstance(task.position, str):
        raise ProtocolError(GOOGLE, f"У задачи {task.id or task.title!r} нет строкового поля position")
    return task.position


def _title(task: Task) -> str:
    if not isinstance(task.title, str):
        raise ProtocolError(GOOGLE, f"У задачи {task.id or task.position!r} поле title не строка")
    return task.title


def render_name(tasks: Iterable[Task], rule: Rule) -> str:
    """Возвращает имя профиля для набора задач.

    Задачи сортируются по ``position`` обычным строковым сравнением
    (сортировка устойчивая), заголовки склеиваются через ``separator`` и
    обрамляются ``beginning_text``/``end_text``. Без задач возвращается
    ``normal_name``.
    """
    tasks = list(tasks)
    if not tasks:
        return rule.normal_name
    positions = [_position(task) for task in tasks]
    ordered = [task for _, task in sorted(zip(positions, tasks), key=lambda pair: pair[0])]
    titles = rule.separator.join(_title(task) for task in ordered)
    return f"{rule.beginning_text}{titles}{rule.end_text}"


__all__ = ["render_name"]
