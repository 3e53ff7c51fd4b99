"""Доменные модели синхронизации имени."""

from .entities import GOOGLE, TWITTER, Credentials, Rule, RuleDraft, Task, TaskList

__all__ = [
    "Task",
    "TaskList",
    "Rule",
    "RuleDraft",
    "Credentials",
    "GOOGLE",
    "TWITTER",
]
