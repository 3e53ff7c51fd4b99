"""Обнаружение ручного изменения имени профиля."""
from __future__ import annotations

from enum import Enum

from todo_name_sync.models import Rule


class DriftDecision(str, Enum):
    PROCEED = "proceed"
    ALREADY_CURRENT = "already_current"
    DISABLE = "disable"


def decide(current_remote_name: str, computed_name: str, rule: Rule) -> DriftDecision:
    """Решает, можно ли перезаписать имя в профиле.

    Имя в профиле сравнивается с тем, что синхронизация записала последней.
    Если оно отличается и от него, и от нового имени, значит его поменял
    человек, и автоматизацию для правила нужно выключить.
    """
    if current_remote_name == computed_name:
        return DriftDecision.ALREADY_CURRENT
    if current_remote_name == rule.last_generated_name:
        return DriftDecision.PROCEED
    return DriftDecision.DISABLE


__all__ = ["DriftDecision", "decide"]
