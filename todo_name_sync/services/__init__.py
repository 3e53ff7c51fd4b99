"""Сервисный слой приложения."""

from .drift_guard import DriftDecision, decide
from .renderer import render_name
from .rule_store import RuleStore
from .rules import MissingCredentialsError, RuleNotFoundError, RuleService
from .sync import NameSyncService, RuleResult, SyncOutcome, SyncReport

__all__ = [
    "NameSyncService",
    "SyncReport",
    "RuleResult",
    "SyncOutcome",
    "RuleStore",
    "RuleService",
    "MissingCredentialsError",
    "RuleNotFoundError",
    "DriftDecision",
    "decide",
    "render_name",
]
