"""Периодическая синхронизация имени профиля с задачами."""
from __future__ import annotations

import logging
from collections import Counter
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from tqdm import tqdm

from todo_name_sync.clients import AuthError, GoogleTasksClient, ProviderError, TransientError, TwitterProfileClient
from todo_name_sync.config import AppConfig
from todo_name_sync.models import GOOGLE, TWITTER, Rule
from todo_name_sync.services.drift_guard import DriftDecision, decide
from todo_name_sync.services.renderer import render_name
from todo_name_sync.services.rule_store import RuleStore

LOGGER = logging.getLogger(__name__)


class SyncOutcome(str, Enum):
    UPDATED = "updated"
    ALREADY_CURRENT = "already_current"
    DRY_RUN = "dry_run"
    DISABLED_DRIFT = "disabled_drift"
    DISABLED_AUTH = "disabled_auth"
    SKIPPED_DISABLED = "skipped_disabled"
    SKIPPED_NO_CREDENTIALS = "skipped_no_credentials"
    FAILED_TRANSIENT = "failed_transient"
    FAILED_PROTOCOL = "failed_protocol"
    FAILED = "failed"


FAILURES = frozenset({SyncOutcome.FAILED_TRANSIENT, SyncOutcome.FAILED_PROTOCOL, SyncOutcome.FAILED})


@dataclass
class RuleResult:
    user_id: str
    outcome: SyncOutcome
    name: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome not in FAILURES


@dataclass
class SyncReport:
    """Итог одного прогона: результат по каждому правилу."""

    results: List[RuleResult] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for result in self.results if result.ok)

    @property
    def failed(self) -> int:
        return len(self.results) - self.succeeded

    def by_outcome(self) -> Dict[str, int]:
        return dict(Counter(result.outcome.value for result in self.results))

    def as_dict(self) -> Dict[str, object]:
        return {
            "succeeded": self.succeeded,
            "failed": self.failed,
            "by_outcome": self.by_outcome(),
            "results": [
                {
                    "user_id": result.user_id,
                    "outcome": result.outcome.value,
                    "name": result.name,
                    "error": result.error,
                }
                for result in self.results
            ],
        }


class NameSyncService:
    """Оркестратор синхронизации имён."""

    def __init__(
        self,
        config: AppConfig,
        task_source: GoogleTasksClient,
        profile_sink: TwitterProfileClient,
        rule_store: RuleStore,
    ) -> None:
        self._config = config
        self._tasks = task_source
        self._profile = profile_sink
        self._store = rule_store

    # region public API
    def run_once(self) -> SyncReport:
        """Один проход по всем правилам с включённой автоматизацией."""
        rules = self._store.list_eligible_rules()
        if not rules:
            LOGGER.info("Нет правил для синхронизации")
            return SyncReport()

        workers = min(self._config.sync.workers, len(rules))
        LOGGER.info("Синхронизация %s правил, потоков: %s", len(rules), workers)
        results: List[RuleResult] = []
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {executor.submit(self.sync_rule, rule): rule for rule in rules}
            progress = tqdm(
                as_completed(futures),
                total=len(futures),
                desc="Правила",
                disable=not self._config.sync.show_progress,
            )
            for future in progress:
                rule = futures[future]
                try:
                    results.append(future.result())
                except Exception as exc:
                    LOGGER.exception("Непредвиденная ошибка при обработке правила %s", rule.user_id)
                    results.append(RuleResult(rule.user_id, SyncOutcome.FAILED, error=str(exc)))

        results.sort(key=lambda result: result.user_id)
        report = SyncReport(results)
        LOGGER.info("Синхронизация завершена: успешно %s, ошибок %s", report.succeeded, report.failed)
        return report

    def sync_rule(self, rule: Rule) -> RuleResult:
        """Обрабатывает одно правило: задачи → имя → проверка дрейфа → запись."""
        if not rule.is_eligible:
            return RuleResult(rule.user_id, SyncOutcome.SKIPPED_DISABLED)

        google = self._store.get_credentials(rule.user_id, GOOGLE)
        twitter = self._store.get_credentials(rule.user_id, TWITTER)
        if google is None or twitter is None:
            LOGGER.info("У пользователя %s не привязан один из аккаунтов, пропуск", rule.user_id)
            return RuleResult(rule.user_id, SyncOutcome.SKIPPED_NO_CREDENTIALS)

        try:
            tasks = self._tasks.fetch_tasks(google, rule.tasklist_id)
            computed = render_name(tasks, rule)
            current = self._profile.read_current_name(twitter)
        except ProviderError as exc:
            return self._handle_error(rule, exc)

        decision = decide(current, computed, rule)
        if decision is DriftDecision.ALREADY_CURRENT:
            LOGGER.debug("Имя пользователя %s уже актуально", rule.user_id)
            return RuleResult(rule.user_id, SyncOutcome.ALREADY_CURRENT, name=computed)
        if decision is DriftDecision.DISABLE:
            LOGGER.warning(
                "Имя пользователя %s изменено вручную (%r), автоматизация выключена",
                rule.user_id,
                current,
            )
            self._store.set_last_generated_name(rule.user_id, None)
            return RuleResult(rule.user_id, SyncOutcome.DISABLED_DRIFT, name=current)

        if self._config.sync.dry_run:
            LOGGER.info("[DRY-RUN] Пользователь %s → %r", rule.user_id, computed)
            return RuleResult(rule.user_id, SyncOutcome.DRY_RUN, name=computed)
        try:
            self._profile.write_name(twitter, computed)
        except ProviderError as exc:
            return self._handle_error(rule, exc)
        self._store.set_last_generated_name(rule.user_id, computed)
        LOGGER.info("Имя пользователя %s обновлено: %r", rule.user_id, computed)
        return RuleResult(rule.user_id, SyncOutcome.UPDATED, name=computed)

    # endregion

    def _handle_error(self, rule: Rule, exc: ProviderError) -> RuleResult:
        if isinstance(exc, AuthError):
            LOGGER.warning(
                "Токен %s пользователя %s недействителен, автоматизация выключена: %s",
                exc.provider,
                rule.user_id,
                exc,
            )
            self._store.disable(rule.user_id)
            return RuleResult(rule.user_id, SyncOutcome.DISABLED_AUTH, error=str(exc))
        if isinstance(exc, TransientError):
            LOGGER.warning("Временная ошибка %s для пользователя %s: %s", exc.provider, rule.user_id, exc)
            return RuleResult(rule.user_id, SyncOutcome.FAILED_TRANSIENT, error=str(exc))
        LOGGER.error("Некорректный ответ %s для пользователя %s: %s", exc.provider, rule.user_id, exc)
        return RuleResult(rule.user_id, SyncOutcome.FAILED_PROTOCOL, error=str(exc))


__all__ = ["NameSyncService", "SyncReport", "RuleResult", "SyncOutcome"]
