"""Сохранение, выключение и предпросмотр правил пользователя."""
from __future__ import annotations

import logging
from typing import List

from todo_name_sync.clients import GoogleTasksClient, TwitterProfileClient
from todo_name_sync.models import GOOGLE, TWITTER, Credentials, Rule, RuleDraft
from todo_name_sync.services.renderer import render_name
from todo_name_sync.services.rule_store import RuleStore

LOGGER = logging.getLogger(__name__)


class MissingCredentialsError(RuntimeError):
    """У пользователя не привязан один из аккаунтов."""


class RuleNotFoundError(LookupError):
    """У пользователя нет сохранённого правила."""


class RuleService:
    """Операции над правилом, которые выполняет сам пользователь."""

    def __init__(
        self,
        task_source: GoogleTasksClient,
        profile_sink: TwitterProfileClient,
        rule_store: RuleStore,
    ) -> None:
        self._tasks = task_source
        self._profile = profile_sink
        self._store = rule_store

    def _credentials(self, user_id: str, *providers: str) -> List[Credentials]:
        found = [self._store.get_credentials(user_id, provider) for provider in providers]
        missing = [provider for provider, value in zip(providers, found) if value is None]
        if missing:
            raise MissingCredentialsError(f"Пользователь {user_id} не привязал аккаунты: {', '.join(missing)}")
        return found

    def get_rule(self, user_id: str) -> Rule:
        rule = self._store.get_rule(user_id)
        if rule is None:
            raise RuleNotFoundError(f"У пользователя {user_id} нет правила")
        return rule

    def save_rule(self, user_id: str, draft: RuleDraft) -> Rule:
        """Сохраняет правило, сразу применяет его к профилю и включает автоматизацию."""
        google, twitter = self._credentials(user_id, GOOGLE, TWITTER)
        tasks = self._tasks.fetch_tasks(google, draft.tasklist_id)
        name = render_name(
            tasks,
            Rule(
                user_id=user_id,
                tasklist_id=draft.tasklist_id,
                beginning_text=draft.beginning_text,
                separator=draft.separator,
                end_text=draft.end_text,
                normal_name=draft.normal_name,
            ),
        )
        self._profile.write_name(twitter, name)
        LOGGER.info("Правило пользователя %s сохранено, имя %r", user_id, name)
        return self._store.upsert_rule(user_id, draft, name)

    def disable_rule(self, user_id: str) -> None:
        if not self._store.disable(user_id):
            raise RuleNotFoundError(f"У пользователя {user_id} нет правила")
        LOGGER.info("Автоматизация пользователя %s выключена вручную", user_id)

    def preview(self, user_id: str) -> str:
        """Имя, которое получится из текущих задач. Профиль не меняется."""
        rule = self.get_rule(user_id)
        (google,) = self._credentials(user_id, GOOGLE)
        return render_name(self._tasks.fetch_tasks(google, rule.tasklist_id), rule)


__all__ = ["RuleService", "MissingCredentialsError", "RuleNotFoundError"]
