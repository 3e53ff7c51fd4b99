# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from todo_name_sync.config import AppConfig
from todo_name_sync.models import GOOGLE, TWITTER, Credentials, Rule, RuleDraft
from todo_name_sync.services.rule_store import RuleStore

from .fakes import FakeProfileSink, FakeTaskSource


@pytest.fixture()
def config(tmp_path: Path) -> AppConfig:
    return AppConfig.model_validate({"state_db": str(tmp_path / "state.sqlite"), "sync": {"workers": 4}})


@pytest.fixture()
def store(config: AppConfig) -> RuleStore:
    store = RuleStore(config.state_db)
    yield store
    store.close()


@pytest.fixture()
def task_source() -> FakeTaskSource:
    return FakeTaskSource()


@pytest.fixture()
def profile_sink() -> FakeProfileSink:
    return FakeProfileSink()


@pytest.fixture()
def add_user(store: RuleStore, profile_sink: FakeProfileSink) -> Callable[..., Rule]:
    """
    Registers a user with both accounts linked and an enabled rule.

    Google token is "g-<user>", Twitter token is "t-<user>"; the remote name
    starts out equal to the last generated name unless given explicitly.
    """

    def _add(
        user_id: str,
        *,
        last_generated_name: str,
        remote_name: str | None = None,
        tasklist_id: str | None = None,
        beginning_text: str = "",
        separator: str = ", ",
        end_text: str = "",
        normal_name: str = "",
        link_google: bool = True,
        link_twitter: bool = True,
    ) -> Rule:
        if link_google:
            store.save_credentials(user_id, Credentials(provider=GOOGLE, access_token=f"g-{user_id}"))
        if link_twitter:
            store.save_credentials(user_id, Credentials(provider=TWITTER, access_token=f"t-{user_id}"))
        profile_sink.names[f"t-{user_id}"] = remote_name if remote_name is not None else last_generated_name
        draft = RuleDraft(
            tasklist_id=tasklist_id or f"list-{user_id}",
            beginning_text=beginning_text,
            separator=separator,
            end_text=end_text,
            normal_name=normal_name,
        )
        return store.upsert_rule(user_id, draft, last_generated_name)

    return _add
