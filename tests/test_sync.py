# tests/test_sync.py

from __future__ import annotations

from todo_name_sync.clients import AuthError, ProtocolError, TransientError
from todo_name_sync.config import AppConfig
from todo_name_sync.models import GOOGLE, TWITTER, Task
from todo_name_sync.services.rule_store import RuleStore
from todo_name_sync.services.sync import NameSyncService, SyncOutcome

from .fakes import FakeProfileSink, FakeTaskSource

BUY_MILK = Task(title="Buy milk", position="a")
CALL_BOB = Task(title="Call Bob", position="b")


def _service(config: AppConfig, task_source, profile_sink, store: RuleStore) -> NameSyncService:
    return NameSyncService(config, task_source, profile_sink, store)


def _alex(add_user, **overrides):
    fields = dict(
        beginning_text="Alex@",
        separator="、",
        end_text="",
        normal_name="Alex",
        last_generated_name="Alex@Buy milk",
        tasklist_id="alex-list",
    )
    fields.update(overrides)
    return add_user("alex", **fields)


def test_scenario_a_new_task_updates_name(config, store, task_source, profile_sink, add_user) -> None:
    _alex(add_user)
    task_source.tasks["alex-list"] = [CALL_BOB, BUY_MILK]

    report = _service(config, task_source, profile_sink, store).run_once()

    assert [r.outcome for r in report.results] == [SyncOutcome.UPDATED]
    assert profile_sink.writes == [("t-alex", "Alex@Buy milk、Call Bob")]
    assert store.get_rule("alex").last_generated_name == "Alex@Buy milk、Call Bob"


def test_scenario_b_manual_edit_disables_without_write(config, store, task_source, profile_sink, add_user) -> None:
    _alex(add_user, remote_name="Someone else entirely")
    task_source.tasks["alex-list"] = [BUY_MILK, CALL_BOB]

    report = _service(config, task_source, profile_sink, store).run_once()

    assert report.results[0].outcome is SyncOutcome.DISABLED_DRIFT
    assert profile_sink.writes == []
    rule = store.get_rule("alex")
    assert rule.last_generated_name is None
    assert rule.enabled is False


def test_disabled_rule_is_not_touched_by_later_runs(config, store, task_source, profile_sink, add_user) -> None:
    _alex(add_user, remote_name="Someone else entirely")
    task_source.tasks["alex-list"] = [BUY_MILK, CALL_BOB]
    service = _service(config, task_source, profile_sink, store)
    service.run_once()
    task_source.calls.clear()

    report = service.run_once()

    assert report.results == []
    assert task_source.calls == []
    assert profile_sink.writes == []


def test_scenario_c_task_auth_error_disables_and_continues(
    config, store, task_source, profile_sink, add_user
) -> None:
    _alex(add_user)
    add_user("bob", last_generated_name="Bob", normal_name="Bob", tasklist_id="bob-list")
    task_source.tasks["alex-list"] = AuthError(GOOGLE, "expired", status_code=401)
    task_source.tasks["bob-list"] = [Task(title="Walk", position="1")]

    report = _service(config, task_source, profile_sink, store).run_once()

    outcomes = {r.user_id: r.outcome for r in report.results}
    assert outcomes == {"alex": SyncOutcome.DISABLED_AUTH, "bob": SyncOutcome.UPDATED}
    assert "t-alex" not in profile_sink.reads
    assert all(token != "t-alex" for token, _ in profile_sink.writes)
    assert store.get_rule("alex").last_generated_name is None
    assert store.get_rule("bob").last_generated_name == "Walk"


def test_scenario_d_empty_tasks_render_normal_name(config, store, task_source, profile_sink, add_user) -> None:
    _alex(add_user)
    task_source.tasks["alex-list"] = []

    report = _service(config, task_source, profile_sink, store).run_once()

    assert report.results[0].outcome is SyncOutcome.UPDATED
    assert profile_sink.writes == [("t-alex", "Alex")]
    assert store.get_rule("alex").last_generated_name == "Alex"


def test_second_run_is_already_current(config, store, task_source, profile_sink, add_user) -> None:
    _alex(add_user)
    task_source.tasks["alex-list"] = [BUY_MILK, CALL_BOB]
    service = _service(config, task_source, profile_sink, store)

    first = service.run_once()
    second = service.run_once()

    assert first.results[0].outcome is SyncOutcome.UPDATED
    assert second.results[0].outcome is SyncOutcome.ALREADY_CURRENT
    assert len(profile_sink.writes) == 1


def test_unchanged_tasks_need_no_write(config, store, task_source, profile_sink, add_user) -> None:
    _alex(add_user)
    task_source.tasks["alex-list"] = [BUY_MILK]

    report = _service(config, task_source, profile_sink, store).run_once()

    assert report.results[0].outcome is SyncOutcome.ALREADY_CURRENT
    assert profile_sink.writes == []


def test_missing_credentials_skip_rule(config, store, task_source, profile_sink, add_user) -> None:
    _alex(add_user, link_twitter=False)

    report = _service(config, task_source, profile_sink, store).run_once()

    assert report.results[0].outcome is SyncOutcome.SKIPPED_NO_CREDENTIALS
    assert report.failed == 0
    assert task_source.calls == []
    assert store.get_rule("alex").last_generated_name == "Alex@Buy milk"


def test_transient_task_error_leaves_rule(config, store, task_source, profile_sink, add_user) -> None:
    _alex(add_user)
    task_source.tasks["alex-list"] = TransientError(GOOGLE, "503", status_code=503)

    report = _service(config, task_source, profile_sink, store).run_once()

    assert report.results[0].outcome is SyncOutcome.FAILED_TRANSIENT
    assert report.failed == 1
    rule = store.get_rule("alex")
    assert rule.enabled and rule.last_generated_name == "Alex@Buy milk"


def test_missing_position_is_protocol_failure(config, store, task_source, profile_sink, add_user) -> None:
    _alex(add_user)
    task_source.tasks["alex-list"] = [BUY_MILK, Task(title="Broken", position=None)]

    report = _service(config, task_source, profile_sink, store).run_once()

    assert report.results[0].outcome is SyncOutcome.FAILED_PROTOCOL
    assert profile_sink.writes == []
    assert store.get_rule("alex").enabled


def test_profile_read_auth_error_disables(config, store, task_source, profile_sink, add_user) -> None:
    _alex(add_user)
    task_source.tasks["alex-list"] = [BUY_MILK, CALL_BOB]
    profile_sink.read_errors["t-alex"] = AuthError(TWITTER, "revoked", status_code=401)

    report = _service(config, task_source, profile_sink, store).run_once()

    assert report.results[0].outcome is SyncOutcome.DISABLED_AUTH
    assert profile_sink.writes == []
    assert store.get_rule("alex").enabled is False


def test_profile_read_protocol_error_is_logged_only(config, store, task_source, profile_sink, add_user) -> None:
    _alex(add_user)
    profile_sink.read_errors["t-alex"] = ProtocolError(TWITTER, "no data.name")

    report = _service(config, task_source, profile_sink, store).run_once()

    assert report.results[0].outcome is SyncOutcome.FAILED_PROTOCOL
    assert store.get_rule("alex").enabled


def test_write_auth_error_disables(config, store, task_source, profile_sink, add_user) -> None:
    _alex(add_user)
    task_source.tasks["alex-list"] = [BUY_MILK, CALL_BOB]
    profile_sink.write_errors["t-alex"] = AuthError(TWITTER, "forbidden", status_code=403)

    report = _service(config, task_source, profile_sink, store).run_once()

    assert report.results[0].outcome is SyncOutcome.DISABLED_AUTH
    assert store.get_rule("alex").last_generated_name is None


def test_write_transient_error_keeps_baseline(config, store, task_source, profile_sink, add_user) -> None:
    _alex(add_user)
    task_source.tasks["alex-list"] = [BUY_MILK, CALL_BOB]
    profile_sink.write_errors["t-alex"] = TransientError(TWITTER, "rate limited", status_code=429)
    service = _service(config, task_source, profile_sink, store)

    first = service.run_once()
    assert first.results[0].outcome is SyncOutcome.FAILED_TRANSIENT
    assert store.get_rule("alex").last_generated_name == "Alex@Buy milk"

    del profile_sink.write_errors["t-alex"]
    second = service.run_once()
    assert second.results[0].outcome is SyncOutcome.UPDATED
    assert profile_sink.writes == [("t-alex", "Alex@Buy milk、Call Bob")]


def test_dry_run_skips_write_and_store(config, store, task_source, profile_sink, add_user) -> None:
    config.sync.dry_run = True
    _alex(add_user)
    task_source.tasks["alex-list"] = [BUY_MILK, CALL_BOB]

    report = _service(config, task_source, profile_sink, store).run_once()

    assert report.results[0].outcome is SyncOutcome.DRY_RUN
    assert report.results[0].name == "Alex@Buy milk、Call Bob"
    assert profile_sink.writes == []
    assert store.get_rule("alex").last_generated_name == "Alex@Buy milk"


def test_unexpected_error_does_not_abort_batch(config, store, task_source, profile_sink, add_user) -> None:
    for index in range(6):
        add_user(f"user{index}", last_generated_name=f"old{index}", normal_name=f"new{index}")
    task_source.tasks["list-user3"] = RuntimeError("boom")

    report = _service(config, task_source, profile_sink, store).run_once()

    outcomes = {r.user_id: r.outcome for r in report.results}
    assert outcomes.pop("user3") is SyncOutcome.FAILED
    assert set(outcomes.values()) == {SyncOutcome.UPDATED}
    assert [r.user_id for r in report.results] == [f"user{i}" for i in range(6)]
    assert report.succeeded == 5
    assert report.failed == 1
    assert report.by_outcome() == {"updated": 5, "failed": 1}
    assert store.get_rule("user3").last_generated_name == "old3"


def test_empty_store_produces_empty_report(config, store, task_source, profile_sink) -> None:
    report = _service(config, task_source, profile_sink, store).run_once()
    assert report.as_dict() == {"succeeded": 0, "failed": 0, "by_outcome": {}, "results": []}


def test_sync_rule_skips_disabled_rule(config, store, task_source, profile_sink, add_user) -> None:
    rule = _alex(add_user)
    rule.enabled = False

    result = _service(config, task_source, profile_sink, store).sync_rule(rule)

    assert result.outcome is SyncOutcome.SKIPPED_DISABLED
    assert task_source.calls == []


def test_profile_read_transient_error_leaves_rule(config, store, task_source, profile_sink, add_user) -> None:
    _alex(add_user)
    task_source.tasks["alex-list"] = [BUY_MILK, CALL_BOB]
    profile_sink.read_errors["t-alex"] = TransientError(TWITTER, "timeout")

    report = _service(config, task_source, profile_sink, store).run_once()

    assert report.results[0].outcome is SyncOutcome.FAILED_TRANSIENT
    assert profile_sink.writes == []
    rule = store.get_rule("alex")
    assert rule.enabled and rule.last_generated_name == "Alex@Buy milk"


def test_write_protocol_error_keeps_baseline(config, store, task_source, profile_sink, add_user) -> None:
    _alex(add_user)
    task_source.tasks["alex-list"] = [BUY_MILK, CALL_BOB]
    profile_sink.write_errors["t-alex"] = ProtocolError(TWITTER, "unexpected payload", status_code=422)

    report = _service(config, task_source, profile_sink, store).run_once()

    assert report.results[0].outcome is SyncOutcome.FAILED_PROTOCOL
    rule = store.get_rule("alex")
    assert rule.enabled and rule.last_generated_name == "Alex@Buy milk"


def test_non_string_title_is_protocol_failure(config, store, task_source, profile_sink, add_user) -> None:
    _alex(add_user)
    task_source.tasks["alex-list"] = [BUY_MILK, Task(title=7, position="b")]

    report = _service(config, task_source, profile_sink, store).run_once()

    assert report.results[0].outcome is SyncOutcome.FAILED_PROTOCOL
    assert profile_sink.writes == []
    assert store.get_rule("alex").enabled
