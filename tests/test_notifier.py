from __future__ import annotations

from typing import Optional

from core.config import NotificationConfig, ProjectOverride
from core.models import BuildEvent, BuildOutcome, ChangeEntry, ChangeSet
from core.notifier import BuildNotifier, prepare_notification


class FakeDelivery:
    def __init__(self, error: Optional[Exception] = None) -> None:
        self.sent: list[tuple[str, str, str]] = []
        self._error = error

    def send_stream_message(self, stream: str, title: str, body: str) -> None:
        if self._error is not None:
            raise self._error
        self.sent.append((stream, title, body))


def _config(smart_notify: bool = True) -> NotificationConfig:
    return NotificationConfig(
        service_url="https://zulip.example.com/api",
        credential_email="bot@example.com",
        api_key="secret",
        default_stream="builds",
        link_base_url="http://ci.example.com",
        smart_notify=smart_notify,
    )


def _event(
    outcome: BuildOutcome,
    previous: Optional[BuildOutcome],
    changes: Optional[ChangeSet] = None,
) -> BuildEvent:
    return BuildEvent(
        outcome=outcome,
        previous_outcome=previous,
        display_name="#12",
        project_name="foo",
        build_url="job/foo/12/",
        changes=changes or ChangeSet(computed=True),
        env={"BRANCH": "main"},
    )


def test_sends_composed_message() -> None:
    delivery = FakeDelivery()
    notifier = BuildNotifier(delivery)
    changes = ChangeSet(computed=True, entries=[ChangeEntry("jane", "Fix build")])

    sent = notifier.handle(
        _event(BuildOutcome.FAILURE, BuildOutcome.SUCCESS, changes),
        _config(),
        ProjectOverride(title="foo@$BRANCH"),
    )

    assert sent
    stream, title, body = delivery.sent[0]
    assert stream == "builds"
    assert title == "foo@main"
    assert body.startswith("[Build #12](http://ci.example.com/job/foo/12/): **FAILURE** :x:")
    assert body.endswith("\n* `jane` Fix build")


def test_smart_notify_suppresses_repeated_success() -> None:
    delivery = FakeDelivery()
    notifier = BuildNotifier(delivery)

    sent = notifier.handle(_event(BuildOutcome.SUCCESS, BuildOutcome.SUCCESS), _config(), ProjectOverride())

    assert not sent
    assert delivery.sent == []


def test_without_smart_notify_every_success_is_sent() -> None:
    delivery = FakeDelivery()
    notifier = BuildNotifier(delivery)

    sent = notifier.handle(
        _event(BuildOutcome.SUCCESS, BuildOutcome.SUCCESS),
        _config(smart_notify=False),
        ProjectOverride(),
    )

    assert sent
    assert delivery.sent[0][2].endswith(": Success")


def test_delivery_failure_is_logged_not_raised(caplog) -> None:
    notifier = BuildNotifier(FakeDelivery(error=RuntimeError("Zulip API error 500: oops")))

    sent = notifier.handle(_event(BuildOutcome.FAILURE, None), _config(), ProjectOverride())

    assert not sent
    assert "Failed to deliver notification" in caplog.text


def test_prepare_returns_none_when_suppressed() -> None:
    target = prepare_notification(_event(BuildOutcome.SUCCESS, BuildOutcome.SUCCESS), _config(), ProjectOverride())
    assert target is None


def test_config_snapshot_is_read_per_call() -> None:
    delivery = FakeDelivery()
    notifier = BuildNotifier(delivery)
    event = _event(BuildOutcome.FAILURE, BuildOutcome.FAILURE)

    notifier.handle(event, _config(), ProjectOverride())
    notifier.handle(event, _config(), ProjectOverride(stream="urgent"))

    assert [stream for stream, _, _ in delivery.sent] == ["builds", "urgent"]


def test_deliver_sends_prepared_target() -> None:
    delivery = FakeDelivery()
    event = _event(BuildOutcome.ABORTED, BuildOutcome.SUCCESS)
    target = prepare_notification(event, _config(), ProjectOverride(stream="ops"))

    assert BuildNotifier(delivery).deliver(event, target)
    assert delivery.sent == [(target.stream, target.title, target.body)]
    assert delivery.sent[0][0] == "ops"
