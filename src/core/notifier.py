"""Core build notification pipeline.

This module is integration-agnostic. It only relies on the delivery port,
enabling other CI frontends or messaging adapters without changes here.
"""

from __future__ import annotations

import logging
from typing import Optional

from core.composer import compose
from core.config import NotificationConfig, ProjectOverride
from core.models import BuildEvent, ResolvedTarget
from core.policy import should_notify
from core.ports import DeliveryPort

LOGGER = logging.getLogger(__name__)


def prepare_notification(
    event: BuildEvent,
    config: NotificationConfig,
    override: ProjectOverride,
) -> Optional[ResolvedTarget]:
    """Return the composed message, or None when smart notify suppresses it."""

    if not should_notify(event.outcome, event.previous_outcome, config.smart_notify):
        LOGGER.info(
            "Smart notify skip for %s %s (still %s)",
            event.project_name,
            event.display_name,
            event.outcome,
        )
        return None
    return compose(
        outcome=event.outcome,
        display_name=event.display_name,
        project_name=event.project_name,
        build_url=event.build_url,
        config=config,
        override=override,
        changes=event.changes,
        env=event.env,
    )


class BuildNotifier:
    """Orchestrates the notify decision, composition, and delivery."""

    def __init__(self, delivery: DeliveryPort) -> None:
        self._delivery = delivery

    def handle(
        self,
        event: BuildEvent,
        config: NotificationConfig,
        override: ProjectOverride,
    ) -> bool:
        """Process one finished build; return True if a message was delivered."""

        target = prepare_notification(event, config, override)
        if target is None:
            return False
        return self.deliver(event, target)

    def deliver(self, event: BuildEvent, target: ResolvedTarget) -> bool:
        """Send an already composed message; return True on success.

        Notification is best-effort: delivery errors are logged, never raised,
        so a build is never failed by its notifier.
        """

        try:
            self._delivery.send_stream_message(target.stream, target.title, target.body)
        except Exception:
            LOGGER.exception(
                "Failed to deliver notification for %s %s to stream %s",
                event.project_name,
                event.display_name,
                target.stream,
            )
            return False

        LOGGER.info(
            "Notification sent for %s %s (%s) to %s",
            event.project_name,
            event.display_name,
            event.outcome,
            target.stream,
        )
        return True
