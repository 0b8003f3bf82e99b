"""Smart-notify policy (core domain)."""

from __future__ import annotations

from typing import Optional

from core.models import BuildOutcome


def should_notify(
    current: BuildOutcome,
    previous: Optional[BuildOutcome],
    smart_notify: bool,
) -> bool:
    """Return whether this build result is worth a notification.

    With smart notify off every build notifies. With it on we notify when:
    - there was no previous build,
    - the current build did not succeed, or
    - the previous build did not succeed (a recovery notifies once).
    Only a success following a success is suppressed.
    """

    if not smart_notify:
        return True
    if previous is None:
        return True
    return current is not BuildOutcome.SUCCESS or previous is not BuildOutcome.SUCCESS
