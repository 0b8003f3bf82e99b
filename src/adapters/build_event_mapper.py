"""Mapping from CI build-event JSON to core BuildEvent objects."""

from __future__ import annotations

import os
from typing import Any, Iterator, Mapping, Optional

from core.models import BuildEvent, BuildOutcome, ChangeEntry, ChangeSet


def _require(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    if value is None or value == "":
        raise ValueError(f"Build event is missing '{key}'")
    return str(value)


class _ChangeEntries:
    """Re-iterable view over raw changelog entries.

    Validation happens while walking, so a broken entry surfaces inside the
    composer, where it degrades to an inline note. Each walk starts afresh.
    """

    def __init__(self, raw_entries: list) -> None:
        self._raw_entries = list(raw_entries)

    def __iter__(self) -> Iterator[ChangeEntry]:
        for raw in self._raw_entries:
            if not isinstance(raw, Mapping):
                raise ValueError(f"Change entry must be an object, got {type(raw).__name__}")
            if "author" not in raw or "message" not in raw:
                raise ValueError("Change entry requires 'author' and 'message'")
            yield ChangeEntry(author=str(raw["author"]), message=str(raw["message"]))


def build_changes(raw_changes: Optional[Mapping[str, Any]]) -> ChangeSet:
    """Build a ChangeSet; a missing block means changes were not computed."""

    if not raw_changes:
        return ChangeSet(computed=False)
    computed = bool(raw_changes.get("computed", True))
    raw_entries = raw_changes.get("entries") or []
    if not isinstance(raw_entries, list):
        raise ValueError("changes.entries must be a list")
    return ChangeSet(computed=computed, entries=_ChangeEntries(raw_entries))


def build_env(
    payload_env: Optional[Mapping[str, Any]],
    extra_env: Optional[Mapping[str, str]] = None,
) -> dict[str, str]:
    """Merge process env, the event's env block, then explicit bindings."""

    env = dict(os.environ)
    for source in (payload_env or {}, extra_env or {}):
        env.update({str(key): str(value) for key, value in source.items()})
    return env


def build_event(
    payload: Mapping[str, Any],
    env: Optional[Mapping[str, str]] = None,
) -> BuildEvent:
    """Build a BuildEvent from a decoded build-event document."""

    outcome = BuildOutcome.parse(_require(payload, "result"))
    raw_previous = payload.get("previous_result")
    previous = BuildOutcome.parse(str(raw_previous)) if raw_previous else None
    display_name = _require(payload, "display_name")
    build_url = _require(payload, "url")
    project_name = _require(payload, "project")

    return BuildEvent(
        outcome=outcome,
        previous_outcome=previous,
        display_name=display_name,
        project_name=project_name,
        build_url=build_url,
        changes=build_changes(payload.get("changes")),
        env=build_env(payload.get("env"), env),
    )
