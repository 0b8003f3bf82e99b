"""Notification settings snapshots handed to the core per build.

settings.py reads them from config.json; the composer and policy only ever
see these immutable values.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class NotificationConfig:
    """Service-wide notification settings."""

    service_url: str
    credential_email: str
    api_key: str
    default_stream: str
    default_title: str = ""
    link_base_url: str = ""
    smart_notify: bool = False


@dataclass(frozen=True)
class ProjectOverride:
    """Per-project overrides. ``None`` (or an empty string) means no override."""

    stream: Optional[str] = None
    title: Optional[str] = None
    extra_message: Optional[str] = None
