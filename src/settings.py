"""Configuration loading for buildnotify.

All user-editable settings (Zulip connection, per-project overrides, logging)
live in a single JSON file for quick edits without touching Python. The file
is re-read on every run so live edits are picked up by the next build.
"""

from __future__ import annotations

import json
import os
from typing import Any, Optional

from dotenv import load_dotenv

from core.config import NotificationConfig, ProjectOverride

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# Default config location; BUILDNOTIFY_CONFIG points elsewhere when set.
CONFIG_PATH = os.path.join(PROJECT_ROOT, "config.json")

# Accepted spellings for boolean switches such as zulip.smart_notify.
_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off", ""}


def resolve_config_path(path: Optional[str] = None) -> str:
    return path or os.getenv("BUILDNOTIFY_CONFIG") or CONFIG_PATH


def load_config(path: Optional[str] = None) -> dict:
    """Load config.json with a flat, user-friendly schema."""

    config_path = resolve_config_path(path)
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text or None


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _flag(value: Any, name: str) -> bool:
    """Parse a JSON boolean, also accepting the usual string spellings."""

    if value is None:
        return False
    if isinstance(value, bool):
        return value
    normalized = str(value).strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be true or false, got {value!r}")


def notification_config(raw: dict) -> NotificationConfig:
    """Build the service-wide NotificationConfig snapshot.

    Credentials may be kept out of config.json; ZULIP_EMAIL and ZULIP_API_KEY
    from the environment (or .env) fill them in.
    """

    load_dotenv()
    zulip = raw.get("zulip") or {}
    return NotificationConfig(
        service_url=_text(zulip.get("url") or os.getenv("ZULIP_URL")),
        credential_email=_text(zulip.get("email") or os.getenv("ZULIP_EMAIL")),
        api_key=_text(zulip.get("api_key") or os.getenv("ZULIP_API_KEY")),
        default_stream=_text(zulip.get("stream")),
        default_title=_text(zulip.get("title")),
        link_base_url=_text(zulip.get("link_base_url")),
        smart_notify=_flag(zulip.get("smart_notify"), "zulip.smart_notify"),
    )


def project_override(raw: dict, project_name: str) -> ProjectOverride:
    """Return the override block for ``project_name``; empty when not configured."""

    project = raw.get("projects", {}).get(project_name) or {}
    return ProjectOverride(
        stream=_optional_text(project.get("stream")),
        title=_optional_text(project.get("title")),
        extra_message=_optional_text(project.get("message")),
    )


def logging_config(raw: dict) -> dict:
    # Logging configuration (optional).
    return raw.get("logging", {}) or {}
