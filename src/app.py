"""Application entry point for the buildnotify CLI."""

from __future__ import annotations

import argparse
import json
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint
from dotenv import load_dotenv

import settings
from adapters.build_event_mapper import build_event
from adapters.zulip_notifier import ZulipStreamNotifier
from core.config import NotificationConfig
from core.models import BuildEvent
from core.notifier import BuildNotifier, prepare_notification

NAME = "BUILDNOTIFY"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict, extra: Optional[list[str]] = None) -> list[str]:
    redact_cfg = config.get("redact", {}) if config else {}
    if not redact_cfg.get("enabled", False):
        return []
    values = [value for value in (extra or []) if value]
    for name in redact_cfg.get("patterns", []):
        value = os.getenv(name)
        if value:
            values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging(config: dict, secrets: Optional[list[str]] = None) -> None:
    if not config.get("enabled", False):
        return

    load_dotenv()
    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    formatter = _RedactingFormatter(_collect_redaction_values(config, secrets), fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/buildnotify.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _load_event(path: str) -> BuildEvent:
    with open(path, "r", encoding="utf-8") as handle:
        return build_event(json.load(handle))


def _missing_credentials(config: NotificationConfig) -> Optional[str]:
    # The core never validates credentials; the CLI checks them before sending.
    if not config.service_url:
        return "zulip.url is not configured"
    if not config.credential_email or not config.api_key:
        return "Zulip email or API key is missing (config.json or ZULIP_EMAIL/ZULIP_API_KEY)"
    return None


def _notify(event_path: str, config_path: Optional[str]) -> None:
    # Reloaded on every run so config edits apply to the next build.
    raw = settings.load_config(config_path)
    config = settings.notification_config(raw)
    _configure_logging(settings.logging_config(raw), secrets=[config.api_key])
    logger = logging.getLogger(__name__)

    event = _load_event(event_path)
    override = settings.project_override(raw, event.project_name)
    target = prepare_notification(event, config, override)
    if target is None:
        return

    problem = _missing_credentials(config)
    if problem:
        logger.error("Cannot notify for %s %s: %s", event.project_name, event.display_name, problem)
        return

    delivery = ZulipStreamNotifier(config.service_url, config.credential_email, config.api_key)
    if not BuildNotifier(delivery).deliver(event, target):
        logger.info("No notification delivered for %s %s", event.project_name, event.display_name)


def _preview(event_path: str, config_path: Optional[str]) -> None:
    _print_banner()
    raw = settings.load_config(config_path)
    config = settings.notification_config(raw)
    _configure_logging(settings.logging_config(raw), secrets=[config.api_key])

    event = _load_event(event_path)
    override = settings.project_override(raw, event.project_name)
    target = prepare_notification(event, config, override)
    if target is None:
        print(f"Suppressed by smart notify: {event.project_name} {event.display_name}")
        return
    print(f"Stream: {target.stream}")
    print(f"Topic:  {target.title}")
    print("")
    print(target.body)


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="buildnotify")
    parser.add_argument("--config", help="Path to config.json (defaults to BUILDNOTIFY_CONFIG)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    notify_parser = subparsers.add_parser("notify", help="Send the notification for a finished build")
    notify_parser.add_argument("event", help="Path to the build event JSON")
    preview_parser = subparsers.add_parser("preview", help="Print the message without sending it")
    preview_parser.add_argument("event", help="Path to the build event JSON")

    args = parser.parse_args(argv)
    if args.command == "preview":
        _preview(args.event, args.config)
        return
    _notify(args.event, args.config)


if __name__ == "__main__":
    main()
