"""Build notification message composition (core domain).

Formatting lives here so every delivery adapter sends the same Zulip
Markdown, and so the rules can be tested without a CI server.
"""

from __future__ import annotations

import logging
from typing import Mapping

from core.config import NotificationConfig, ProjectOverride
from core.expansion import expand
from core.models import BuildOutcome, ChangeSet, ResolvedTarget

LOGGER = logging.getLogger(__name__)

MAX_COMMIT_CHARS = 47
TRUNCATED_COMMIT_CHARS = 46

NO_CHANGES_TEXT = "Could not determine changes since last build."
CHANGES_HEADER = "Changes since last build:\n"
CHANGES_ERROR_TEXT = (
    "\nError determining changes since last build - please contact support@zulip.com."
)


def normalize_base_url(base_url: str) -> str:
    """Return ``base_url`` with exactly one trailing slash (empty stays empty)."""

    if base_url and not base_url.endswith("/"):
        return base_url + "/"
    return base_url


def truncate_commit_message(message: str) -> str:
    commit_msg = message.strip()
    if len(commit_msg) > MAX_COMMIT_CHARS:
        commit_msg = commit_msg[:TRUNCATED_COMMIT_CHARS] + "..."
    return commit_msg


def summarize_changes(changes: ChangeSet) -> str:
    """Return the change summary section, or "" when there is nothing to say.

    Failures while walking the changelog are logged and turned into an
    inline note; they never abort composition.
    """

    summary = ""
    try:
        if not changes.computed:
            summary = NO_CHANGES_TEXT
        else:
            # Built incrementally so a failure mid-walk keeps the lines so far.
            for entry in changes.entries:
                if not summary:
                    summary = CHANGES_HEADER
                summary += f"\n* `{entry.author}` {truncate_commit_message(entry.message)}"
    except Exception:
        LOGGER.warning("Exception while computing changes since last build", exc_info=True)
        summary += CHANGES_ERROR_TEXT
    return summary


def format_header(display_name: str, build_url: str, link_base_url: str) -> str:
    header = f"Build {display_name}"
    if link_base_url:
        header = f"[{header}]({normalize_base_url(link_base_url)}{build_url})"
    return header + ": "


def format_result(outcome: BuildOutcome, smart_notify: bool) -> str:
    result_text = str(outcome)
    if not smart_notify and outcome is BuildOutcome.SUCCESS:
        # With smart notify off a success is the common case, so keep it quiet.
        return result_text.lower().capitalize()
    glyph = ":white_check_mark:" if outcome is BuildOutcome.SUCCESS else ":x:"
    return f"**{result_text}** {glyph}"


def compose(
    outcome: BuildOutcome,
    display_name: str,
    project_name: str,
    build_url: str,
    config: NotificationConfig,
    override: ProjectOverride,
    changes: ChangeSet,
    env: Mapping[str, str],
) -> ResolvedTarget:
    """Compose the stream, topic title, and Markdown body for one build.

    Stream falls back from the project override to the configured default;
    title falls back further to the project name. An empty resolved stream
    means the configuration is incomplete, which callers validate upstream.
    """

    body = format_header(display_name, build_url, config.link_base_url)
    body += format_result(outcome, config.smart_notify)

    summary = summarize_changes(changes)
    if summary:
        body += "\n\n" + summary

    if override.extra_message:
        body += "\n\n" + expand(override.extra_message, env)

    stream = expand(override.stream or config.default_stream, env)
    title = expand(override.title or config.default_title or project_name, env)
    return ResolvedTarget(stream=stream, title=title, body=body)
