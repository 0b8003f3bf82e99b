"""Adapters connecting the core notifier to CI events and Zulip delivery."""
