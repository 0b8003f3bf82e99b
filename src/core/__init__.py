"""Core domain package for buildnotify.

Core contains the notify policy, placeholder expansion, and message
composition without any CI- or Zulip-specific code, keeping the build
notification logic portable.
"""
