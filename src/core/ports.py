"""Ports (interfaces) used by the core notifier.

Ports define the minimal contracts for delivery adapters so that the core
can be reused with different messaging backends.
"""

from __future__ import annotations

from typing import Protocol


class DeliveryPort(Protocol):
    """Delivery operations required by the core notifier."""

    def send_stream_message(self, stream: str, title: str, body: str) -> None:
        ...
