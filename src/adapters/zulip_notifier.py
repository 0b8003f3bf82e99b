"""Zulip stream delivery adapter.

Implements the core DeliveryPort by posting to the Zulip messages API.
"""

from __future__ import annotations

import base64
import urllib.error
import urllib.parse
import urllib.request


class ZulipStreamNotifier:
    """Delivery adapter that sends stream messages via the Zulip REST API."""

    def __init__(self, service_url: str, email: str, api_key: str, timeout: float = 10) -> None:
        self._service_url = service_url
        self._email = email
        self._api_key = api_key
        self._timeout = timeout

    def _endpoint(self) -> str:
        return self._service_url.rstrip("/") + "/v1/messages"

    def _auth_header(self) -> str:
        token = base64.b64encode(f"{self._email}:{self._api_key}".encode("utf-8")).decode("ascii")
        return f"Basic {token}"

    def send_stream_message(self, stream: str, title: str, body: str) -> None:
        """Post one message to ``stream`` under topic ``title``."""

        payload = {
            "type": "stream",
            "to": stream,
            "subject": title,
            "content": body,
        }
        data = urllib.parse.urlencode(payload).encode("utf-8")
        request = urllib.request.Request(self._endpoint(), data=data, method="POST")
        request.add_header("Content-Type", "application/x-www-form-urlencoded")
        request.add_header("Authorization", self._auth_header())
        # Blocking call; no retries, a failed notification is simply logged upstream.
        try:
            with urllib.request.urlopen(request, timeout=self._timeout):
                pass
        except urllib.error.HTTPError as e:
            body_text = e.read().decode("utf-8", errors="replace")
            raise RuntimeError(f"Zulip API error {e.code}: {body_text}") from e
