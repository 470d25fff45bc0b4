"""Telegram Bot API notification adapter.

Uses the Bot API for delivery so fissure alerts can reach a phone as well as
(or instead of) the desktop.
"""

from __future__ import annotations

import asyncio
import json
import urllib.error
import urllib.request

from adapters.notification_formatting import format_notification
from core.errors import NotifyError

# Formatting mode -> Bot API parse_mode.
PARSE_MODES = {"html": "HTML", "markdown": "Markdown"}


class TelegramBotNotifier:
    """Notifier adapter that sends messages via the Telegram Bot API."""

    def __init__(self, bot_token: str, chat_id: str, mode: str = "html", timeout: float = 10) -> None:
        if mode not in PARSE_MODES:
            raise ValueError(f"Unsupported notification format: {mode}")
        self._bot_token = bot_token
        self._chat_id = chat_id
        self._mode = mode
        self._timeout = timeout

    def _endpoint(self) -> str:
        # The Bot API endpoint is deterministic and derived from the token.
        return f"https://api.telegram.org/bot{self._bot_token}/sendMessage"

    def _build_request(self, summary: str, body: str) -> urllib.request.Request:
        payload = {
            "chat_id": self._chat_id,
            "text": format_notification(summary, body, mode=self._mode),
            "parse_mode": PARSE_MODES[self._mode],
            "disable_web_page_preview": True,
        }
        data = json.dumps(payload).encode("utf-8")
        request = urllib.request.Request(self._endpoint(), data=data, method="POST")
        request.add_header("Content-Type", "application/json")
        return request

    def _post(self, request: urllib.request.Request) -> None:
        try:
            with urllib.request.urlopen(request, timeout=self._timeout):
                pass
        except urllib.error.HTTPError as e:
            body = e.read().decode("utf-8", errors="replace")
            raise NotifyError(f"Bot API error {e.code}: {body}") from e
        except OSError as e:
            raise NotifyError(f"Bot API unreachable: {e}") from e

    async def send(self, summary: str, body: str) -> None:
        """Send the formatted notification via the Bot API."""

        request = self._build_request(summary, body)
        # urllib blocks, so run it off the event loop to keep the poll loop responsive.
        await asyncio.to_thread(self._post, request)
