"""Desktop notification adapter.

Delivers notifications through ``notify-send`` (libnotify), which is the
platform notification surface on most Linux desktops.
"""

from __future__ import annotations

import asyncio
import shutil

from core.errors import NotifyError

APP_NAME = "fissurewatch"


class DesktopNotifier:
    """Notifier adapter that shows a desktop notification per call."""

    def __init__(self, command: str = "notify-send", app_name: str = APP_NAME) -> None:
        self._command = command
        self._app_name = app_name

    def is_available(self) -> bool:
        return shutil.which(self._command) is not None

    async def send(self, summary: str, body: str) -> None:
        """Show the notification, raising NotifyError if the sink is unavailable."""

        try:
            process = await asyncio.create_subprocess_exec(
                self._command,
                f"--app-name={self._app_name}",
                "--",
                summary,
                body,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise NotifyError(f"{self._command} unavailable: {exc}") from exc

        _, stderr = await process.communicate()
        if process.returncode != 0:
            detail = stderr.decode("utf-8", errors="replace").strip()
            raise NotifyError(f"{self._command} exited with {process.returncode}: {detail}")
