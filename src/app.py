"""Application entry point for the fissurewatch watcher."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Any, Optional, Sequence

from art import tprint
from rich.console import Console
from rich.table import Table

import settings
from adapters.desktop_notifier import DesktopNotifier
from adapters.telegram_bot_notifier import TelegramBotNotifier
from adapters.warframestat_client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, WarframestatClient
from core.config import SharedConfig
from core.models import TABLE_HEADERS, Fissure
from core.ports import NotifierPort
from core.scheduler import NotificationScheduler
from core.watcher import ErrorEvent, FissuresEvent, FissureWatcher, NoNewFissuresEvent

NAME = "FISSUREWATCH"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
REDACTED = "[redacted]"


class _RedactingFormatter(logging.Formatter):
    """Formatter that masks secret environment values (bot token) in output."""

    def __init__(self, secrets: Sequence[str], fmt: str = LOG_FORMAT, datefmt: str = LOG_DATE_FORMAT) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        # Longest first so a secret containing another is masked whole.
        self._secrets = sorted({secret for secret in secrets if secret}, key=len, reverse=True)

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        for secret in self._secrets:
            text = text.replace(secret, REDACTED)
        return text


def _secret_values(logging_config: dict[str, Any]) -> list[str]:
    redact = logging_config.get("redact") or {}
    if not redact.get("enabled", False):
        return []
    return [os.environ[name] for name in redact.get("patterns", []) if os.environ.get(name)]


def _log_file_handler(file_config: dict[str, Any]) -> RotatingFileHandler:
    path = file_config.get("path", "logs/fissurewatch.log")
    if not os.path.isabs(path):
        path = os.path.join(settings.PROJECT_ROOT, path)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    return RotatingFileHandler(
        path,
        maxBytes=int(file_config.get("max_bytes", 5 * 1024 * 1024)),
        backupCount=int(file_config.get("backup_count", 5)),
        encoding="utf-8",
    )


def _configure_logging(logging_config: dict[str, Any], console: bool = True) -> None:
    """Set up root logging from the ``logging`` section of config.json.

    ``console=False`` skips the stderr handler; the dashboard owns the
    terminal and mirrors watcher events in its console tab.
    """

    if not logging_config.get("enabled", False):
        return

    handlers: list[logging.Handler] = []
    if console and logging_config.get("console", True):
        handlers.append(logging.StreamHandler())
    file_config = logging_config.get("file") or {}
    if file_config.get("enabled", False):
        handlers.append(_log_file_handler(file_config))
    if not handlers:
        return

    level = getattr(logging, str(logging_config.get("level", "INFO")).upper(), logging.INFO)
    formatter = _RedactingFormatter(_secret_values(logging_config))
    for handler in handlers:
        handler.setFormatter(formatter)
    logging.basicConfig(level=level, handlers=handlers)


def build_notifier(notifications: dict[str, Any]) -> NotifierPort:
    """Select the notification adapter from the ``notifications`` section.

    The scheduler only sees the NotifierPort, so delivery details stay out of
    the core.
    """

    method = notifications.get("notification_method", "desktop")
    if method == "bot":
        bot_token = os.getenv("BOT_API")
        if not bot_token:
            raise RuntimeError("BOT_API is required when notification_method=bot")
        chat_id = notifications.get("bot_chat_id")
        if not chat_id:
            raise RuntimeError("notifications.bot_chat_id is required for bot notifications")
        return TelegramBotNotifier(
            bot_token=bot_token,
            chat_id=str(chat_id),
            mode=str(notifications.get("bot_format", "html")),
        )
    if method == "desktop":
        notifier = DesktopNotifier()
        if not notifier.is_available():
            logging.getLogger(__name__).warning(
                "notify-send not found; desktop notifications will fail until it is installed"
            )
        return notifier
    raise RuntimeError("notification_method must be 'desktop' or 'bot'")


def build_watcher(loaded: settings.LoadedConfig) -> tuple[FissureWatcher, NotificationScheduler, SharedConfig]:
    """Wire the core watcher with its adapters from loaded settings."""

    shared_config = SharedConfig(loaded.watcher)
    notifications = settings.section(loaded.data, "notifications")
    api = settings.section(loaded.data, "api")

    notifier = build_notifier(notifications)
    scheduler = NotificationScheduler(
        notifier,
        shared_config,
        cancel_on_removal=bool(notifications.get("cancel_on_removal", False)),
    )
    source = WarframestatClient(
        base_url=str(api.get("base_url", DEFAULT_BASE_URL)),
        timeout=float(api.get("timeout", DEFAULT_TIMEOUT)),
    )
    watcher = FissureWatcher(source, scheduler, shared_config)
    return watcher, scheduler, shared_config


def render_fissure_table(fissures: Sequence[Fissure], title: str) -> Table:
    table = Table(title=title, title_justify="left")
    for header in TABLE_HEADERS:
        table.add_column(header)
    for fissure in fissures:
        table.add_row(*fissure.table_row())
    return table


async def log_events(watcher: FissureWatcher, console: Optional[Console] = None) -> None:
    """Consume watcher events forever, logging one line per tick."""

    logger = logging.getLogger(__name__)
    console = console or Console()
    while True:
        event = await watcher.events.get()
        if isinstance(event, FissuresEvent):
            logger.info(
                "%s new fissures (%s removed, %s of %s match filters)",
                event.new_count,
                event.removed_count,
                len(event.filtered_fissures),
                len(event.fissures),
            )
            if event.filtered_fissures:
                console.print(render_fissure_table(event.filtered_fissures, "Matching fissures"))
        elif isinstance(event, NoNewFissuresEvent):
            logger.info("No new fissures")
        elif isinstance(event, ErrorEvent):
            logger.error("Error: %s", event.message)
        watcher.events.task_done()


async def _run_headless(loaded: settings.LoadedConfig) -> None:
    watcher, scheduler, _ = build_watcher(loaded)
    consumer = asyncio.create_task(log_events(watcher), name="event-log")
    try:
        await watcher.run()
    finally:
        consumer.cancel()
        await scheduler.shutdown()


def _run() -> None:
    _print_banner()
    loaded = settings.load_config()
    _configure_logging(settings.section(loaded.data, "logging"))
    logger = logging.getLogger(__name__)

    logger.info("Starting fissurewatch")
    logger.info("%s", loaded.message)
    logger.info("Starting fissure watcher with config:\n%s", loaded.watcher.describe())

    try:
        asyncio.run(_run_headless(loaded))
    except KeyboardInterrupt:
        logger.info("Stopped")


async def _run_dashboard(loaded: settings.LoadedConfig) -> None:
    from frontend.app import DashboardApp

    watcher, scheduler, shared_config = build_watcher(loaded)
    try:
        await DashboardApp(loaded, watcher, scheduler, shared_config).run_async()
    finally:
        await scheduler.shutdown()


def _dashboard() -> None:
    loaded = settings.load_config()
    _configure_logging(settings.section(loaded.data, "logging"), console=False)
    asyncio.run(_run_dashboard(loaded))


def _show_config() -> None:
    _print_banner()
    loaded = settings.load_config()
    print(loaded.message)
    print(loaded.watcher.describe())


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="fissurewatch")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Start the headless watcher")
    subparsers.add_parser("dashboard", help="Start the watcher with the terminal dashboard")
    subparsers.add_parser(
        "config",
        help="Print the effective configuration, creating the default file if missing.",
    )

    args = parser.parse_args(argv)
    if args.command == "dashboard":
        _dashboard()
        return
    if args.command == "config":
        _show_config()
        return
    _run()


if __name__ == "__main__":
    main()
