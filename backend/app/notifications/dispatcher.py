"""Fire-and-forget notification dispatch.

Sends run on a small thread pool, decoupled from the request that triggered
them. Failures are logged here and never reach the caller.
"""
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Optional

from app.config import settings
from app.notifications.discord import DiscordNotifier

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    def __init__(self, notifier: Any, max_workers: int = 2):
        self.notifier = notifier
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="notify")

    def send(self, message: dict[str, Any], mention_all: bool = False) -> Optional[Future]:
        try:
            future = self._executor.submit(self.notifier.send, message, mention_all)
        except RuntimeError:
            logger.warning("Dispatcher shut down; dropping message '%s'", message.get("title"))
            return None
        future.add_done_callback(lambda f: _log_failure(f, message))
        return future

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)


def _log_failure(future: Future, message: dict[str, Any]) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.error("Failed to deliver '%s': %s", message.get("title"), exc)


_dispatcher: Optional[NotificationDispatcher] = None
_dispatcher_lock = threading.Lock()


def get_dispatcher() -> NotificationDispatcher:
    """FastAPI dependency returning the process-wide dispatcher."""
    global _dispatcher
    if _dispatcher is None:
        with _dispatcher_lock:
            if _dispatcher is None:
                _dispatcher = NotificationDispatcher(
                    DiscordNotifier.from_settings(),
                    max_workers=settings.NOTIFY_MAX_WORKERS,
                )
    return _dispatcher


def shutdown_dispatcher() -> None:
    global _dispatcher
    with _dispatcher_lock:
        dispatcher, _dispatcher = _dispatcher, None
    if dispatcher is not None:
        dispatcher.shutdown(wait=True)
