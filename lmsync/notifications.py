"""
Relays desktop notifications from any thread to a single presentation sink.

Producers post ``Notification`` objects to a bounded queue; a daemon worker
thread forwards them one at a time to the sink. ``NotificationBridge`` is a
sink that re-emits each notification as a Qt signal so a window can show it.
"""

import time
import queue
import logging
import threading
from typing import Callable, Optional

from PyQt5.QtCore import QObject, pyqtSignal

from .config import APP_NAME
from .data_structures import Notification

BACKGROUND_NOTICE: Notification = Notification(
    APP_NAME, f"{APP_NAME} is still running in the background to keep your files synced")

_STOP = object()

logger: logging.Logger = logging.getLogger(APP_NAME)


# --- Presentation Sink ---
class NotificationBridge(QObject):
    received = pyqtSignal(str, str)  # title, content

    def __call__(self, notification: Notification) -> None:
        self.received.emit(notification.title, notification.content)


# --- Relay Worker ---
class NotificationRelay(threading.Thread):
    """
    Single consumer forwarding queued notifications to ``sink``.

    ``shutdown(drain=True)`` delivers everything already queued before the
    worker exits; ``shutdown(drain=False)`` drops it. Posting after shutdown
    raises ``RuntimeError``. An exception raised by the sink is logged and the
    relay keeps going.
    """

    def __init__(self, sink: Callable[[Notification], None], maxsize: int = 100):
        super().__init__(daemon=True, name="NotificationRelay")
        self.sink = sink
        self._queue: "queue.Queue" = queue.Queue(maxsize=maxsize)
        self._lock = threading.Lock()
        self._closed = False

    def post(self, notification: Notification, block: bool = True, timeout: Optional[float] = None) -> None:
        """
        Queues a notification for delivery.

        Raises:
            queue.Full: If the queue is full and ``block`` is False or ``timeout`` expires.
            RuntimeError: If the relay has been shut down.
        """
        with self._lock:
            if self._closed:
                raise RuntimeError("Notification relay has been shut down")
        self._queue.put(notification, block, timeout)

    def run(self):
        while True:
            item = self._queue.get()
            if item is _STOP:
                break
            try:
                self.sink(item)
            except Exception:
                logger.exception(f"Notification sink failed for '{item.title}'")

    def shutdown(self, drain: bool = True, timeout: Optional[float] = None) -> int:
        """
        Stops accepting notifications and waits up to ``timeout`` seconds for the
        worker to finish. The worker may still be running when this returns;
        check ``is_alive()``.

        Args:
            drain (bool): Deliver the queued notifications first instead of dropping them.
            timeout (Optional[float]): Seconds to wait for the worker; None waits forever.

        Returns:
            int: The number of notifications dropped.
        """
        with self._lock:
            self._closed = True

        dropped = 0
        if not drain or not self.is_alive():
            while True:
                try:
                    self._queue.get_nowait()
                except queue.Empty:
                    break
                dropped += 1
            if dropped:
                logger.info(f"Dropped {dropped} undelivered notifications")

        if self.is_alive():
            deadline = None if timeout is None else time.monotonic() + timeout
            try:
                self._queue.put(_STOP, timeout=timeout)
            except queue.Full:
                logger.warning(f"Notification relay did not stop within {timeout}s; sink is still busy")
                return dropped
            self.join(None if deadline is None else max(0.0, deadline - time.monotonic()))
        return dropped
