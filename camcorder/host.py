"""
Host integration surface.

The recording controller only needs two things from the host: the id of
the window to capture, and a notification when that window goes away.
"""

import threading
from abc import ABC, abstractmethod
from typing import Callable, List, Union

from camcorder.core.errors import CamcorderError
from camcorder.logging import get_camcorder_logger
from camcorder.transport.base import Transport

logger = get_camcorder_logger(__name__)


class WindowIdProvider(ABC):
    """Source of the raw window id of the window to capture."""

    @abstractmethod
    def current_window_id(self) -> str:
        pass


class StaticWindowIdProvider(WindowIdProvider):
    """Always returns the same id (from --window-id, or tests)."""

    def __init__(self, window_id: Union[str, int]):
        self.window_id = str(window_id)

    def current_window_id(self) -> str:
        return self.window_id


class XdotoolWindowIdProvider(WindowIdProvider):
    """Asks xdotool for the currently active X11 window."""

    COMMAND = "xdotool getactivewindow"

    def __init__(self, transport: Transport):
        self.transport = transport

    def current_window_id(self) -> str:
        output, code = self.transport.run_shell(self.COMMAND)
        window_id = output.strip()
        if code != 0 or not window_id:
            raise CamcorderError(
                f"Could not determine active window ({self.COMMAND} exited {code}): {window_id}"
            )
        return window_id.splitlines()[0]


class TeardownNotifier:
    """
    Fan-out of "window destroyed" events.

    Example:
        notifier = TeardownNotifier()
        controller.attach(notifier)
        notifier.notify("21")  # stops the session capturing window 21
    """

    def __init__(self):
        self._subscribers: List[Callable[[str], None]] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: Callable[[str], None]) -> None:
        with self._lock:
            if callback not in self._subscribers:
                self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[str], None]) -> None:
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    def notify(self, window_id: Union[str, int]) -> None:
        """Deliver a teardown event to every subscriber."""
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(str(window_id))
            except CamcorderError as e:
                logger.warning(f"Teardown handler failed: {e}")
