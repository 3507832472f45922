"""
Process discovery.

Locates the OS process of a just-launched command by polling the process
table for its command name. Matching by name alone cannot tell a new
process from an unrelated one with the same name, so discovery narrows
the search in two ways:

- pids that already matched before launch (a snapshot) are ignored
- when the spawned shell's pid is known, its process tree is searched
  first; the global table is only consulted once that tree has exited
  (e.g. the command daemonized itself)
"""

import threading
import time
from typing import Iterable, Optional, Set

from camcorder.core.errors import DiscoveryCancelled, ProcessNotFound
from camcorder.logging import get_camcorder_logger
from camcorder.transport.base import Transport

logger = get_camcorder_logger(__name__)


class ProcessDiscovery:
    """
    Bounded, cancellable polling for a process by command name.

    Example:
        discovery = ProcessDiscovery(LocalTransport(), timeout=5.0)
        before = discovery.snapshot("recordmydesktop")
        spawned = transport.run_async(command)
        pid = discovery.find("recordmydesktop", root=spawned, exclude=before)
    """

    def __init__(self, transport: Transport, timeout: float = 10.0, interval: float = 0.1):
        """
        Args:
            transport: Transport used to read the process table
            timeout: Seconds before giving up with ProcessNotFound
            interval: Seconds between polls
        """
        self.transport = transport
        self.timeout = timeout
        self.interval = interval

    def snapshot(self, command_name: str) -> Set[int]:
        """Pids currently running under command_name."""
        return {
            pid for pid, name in self.transport.list_processes() if name == command_name
        }

    def poll_once(
        self,
        command_name: str,
        root: Optional[int] = None,
        exclude: Iterable[int] = (),
    ) -> Optional[int]:
        """Scan the process table once; return the first matching pid."""
        exclude = set(exclude)

        if root is not None:
            tree = self.transport.list_processes(root=root)
            for pid, name in tree:
                if name == command_name and pid not in exclude:
                    return pid
            if tree:
                # Spawned tree still alive; the command may not have started yet
                return None

        for pid, name in self.transport.list_processes():
            if name == command_name and pid not in exclude:
                return pid
        return None

    def find(
        self,
        command_name: str,
        root: Optional[int] = None,
        exclude: Iterable[int] = (),
        cancel_event: Optional[threading.Event] = None,
    ) -> int:
        """
        Block until a matching process appears.

        Raises:
            ProcessNotFound: Nothing matched within self.timeout
            DiscoveryCancelled: cancel_event was set
        """
        cancel_event = cancel_event or threading.Event()
        exclude = set(exclude)
        deadline = time.monotonic() + self.timeout

        while True:
            if cancel_event.is_set():
                raise DiscoveryCancelled(f"Discovery of '{command_name}' cancelled")

            pid = self.poll_once(command_name, root=root, exclude=exclude)
            if pid is not None:
                logger.debug(f"Discovered '{command_name}' as pid {pid}")
                return pid

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise ProcessNotFound(command_name, self.timeout)

            cancel_event.wait(min(self.interval, remaining))

