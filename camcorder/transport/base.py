"""
Base transport interface.

A transport is the core's only way to touch the operating system:
launching shell commands, sending signals and reading the process table.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Optional, Tuple

# (pid, command name)
ProcessEntry = Tuple[int, str]


class SignalKind(Enum):
    """
    Signals the core sends to a capture process.

    PAUSE_RESUME is a single toggle signal; the capture tool decides
    whether it pauses or resumes. LocalTransport maps it to SIGUSR1,
    which is recordmydesktop's convention. Re-check the mapping when
    using another capture tool.
    """
    TERMINATE = "terminate"
    PAUSE_RESUME = "pause-resume"


class Transport(ABC):
    """
    Abstract base class for process launching and control.

    Implementations:
    - LocalTransport: subprocess, os.kill and psutil on this machine
    - NullTransport: raises on use
    """

    @abstractmethod
    def run_async(self, command: str) -> Optional[int]:
        """
        Launch a shell command in the background (fire-and-forget).

        Args:
            command: Shell command string

        Returns:
            PID of the spawned shell when known, else None
        """
        pass

    @abstractmethod
    def run_shell(self, command: str) -> Tuple[str, int]:
        """
        Run a shell command to completion.

        Returns:
            Tuple of (output, exit_code)
        """
        pass

    @abstractmethod
    def send_signal(self, pid: int, kind: SignalKind) -> bool:
        """
        Send a signal to a process.

        Returns:
            True if delivered, False if the process no longer exists
        """
        pass

    @abstractmethod
    def list_processes(self, root: Optional[int] = None) -> List[ProcessEntry]:
        """
        Read the process table.

        Args:
            root: If given, only this process and its descendants

        Returns:
            List of (pid, command name); empty if root has exited
        """
        pass

    @abstractmethod
    def is_running(self, pid: int) -> bool:
        """Check whether a process is still alive."""
        pass

    def close(self) -> None:
        """Release transport resources."""
        pass

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()


class NullTransport(Transport):
    """
    Null Object implementation of Transport.

    Used as the default where no transport has been wired, so callers
    get a helpful error instead of an AttributeError on None.
    """

    def _raise_error(self, method_name: str) -> None:
        raise RuntimeError(
            f"Cannot call {method_name}: Transport not initialized. "
            f"Pass a transport explicitly, e.g. RecordingController(LocalTransport(), config)"
        )

    def run_async(self, command: str) -> Optional[int]:
        self._raise_error("run_async()")
        return None

    def run_shell(self, command: str) -> Tuple[str, int]:
        self._raise_error("run_shell()")
        return ("", 1)

    def send_signal(self, pid: int, kind: SignalKind) -> bool:
        self._raise_error("send_signal()")
        return False

    def list_processes(self, root: Optional[int] = None) -> List[ProcessEntry]:
        self._raise_error("list_processes()")
        return []

    def is_running(self, pid: int) -> bool:
        self._raise_error("is_running()")
        return False
