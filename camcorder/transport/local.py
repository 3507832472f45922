"""
Local transport - launch and control processes on this machine.
"""

import os
import signal
import subprocess
from typing import Dict, List, Optional, Tuple, Union

import psutil

from camcorder.logging import get_camcorder_logger
from camcorder.transport.base import ProcessEntry, SignalKind, Transport

logger = get_camcorder_logger(__name__)


def signal_number(value: Union[str, int]) -> int:
    """Convert "SIGUSR1" / "USR1" / 10 to a signal number."""
    if isinstance(value, int):
        return value
    name = value.upper()
    if not name.startswith("SIG"):
        name = "SIG" + name
    try:
        return int(getattr(signal, name))
    except AttributeError:
        raise ValueError(f"Unknown signal: {value}")


class LocalTransport(Transport):
    """
    Local transport using subprocess, os.kill and psutil.

    Launched commands run in their own session so that terminal signals
    sent to the host (Ctrl-C) do not reach the capture process directly.
    """

    def __init__(
        self,
        pause_signal: Union[str, int] = "SIGUSR1",
        stop_signal: Union[str, int] = "SIGTERM",
        output=subprocess.DEVNULL,
    ):
        """
        Args:
            pause_signal: Signal mapped to SignalKind.PAUSE_RESUME
            stop_signal: Signal mapped to SignalKind.TERMINATE
            output: Where launched commands write stdout/stderr
        """
        self.signals: Dict[SignalKind, int] = {
            SignalKind.PAUSE_RESUME: signal_number(pause_signal),
            SignalKind.TERMINATE: signal_number(stop_signal),
        }
        self.output = output
        self._children: List[subprocess.Popen] = []

    def run_async(self, command: str) -> Optional[int]:
        """Launch command via shell without waiting for it."""
        proc = subprocess.Popen(
            command,
            shell=True,
            stdin=subprocess.DEVNULL,
            stdout=self.output,
            stderr=self.output,
            start_new_session=True,
        )
        self._children.append(proc)
        self._reap()
        logger.debug(f"Spawned shell pid {proc.pid}")
        return proc.pid

    def run_shell(self, command: str) -> Tuple[str, int]:
        result = subprocess.run(
            command,
            shell=True,
            capture_output=True,
            text=True,
        )
        return result.stdout + result.stderr, result.returncode

    def send_signal(self, pid: int, kind: SignalKind) -> bool:
        signum = self.signals[kind]
        if not self.is_running(pid):
            return False
        try:
            os.kill(pid, signum)
        except ProcessLookupError:
            return False
        logger.debug(f"Sent {signal.Signals(signum).name} to {pid}")
        return True

    def list_processes(self, root: Optional[int] = None) -> List[ProcessEntry]:
        if root is None:
            entries = []
            for proc in psutil.process_iter(["pid", "name"]):
                name = proc.info.get("name")
                if name:
                    entries.append((proc.info["pid"], name))
            return entries

        try:
            parent = psutil.Process(root)
            procs = [parent] + parent.children(recursive=True)
        except psutil.NoSuchProcess:
            return []

        entries = []
        for proc in procs:
            try:
                if proc.status() == psutil.STATUS_ZOMBIE:
                    continue
                entries.append((proc.pid, proc.name()))
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                continue
        return entries

    def is_running(self, pid: int) -> bool:
        try:
            return psutil.Process(pid).status() != psutil.STATUS_ZOMBIE
        except psutil.NoSuchProcess:
            return False

    def _reap(self) -> None:
        """Collect exit status of finished children."""
        self._children = [p for p in self._children if p.poll() is None]

    def close(self) -> None:
        """Reap finished children; running ones are left alone."""
        self._reap()
