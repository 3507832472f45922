"""
Unit tests for transports.
"""

import signal

import pytest

from camcorder.transport import LocalTransport, NullTransport, SignalKind, signal_number


class TestSignalNumber:
    """Signal name parsing."""

    def test_names(self):
        """Test mapping signal names."""
        assert signal_number("SIGTERM") == signal.SIGTERM
        assert signal_number("term") == signal.SIGTERM

    def test_number(self):
        """Test passing a signal number through."""
        assert signal_number(15) == 15

    def test_unknown(self):
        """Test rejecting an unknown signal name."""
        with pytest.raises(ValueError):
            signal_number("SIGNOPE")


class TestNullTransport:
    """Null object raises helpful errors."""

    @pytest.mark.parametrize("call", [
        lambda t: t.run_async("true"),
        lambda t: t.run_shell("true"),
        lambda t: t.send_signal(1, SignalKind.TERMINATE),
        lambda t: t.list_processes(),
        lambda t: t.is_running(1),
    ])
    def test_raises(self, call):
        """Test that every NullTransport call raises."""
        with pytest.raises(RuntimeError, match="Transport not initialized"):
            call(NullTransport())


@pytest.mark.skipif(not hasattr(signal, "SIGUSR1"), reason="POSIX signals required")
class TestLocalTransport:
    """LocalTransport against the real OS."""

    def test_signal_mapping(self):
        """Test mapping SignalKind to the configured signals."""
        transport = LocalTransport(pause_signal="SIGSTOP")

        assert transport.signals[SignalKind.PAUSE_RESUME] == signal.SIGSTOP
        assert transport.signals[SignalKind.TERMINATE] == signal.SIGTERM

    def test_run_shell(self):
        """Test capturing shell output and exit code."""
        output, code = LocalTransport().run_shell("echo hello")

        assert output == "hello\n"
        assert code == 0

    def test_list_processes_includes_self(self):
        """Test that the process table includes this process."""
        import os

        pids = {pid for pid, _ in LocalTransport().list_processes()}

        assert os.getpid() in pids

    def test_exited_tree_is_empty(self):
        """Test that an exited process has an empty tree."""
        transport = LocalTransport()
        pid = transport.run_async("true")
        transport._children[-1].wait(timeout=5)

        assert transport.list_processes(root=pid) == []
        assert transport.is_running(pid) is False
        assert transport.send_signal(pid, SignalKind.TERMINATE) is False
