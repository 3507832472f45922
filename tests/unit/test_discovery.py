"""
Unit tests for process discovery.
"""

import threading

import pytest

from camcorder.core.errors import DiscoveryCancelled, ProcessNotFound
from camcorder.process.discovery import ProcessDiscovery

from tests.fakes import FakeTransport


class TestPollOnce:
    """Single scans of the process table."""

    def test_global_match(self):
        """Test matching in the global process table."""
        transport = FakeTransport(processes={7: "bash", 8: "rec"})
        discovery = ProcessDiscovery(transport)

        assert discovery.poll_once("rec") == 8

    def test_exact_name_only(self):
        """Test that only exact names match."""
        transport = FakeTransport(processes={8: "recorder"})
        discovery = ProcessDiscovery(transport)

        assert discovery.poll_once("rec") is None

    def test_excluded_pids_skipped(self):
        """Test that excluded pids never match."""
        transport = FakeTransport(processes={8: "rec", 9: "rec"})
        discovery = ProcessDiscovery(transport)

        assert discovery.poll_once("rec", exclude={8}) == 9

    def test_spawned_tree_preferred(self):
        """A match inside the spawned tree wins over an older global match."""
        transport = FakeTransport(processes={8: "rec"})
        pid = transport.run_async("rec")
        discovery = ProcessDiscovery(transport)

        assert discovery.poll_once("rec", root=pid) == pid

    def test_no_global_fallback_while_tree_alive(self):
        """Live spawned tree without a match means 'not started yet'."""
        transport = FakeTransport(spawn_name="sh", processes={8: "rec"})
        pid = transport.run_async("sh -c rec")
        discovery = ProcessDiscovery(transport)

        assert discovery.poll_once("rec", root=pid) is None

    def test_global_fallback_when_tree_gone(self):
        """Test falling back to the global table once the tree exits."""
        transport = FakeTransport(spawn_name=None, processes={8: "rec"})
        pid = transport.run_async("rec --daemon")
        discovery = ProcessDiscovery(transport)

        assert discovery.poll_once("rec", root=pid) == 8


class TestFind:
    """Bounded polling."""

    def test_snapshot(self):
        """Test the pre-launch snapshot."""
        transport = FakeTransport(processes={7: "rec", 8: "bash", 9: "rec"})
        discovery = ProcessDiscovery(transport)

        assert discovery.snapshot("rec") == {7, 9}

    def test_found_immediately(self):
        """Test a process that is already running."""
        transport = FakeTransport(processes={8: "rec"})
        discovery = ProcessDiscovery(transport, timeout=1.0, interval=0.01)

        assert discovery.find("rec") == 8

    def test_found_after_delay(self):
        """Test a process that appears while polling."""
        transport = FakeTransport()
        discovery = ProcessDiscovery(transport, timeout=2.0, interval=0.01)
        timer = threading.Timer(0.1, lambda: transport.processes.update({42: "rec"}))
        timer.start()

        try:
            assert discovery.find("rec") == 42
        finally:
            timer.cancel()

    def test_timeout(self):
        """Never-appearing process raises ProcessNotFound after the bound."""
        transport = FakeTransport(processes={8: "bash"})
        discovery = ProcessDiscovery(transport, timeout=0.1, interval=0.01)

        with pytest.raises(ProcessNotFound) as exc_info:
            discovery.find("rec")

        assert exc_info.value.command_name == "rec"
        assert transport.list_calls > 1

    def test_preexisting_process_not_mistaken(self):
        """Test that a process running before launch is not taken for the new one."""
        transport = FakeTransport(processes={8: "rec"})
        discovery = ProcessDiscovery(transport, timeout=0.1, interval=0.01)
        before = discovery.snapshot("rec")

        with pytest.raises(ProcessNotFound):
            discovery.find("rec", exclude=before)

    def test_cancel(self):
        """Test cancelling discovery."""
        transport = FakeTransport()
        discovery = ProcessDiscovery(transport, timeout=5.0, interval=0.01)
        cancel = threading.Event()
        threading.Timer(0.05, cancel.set).start()

        with pytest.raises(DiscoveryCancelled):
            discovery.find("rec", cancel_event=cancel)
