"""
Integration tests for recording and conversion with real processes.

A long `sleep` stands in for the capture tool.
"""

import signal
import time
from pathlib import Path

import psutil
import pytest

from camcorder.config import Config, load_config
from camcorder.convert.pipeline import ConversionPipeline, ConversionTemplate
from camcorder.core.template import CommandTemplate, Placeholder
from camcorder.host import StaticWindowIdProvider
from camcorder.record.controller import RecordingController, SessionState
from camcorder.transport import LocalTransport

EXAMPLES = Path(__file__).resolve().parents[2] / "examples"

pytestmark = pytest.mark.skipif(
    not hasattr(signal, "SIGUSR1"), reason="POSIX process control required"
)


def wait_for(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.05)
    return predicate()


class TestRecordingWorkflow:
    """Start and stop a real process."""

    def setup_method(self):
        self.transport = LocalTransport()

    def teardown_method(self):
        self.transport.close()

    def _controller(self, template, tmp_path):
        config = Config(
            recording_template=template,
            output_directory=tmp_path,
            countdown=0,
            discovery_timeout=5.0,
            discovery_interval=0.05,
        )
        return RecordingController(
            self.transport, config, window_provider=StaticWindowIdProvider("21")
        )

    def test_start_stop(self, tmp_path):
        """The command runs under a shell; discovery finds it in the spawned tree."""
        template = CommandTemplate.of("sleep 30 && touch ", Placeholder.OUTPUT_FILE)
        controller = self._controller(template, tmp_path)
        output = tmp_path / "out.ogv"

        session = controller.start(str(output))
        assert controller.wait_until_started(timeout=10) == SessionState.RECORDING

        pid = session.pid
        assert psutil.Process(pid).name() == "sleep"

        controller.stop()

        assert controller.state == SessionState.IDLE
        assert wait_for(lambda: not psutil.pid_exists(pid) or
                        psutil.Process(pid).status() == psutil.STATUS_ZOMBIE)
        # sleep was terminated, so the && branch never ran
        assert not output.exists()

    def test_discovery_timeout(self, tmp_path):
        """Test that a command that never matches returns to IDLE."""
        template = CommandTemplate.of("true ", Placeholder.OUTPUT_FILE)
        controller = self._controller(template, tmp_path)
        controller.discovery.timeout = 0.3

        session = controller.start(str(tmp_path / "out.ogv"))

        assert controller.wait_until_started(timeout=10) == SessionState.IDLE
        assert session.error is not None


class TestConversionWorkflow:
    """Fire-and-forget conversion."""

    def test_convert_copies_file(self, tmp_path):
        """Test a conversion that copies the file."""
        source = tmp_path / "in.ogv"
        source.write_bytes(b"video")
        target = tmp_path / "out.gif"
        catalogue = [ConversionTemplate(
            "copy",
            CommandTemplate.of(
                "cp ", Placeholder.INPUT_FILE, " ", Placeholder.TEMP_OUTPUT_FILE,
                " && mv ", Placeholder.TEMP_OUTPUT_FILE, " ", Placeholder.OUTPUT_FILE,
            ),
        )]
        transport = LocalTransport()
        pipeline = ConversionPipeline(transport, catalogue)

        job = pipeline.convert("copy", str(source), str(target))

        assert job is not None
        assert wait_for(lambda: target.exists() and target.read_bytes() == b"video")
        transport.close()


class TestExampleConfigs:
    """Shipped example configs load."""

    def test_recordmydesktop(self):
        """Test loading the recordmydesktop example."""
        config = load_config(str(EXAMPLES / "recordmydesktop.py"))

        assert config.window_id_offset == -2
        assert config.recording_template.command_name == "recordmydesktop"
        assert config.countdown == 5

    def test_web_formats(self):
        """Test loading the web formats example."""
        config = load_config(str(EXAMPLES / "web-formats.py"))
        names = [entry.name for entry in config.conversion_templates]

        assert names[:2] == ["webm", "mp4"]
        assert "ffmpeg" in names
        assert config.default_conversion_output("a.ogv") == "a.webm"
