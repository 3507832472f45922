"""
Shared fixtures for Camcorder tests.
"""

import pytest

from camcorder.config import Config
from camcorder.core.template import CommandTemplate, Placeholder

from tests.fakes import FakeTransport


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def rec_template():
    return CommandTemplate.of(
        "rec --id ", Placeholder.WINDOW_ID, " -o ", Placeholder.OUTPUT_FILE
    )


@pytest.fixture
def config(tmp_path, rec_template):
    return Config(
        recording_template=rec_template,
        output_directory=tmp_path,
        countdown=0,
        discovery_timeout=0.5,
        discovery_interval=0.01,
    )
