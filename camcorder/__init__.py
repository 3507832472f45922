__version__ = "0.1.0"

from camcorder.core import CommandTemplate, Literal, Placeholder, resolve
from camcorder.record import RecordingController, RecordingSession, SessionState
from camcorder.convert import ConversionPipeline, ConversionTemplate
from camcorder.config import Config, load_config
from camcorder.logging import get_logger, get_camcorder_logger, setup_logging

"""
Camcorder:
    CommandTemplate is a literal/placeholder sequence resolved into a shell command.
    RecordingController launches the capture command and drives its process
    through start, pause, resume and stop with OS signals.
    ConversionPipeline resolves and launches a conversion of a finished capture.
"""

__all__ = [
    "CommandTemplate",
    "Literal",
    "Placeholder",
    "resolve",
    "RecordingController",
    "RecordingSession",
    "SessionState",
    "ConversionPipeline",
    "ConversionTemplate",
    "Config",
    "load_config",
    "get_logger",
    "get_camcorder_logger",
    "setup_logging",
]
