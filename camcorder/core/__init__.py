"""
Core Camcorder functionality.

Exports command templates, context assembly and the error taxonomy.
"""

from camcorder.core.template import CommandTemplate, Literal, Placeholder, resolve
from camcorder.core.context import build_context, discard_temp_paths, format_window_id
from camcorder.core.errors import (
    CamcorderError,
    UnresolvedPlaceholder,
    SessionAlreadyActive,
    StartingInProgress,
    InvalidTransition,
    ProcessNotFound,
    ProcessNotRunning,
    DiscoveryCancelled,
    UnknownTemplate,
    ConfigError,
    InvalidWindowId,
)

__all__ = [
    "CommandTemplate",
    "Literal",
    "Placeholder",
    "resolve",
    "build_context",
    "format_window_id",
    "discard_temp_paths",
    "CamcorderError",
    "UnresolvedPlaceholder",
    "SessionAlreadyActive",
    "StartingInProgress",
    "InvalidTransition",
    "ProcessNotFound",
    "ProcessNotRunning",
    "DiscoveryCancelled",
    "UnknownTemplate",
    "ConfigError",
    "InvalidWindowId",
]
