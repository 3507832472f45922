"""
Error taxonomy for Camcorder.

Structural errors (UnresolvedPlaceholder, SessionAlreadyActive,
StartingInProgress, InvalidTransition, UnknownTemplate, InvalidWindowId)
are raised before any process is launched or signalled. Environmental
errors (ProcessNotFound, ProcessNotRunning) are recorded and logged by
the controller instead of escaping from background threads.
"""

from typing import Optional


class CamcorderError(Exception):
    """Base class for all Camcorder errors."""

    pass


class UnresolvedPlaceholder(CamcorderError):
    """A template references a placeholder missing from the context."""

    def __init__(self, kind):
        self.kind = kind
        super().__init__(f"No value for placeholder {kind.name} in resolution context")


class SessionAlreadyActive(CamcorderError):
    """A start was requested while another session is in progress."""

    def __init__(self, state):
        self.state = state
        super().__init__(f"A recording session is already active (state: {state.value})")


class StartingInProgress(CamcorderError):
    """Pause/resume requested before the capture process was discovered."""

    def __init__(self, action: str):
        self.action = action
        super().__init__(f"Cannot {action}: capture process is still starting")


class InvalidTransition(CamcorderError):
    """Action not allowed from the current session state."""

    def __init__(self, state, action: str):
        self.state = state
        self.action = action
        super().__init__(f"Cannot {action} while {state.value}")


class ProcessNotFound(CamcorderError):
    """Discovery gave up before a matching process appeared."""

    def __init__(self, command_name: str, timeout: float):
        self.command_name = command_name
        self.timeout = timeout
        super().__init__(f"No '{command_name}' process appeared within {timeout:.1f}s")


class ProcessNotRunning(CamcorderError):
    """A signal targeted a process that has already exited."""

    def __init__(self, pid: Optional[int]):
        self.pid = pid
        super().__init__(f"Process {pid} is not running")


class DiscoveryCancelled(CamcorderError):
    """Discovery was cancelled before a match was found."""

    pass


class UnknownTemplate(CamcorderError):
    """No conversion template with the requested name."""

    def __init__(self, name: str, available=()):
        self.name = name
        self.available = list(available)
        msg = f"Unknown conversion template: {name}"
        if self.available:
            msg += f" (available: {', '.join(self.available)})"
        super().__init__(msg)


class ConfigError(CamcorderError):
    """Configuration file could not be loaded."""

    pass


class InvalidWindowId(CamcorderError):
    """A window id that is not a non-negative integer after the offset."""

    def __init__(self, raw, reason: str):
        self.raw = raw
        super().__init__(f"Invalid window id {raw!r}: {reason}")
