"""
Recording mode - launch and control the external capture process.

Usage:
    camcorder record out.ogv
    # p: pause/resume, s: stop
"""

from camcorder.record.controller import RecordingController, RecordingSession, SessionState

__all__ = ["RecordingController", "RecordingSession", "SessionState"]
