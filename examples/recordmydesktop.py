"""
Record with recordmydesktop at 20 fps, without sound.

Usage:
    camcorder --config examples/recordmydesktop.py record demo.ogv
"""

from camcorder import CommandTemplate, Placeholder

# Some window managers report the client window; recordmydesktop wants the frame
WINDOW_ID_OFFSET = -2

RECORDING_TEMPLATE = CommandTemplate.of(
    "recordmydesktop --fps 20 --no-sound --windowid ", Placeholder.WINDOW_ID,
    " -o ", Placeholder.OUTPUT_FILE,
)

OUTPUT_DIRECTORY = "~/Videos/camcorder"
COUNTDOWN = 5
