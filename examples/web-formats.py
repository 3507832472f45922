"""
Conversion catalogue for publishing captures on the web.

Usage:
    camcorder --config examples/web-formats.py convert demo.ogv -t webm
"""

from camcorder import CommandTemplate, ConversionTemplate, Placeholder
from camcorder.convert import default_catalogue

CONVERSION_EXTENSION = ".webm"

CONVERSION_TEMPLATES = [
    ConversionTemplate(
        "webm",
        CommandTemplate.of(
            "ffmpeg -y -i ", Placeholder.INPUT_FILE,
            " -c:v libvpx-vp9 -b:v 0 -crf 35 ", Placeholder.OUTPUT_FILE,
        ),
    ),
    ConversionTemplate(
        "mp4",
        CommandTemplate.of(
            "ffmpeg -y -i ", Placeholder.INPUT_FILE,
            " -c:v libx264 -pix_fmt yuv420p -movflags +faststart ", Placeholder.OUTPUT_FILE,
        ),
    ),
] + default_catalogue()
