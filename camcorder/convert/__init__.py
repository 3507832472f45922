"""
Post-hoc format conversion of captured videos.
"""

from camcorder.convert.pipeline import (
    ConversionJob,
    ConversionPipeline,
    ConversionTemplate,
    default_catalogue,
)

__all__ = ["ConversionJob", "ConversionPipeline", "ConversionTemplate", "default_catalogue"]
