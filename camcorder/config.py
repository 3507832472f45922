"""
Configuration for Camcorder.

Config files are plain Python modules. Any module-level name matching a
Config field (case-insensitive) overrides the default:

    # ~/.camcorder/config.py
    from camcorder import CommandTemplate, Placeholder

    WINDOW_ID_OFFSET = -2
    RECORDING_TEMPLATE = CommandTemplate.of(
        "recordmydesktop --fps 20 --no-sound --windowid ", Placeholder.WINDOW_ID,
        " -o ", Placeholder.OUTPUT_FILE,
    )
"""

import importlib.util
import os
from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from camcorder.convert.pipeline import ConversionTemplate, default_catalogue
from camcorder.core.errors import ConfigError
from camcorder.core.template import CommandTemplate, Placeholder
from camcorder.logging import get_camcorder_logger

logger = get_camcorder_logger(__name__)

CONFIG_ENV_VAR = "CAMCORDER_CONFIG"
DEFAULT_CONFIG_PATH = Path.home() / ".camcorder" / "config.py"

DEFAULT_RECORDING_TEMPLATE = CommandTemplate.of(
    "recordmydesktop --no-sound --windowid ", Placeholder.WINDOW_ID,
    " -o ", Placeholder.OUTPUT_FILE,
)


@dataclass
class Config:
    """Externally supplied values the core consumes."""
    recording_template: CommandTemplate = DEFAULT_RECORDING_TEMPLATE
    conversion_templates: List[ConversionTemplate] = field(default_factory=default_catalogue)
    window_id_offset: int = 0
    output_directory: Path = field(default_factory=lambda: Path.home() / "Videos")
    output_extension: str = ".ogv"
    conversion_extension: str = ".gif"
    countdown: int = 3
    discovery_timeout: float = 10.0
    discovery_interval: float = 0.1
    pause_signal: str = "SIGUSR1"
    stop_signal: str = "SIGTERM"

    def default_output_file(self, now: Optional[datetime] = None) -> str:
        """Timestamped output path inside output_directory."""
        now = now or datetime.now()
        name = f"camcorder-{now.strftime('%Y%m%d-%H%M%S')}{self.output_extension}"
        return str(Path(self.output_directory).expanduser() / name)

    def default_conversion_output(self, input_file: str) -> str:
        """input_file with its extension swapped for conversion_extension."""
        return str(Path(input_file).with_suffix(self.conversion_extension))


def load_config(path: Optional[str] = None) -> Config:
    """
    Load configuration.

    Lookup order: explicit path, $CAMCORDER_CONFIG, ~/.camcorder/config.py,
    else built-in defaults.

    Raises:
        ConfigError: The file is missing or fails to execute
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR)
        if path is None and DEFAULT_CONFIG_PATH.exists():
            path = str(DEFAULT_CONFIG_PATH)

    config = Config()
    if path is None:
        return config

    config_path = Path(path).expanduser().resolve()
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    spec = importlib.util.spec_from_file_location("camcorder_config", config_path)
    if spec is None or spec.loader is None:
        raise ConfigError(f"Could not load config: {config_path}")

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise ConfigError(f"Error loading config {config_path}: {e}") from e

    overrides = {}
    names = {f.name for f in fields(Config)}
    for attr in dir(module):
        key = attr.lower()
        if key in names and not attr.startswith("_"):
            overrides[key] = getattr(module, attr)

    if "output_directory" in overrides:
        overrides["output_directory"] = Path(overrides["output_directory"]).expanduser()
    if "conversion_templates" in overrides:
        overrides["conversion_templates"] = list(overrides["conversion_templates"])

    logger.debug(f"Loaded config {config_path} ({', '.join(sorted(overrides)) or 'no overrides'})")
    return replace(config, **overrides)
