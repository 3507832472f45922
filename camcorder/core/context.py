"""
Resolution context assembly.

A context is built fresh for every recording start and every conversion,
so temp paths and window ids from one invocation never leak into another.
"""

import os
import tempfile
from pathlib import Path
from typing import Iterable, Optional, Union

from camcorder.core.errors import InvalidWindowId
from camcorder.core.template import Placeholder, ResolutionContext

TEMP_PREFIX = "camcorder-"


def format_window_id(raw: Union[str, int], offset: int = 0) -> str:
    """
    Apply the configured offset to a raw window id and format it as hex.

    Args:
        raw: Window id as reported by the host (decimal, or 0x-prefixed hex)
        offset: Integer added to the raw id

    Returns:
        "0x"-prefixed lower-case hex string

    Raises:
        InvalidWindowId: raw is not an integer, or the offset makes it negative

    Example:
        format_window_id("21")  # '0x15'
    """
    if isinstance(raw, int):
        value = raw
    else:
        text = raw.strip()
        try:
            value = int(text, 16) if text.lower().startswith("0x") else int(text)
        except ValueError:
            raise InvalidWindowId(raw, "not a decimal or 0x-prefixed hex integer") from None
    value += offset
    if value < 0:
        raise InvalidWindowId(raw, f"offset {offset} gives a negative id")
    return hex(value)


def fresh_temp_paths(
    kinds: Iterable[Placeholder],
    output_file: Optional[str] = None,
    temp_root: Optional[str] = None,
) -> ResolutionContext:
    """
    Create the temporary paths requested by a template.

    Only kinds present in `kinds` are created. TEMP_OUTPUT_FILE keeps the
    extension of `output_file` so format-sniffing tools accept it.
    """
    kinds = set(kinds)
    paths: ResolutionContext = {}

    if Placeholder.TEMP_FILE in kinds:
        fd, path = tempfile.mkstemp(prefix=TEMP_PREFIX, dir=temp_root)
        os.close(fd)
        paths[Placeholder.TEMP_FILE] = path

    if Placeholder.TEMP_OUTPUT_FILE in kinds:
        suffix = Path(output_file).suffix if output_file else ""
        fd, path = tempfile.mkstemp(prefix=TEMP_PREFIX, suffix=suffix, dir=temp_root)
        os.close(fd)
        paths[Placeholder.TEMP_OUTPUT_FILE] = path

    if Placeholder.TEMP_DIR in kinds:
        paths[Placeholder.TEMP_DIR] = tempfile.mkdtemp(prefix=TEMP_PREFIX, dir=temp_root)

    return paths


def build_context(
    kinds: Iterable[Placeholder],
    output_file: Optional[str] = None,
    input_file: Optional[str] = None,
    window_id: Optional[Union[str, int]] = None,
    window_id_offset: int = 0,
    temp_root: Optional[str] = None,
) -> ResolutionContext:
    """
    Build a resolution context for one invocation.

    Values that were not supplied are simply absent, so resolving a
    template that needs them fails with UnresolvedPlaceholder.

    Args:
        kinds: Placeholder kinds the template uses (drives temp path creation)
        output_file: Output path chosen by the user
        input_file: Input path (conversion only)
        window_id: Raw window id from the host
        window_id_offset: Offset applied to window_id
        temp_root: Directory for temp paths (default: system temp dir)
    """
    context: ResolutionContext = {}
    if output_file is not None:
        context[Placeholder.OUTPUT_FILE] = str(output_file)
    if input_file is not None:
        context[Placeholder.INPUT_FILE] = str(input_file)
    if window_id is not None:
        context[Placeholder.WINDOW_ID] = format_window_id(window_id, window_id_offset)
    context.update(fresh_temp_paths(kinds, output_file=output_file, temp_root=temp_root))
    return context


def discard_temp_paths(context: ResolutionContext) -> None:
    """Remove temp paths in context that are still unused (empty)."""
    for kind in (Placeholder.TEMP_FILE, Placeholder.TEMP_OUTPUT_FILE):
        if kind in context:
            path = Path(context[kind])
            if path.is_file() and path.stat().st_size == 0:
                path.unlink()
    if Placeholder.TEMP_DIR in context:
        path = Path(context[Placeholder.TEMP_DIR])
        if path.is_dir() and not any(path.iterdir()):
            path.rmdir()
