"""
Conversion pipeline - turn a captured video into another format.

Conversions are one-shot: pick a catalogue entry, resolve it against
freshly built paths, confirm the full command with the user, then launch
it in the background. Nothing is tracked after launch, and no recording
session state is touched.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

from camcorder.core.context import build_context, discard_temp_paths
from camcorder.core.errors import UnknownTemplate, UnresolvedPlaceholder
from camcorder.core.template import CommandTemplate, Placeholder, ResolutionContext
from camcorder.logging import get_camcorder_logger
from camcorder.transport.base import Transport

logger = get_camcorder_logger(__name__)

ConfirmPrompt = Callable[[str], bool]


@dataclass(frozen=True)
class ConversionTemplate:
    """A named catalogue entry."""
    name: str
    template: CommandTemplate


@dataclass
class ConversionJob:
    """One resolved conversion, ready to launch."""
    template: ConversionTemplate
    input_file: str
    output_file: str
    context: ResolutionContext
    command: str

    @property
    def temp_paths(self) -> Dict[Placeholder, str]:
        return {
            kind: value for kind, value in self.context.items()
            if kind in (Placeholder.TEMP_FILE, Placeholder.TEMP_DIR, Placeholder.TEMP_OUTPUT_FILE)
        }

    def discard(self) -> None:
        """Remove the temp paths created for this job if still empty."""
        discard_temp_paths(self.context)


def default_catalogue() -> List[ConversionTemplate]:
    """Built-in conversion templates (all produce animated GIFs)."""
    return [
        ConversionTemplate(
            "ffmpeg",
            CommandTemplate.of(
                "ffmpeg -i ", Placeholder.INPUT_FILE,
                " -pix_fmt rgb24 -r 15 ", Placeholder.OUTPUT_FILE,
            ),
        ),
        ConversionTemplate(
            "ffmpeg + gifsicle",
            CommandTemplate.of(
                "ffmpeg -i ", Placeholder.INPUT_FILE,
                " -pix_fmt rgb24 -r 15 ", Placeholder.TEMP_OUTPUT_FILE,
                " && gifsicle -O2 ", Placeholder.TEMP_OUTPUT_FILE,
                " -o ", Placeholder.OUTPUT_FILE,
            ),
        ),
        ConversionTemplate(
            "mplayer + imagemagick",
            CommandTemplate.of(
                "mplayer -ao null ", Placeholder.INPUT_FILE,
                " -vo jpeg:outdir=", Placeholder.TEMP_DIR,
                " && convert ", Placeholder.TEMP_DIR, "/* ", Placeholder.OUTPUT_FILE,
            ),
        ),
    ]


def _always_confirm(command: str) -> bool:
    return True


class ConversionPipeline:
    """
    Catalogue of conversion templates plus launch logic.

    Example:
        pipeline = ConversionPipeline(LocalTransport(), confirm=click.confirm)
        job = pipeline.convert("ffmpeg", "capture.ogv", "capture.gif")
        if job is None:
            print("Declined")
    """

    def __init__(
        self,
        transport: Transport,
        catalogue: Optional[Iterable[ConversionTemplate]] = None,
        confirm: Optional[ConfirmPrompt] = None,
        temp_root: Optional[str] = None,
    ):
        """
        Args:
            transport: Transport used to launch the command
            catalogue: Conversion templates (default: default_catalogue())
            confirm: Prompt shown the resolved command; False aborts.
                     None confirms everything (scripted use).
            temp_root: Directory for temp paths
        """
        self.transport = transport
        self.catalogue: Dict[str, ConversionTemplate] = {}
        for entry in (catalogue if catalogue is not None else default_catalogue()):
            self.catalogue[entry.name] = entry
        self.confirm = confirm or _always_confirm
        self.temp_root = temp_root

    def names(self) -> List[str]:
        """Descriptors in catalogue order."""
        return list(self.catalogue)

    def get(self, name: str) -> ConversionTemplate:
        try:
            return self.catalogue[name]
        except KeyError:
            raise UnknownTemplate(name, self.names()) from None

    def prepare(self, name: str, input_file: str, output_file: str) -> ConversionJob:
        """
        Resolve a conversion without launching it.

        Raises:
            UnknownTemplate: name is not in the catalogue
            UnresolvedPlaceholder: the template needs a value that is not
                available for conversions (e.g. WINDOW_ID)
        """
        entry = self.get(name)
        context = build_context(
            entry.template.placeholders,
            output_file=output_file,
            input_file=input_file,
            temp_root=self.temp_root,
        )
        try:
            command = entry.template.resolve(context)
        except UnresolvedPlaceholder:
            discard_temp_paths(context)
            raise
        return ConversionJob(
            template=entry,
            input_file=input_file,
            output_file=output_file,
            context=context,
            command=command,
        )

    def launch(self, job: ConversionJob) -> None:
        """Fire-and-forget launch of a prepared job."""
        logger.command(f"convert ({job.template.name})", job.command)
        self.transport.run_async(job.command)
        logger.info(f"Conversion of {job.input_file} to {job.output_file} started")

    def convert(self, name: str, input_file: str, output_file: str) -> Optional[ConversionJob]:
        """
        Resolve, confirm and launch a conversion.

        Returns:
            The launched job, or None if the user declined
        """
        job = self.prepare(name, input_file, output_file)
        if not self.confirm(job.command):
            job.discard()
            logger.info("Conversion cancelled")
            return None
        self.launch(job)
        return job
