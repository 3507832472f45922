"""
Camcorder CLI - record a window and convert the result.

Commands:
    camcorder record [OUTPUT]          - Record a window (p: pause/resume, s: stop)
    camcorder convert INPUT [OUTPUT]   - Convert a capture (e.g. to GIF)
    camcorder templates                - Show configured templates
    camcorder version                  - Show version
"""

import sys
from typing import Optional

import click

from camcorder.config import Config, load_config
from camcorder.convert.pipeline import ConversionPipeline
from camcorder.core.errors import CamcorderError
from camcorder.host import StaticWindowIdProvider, XdotoolWindowIdProvider
from camcorder.logging import get_camcorder_logger, setup_logging
from camcorder.record.controller import RecordingController, SessionState
from camcorder.transport import LocalTransport

logger = get_camcorder_logger(__name__)

STOP_KEYS = ("s", "q")
PAUSE_KEYS = ("p", " ")


@click.group(invoke_without_command=True)
@click.option('--config', 'config_file', type=click.Path(), help='Python config file')
@click.option('--verbose', '-v', is_flag=True, help='Debug logging')
@click.pass_context
def cli(ctx, config_file: Optional[str], verbose: bool):
    """Camcorder - record a window, convert it to something shareable."""
    setup_logging("DEBUG" if verbose else "INFO")
    try:
        ctx.obj = load_config(config_file)
    except CamcorderError as e:
        click.secho(f"Error loading config: {e}", fg="red")
        sys.exit(1)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


def _transport(config: Config) -> LocalTransport:
    return LocalTransport(pause_signal=config.pause_signal, stop_signal=config.stop_signal)


@cli.command()
@click.argument('output', required=False, type=click.Path())
@click.option('--window-id', help='Window to capture (default: active window via xdotool)')
@click.option('--countdown', type=int, help='Seconds to wait before recording')
@click.option('--dry-run', is_flag=True, help='Show the command without running it')
@click.pass_obj
def record(config: Config, output: Optional[str], window_id: Optional[str],
           countdown: Optional[int], dry_run: bool):
    """
    Record a window until stopped.

    Example:
        camcorder record demo.ogv
        camcorder record demo.ogv --window-id 0x3a00007 --countdown 0
    """
    if countdown is not None:
        config.countdown = countdown

    transport = _transport(config)
    if window_id:
        provider = StaticWindowIdProvider(window_id)
    else:
        provider = XdotoolWindowIdProvider(transport)

    controller = RecordingController(transport, config, window_provider=provider)

    try:
        if dry_run:
            logger.dry_run("Would execute:")
            logger.command("record", controller.preview(output))
            return

        session = controller.start(output)
        state = controller.wait_until_started(
            timeout=config.countdown + config.discovery_timeout + 5
        )
    except CamcorderError as e:
        click.secho(f"Error: {e}", fg="red")
        sys.exit(1)
    except KeyboardInterrupt:
        controller.stop()
        controller.wait_until_started()
        click.echo("\nRecording cancelled")
        return

    if state != SessionState.RECORDING:
        click.secho(f"Recording did not start: {session.error}", fg="red")
        sys.exit(1)

    click.echo("Recording. Press 'p' to pause/resume, 's' to stop.")
    try:
        _control_loop(controller)
    except KeyboardInterrupt:
        click.echo()
    finally:
        controller.stop()
        transport.close()

    click.secho(f"Saved {session.output_file}", fg="green")
    click.echo(f"\nTo convert: camcorder convert {session.output_file}")


def _control_loop(controller: RecordingController) -> None:
    """Read single keys until stop is requested or the session ends."""
    while controller.state in (SessionState.RECORDING, SessionState.PAUSED):
        key = click.getchar().lower()
        if key in STOP_KEYS:
            return
        if key in PAUSE_KEYS:
            try:
                if controller.toggle_pause():
                    click.echo(f"  {controller.state.value}")
                else:
                    click.secho("  capture process is not running", fg="yellow")
                    return
            except CamcorderError as e:
                click.secho(f"  {e}", fg="yellow")


@cli.command()
@click.argument('input_file', type=click.Path(exists=True))
@click.argument('output', required=False, type=click.Path())
@click.option('--template', '-t', 'template_name', help='Conversion template name')
@click.option('--yes', '-y', is_flag=True, help='Skip confirmation')
@click.option('--dry-run', is_flag=True, help='Show the command without running it')
@click.pass_obj
def convert(config: Config, input_file: str, output: Optional[str],
            template_name: Optional[str], yes: bool, dry_run: bool):
    """
    Convert a capture with one of the configured templates.

    Example:
        camcorder convert demo.ogv
        camcorder convert demo.ogv demo.gif -t "ffmpeg + gifsicle" --yes
    """
    transport = _transport(config)

    def _confirm(command: str) -> bool:
        click.echo(f"\n  {command}\n")
        return yes or click.confirm("Run this command?")

    pipeline = ConversionPipeline(transport, config.conversion_templates, confirm=_confirm)

    if template_name is None:
        names = pipeline.names()
        if not names:
            click.secho("No conversion templates configured", fg="red")
            sys.exit(1)
        template_name = click.prompt(
            "Conversion", type=click.Choice(names), default=names[0]
        )

    output = output or config.default_conversion_output(input_file)

    try:
        if dry_run:
            job = pipeline.prepare(template_name, input_file, output)
            job.discard()
            logger.dry_run("Would execute:")
            logger.command(f"convert ({template_name})", job.command)
            return

        job = pipeline.convert(template_name, input_file, output)
    except CamcorderError as e:
        click.secho(f"Error: {e}", fg="red")
        sys.exit(1)

    if job is None:
        click.echo("Aborted.")
        return

    click.secho(f"Converting to {job.output_file} in the background", fg="green")


@cli.command()
@click.pass_obj
def templates(config: Config):
    """Show the recording template and conversion catalogue."""
    click.echo("Recording:")
    click.echo(f"  {config.recording_template.describe()}")
    click.echo("\nConversions:")
    for entry in config.conversion_templates:
        click.echo(f"  {entry.name:<24} {entry.template.describe()}")


@cli.command()
def version():
    """Show Camcorder version."""
    from camcorder import __version__
    click.echo(f"camcorder version {__version__}")


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
