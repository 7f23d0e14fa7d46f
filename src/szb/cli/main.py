"""
szb - Status Display Command-Line Interface
===========================================

Drives a 4x20 character LCD attached over USB serial. The device prints
a ``$>:`` prompt whenever it wants a frame; szb answers each prompt with
one 80-byte frame composed from four status lines.

Usage Examples
--------------
List available serial ports:
    $ szb ports

Run with the default wrap-span style on an auto-detected port:
    $ szb run

Trim lines 1 and 4, scroll lines 2 and 3 (line 3 at a third of the speed):
    $ szb run -c /dev/ttyACM0 -o t,em,em:3,t

Preview a style in the terminal without a device:
    $ szb preview -o t,cm,em,t -n 30 -l "hello" -l "a line too long for one row"

Overflow Styles
---------------
    wrap          the four lines flow through all 80 cells
    A,B,C,D       one style per line, each of:
                    t      trim to 20 columns
                    em[:N] endless marquee, advancing every N frames
                    cm[:N] cycle marquee, bouncing every N frames

Exit Codes
----------
0 - Success
1 - Serial or link error
2 - Invalid arguments or configuration error
3 - Internal error
"""

import logging
import time
from typing import Optional

import click

from szb import __version__
from szb.app import Composer, DisplayApp, StatusLines
from szb.cli.errors import handle_cli_exception
from szb.comms.serial import (
    find_display_port,
    format_port_list,
    list_serial_ports,
)
from szb.config import AppConfig
from szb.display.buffer import DisplayBuffer
from szb.display.charmap import rom_to_text
from szb.display.layout import LINE_COUNT, LINE_WIDTH, logical_rows
from szb.display.parser import parse_overflow_style
from szb.stats.weather import Coordinates

logger = logging.getLogger(__name__)


# =============================================================================
# CLI Context and Utilities
# =============================================================================

class Context:
    """
    Shared context for CLI commands.

    Stores global options like verbosity.
    """

    def __init__(self) -> None:
        self.verbose: bool = False

    def setup_logging(self) -> None:
        """Configure logging based on verbosity."""
        level = logging.DEBUG if self.verbose else logging.INFO
        logging.basicConfig(
            level=level,
            format="%(levelname)s: %(message)s" if self.verbose else "%(message)s",
        )


pass_context = click.make_pass_decorator(Context, ensure=True)


def build_coordinates(lat: Optional[float], lon: Optional[float]) -> Optional[Coordinates]:
    """
    Combine --lat/--lon into Coordinates.

    Raises:
        click.BadParameter: If only one of the two is given.
    """
    if lat is None and lon is None:
        return None
    if lat is None or lon is None:
        raise click.BadParameter("--lat and --lon must be given together")
    return Coordinates(lat, lon)


def format_frame(frame: bytes) -> str:
    """Render a frame as four bordered rows in logical order."""
    border = "+" + "-" * LINE_WIDTH + "+"
    rows = [f"|{rom_to_text(row)}|" for row in logical_rows(frame)]
    return "\n".join([border, *rows, border])


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Enable verbose output",
)
@click.version_option(version=__version__, prog_name="szb")
@pass_context
def main(ctx: Context, verbose: bool) -> None:
    """
    Show system status on a 4x20 character LCD over serial.

    Use 'szb ports' to list available serial ports.
    """
    ctx.verbose = verbose
    ctx.setup_logging()


# =============================================================================
# Run Command
# =============================================================================

@main.command()
@click.option(
    "-c", "--connect",
    "port",
    type=str,
    default=None,
    help="Serial port device (auto-detect if not specified)",
)
@click.option(
    "-b", "--baud",
    type=click.IntRange(min=1),
    default=None,
    help="Baud rate (default: 115200)",
)
@click.option(
    "-o", "--overflow",
    type=str,
    default=None,
    help="Overflow style: 'wrap' or four line styles like t,em,em:3,cm",
)
@click.option(
    "--timezone",
    type=str,
    default=None,
    help="IANA timezone for the clock line (default: Asia/Tokyo)",
)
@click.option(
    "--render-rate",
    type=click.IntRange(min=1),
    default=None,
    help="Prompts per second sent by the device (default: 2)",
)
@click.option(
    "--dow-period",
    "show_dow_period",
    type=click.IntRange(min=0, max=60),
    default=None,
    help="Seconds per minute showing the weekday (default: 10)",
)
@click.option(
    "--prompt-delay",
    type=click.FloatRange(min=0.0),
    default=None,
    help="Seconds to wait before answering a prompt (default: 0.5)",
)
@click.option("--lat", type=float, default=None, help="Latitude for the weather line")
@click.option("--lon", type=float, default=None, help="Longitude for the weather line")
@pass_context
def run(
    ctx: Context,
    port: Optional[str],
    baud: Optional[int],
    overflow: Optional[str],
    timezone: Optional[str],
    render_rate: Optional[int],
    show_dow_period: Optional[int],
    prompt_delay: Optional[float],
    lat: Optional[float],
    lon: Optional[float],
) -> None:
    """
    Answer display prompts until interrupted.

    Options override the SZB_* environment variables. The weather line
    needs --lat/--lon and the OWM_API_KEY environment variable.

    Example:
        szb run
        szb run -c /dev/ttyACM0 -o t,em,em,t --timezone Europe/Lisbon
    """
    try:
        config = AppConfig.from_env().with_overrides(
            port=port,
            baud_rate=baud,
            overflow_style=overflow,
            timezone=timezone,
            render_rate=render_rate,
            show_dow_period=show_dow_period,
            prompt_delay=prompt_delay,
            weather_coordinates=build_coordinates(lat, lon),
        )
        if config.weather_coordinates is not None and not config.weather_enabled:
            logger.warning("OWM_API_KEY is not set, weather line disabled")

        app = DisplayApp(config)
        result = app.run()
        logger.info("Stopped after %d prompts", result.iterations)

    except KeyboardInterrupt:
        click.echo("\nInterrupted.", err=True)
    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose)


# =============================================================================
# Ports Command
# =============================================================================

@main.command()
@pass_context
def ports(ctx: Context) -> None:
    """
    List available serial ports.

    USB-serial adapters and microcontroller boards are marked with their
    vendor (e.g., Raspberry Pi, Arduino).

    Example:
        szb ports
    """
    port_list = list_serial_ports()

    if not port_list:
        click.echo("No serial ports found.")
        click.echo("\nTips:")
        click.echo("  - Connect the display board over USB")
        click.echo("  - On Linux, ensure you have permission (dialout group)")
        return

    click.echo("Available serial ports:")
    click.echo(format_port_list(port_list))

    auto_port = find_display_port()
    if auto_port:
        click.echo(f"\nSuggested port for the display: {auto_port}")
    else:
        click.echo("\nNo display board auto-detected.")


# =============================================================================
# Preview Command
# =============================================================================

SAMPLE_LINES = (
    "szb preview",
    "ア「テスト」 a line that is too long for one row",
    "short",
    "another long line to watch the overflow style at work",
)


@main.command()
@click.option(
    "-o", "--overflow",
    type=str,
    default="wrap",
    show_default=True,
    help="Overflow style to preview",
)
@click.option(
    "-n", "--ticks",
    type=click.IntRange(min=1),
    default=10,
    show_default=True,
    help="Number of frames to render",
)
@click.option(
    "-l", "--line",
    "lines",
    multiple=True,
    help="Line text, repeat up to four times (default: sample lines)",
)
@click.option(
    "--live",
    is_flag=True,
    help="Use the live status lines instead of fixed text",
)
@click.option(
    "--delay",
    type=click.FloatRange(min=0.0),
    default=0.0,
    help="Seconds between frames",
)
@pass_context
def preview(
    ctx: Context,
    overflow: str,
    ticks: int,
    lines: tuple[str, ...],
    live: bool,
    delay: float,
) -> None:
    """
    Print frames to the terminal instead of the device.

    Rows are shown in their on-screen order. Characters the terminal
    cannot show from the LCD ROM appear as '?'.

    Example:
        szb preview -o t,em,cm,t -n 25
        szb preview --live --delay 0.5
    """
    try:
        if len(lines) > LINE_COUNT:
            raise click.BadParameter(f"at most {LINE_COUNT} lines", param_hint="--line")

        composer = Composer(DisplayBuffer(parse_overflow_style(overflow)))
        status = None
        if live:
            status = StatusLines.from_config(AppConfig.from_env())
            status.start()
        fixed = list(lines or SAMPLE_LINES)
        fixed += [""] * (LINE_COUNT - len(fixed))

        try:
            for tick in range(ticks):
                frame = composer.compose(status.read() if status else fixed)
                click.echo(f"frame {tick + 1}")
                click.echo(format_frame(frame))
                if delay:
                    time.sleep(delay)
        finally:
            if status is not None:
                status.stop()

    except KeyboardInterrupt:
        click.echo("\nInterrupted.", err=True)
    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
