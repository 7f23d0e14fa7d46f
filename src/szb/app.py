"""
Display Host Application
========================

Wires the status line providers, the display buffer and the device link
into the kickstart lifecycle:

    init        open the serial port
    then        start the background providers
    loop        wait for a prompt, refresh the lines, send one frame
    then        stop providers, clear the display, close the port

Lines
-----
    1  date and time
    2  weather (blank unless configured)
    3  memory / CPU / uptime aggregates
    4  network interfaces

Under the wrap-span style only line 1 can be set, so the four lines are
joined into one stream, each short line padded to a full row.
"""

import logging
import time
from typing import Callable, Optional, Sequence

from szb.comms.link import DisplayLink
from szb.comms.serial import (
    DEFAULT_DEVICE,
    close_serial_port,
    find_display_port,
    open_serial_port,
)
from szb.config import AppConfig
from szb.display.buffer import DisplayBuffer
from szb.display.layout import LINE_COUNT, LINE_WIDTH
from szb.display.overflow import WrapSpanLines
from szb.display.parser import parse_overflow_style
from szb.errors import CommsError
from szb.kickstart import Context, Kickstart
from szb.stats.aggregates import Aggregates
from szb.stats.clock import DateTime
from szb.stats.network import NetworkStats
from szb.stats.provider import StatsProvider
from szb.stats.weather import WeatherStats

logger = logging.getLogger(__name__)


# =============================================================================
# Status Lines
# =============================================================================

class StatusLines:
    """
    The four line sources, in display order.

    A source is anything whose ``str()`` is the current line text; None
    leaves the line blank. Sources that are StatsProviders are started
    and stopped with this object.
    """

    def __init__(self, sources: Sequence[Optional[object]]):
        if len(sources) != LINE_COUNT:
            raise ValueError(f"expected {LINE_COUNT} line sources, got {len(sources)}")
        self.sources = list(sources)

    @classmethod
    def from_config(cls, config: AppConfig) -> "StatusLines":
        """
        Build the standard line sources.

        Raises:
            StatsError: If the timezone is unknown.
        """
        weather = None
        if config.weather_enabled:
            weather = WeatherStats(config.weather_coordinates, config.owm_api_key)

        return cls([
            DateTime(config.timezone, config.render_rate, config.show_dow_period),
            weather,
            Aggregates(),
            NetworkStats(),
        ])

    def _providers(self) -> list[StatsProvider]:
        return [s for s in self.sources if isinstance(s, StatsProvider)]

    def start(self) -> None:
        for provider in self._providers():
            provider.start()

    def stop(self) -> None:
        for provider in self._providers():
            provider.stop()

    def read(self) -> list[str]:
        """Current text of all four lines."""
        return ["" if s is None else str(s) for s in self.sources]


def join_for_wrap(lines: Sequence[str]) -> str:
    """Join lines into one wrap-span stream, short lines padded to a row."""
    return "".join(line.ljust(LINE_WIDTH) for line in lines if line)


# =============================================================================
# Composer
# =============================================================================

class Composer:
    """
    Feeds status lines into a display buffer.

    Under wrap-span the lines are joined into line 1, the only line that
    style accepts; otherwise each line goes to its own row.
    """

    def __init__(self, buffer: DisplayBuffer):
        self.buffer = buffer

    @property
    def wraps(self) -> bool:
        """True if the buffer uses the wrap-span style."""
        return isinstance(self.buffer.style, WrapSpanLines)

    def update(self, lines: Sequence[str]) -> None:
        """Set all lines for the next render."""
        if self.wraps:
            self.buffer.set_line_1(join_for_wrap(lines))
            return

        for number, line in enumerate(lines, start=1):
            self.buffer.set_line(number, line)

    def compose(self, lines: Sequence[str]) -> bytes:
        """Set lines and render one frame."""
        self.update(lines)
        return self.buffer.next_render()


# =============================================================================
# Application
# =============================================================================

class DisplayApp:
    """
    The display host program.

    Example:
        >>> config = AppConfig(port="/dev/ttyACM0", overflow_style="t,em,em,t")
        >>> DisplayApp(config).run()
    """

    def __init__(
        self,
        config: AppConfig,
        lines: Optional[StatusLines] = None,
        open_port: Callable = open_serial_port,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Prepare the application. Parses the overflow style first, so a bad
        token fails before any serial I/O.

        Raises:
            ConfigError: If the overflow style is invalid.
            StatsError: If a line source cannot be created.
        """
        self.config = config
        self.composer = Composer(DisplayBuffer(parse_overflow_style(config.overflow_style)))
        self.lines = lines if lines is not None else StatusLines.from_config(config)
        self._open_port = open_port
        self._sleep = sleep
        self.port = None
        self.link: Optional[DisplayLink] = None

    def resolve_port(self) -> str:
        """Configured port, else auto-detected, else the default device."""
        if self.config.port:
            return self.config.port
        detected = find_display_port()
        if detected:
            return detected
        logger.info("No port detected, falling back to %s", DEFAULT_DEVICE)
        return DEFAULT_DEVICE

    # -------------------------------------------------------------------------
    # Lifecycle stages
    # -------------------------------------------------------------------------

    def init(self, ctx: Context) -> None:
        device = self.resolve_port()
        self.port = self._open_port(device, baud_rate=self.config.baud_rate)
        self.link = DisplayLink(self.port)
        ctx.app = self

    def start(self, ctx: Context) -> None:
        self.lines.start()
        logger.info("Waiting for prompts from the display")

    def step(self, ctx: Context) -> None:
        if not self.link.wait_for_prompt():
            return
        if self.config.prompt_delay > 0:
            self._sleep(self.config.prompt_delay)
        frame = self.composer.compose(self.lines.read())
        self.link.send_frame(frame)

    def teardown(self, ctx: Context) -> None:
        self.lines.stop()
        if self.link is not None:
            try:
                self.link.clear()
            except CommsError as e:
                logger.warning("Could not clear display: %s", e)
        close_serial_port(self.port)
        logger.info("Sent %d frames", self.link.frames_sent if self.link else 0)

    def kickstart(self) -> Kickstart:
        """Build the lifecycle for this app."""
        return (
            Kickstart(self.init)
            .then(self.start)
            .loop(self.step)
            .then(self.teardown)
        )

    def run(self) -> Context:
        """Run until SIGINT/SIGTERM or a link error."""
        return self.kickstart().execute()
