"""
Tests for the Application Layer
===============================

This module tests everything above the composition core:
- Kickstart lifecycle and stop handling
- AppConfig defaults, environment and overrides
- Status line wiring and the composer
- DisplayApp against a scripted serial port
"""

import logging
import signal
from unittest.mock import Mock, patch

import pytest
import serial

from szb.app import Composer, DisplayApp, StatusLines, join_for_wrap
from szb.config import AppConfig
from szb.display.buffer import DisplayBuffer
from szb.display.layout import logical_rows
from szb.display.parser import parse_overflow_style
from szb.errors import InvalidStyleForLineError, LinkClosedError
from szb.kickstart import Context, Kickstart, LoopState
from szb.stats.provider import StatsProvider
from szb.stats.weather import Coordinates


# =============================================================================
# Kickstart Tests
# =============================================================================

class TestKickstart:
    """Tests for the lifecycle driver."""

    def test_stage_order(self):
        """Stages run init, then, loop, then."""
        calls = []

        def body(ctx):
            calls.append("loop")
            return LoopState.BREAK

        ctx = (
            Kickstart(lambda ctx: calls.append("init"))
            .then(lambda ctx: calls.append("after_init"))
            .loop(body)
            .then(lambda ctx: calls.append("after_loop"))
            .execute()
        )
        assert calls == ["init", "after_init", "loop", "after_loop"]
        assert ctx.iterations == 1

    def test_break_via_context(self):
        """Setting ctx.next stops the loop."""
        def body(ctx):
            if ctx.iterations == 2:
                ctx.next = LoopState.BREAK

        assert Kickstart(lambda ctx: None).loop(body).execute().iterations == 3

    def test_teardown_after_loop_error(self):
        """The teardown stage runs when the loop raises."""
        teardown = Mock()

        def body(ctx):
            raise RuntimeError("boom")

        kickstart = Kickstart(lambda ctx: None).loop(body).then(teardown)
        with pytest.raises(RuntimeError):
            kickstart.execute()
        teardown.assert_called_once()

    def test_no_teardown_when_init_fails(self):
        """A failed init skips every later stage."""
        teardown = Mock()

        def init(ctx):
            raise OSError("no port")

        with pytest.raises(OSError):
            Kickstart(init).loop(Mock()).then(teardown).execute()
        teardown.assert_not_called()

    def test_request_stop(self):
        """request_stop ends the loop after the current iteration."""
        kickstart = Kickstart(lambda ctx: None)

        def body(ctx):
            kickstart.request_stop()

        ctx = kickstart.loop(body).execute()
        assert ctx.iterations == 1
        assert kickstart.stopping

    def test_signal_handlers_restored(self):
        """Original handlers are reinstated after execute."""
        before = signal.getsignal(signal.SIGTERM)
        Kickstart(lambda ctx: None).loop(lambda ctx: LoopState.BREAK).execute()
        assert signal.getsignal(signal.SIGTERM) is before

    def test_sigterm_stops_loop(self):
        """SIGTERM during the loop requests a stop."""
        def body(ctx):
            signal.raise_signal(signal.SIGTERM)

        kickstart = Kickstart(lambda ctx: None).loop(body)
        assert kickstart.execute().iterations == 1
        assert kickstart.stopping


# =============================================================================
# Configuration Tests
# =============================================================================

class TestAppConfig:
    """Tests for AppConfig."""

    def test_defaults(self):
        """Defaults match the documented values."""
        config = AppConfig()
        assert config.port is None
        assert config.baud_rate == 115200
        assert config.overflow_style == "wrap"
        assert config.timezone == "Asia/Tokyo"
        assert config.render_rate == 2
        assert config.show_dow_period == 10
        assert config.prompt_delay == 0.5
        assert not config.weather_enabled

    def test_from_env(self, monkeypatch):
        """SZB_* variables override defaults."""
        monkeypatch.setenv("SZB_PORT", "/dev/ttyUSB1")
        monkeypatch.setenv("SZB_BAUD", "9600")
        monkeypatch.setenv("SZB_OVERFLOW", "t,em,em,t")
        monkeypatch.setenv("SZB_TIMEZONE", "UTC")
        monkeypatch.setenv("OWM_API_KEY", "secret")
        config = AppConfig.from_env()
        assert config.port == "/dev/ttyUSB1"
        assert config.baud_rate == 9600
        assert config.overflow_style == "t,em,em,t"
        assert config.timezone == "UTC"
        assert config.owm_api_key == "secret"

    def test_invalid_env_baud_ignored(self, monkeypatch, caplog):
        """Non-numeric SZB_BAUD keeps the default and is logged."""
        monkeypatch.setenv("SZB_BAUD", "fast")
        assert AppConfig.from_env().baud_rate == 115200
        assert "Ignoring invalid SZB_BAUD" in caplog.text

    def test_overrides_skip_none(self):
        """None overrides keep the current value."""
        config = AppConfig(port="/dev/a").with_overrides(port=None, baud_rate=9600)
        assert config.port == "/dev/a"
        assert config.baud_rate == 9600

    def test_api_key_hidden_from_repr(self):
        """The API key does not appear in repr."""
        assert "secret" not in repr(AppConfig(owm_api_key="secret"))

    def test_weather_enabled(self):
        """Weather needs both coordinates and a key."""
        coords = Coordinates(1.0, 2.0)
        assert AppConfig(weather_coordinates=coords, owm_api_key="k").weather_enabled
        assert not AppConfig(weather_coordinates=coords).weather_enabled


# =============================================================================
# Composer Tests
# =============================================================================

class TestComposer:
    """Tests for feeding status lines into the buffer."""

    def test_join_for_wrap(self):
        """Short lines pad to a row and empty lines are dropped."""
        assert join_for_wrap(["ab", "", "cd"]) == "ab" + " " * 18 + "cd" + " " * 18

    def test_wrap_uses_line_1(self):
        """Under wrap-span all lines flow through line 1."""
        composer = Composer(DisplayBuffer(parse_overflow_style("wrap")))
        assert composer.wraps
        rows = logical_rows(composer.compose(["one", "two", "", "four"]))
        assert rows[0].startswith(b"one")
        assert rows[1].startswith(b"two")
        assert rows[2].startswith(b"four")

    def test_per_line(self):
        """Under per-line styles each line has its own row."""
        composer = Composer(DisplayBuffer(parse_overflow_style("t,t,t,t")))
        rows = logical_rows(composer.compose(["a", "b", "c", "d"]))
        assert [r[:1] for r in rows] == [b"a", b"b", b"c", b"d"]

    def test_wrap_sets_only_line_1(self, caplog):
        """Wrap-span frames never touch the per-line setters."""
        buffer = DisplayBuffer(parse_overflow_style("wrap"))
        composer = Composer(buffer)
        with patch.object(buffer, "set_line", wraps=buffer.set_line) as set_line:
            for _ in range(3):
                frame = composer.compose(["one", "two", "three", "four"])
        set_line.assert_not_called()
        assert [r.rstrip() for r in logical_rows(frame)] == [b"one", b"two", b"three", b"four"]
        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]


class TestStatusLines:
    """Tests for StatusLines."""

    def test_requires_four(self):
        """Exactly four sources are needed."""
        with pytest.raises(ValueError):
            StatusLines(["a"])

    def test_read(self):
        """None sources read as empty lines."""
        lines = StatusLines(["x", None, 3, "y"])
        assert lines.read() == ["x", "", "3", "y"]

    def test_start_stop_providers(self):
        """Only StatsProvider sources are started and stopped."""
        provider = Mock(spec=StatsProvider)
        lines = StatusLines([provider, "static", None, "z"])
        lines.start()
        lines.stop()
        provider.start.assert_called_once()
        provider.stop.assert_called_once()

    def test_from_config(self, monkeypatch):
        """Weather is left out without an API key."""
        monkeypatch.delenv("OWM_API_KEY", raising=False)
        lines = StatusLines.from_config(AppConfig(timezone="UTC"))
        assert lines.sources[1] is None
        assert len(lines.sources) == 4


# =============================================================================
# Display App Tests
# =============================================================================

def serial_gone():
    return serial.SerialException("device disconnected")


def static_lines() -> StatusLines:
    return StatusLines(["line one", "line two", "line three", "line four"])


class TestDisplayApp:
    """Tests for DisplayApp against a scripted port."""

    def test_bad_style_fails_before_io(self):
        """Invalid overflow styles raise before any port is opened."""
        open_port = Mock()
        with pytest.raises(InvalidStyleForLineError):
            DisplayApp(AppConfig(overflow_style="t,x,t,t"), lines=static_lines(),
                       open_port=open_port)
        open_port.assert_not_called()

    def test_answers_each_prompt(self, fake_port):
        """One frame per prompt, then clr on teardown."""
        port = fake_port([b"$>:\n", b"$>:\n", serial_gone()])
        open_port = Mock(return_value=port)
        sleep = Mock()
        app = DisplayApp(
            AppConfig(port="/dev/test", overflow_style="t,t,t,t"),
            lines=static_lines(),
            open_port=open_port,
            sleep=sleep,
        )

        with pytest.raises(LinkClosedError):
            app.run()

        open_port.assert_called_once_with("/dev/test", baud_rate=115200)
        assert sleep.call_count == 2
        sleep.assert_called_with(0.5)

        written = bytes(port.written)
        assert written.count(b"display:") == 2
        assert written.endswith(b"clr\n")

        frame = written[len(b"display:"):len(b"display:") + 80]
        rows = logical_rows(frame)
        assert rows[0].startswith(b"line one")
        assert rows[1].startswith(b"line two")
        assert rows[2].startswith(b"line three")
        assert rows[3].startswith(b"line four")
        assert not port.is_open

    def test_timeout_sends_nothing(self, fake_port):
        """Loop iterations without a prompt send no frame."""
        port = fake_port([b"noise\n", b"", serial_gone()])
        app = DisplayApp(
            AppConfig(port="/dev/test"),
            lines=static_lines(),
            open_port=Mock(return_value=port),
            sleep=Mock(),
        )
        with pytest.raises(LinkClosedError):
            app.run()
        assert b"display:" not in bytes(port.written)

    def test_wrap_frame(self, fake_port):
        """Wrap-span frames carry all lines in row order."""
        port = fake_port([b"$>:\n", serial_gone()])
        app = DisplayApp(
            AppConfig(port="/dev/test", overflow_style="wrap", prompt_delay=0),
            lines=static_lines(),
            open_port=Mock(return_value=port),
        )
        with pytest.raises(LinkClosedError):
            app.run()
        frame = bytes(port.written)[8:88]
        assert [r.rstrip() for r in logical_rows(frame)] == [
            b"line one", b"line two", b"line three", b"line four",
        ]

    def test_auto_detect_fallback(self, monkeypatch):
        """Without a detected port the default device is used."""
        monkeypatch.setattr("szb.app.find_display_port", lambda: None)
        app = DisplayApp(AppConfig(), lines=static_lines())
        assert app.resolve_port() == "/dev/ttyACM0"

    def test_auto_detect(self, monkeypatch):
        """A detected port is preferred over the default."""
        monkeypatch.setattr("szb.app.find_display_port", lambda: "/dev/ttyACM3")
        app = DisplayApp(AppConfig(), lines=static_lines())
        assert app.resolve_port() == "/dev/ttyACM3"

    def test_env_baud_reaches_pyserial(self, monkeypatch):
        """A fast SZB_BAUD rate is opened as given."""
        monkeypatch.setenv("SZB_PORT", "/dev/ttyACM0")
        monkeypatch.setenv("SZB_BAUD", "230400")
        app = DisplayApp(AppConfig.from_env(), lines=static_lines())
        with patch("serial.Serial") as mock_serial:
            app.init(Context())
        assert mock_serial.call_args.kwargs["port"] == "/dev/ttyACM0"
        assert mock_serial.call_args.kwargs["baudrate"] == 230400
