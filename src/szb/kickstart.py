"""
Application Lifecycle
=====================

A small driver for programs shaped as init -> loop -> teardown:

    Kickstart(open_port) \\
        .then(start_providers) \\
        .loop(compose_and_send) \\
        .then(clear_and_close) \\
        .execute()

Each stage receives the shared Context. SIGINT and SIGTERM request a
stop, which the loop observes between iterations; a second SIGINT
raises KeyboardInterrupt for a stuck iteration. The loop body may also
stop by returning ``LoopState.BREAK`` or setting ``ctx.next``.

The teardown stage runs whenever init succeeded, even if a later stage
raised, so the serial port is always released.
"""

import logging
import signal
import threading
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class LoopState(IntEnum):
    """What the loop should do after the current iteration."""
    CONTINUE = 0
    BREAK = 1


@dataclass
class Context:
    """
    State shared by all lifecycle stages.

    Attributes:
        app: Whatever the init stage wants to hand to later stages
        next: Set to LoopState.BREAK by the loop body to stop
        iterations: Completed loop iterations
    """
    app: Any = None
    next: LoopState = LoopState.CONTINUE
    iterations: int = 0


Stage = Callable[[Context], Optional[LoopState]]

STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class Kickstart:
    """
    Builder and runner for an init/loop/teardown program.

    ``then`` attaches to whichever stage was configured last: after
    ``Kickstart(init)`` it sets the post-init stage, after ``loop`` it
    sets the teardown stage.
    """

    def __init__(self, init: Stage):
        self._init = init
        self._after_init: Optional[Stage] = None
        self._loop: Optional[Stage] = None
        self._after_loop: Optional[Stage] = None
        self._stop_event = threading.Event()

    def then(self, stage: Stage) -> "Kickstart":
        if self._loop is None:
            self._after_init = stage
        else:
            self._after_loop = stage
        return self

    def loop(self, stage: Stage) -> "Kickstart":
        self._loop = stage
        return self

    @property
    def stopping(self) -> bool:
        """True once a stop was requested."""
        return self._stop_event.is_set()

    def request_stop(self) -> None:
        """Ask the loop to stop after the current iteration."""
        self._stop_event.set()

    def _handle_signal(self, signum: int, frame) -> None:
        if self._stop_event.is_set() and signum == signal.SIGINT:
            raise KeyboardInterrupt
        logger.info("Received %s, stopping", signal.Signals(signum).name)
        self._stop_event.set()

    def _install_handlers(self) -> dict:
        previous = {}
        if threading.current_thread() is not threading.main_thread():
            logger.debug("Not on the main thread, signal handlers not installed")
            return previous
        for signum in STOP_SIGNALS:
            previous[signum] = signal.signal(signum, self._handle_signal)
        return previous

    @staticmethod
    def _restore_handlers(previous: dict) -> None:
        for signum, handler in previous.items():
            signal.signal(signum, handler)

    def _run_loop(self, ctx: Context) -> None:
        while not self._stop_event.is_set():
            ctx.next = LoopState.CONTINUE
            if self._loop(ctx) == LoopState.BREAK:
                ctx.next = LoopState.BREAK
            ctx.iterations += 1
            if ctx.next == LoopState.BREAK:
                logger.debug("Loop break after %d iterations", ctx.iterations)
                break

    def execute(self) -> Context:
        """
        Run all stages.

        Returns:
            The context after teardown.

        Raises:
            Whatever a stage raises, after teardown has run.
        """
        ctx = Context()
        previous = self._install_handlers()
        try:
            self._init(ctx)
            try:
                if self._after_init is not None:
                    self._after_init(ctx)
                if self._loop is not None:
                    self._run_loop(ctx)
            finally:
                if self._after_loop is not None:
                    self._after_loop(ctx)
        finally:
            self._restore_handlers(previous)
        return ctx
