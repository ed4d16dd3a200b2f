"""Interrupt handling: finalize through the state owner, then exit."""

import logging
import os
import signal
import sys
from typing import Callable

from timeln.state import TimingState

logger = logging.getLogger(__name__)

INTERRUPT_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def terminate(code: int) -> None:
    """Flush standard streams and end the process without unwinding."""
    for stream in (sys.stdout, sys.stderr):
        try:
            stream.flush()
        except (OSError, ValueError, RuntimeError):
            pass  # Closed, broken pipe, or interrupted mid-write
    os._exit(code)


class InterruptCoordinator:
    """
    Installs handlers that finalize through the TimingState and then exit.

    Python runs the handler on the main thread between bytecodes, so while
    it waits for the owner thread the processing loop is parked at a line
    boundary and nothing else reaches stdout. A blocking read in the main
    thread is simply abandoned.
    """

    def __init__(
        self,
        state: TimingState,
        exit_func: Callable[[int], None] = terminate,
        finalize_timeout: float | None = 30.0,
    ) -> None:
        """
        Initialize the InterruptCoordinator.

        Args:
            state: Owner that runs the finalize body.
            exit_func: Called with exit code 0 once finalize is done.
            finalize_timeout: Seconds to wait for the owner before exiting
                anyway; None waits for as long as the owner is alive.
        """
        self._state = state
        self._exit = exit_func
        self._finalize_timeout = finalize_timeout
        self._previous: dict[int, object] = {}

    @property
    def installed(self) -> bool:
        """Check if the handlers are currently installed."""
        return bool(self._previous)

    def install(self) -> None:
        """Register the handlers. Must be called once, from the main thread."""
        if self.installed:
            raise RuntimeError("interrupt handlers are already installed")
        for sig in INTERRUPT_SIGNALS:
            self._previous[sig] = signal.signal(sig, self._handle)
        logger.debug("Interrupt handlers installed")

    def uninstall(self) -> None:
        """Restore the handlers that were active before install()."""
        for sig, previous in self._previous.items():
            signal.signal(sig, previous if previous is not None else signal.SIG_DFL)
        self._previous.clear()

    def _handle(self, signum, frame) -> None:
        """Finalize once, then exit with code 0 without returning to the loop."""
        self._state.interrupt(timeout=self._finalize_timeout)
        self._exit(0)
