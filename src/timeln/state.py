"""Single-owner timing state for timeln."""

import logging
import threading
import time
from dataclasses import dataclass
from queue import Empty, SimpleQueue
from typing import Callable

from timeln.channel import SnapshotChannel
from timeln.errors import StateAccessError
from timeln.models import Counters, FinalizeReason, TimeSnapshot

logger = logging.getLogger(__name__)

FinalizeBody = Callable[[Counters, list[TimeSnapshot], FinalizeReason], None]

_POLL_INTERVAL = 0.1


@dataclass(slots=True, frozen=True)
class FinalizeOutcome:
    """Reply to a finalize request."""

    ran: bool
    error: Exception | None = None


@dataclass(slots=True, frozen=True)
class _Increment:
    matches: bool


@dataclass(slots=True, frozen=True)
class _Read:
    reply: SimpleQueue


@dataclass(slots=True, frozen=True)
class _Finalize:
    reason: FinalizeReason
    reply: SimpleQueue


class _Stop:
    pass


class TimingState:
    """
    Owner of the counters and the finalization guard.

    Runs in a separate daemon thread and handles one inbox message at a time,
    so counter updates, reads and the finalize check-and-set never race.
    The inbox is a ``SimpleQueue`` because its ``put`` may be called from a
    signal handler that interrupted the main thread in the middle of another
    ``put``.
    """

    def __init__(
        self,
        channel: SnapshotChannel,
        finalize_body: FinalizeBody,
        read_timeout: float = 1.0,
    ) -> None:
        """
        Initialize the TimingState.

        Args:
            channel: Snapshot channel drained once at finalize.
            finalize_body: Summary/plot logic, run at most once.
            read_timeout: Seconds to wait for a counters read before falling
                back to the last published counters.
        """
        self._channel = channel
        self._finalize_body = finalize_body
        self._read_timeout = read_timeout
        self._inbox: SimpleQueue = SimpleQueue()
        self._counters = Counters()
        self._finalize_count = 0
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        """Check if the owner thread is running."""
        return self._thread is not None and self._thread.is_alive()

    @property
    def finalize_count(self) -> int:
        """How many times the finalize body has run (0 or 1)."""
        return self._finalize_count

    @property
    def last_known(self) -> Counters:
        """Counters as last published by the owner thread."""
        return self._counters

    def start(self) -> None:
        """Start the owner thread."""
        if self.is_running:
            return

        self._thread = threading.Thread(
            target=self._serve,
            daemon=True,
            name="TimingState",
        )
        self._thread.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        """Stop the owner thread after it handles everything queued so far."""
        if self._thread is not None:
            self._inbox.put(_Stop())
            self._thread.join(timeout=timeout)
            self._thread = None
        self._channel.close()

    def increment_lines(self) -> None:
        """Count one more read line."""
        self._inbox.put(_Increment(matches=False))

    def increment_matches(self) -> None:
        """Count one more matching line."""
        self._inbox.put(_Increment(matches=True))

    def read(self) -> Counters:
        """
        Read the current counters.

        Never raises: if the owner cannot answer, the last published
        counters are returned instead.
        """
        reply: SimpleQueue = SimpleQueue()
        self._inbox.put(_Read(reply))
        try:
            return self._await(reply, timeout=self._read_timeout)
        except StateAccessError as e:
            logger.warning("%s, using last known counters", e)
            return self.last_known

    def finalize(self, reason: FinalizeReason = FinalizeReason.END_OF_STREAM) -> bool:
        """
        Run the finalize body unless it already ran, and wait for it.

        Returns:
            True if this call ran the body, False if it was already done.

        Raises:
            StateAccessError: The owner thread is gone.
            Exception: Whatever the finalize body raised.
        """
        reply: SimpleQueue = SimpleQueue()
        self._inbox.put(_Finalize(reason, reply))
        outcome: FinalizeOutcome = self._await(reply, timeout=None)
        if outcome.error is not None:
            raise outcome.error
        return outcome.ran

    def interrupt(self, timeout: float | None = None) -> bool:
        """
        Finalize on behalf of an interrupt and wait for the owner to finish.

        Safe to call from a signal handler: the caller is parked on a private
        reply queue while the owner thread does the work. Never raises; a
        failing body has already been logged by the owner.

        Returns:
            True if this call ran the body.
        """
        reply: SimpleQueue = SimpleQueue()
        self._inbox.put(_Finalize(FinalizeReason.INTERRUPT, reply))
        try:
            outcome: FinalizeOutcome = self._await(reply, timeout=timeout)
        except StateAccessError as e:
            logger.error("Interrupt finalize abandoned: %s", e)
            return False
        return outcome.ran

    def _await(self, reply: SimpleQueue, timeout: float | None):
        """Wait for a reply while the owner thread is alive."""
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            try:
                return reply.get(timeout=_POLL_INTERVAL)
            except Empty:
                if not self.is_running:
                    raise StateAccessError("state owner is not running") from None
                if deadline is not None and time.monotonic() >= deadline:
                    raise StateAccessError("state owner did not answer in time") from None

    def _serve(self) -> None:
        """Main loop running in the owner thread."""
        while True:
            message = self._inbox.get()
            if isinstance(message, _Stop):
                break
            try:
                self._handle(message)
            except Exception:
                # Keep serving so readers still get the last counters
                logger.exception("Failed to handle %r", message)

    def _handle(self, message) -> None:
        """Apply one inbox message."""
        if isinstance(message, _Increment):
            if message.matches:
                self._counters = self._counters.with_match()
            else:
                self._counters = self._counters.with_line()
        elif isinstance(message, _Read):
            message.reply.put(self._counters)
        elif isinstance(message, _Finalize):
            message.reply.put(self._finalize_once(message.reason))
        else:
            logger.warning("Ignoring unknown message %r", message)

    def _finalize_once(self, reason: FinalizeReason) -> FinalizeOutcome:
        """Check-and-set the guard, then run the body."""
        if self._finalize_count:
            logger.debug("Already finalized, ignoring %s request", reason.value)
            return FinalizeOutcome(ran=False)
        self._finalize_count += 1

        logger.debug("Finalizing on %s", reason.value)
        snapshots = self._channel.drain()
        try:
            self._finalize_body(self._counters, snapshots, reason)
        except Exception as e:
            logger.error("Finalize failed: %s", e)
            return FinalizeOutcome(ran=True, error=e)
        return FinalizeOutcome(ran=True)
