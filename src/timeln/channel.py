"""Snapshot transport from the processing loop to the finalizer."""

from queue import Empty, SimpleQueue

from timeln.errors import ChannelError
from timeln.models import TimeSnapshot


class SnapshotChannel:
    """
    Unbounded FIFO of TimeSnapshot.

    One producer sends; whoever finalizes drains once. ``SimpleQueue`` keeps
    ``send`` safe even if a signal handler runs in the middle of it.
    """

    def __init__(self) -> None:
        """Initialize an open, empty channel."""
        self._queue: SimpleQueue[TimeSnapshot] = SimpleQueue()
        self._closed = False

    @property
    def closed(self) -> bool:
        """Check if the channel refuses new snapshots."""
        return self._closed

    def send(self, snapshot: TimeSnapshot) -> None:
        """Queue a snapshot without blocking."""
        if self._closed:
            raise ChannelError("snapshot channel is closed")
        self._queue.put(snapshot)

    def drain(self) -> list[TimeSnapshot]:
        """Take everything currently available, in send order."""
        snapshots: list[TimeSnapshot] = []
        while True:
            try:
                snapshots.append(self._queue.get_nowait())
            except Empty:
                break
        return snapshots

    def close(self) -> None:
        """Stop accepting snapshots."""
        self._closed = True
