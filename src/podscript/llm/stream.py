"""
Streaming completion primitive.

A CompletionStream is filled by a producer thread that reads backend events
and consumed by iterating over it. Iteration ends after the single done chunk
on success, or without a done chunk when the producer fails, in which case
``error`` holds the failure.
"""

import logging
import queue
import threading
from typing import Callable, Iterator, Optional

from .models import CompletionChunk, Provider

logger = logging.getLogger(__name__)

_END = object()


class CompletionStream:
    """
    Ordered sequence of CompletionChunk values plus a single error slot.

    The stream stops early when ``cancel_event`` (shared with the caller) is
    set or when ``close()`` is called. The producer checks the same flags
    between backend events.
    """

    def __init__(
        self,
        provider: Provider,
        cancel_event: Optional[threading.Event] = None,
        poll_interval: float = 0.1,
    ):
        self.provider = provider
        self._queue: "queue.Queue" = queue.Queue()
        self._cancel_event = cancel_event or threading.Event()
        self._closed = threading.Event()
        self._finished = threading.Event()
        self._poll_interval = poll_interval
        self._error: Optional[Exception] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def stopped(self) -> bool:
        """True once the caller cancelled or closed the stream."""
        return self._cancel_event.is_set() or self._closed.is_set()

    @property
    def error(self) -> Optional[Exception]:
        """The producer's failure, if any. Read after iteration ends."""
        return self._error

    def close(self) -> None:
        """Stop consuming and tell the producer to stop."""
        self._closed.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the producer has finished."""
        return self._finished.wait(timeout)

    def start(self, produce: Callable[["CompletionStream"], None]) -> "CompletionStream":
        """Run ``produce(self)`` on a daemon thread."""
        self._thread = threading.Thread(
            target=self._run,
            args=(produce,),
            name=f"{self.provider.value}-stream",
            daemon=True,
        )
        self._thread.start()
        return self

    def _run(self, produce: Callable[["CompletionStream"], None]) -> None:
        try:
            produce(self)
        except Exception as exc:
            logger.debug(f"{self.provider.value} stream failed: {exc}")
            self._error = exc
        finally:
            self._finished.set()
            self._queue.put(_END)

    # --- producer side ---

    def put_text(self, text: str) -> None:
        self._queue.put(CompletionChunk(text=text, provider=self.provider))

    def put_done(self) -> None:
        self._queue.put(CompletionChunk(provider=self.provider, done=True))

    # --- consumer side ---

    def __iter__(self) -> Iterator[CompletionChunk]:
        while True:
            if self.stopped:
                return
            try:
                item = self._queue.get(timeout=self._poll_interval)
            except queue.Empty:
                continue
            if item is _END or self.stopped:
                return
            yield item
