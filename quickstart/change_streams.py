"""Watch the ``episodes`` collection for long new episodes.

The stream is read on a single background thread while the main thread
waits in ``ChangeStreamWorker.join()``. The loop ends when the server closes
the stream, when it raises, or when ``stop()`` is called.
"""
from __future__ import annotations

import threading
from typing import Any, Callable, Optional

from .connect_db import get_client, get_database

INSERTS_OVER_30_MINUTES = [
    {
        "$match": {
            "operationType": "insert",
            "fullDocument.duration": {"$gt": 30},
        }
    }
]

# How long the server may hold a getMore before try_next() returns None,
# which bounds how quickly a stop request is noticed.
MAX_AWAIT_TIME_MS = 1000


def open_episode_stream(db, pipeline: Optional[list[dict]] = None):
    if pipeline is None:
        pipeline = INSERTS_OVER_30_MINUTES
    return db.episodes.watch(pipeline, max_await_time_ms=MAX_AWAIT_TIME_MS)


def consume(stream, stop: threading.Event, handle: Callable[[dict], Any] = print) -> None:
    with stream:
        while stream.alive and not stop.is_set():
            change = stream.try_next()
            if change is not None:
                handle(change)


class ChangeStreamWorker:
    """Runs ``consume`` over one stream on a background thread."""

    def __init__(self, stream, handle: Callable[[dict], Any] = print):
        self._stream = stream
        self._handle = handle
        self._stop = threading.Event()
        self._error: Optional[BaseException] = None
        self._thread = threading.Thread(target=self._run, name="episode-change-stream", daemon=True)

    def _run(self) -> None:
        try:
            consume(self._stream, self._stop, self._handle)
        except BaseException as e:
            self._error = e

    def start(self) -> "ChangeStreamWorker":
        self._thread.start()
        return self

    def stop(self) -> None:
        self._stop.set()

    @property
    def running(self) -> bool:
        return self._thread.is_alive()

    def join(self, timeout: Optional[float] = None) -> None:
        self._thread.join(timeout)
        if self._error is not None:
            raise self._error


def main():
    with get_client() as client:
        db = get_database(client)
        worker = ChangeStreamWorker(open_episode_stream(db)).start()
        print("Watching for new episodes longer than 30 minutes (Ctrl-C to stop)...")
        try:
            worker.join()
        except KeyboardInterrupt:
            worker.stop()
            worker.join()


if __name__ == "__main__":
    main()
