from __future__ import annotations

import logging
import os
import posixpath
import queue
import threading
from pathlib import Path
from typing import Iterator, Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 1000

_CLOSED = object()


def normalize_path(path: Union[str, Path]) -> str:
    value = str(path).replace("\\", "/")
    if not value:
        return "."
    return posixpath.normpath(value)


def iter_files(root: Union[str, Path]) -> Iterator[str]:
    """Yield every regular file under root, depth-first.

    Paths keep the root prefix as given, so a root of "." yields "a.txt"
    and a root of "data" yields "data/a.txt". FIFOs, sockets, device nodes
    and dangling links are skipped.
    """

    def _skip(exc: OSError) -> None:
        logger.debug("skip unreadable entry: %s", exc)

    for dirpath, _dirnames, filenames in os.walk(str(root), onerror=_skip):
        for name in filenames:
            path = os.path.join(dirpath, name)
            if not os.path.isfile(path):
                logger.debug("skip non-regular file: %s", path)
                continue
            yield normalize_path(path)


class FileWalker:
    """Walks a tree on a background thread and hands paths over a bounded queue."""

    def __init__(self, root: Union[str, Path], queue_size: int = DEFAULT_QUEUE_SIZE) -> None:
        self._root = root
        self._queue: queue.Queue[object] = queue.Queue(maxsize=max(1, int(queue_size)))
        self._stop_event = threading.Event()
        self._worker = threading.Thread(target=self._run, daemon=True)

    def start(self) -> None:
        self._worker.start()

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        self._stop_event.set()
        if self._worker.is_alive():
            self._worker.join(timeout=timeout)

    @property
    def running(self) -> bool:
        return self._worker.is_alive()

    def __iter__(self) -> Iterator[str]:
        while True:
            item = self._queue.get()
            if item is _CLOSED:
                return
            yield item  # type: ignore[misc]

    def _run(self) -> None:
        try:
            for path in iter_files(self._root):
                if not self._put(path):
                    return
        except Exception:
            logger.exception("walk failed: %s", self._root)
        finally:
            self._put(_CLOSED)

    def _put(self, item: object) -> bool:
        while not self._stop_event.is_set():
            try:
                self._queue.put(item, timeout=0.5)
                return True
            except queue.Full:
                continue
        return False


def discover_files(
    root: Union[str, Path], queue_size: int = DEFAULT_QUEUE_SIZE
) -> Iterator[str]:
    walker = FileWalker(root, queue_size=queue_size)
    walker.start()
    try:
        yield from walker
    finally:
        walker.stop()
