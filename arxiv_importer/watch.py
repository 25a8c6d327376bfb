"""Folder watch sessions.

A watch session observes a directory with ``watchdog`` and reports every
new ``.pdf`` file as a :class:`FolderEvent`. Active sessions live in a
process-wide registry keyed by watch id until `stop_watch` is called;
there is no timeout and no automatic cleanup.
"""
from __future__ import annotations

import logging
import queue
import threading
import uuid
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .library import LibraryError, require_directory, is_pdf_path
from .models import FolderEvent

logger = logging.getLogger(__name__)

Listener = Callable[[FolderEvent], None]

_STOPPED = object()


class _PdfCreatedHandler(FileSystemEventHandler):
    def __init__(self, session: "WatchSession") -> None:
        super().__init__()
        self._session = session

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._session._emit(event.src_path)


class WatchSession:
    """One active watch over `folder_path`."""

    def __init__(self, watch_id: str, folder_path: str, recursive: bool, listener: Optional[Listener] = None) -> None:
        self.watch_id = watch_id
        self.folder_path = folder_path
        self.recursive = recursive
        self._listener = listener
        self._events: "queue.Queue[object]" = queue.Queue()
        self._observer = Observer()
        self._observer.schedule(_PdfCreatedHandler(self), folder_path, recursive=recursive)

    def _emit(self, file_path: str | bytes) -> None:
        if isinstance(file_path, bytes):
            file_path = file_path.decode()
        if not is_pdf_path(file_path):
            return
        event = FolderEvent(watch_id=self.watch_id, folder_path=self.folder_path, file_path=file_path)
        self._events.put(event)
        if self._listener is not None:
            try:
                self._listener(event)
            except Exception:
                logger.exception("Watch listener failed for %s", file_path)

    def start(self) -> None:
        self._observer.start()

    def close(self) -> None:
        self._observer.stop()
        self._observer.join()
        self._events.put(_STOPPED)

    def events(self, timeout: Optional[float] = None) -> Iterator[FolderEvent]:
        """Yield events until the session is stopped.

        With `timeout`, iteration also ends after `timeout` seconds without
        a new event.
        """
        while True:
            try:
                item = self._events.get(timeout=timeout)
            except queue.Empty:
                return
            if item is _STOPPED:
                return
            yield item


_WATCHERS: Dict[str, WatchSession] = {}
_WATCHERS_LOCK = threading.Lock()


def start_watch(folder_path: str | Path, recursive: bool = False, listener: Optional[Listener] = None) -> str:
    """Start watching `folder_path` for new PDFs and return the watch id."""
    path = require_directory(folder_path)
    watch_id = str(uuid.uuid4())
    session = WatchSession(watch_id, str(path), recursive, listener)
    try:
        session.start()
    except OSError as exc:
        raise LibraryError(f"Failed to start watching: {exc}") from exc

    with _WATCHERS_LOCK:
        _WATCHERS[watch_id] = session
    logger.info("Watching %s (id=%s, recursive=%s)", path, watch_id, recursive)
    return watch_id


def stop_watch(watch_id: str) -> None:
    with _WATCHERS_LOCK:
        session = _WATCHERS.pop(watch_id, None)
    if session is None:
        raise LibraryError(f"Watcher with ID {watch_id} not found")
    session.close()
    logger.info("Stopped watch %s", watch_id)


def get_session(watch_id: str) -> WatchSession:
    with _WATCHERS_LOCK:
        session = _WATCHERS.get(watch_id)
    if session is None:
        raise LibraryError(f"Watcher with ID {watch_id} not found")
    return session


def active_watch_ids() -> List[str]:
    with _WATCHERS_LOCK:
        return list(_WATCHERS)
