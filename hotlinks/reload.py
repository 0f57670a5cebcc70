"""Reload triggers for the configuration store

A reload request is a message, not work: signal handlers and file watchers
only post to a queue, and a single worker thread drains it, reads the source
file, and calls `ConfigStore.try_reload()`. Request handling never waits on
any of this.

The queue is a `queue.SimpleQueue`, whose `put()` is reentrant, so a signal
landing while the main thread is itself posting can't deadlock.

Classes:
    ReloadTrigger:
        Queue + worker thread performing reloads from the startup source path.

    ConfigFileEventHandler:
        watchdog event handler filtering directory events down to the config file.

    FileWatcher:
        watchdog polling observer posting a reload request when the source file changes.

Example:
    >>> trigger = ReloadTrigger(store, Path('config.toml'))
    >>> trigger.start()
    >>> trigger.install_signal_handler()    # SIGHUP -> trigger.request('SIGHUP')
    True
    >>> trigger.request('admin')            # returns immediately
    >>> trigger.join()                      # wait until earlier requests are processed
    True
    >>> trigger.stop()
"""

import os
import logging
import queue
import signal
import threading
from collections.abc import Callable
from pathlib import Path

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers.polling import PollingObserver

from hotlinks.config.loader import read_source
from hotlinks.config.store import ConfigStore
from hotlinks.exceptions import InvalidConfigError, ReloadError


logger = logging.getLogger(__name__)

_STOP = object()


class ReloadTrigger:
    """Serialize reload requests onto a dedicated worker thread

    Failures are logged and never escape the worker: a bad reload only means
    the previous snapshot keeps serving.

    Methods:
        reload_now() -> int:
            Synchronously read the source and reload. Raises ReloadError.

        request(reason: str = 'manual') -> None:
            Post a reload request. Never blocks; safe inside signal handlers.

        start() / stop() / join():
            Worker thread lifecycle.

        install_signal_handler(signum: int | None = None) -> bool:
            Route a POSIX signal (SIGHUP by default) to request().
    """

    def __init__(self, store: ConfigStore, source_path: Path):
        self._store = store
        self._source_path = Path(source_path)
        self._requests = queue.SimpleQueue()
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()

    @property
    def source_path(self) -> Path:
        return self._source_path

    def reload_now(self) -> int:
        """Read the configuration source and reload the store

        Returns:
            int: version of the newly active snapshot.

        Raises:
            SourceUnavailableError:
                If the source file can't be read.
            InvalidConfigError, RestartRequiredError, ReloadBusyError:
                Propagated from ConfigStore.try_reload().
        """
        raw_text = read_source(self._source_path)
        return self._store.try_reload(raw_text)

    def request(self, reason: str = 'manual') -> None:
        self._requests.put(reason)

    def start(self) -> None:
        with self._lock:
            if self._thread is not None:
                return
            self._thread = threading.Thread(target=self._run, name='hotlinks-reload', daemon=True)
            self._thread.start()
        logger.debug('Started reload worker.', extra={'path': str(self._source_path)})

    def stop(self, timeout: float = 2.0) -> None:
        with self._lock:
            thread, self._thread = self._thread, None
        if thread is None:
            return
        self._requests.put(_STOP)
        thread.join(timeout=timeout)
        logger.debug('Stopped reload worker.', extra={'path': str(self._source_path)})

    def join(self, timeout: float | None = None) -> bool:
        """Block until every request posted before this call has been processed

        Posts a marker behind the pending requests and waits for the worker
        to reach it. Requires a running worker.

        Returns:
            bool: False if `timeout` expired first, True otherwise.
        """
        marker = threading.Event()
        self._requests.put(marker)
        return marker.wait(timeout)

    def install_signal_handler(self, signum: int | None = None) -> bool:
        """Route a signal to `request()`

        Must be called from the main thread. The installed handler only
        enqueues; the reload itself runs on the worker thread.

        Args:
            signum (int | None):
                Signal number. Defaults to SIGHUP.

        Returns:
            bool: False if the platform has no such signal, True otherwise.
        """
        if signum is None:
            signum = getattr(signal, 'SIGHUP', None)
        if signum is None:
            logger.warning('SIGHUP is not available on this platform; signal-driven reload disabled.')
            return False

        def handler(received: int, frame: object) -> None:
            self.request(signal.Signals(received).name)

        signal.signal(signum, handler)
        logger.debug('Installed reload signal handler.', extra={'signal': signal.Signals(signum).name})
        return True

    def _run(self) -> None:
        stopping = False
        while not stopping:
            batch = [self._requests.get()]
            # Coalesce a burst of requests into a single reload
            while True:
                try:
                    batch.append(self._requests.get_nowait())
                except queue.Empty:
                    break

            stopping = any(item is _STOP for item in batch)
            markers = [item for item in batch if isinstance(item, threading.Event)]
            reasons = [item for item in batch if isinstance(item, str)]

            try:
                if reasons:
                    self._handle(reasons)
            finally:
                for marker in markers:
                    marker.set()

    def _handle(self, reasons: list[str]) -> None:
        extra = {'path': str(self._source_path), 'reasons': reasons}
        try:
            version = self.reload_now()
        except InvalidConfigError as e:
            logger.error(
                'Rejected invalid configuration; keeping the current one.',
                extra={**extra, 'error': e.cause.__class__.__name__, 'errorCode': e.cause.error_code, 'reason': str(e.cause)},
            )
        except ReloadError as e:
            logger.error(
                'Configuration reload failed; keeping the current one.',
                extra={**extra, 'error': e.__class__.__name__, 'errorCode': e.error_code, 'reason': str(e)},
            )
        except Exception:
            logger.exception('Unexpected error during configuration reload; keeping the current one.', extra=extra)
        else:
            logger.info('Successfully reloaded configuration.', extra={**extra, 'version': version})


class ConfigFileEventHandler(FileSystemEventHandler):
    """Forward watchdog events concerning one file to a callback

    The observer watches the file's parent directory, since editors usually
    save by writing a temporary file and renaming it over the original. Only
    modifications, creations, and moves landing on the config path count.
    """

    RELEVANT_EVENTS = frozenset({EVENT_TYPE_MODIFIED, EVENT_TYPE_CREATED, EVENT_TYPE_MOVED})

    def __init__(self, path: Path, callback: Callable[[], None]):
        super().__init__()
        self._path = Path(path).resolve()
        self._callback = callback

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type not in self.RELEVANT_EVENTS:
            return

        candidates = [event.src_path]
        if event.event_type == EVENT_TYPE_MOVED:
            candidates = [getattr(event, 'dest_path', '')]
        if not any(candidate and Path(os.fsdecode(candidate)).resolve() == self._path for candidate in candidates):
            return

        logger.info('Configuration file changed.', extra={'path': str(self._path), 'fsEvent': event.event_type})
        try:
            self._callback()
        except Exception:
            logger.exception('Error in configuration change callback.', extra={'path': str(self._path)})


class FileWatcher:
    """Watch a file with a watchdog polling observer

    Uses `PollingObserver` so the configured interval is honoured and the
    watcher behaves the same on every platform and filesystem.

    Example:
        >>> watcher = FileWatcher(Path('config.toml'), lambda: trigger.request('file-change'), interval=2.0)
        >>> watcher.start()
        >>> watcher.stop()
    """

    def __init__(self, path: Path, callback: Callable[[], None], interval: float = 1.0):
        self._path = Path(path)
        self._interval = interval
        self._handler = ConfigFileEventHandler(self._path, callback)
        self._observer: PollingObserver | None = None

    @property
    def handler(self) -> ConfigFileEventHandler:
        return self._handler

    def start(self) -> None:
        if self._observer is not None:
            return
        observer = PollingObserver(timeout=self._interval)
        observer.schedule(self._handler, str(self._path.resolve().parent), recursive=False)
        observer.start()
        self._observer = observer
        logger.debug('Started config file watcher.', extra={'path': str(self._path), 'interval': self._interval})

    def stop(self, timeout: float = 2.0) -> None:
        observer, self._observer = self._observer, None
        if observer is None:
            return
        observer.stop()
        observer.join(timeout=timeout)
        logger.debug('Stopped config file watcher.', extra={'path': str(self._path)})
