"""Holder of the active redirect table

The store keeps exactly one current `Snapshot` and replaces it wholesale on
a successful reload. Readers never lock: `current()` is a single attribute
read, and since snapshots are immutable a reader holding one is unaffected by
any later swap. Writers are serialized by a lock that readers never touch.

Classes:
    ConfigStore:
        Current-snapshot holder with a wait-free read path and a serialized
        validate-then-swap write path.

Example:
    >>> store = ConfigStore.from_text(initial_text)
    >>> store.current().version
    1
    >>> store.try_reload(updated_text)
    2
    >>> store.try_reload('not = [valid')
    Traceback (most recent call last):
        ...
    hotlinks.exceptions.InvalidConfigError: Rejected configuration: ...
    >>> store.current().version
    2
"""

import logging
import threading

from beartype import beartype

from hotlinks.config.validator import validate
from hotlinks.exceptions import InvalidConfigError, ReloadBusyError, RestartRequiredError, ValidationError
from hotlinks.models import Configuration, ServerSettings, Snapshot


logger = logging.getLogger(__name__)

# Settings the running listener can't pick up without a restart
RESTART_FIELDS = ('bind_address', 'port')


class ConfigStore:
    """Current-snapshot holder

    Attributes:
        _snapshot (Snapshot):
            The active snapshot. Only `_swap()` assigns it.
        _reload_lock (threading.Lock):
            Serializes reloads. Never acquired by readers.

    Methods:
        current() -> Snapshot:
            Return the active snapshot.

        try_reload(raw_text: str, blocking: bool = True) -> int:
            Validate `raw_text` and swap it in, returning the new version.
    """

    def __init__(self, configuration: Configuration):
        self._snapshot = Snapshot.create(configuration, version=1)
        self._reload_lock = threading.Lock()
        logger.info(
            'Loaded initial configuration.',
            extra={'version': self._snapshot.version, 'entries': len(self._snapshot)},
        )

    @classmethod
    def from_text(cls, raw_text: str) -> 'ConfigStore':
        """Build a store from startup configuration text

        Raises:
            ValidationError: if the text is invalid. There's no table to fall
                back to at startup, so the error propagates unwrapped.
        """
        return cls(validate(raw_text))

    def current(self) -> Snapshot:
        return self._snapshot

    @beartype
    def try_reload(self, raw_text: str, blocking: bool = True) -> int:
        """Validate a candidate configuration and make it current

        Steps:
            - Acquire the reload lock (wait, or fail fast if `blocking` is False)
            - Validate the candidate text
            - Reject changes to settings that need a restart
            - Swap in a new snapshot with version = previous version + 1

        Failed attempts leave the current snapshot untouched and don't
        consume a version number.

        Args:
            raw_text (str):
                Full candidate configuration document.
            blocking (bool):
                If True, queue behind a reload in progress.
                If False, raise ReloadBusyError instead.
                Defaults to True.

        Returns:
            int: version of the newly active snapshot.

        Raises:
            InvalidConfigError:
                If validation fails. The ValidationError is kept as `cause`.
            RestartRequiredError:
                If the candidate changes the bind address or port.
            ReloadBusyError:
                If `blocking` is False and another reload holds the lock.
        """
        if not self._reload_lock.acquire(blocking=blocking):
            raise ReloadBusyError('Another configuration reload is in progress.')

        try:
            try:
                configuration = validate(raw_text)
            except ValidationError as e:
                raise InvalidConfigError(e) from e

            previous = self._snapshot
            changed = _restart_fields_changed(previous.server, configuration.server)
            if changed:
                raise RestartRequiredError(changed)

            return self._swap(previous, configuration)
        finally:
            self._reload_lock.release()

    def _swap(self, previous: Snapshot, configuration: Configuration) -> int:
        snapshot = Snapshot.create(configuration, version=previous.version + 1)
        # Single reference assignment: readers see either the old or the new snapshot
        self._snapshot = snapshot
        logger.info(
            'Swapped in new configuration.',
            extra={'version': snapshot.version, 'previousVersion': previous.version, 'entries': len(snapshot)},
        )
        return snapshot.version


def _restart_fields_changed(old: ServerSettings, new: ServerSettings) -> list[str]:
    return [name for name in RESTART_FIELDS if getattr(old, name) != getattr(new, name)]
