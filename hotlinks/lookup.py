from hotlinks.config.store import ConfigStore


class RedirectResolver:
    """Read-only short code lookup used by request handlers.

    Each call captures the current snapshot once, so a reload happening
    mid-call can't mix entries from two configurations.

    Example:
        >>> resolver = RedirectResolver(store)
        >>> resolver.resolve('go')
        'https://go.dev'
        >>> resolver.resolve('nope') is None
        True
    """

    def __init__(self, store: ConfigStore):
        self._store = store

    def resolve(self, code: str) -> str | None:
        snapshot = self._store.current()
        return snapshot.targets.get(code)
