"""Unit tests for RedirectResolver in lookup.py"""

from unittest.mock import MagicMock

from hotlinks.config.store import ConfigStore
from hotlinks.lookup import RedirectResolver


def test_resolve_known_code(store):
    resolver = RedirectResolver(store)
    assert resolver.resolve('go') == 'https://golang.org'


def test_resolve_unknown_code(store):
    resolver = RedirectResolver(store)
    assert resolver.resolve('nope') is None
    assert resolver.resolve('') is None


def test_resolve_is_case_sensitive(store):
    resolver = RedirectResolver(store)
    assert resolver.resolve('GO') is None


def test_resolve_reads_current_snapshot_once(store):
    spy = MagicMock(spec=ConfigStore, wraps=store)
    spy.current.side_effect = store.current

    RedirectResolver(spy).resolve('go')

    spy.current.assert_called_once_with()


def test_resolve_follows_reloads(store, config_text):
    resolver = RedirectResolver(store)

    store.try_reload(config_text([('go', 'https://go.dev'), ('new', 'https://new.example')]))

    assert resolver.resolve('go') == 'https://go.dev'
    assert resolver.resolve('new') == 'https://new.example'
    assert resolver.resolve('py') is None
