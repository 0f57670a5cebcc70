import json
from collections.abc import Callable, Iterable
from typing import TypeAlias

import pytest
from pytest import MonkeyPatch

from hotlinks.config.store import ConfigStore
from hotlinks.constants import ENV


ConfigFactory: TypeAlias = Callable[..., str]


def render_config(
    entries: Iterable[tuple[str, str]] = (),
    bind_address: str = '127.0.0.1',
    port: int = 8387,
    watch_interval: float | None = None,
) -> str:
    lines = ['[server]', f'bind_address = {json.dumps(bind_address)}', f'port = {port}']
    if watch_interval is not None:
        lines.append(f'watch_interval = {watch_interval}')
    for code, target in entries:
        lines += ['', '[[entries]]', f'code = {json.dumps(code)}', f'target = {json.dumps(target)}']
    return '\n'.join(lines) + '\n'


@pytest.fixture(autouse=True)
def _env(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setenv(ENV.App.APP_ENV, 'test')
    monkeypatch.delenv(ENV.App.CONFIG_PATH, raising=False)


@pytest.fixture
def config_text() -> ConfigFactory:
    """Render a TOML configuration document from (code, target) pairs."""
    return render_config


@pytest.fixture
def golang_config(config_text: ConfigFactory) -> str:
    return config_text([('go', 'https://golang.org'), ('py', 'https://www.python.org')])


@pytest.fixture
def store(golang_config: str) -> ConfigStore:
    return ConfigStore.from_text(golang_config)
