"""Reading configuration documents from disk

Functions:
    config_path(path: str | Path | None = None) -> Path
        Resolve the configuration path from an explicit value, the
        `HOTLINKS_CONFIG` environment variable, or the default './config.toml'.

    read_source(path: Path) -> str
        Read a configuration document, wrapping I/O and decoding failures
        in SourceUnavailableError.

    load_store(path: Path) -> ConfigStore
        Read and validate the startup configuration.

Example:
    >>> store = load_store(config_path())
    >>> store.current().version
    1
"""

import os
import logging
from pathlib import Path

from hotlinks.config.store import ConfigStore
from hotlinks.constants import ENV, Defaults
from hotlinks.exceptions import SourceUnavailableError


logger = logging.getLogger(__name__)


def config_path(path: str | Path | None = None) -> Path:
    if path:
        return Path(path)
    return Path(os.environ.get(ENV.App.CONFIG_PATH) or Defaults.CONFIG_PATH)


def read_source(path: Path) -> str:
    """Read a configuration document

    Args:
        path (Path):
            Location of the TOML document.

    Returns:
        str: the document text.

    Raises:
        SourceUnavailableError:
            If the file is missing, unreadable, or not valid UTF-8.
    """
    logger.debug('Reading configuration source.', extra={'path': str(path)})
    try:
        return Path(path).read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise SourceUnavailableError(f"Can't read configuration from {path}: {e}") from e


def load_store(path: Path) -> ConfigStore:
    """Build the store from the startup configuration

    Raises:
        SourceUnavailableError:
            If the file can't be read.
        ValidationError:
            If the document is invalid.
    """
    return ConfigStore.from_text(read_source(path))
