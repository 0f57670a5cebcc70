"""Schema validation for redirect configuration documents

This module turns raw configuration text into a validated `Configuration`.
It is a pure function of its input: no I/O, no logging side effects that
matter, no partial results. The first violation found fails the whole
document.

The document is TOML and follows this structure:

    [server]
    bind_address = "127.0.0.1"
    port = 8387
    watch_interval = 2.0        # optional, seconds; 0 or absent disables polling

    [[entries]]
    code = "go"                 # [A-Za-z0-9_-]+, unique, case-sensitive
    target = "https://go.dev"   # absolute http(s) URL

Functions:
    validate(raw_text: str) -> Configuration
        Parse and validate a configuration document.

    is_valid_code(code: object) -> bool
        True if `code` is a non-empty string over the short code alphabet
        and not the reserved '_' path prefix.

    is_valid_target(target: object) -> bool
        True if `target` is an absolute http(s) URL under the strict grammar.

Example:
    >>> from hotlinks.config.validator import validate
    >>> config = validate('''
    ... [server]
    ... bind_address = "127.0.0.1"
    ... port = 8387
    ...
    ... [[entries]]
    ... code = "go"
    ... target = "https://go.dev"
    ... ''')
    >>> config.entries[0].target
    'https://go.dev'

NOTE:
    Short codes are compared exactly: 'Go' and 'go' are distinct codes and
    no whitespace trimming happens (whitespace is outside the alphabet anyway).
"""

import math
import re
import tomllib
import urllib.parse
from typing import Any

from beartype import beartype

from hotlinks.constants import ALLOWED_TARGET_SCHEMES, MAX_PORT, RESERVED_PREFIX, SHORTCODE_PATTERN
from hotlinks.exceptions import (
    ConfigSyntaxError,
    DuplicateCodeError,
    InvalidCodeError,
    InvalidFieldError,
    InvalidTargetError,
    MissingFieldError,
)
from hotlinks.models import Configuration, RedirectEntry, ServerSettings
from hotlinks.types import ConfigDocument


__all__ = ['validate', 'is_valid_code', 'is_valid_target']

_TOML_LOCATION = re.compile(r'\(at line (?P<line>\d+), column (?P<column>\d+)\)')


def is_valid_code(code: object) -> bool:
    # '_' is the server's reserved path prefix and could never be routed
    if code == RESERVED_PREFIX:
        return False
    return isinstance(code, str) and SHORTCODE_PATTERN.fullmatch(code) is not None


def is_valid_target(target: object) -> bool:
    """Check a redirect target against the strict URL grammar

    Accepted targets are strings without whitespace or control characters,
    with an http or https scheme, a non-empty host and, if present, a numeric
    port in range.

    Args:
        target (object):
            Candidate target value taken straight from the document.

    Returns:
        bool: True if the target is acceptable, False otherwise.
    """
    if not isinstance(target, str) or not target:
        return False
    if any(ch.isspace() or not ch.isprintable() for ch in target):
        return False

    try:
        components = urllib.parse.urlsplit(target)
        # Accessing .port raises ValueError for non-numeric or out-of-range ports
        components.port
    except ValueError:
        return False

    if components.scheme not in ALLOWED_TARGET_SCHEMES:
        return False
    return bool(components.hostname)


def _parse(raw_text: str) -> ConfigDocument:
    try:
        return tomllib.loads(raw_text)
    except tomllib.TOMLDecodeError as e:
        line = getattr(e, 'lineno', None)
        column = getattr(e, 'colno', None)
        message = getattr(e, 'msg', str(e))
        if line is None:
            # Older interpreters only embed the location in the message
            match = _TOML_LOCATION.search(message)
            if match:
                line, column = int(match['line']), int(match['column'])
                message = message[: match.start()].rstrip()
        raise ConfigSyntaxError(message, line=line, column=column) from e


def _require(section: dict[str, Any], key: str, name: str) -> Any:
    if key not in section:
        raise MissingFieldError(name)
    return section[key]


def _validate_server(document: ConfigDocument) -> ServerSettings:
    server = _require(document, 'server', 'server')
    if not isinstance(server, dict):
        raise InvalidFieldError('server', 'expected a table')

    bind_address = _require(server, 'bind_address', 'server.bind_address')
    if not isinstance(bind_address, str) or not bind_address:
        raise InvalidFieldError('server.bind_address', 'expected a non-empty string')

    # NOTE: bool is a subclass of int, so `port = true` must be rejected explicitly
    port = _require(server, 'port', 'server.port')
    if isinstance(port, bool) or not isinstance(port, int):
        raise InvalidFieldError('server.port', 'expected an integer')
    if not 0 <= port <= MAX_PORT:
        raise InvalidFieldError('server.port', f'expected a value between 0 and {MAX_PORT}')

    watch_interval = server.get('watch_interval')
    if watch_interval is not None:
        if isinstance(watch_interval, bool) or not isinstance(watch_interval, int | float):
            raise InvalidFieldError('server.watch_interval', 'expected a number of seconds')
        if not math.isfinite(watch_interval):
            raise InvalidFieldError('server.watch_interval', 'expected a finite number')
        if watch_interval < 0:
            raise InvalidFieldError('server.watch_interval', 'expected a non-negative number')
        watch_interval = float(watch_interval) or None

    return ServerSettings(bind_address=bind_address, port=port, watch_interval=watch_interval)


def _validate_entries(document: ConfigDocument) -> tuple[RedirectEntry, ...]:
    raw_entries = _require(document, 'entries', 'entries')
    if not isinstance(raw_entries, list):
        raise InvalidFieldError('entries', 'expected an array of tables')

    entries = []
    seen: dict[str, int] = {}
    for index, raw_entry in enumerate(raw_entries):
        if not isinstance(raw_entry, dict):
            raise InvalidFieldError(f'entries[{index}]', 'expected a table')

        code = _require(raw_entry, 'code', f'entries[{index}].code')
        if not is_valid_code(code):
            raise InvalidCodeError(str(code))

        target = _require(raw_entry, 'target', f'entries[{index}].target')
        if not is_valid_target(target):
            raise InvalidTargetError(code, target)

        if code in seen:
            raise DuplicateCodeError(code, first=seen[code], duplicate=index)
        seen[code] = index

        entries.append(RedirectEntry(code=code, target=target))

    return tuple(entries)


@beartype
def validate(raw_text: str) -> Configuration:
    """Parse and validate a configuration document

    Steps:
        - Parse the text as TOML
        - Validate the [server] table
        - Validate every [[entries]] table in file order

    Args:
        raw_text (str):
            Full configuration document.

    Returns:
        Configuration: the validated configuration, entries in file order.

    Raises:
        ConfigSyntaxError:
            If the text is not well-formed TOML.
        MissingFieldError:
            If a required table or field is absent.
        InvalidFieldError:
            If a setting has the wrong type or is out of range.
        InvalidCodeError:
            If a short code is empty, contains disallowed characters, or is '_'.
        InvalidTargetError:
            If a target is not an absolute http(s) URL.
        DuplicateCodeError:
            If a short code appears more than once.
    """
    document = _parse(raw_text)
    server = _validate_server(document)
    entries = _validate_entries(document)
    return Configuration(server=server, entries=entries)
