"""Unit tests for the configuration validator in validator.py

Test coverage includes:

1. Valid documents
   - Ensures entries and server settings are returned as parsed, in file order.

2. Syntax and structure errors
   - Ensures malformed TOML raises ConfigSyntaxError with a location.
   - Ensures missing tables/fields raise MissingFieldError naming the field.
   - Ensures wrongly typed settings raise InvalidFieldError.

3. Entry errors
   - Ensures bad short codes, bad targets and duplicates are rejected.
   - Ensures one bad entry fails the whole document.
"""

import pytest
from beartype.roar import BeartypeCallHintParamViolation

from hotlinks.config.validator import validate, is_valid_code, is_valid_target
from hotlinks.exceptions import (
    ConfigSyntaxError,
    DuplicateCodeError,
    InvalidCodeError,
    InvalidFieldError,
    InvalidTargetError,
    MissingFieldError,
    ValidationError,
)
from hotlinks.models import Configuration, RedirectEntry, ServerSettings


# -------------------------------
# 1. Valid documents
# -------------------------------


def test_validate_returns_entries_in_file_order(config_text):
    pairs = [('zeta', 'https://z.example'), ('alpha', 'https://a.example/path?q=1'), ('m-1_x', 'http://localhost:8080/')]

    config = validate(config_text(pairs))

    assert isinstance(config, Configuration)
    assert config.entries == tuple(RedirectEntry(code=code, target=target) for code, target in pairs)
    assert config.server == ServerSettings(bind_address='127.0.0.1', port=8387, watch_interval=None)


def test_validate_accepts_empty_entries():
    config = validate('entries = []\n[server]\nbind_address = "0.0.0.0"\nport = 80\n')
    assert config.entries == ()


def test_validate_reads_watch_interval(config_text):
    assert validate(config_text(watch_interval=2)).server.watch_interval == 2.0
    assert validate(config_text(watch_interval=0)).server.watch_interval is None


def test_validate_is_deterministic(golang_config):
    assert validate(golang_config) == validate(golang_config)


def test_validate_treats_codes_case_sensitively(config_text):
    config = validate(config_text([('go', 'https://go.dev'), ('Go', 'https://golang.org')]))
    assert [entry.code for entry in config.entries] == ['go', 'Go']


def test_validate_rejects_non_string_input():
    with pytest.raises(BeartypeCallHintParamViolation):
        validate(b'[server]')


# -------------------------------
# 2. Syntax and structure errors
# -------------------------------


def test_validate_with_malformed_toml():
    with pytest.raises(ConfigSyntaxError) as exc_info:
        validate('[server]\nbind_address = "127.0.0.1\nport = 1\n')

    assert exc_info.value.line == 2
    assert exc_info.value.column is not None
    assert 'line 2' in str(exc_info.value)


def test_validate_with_duplicate_toml_keys():
    with pytest.raises(ConfigSyntaxError):
        validate('[server]\nport = 1\nport = 2\n')


@pytest.mark.parametrize(
    'document, field',
    [
        ('entries = []\n', 'server'),
        ('[server]\nport = 1\n[[entries]]\ncode = "a"\ntarget = "https://a.example"\n', 'server.bind_address'),
        ('[server]\nbind_address = "::"\n', 'server.port'),
        ('[server]\nbind_address = "::"\nport = 1\n', 'entries'),
        ('[server]\nbind_address = "::"\nport = 1\n[[entries]]\ntarget = "https://a.example"\n', 'entries[0].code'),
        (
            '[server]\nbind_address = "::"\nport = 1\n[[entries]]\ncode = "a"\ntarget = "https://a.example"\n[[entries]]\ncode = "b"\n',
            'entries[1].target',
        ),
    ],
)
def test_validate_with_missing_field(document, field):
    with pytest.raises(MissingFieldError) as exc_info:
        validate(document)
    assert exc_info.value.name == field


@pytest.mark.parametrize(
    'document, field',
    [
        ('server = 1\nentries = []\n', 'server'),
        ('entries = []\n[server]\nbind_address = 1\nport = 1\n', 'server.bind_address'),
        ('entries = []\n[server]\nbind_address = ""\nport = 1\n', 'server.bind_address'),
        ('entries = []\n[server]\nbind_address = "::"\nport = "80"\n', 'server.port'),
        ('entries = []\n[server]\nbind_address = "::"\nport = true\n', 'server.port'),
        ('entries = []\n[server]\nbind_address = "::"\nport = 70000\n', 'server.port'),
        ('entries = []\n[server]\nbind_address = "::"\nport = -1\n', 'server.port'),
        ('entries = []\n[server]\nbind_address = "::"\nport = 1\nwatch_interval = -1\n', 'server.watch_interval'),
        ('entries = []\n[server]\nbind_address = "::"\nport = 1\nwatch_interval = "2s"\n', 'server.watch_interval'),
        ('entries = []\n[server]\nbind_address = "::"\nport = 1\nwatch_interval = nan\n', 'server.watch_interval'),
        ('entries = []\n[server]\nbind_address = "::"\nport = 1\nwatch_interval = inf\n', 'server.watch_interval'),
        ('entries = "go"\n[server]\nbind_address = "::"\nport = 1\n', 'entries'),
        ('entries = ["go"]\n[server]\nbind_address = "::"\nport = 1\n', 'entries[0]'),
    ],
)
def test_validate_with_invalid_field(document, field):
    with pytest.raises(InvalidFieldError) as exc_info:
        validate(document)
    assert exc_info.value.name == field


# -------------------------------
# 3. Entry errors
# -------------------------------


@pytest.mark.parametrize('code', ['', 'with space', 'slash/code', 'dot.code', 'ünïcode', 'tab\t', 'go!', '_'])
def test_validate_with_invalid_code(config_text, code):
    with pytest.raises(InvalidCodeError) as exc_info:
        validate(config_text([(code, 'https://example.com')]))
    assert exc_info.value.code == code


def test_validate_with_non_string_code():
    document = '[server]\nbind_address = "::"\nport = 1\n[[entries]]\ncode = 12\ntarget = "https://a.example"\n'
    with pytest.raises(InvalidCodeError):
        validate(document)


@pytest.mark.parametrize(
    'target',
    [
        '',
        'example.com',
        '/relative/path',
        'ftp://example.com/file',
        'mailto:someone@example.com',
        'https://',
        'https:///path',
        'https://exa mple.com',
        'https://example.com:99999/',
        'https://example.com:port/',
        'https://[::1/',
        'javascript:alert(1)',
        'https://example.com/\n',
    ],
)
def test_validate_with_invalid_target(config_text, target):
    with pytest.raises(InvalidTargetError) as exc_info:
        validate(config_text([('ok', 'https://fine.example'), ('bad', target)]))
    assert exc_info.value.code == 'bad'


def test_validate_with_duplicate_code(config_text):
    document = config_text(
        [
            ('go', 'https://golang.org'),
            ('py', 'https://www.python.org'),
            ('go', 'https://go.dev'),
        ]
    )

    with pytest.raises(DuplicateCodeError) as exc_info:
        validate(document)

    assert exc_info.value.code == 'go'
    assert exc_info.value.first == 0
    assert exc_info.value.duplicate == 2


def test_validate_fails_closed_on_single_bad_entry(config_text):
    pairs = [(f'code{i}', f'https://example.com/{i}') for i in range(20)]
    pairs.append(('last', 'not a url'))

    with pytest.raises(ValidationError):
        validate(config_text(pairs))


@pytest.mark.parametrize(
    'code, expected',
    [('go', True), ('A-z_09', True), ('', False), ('a b', False), ('_', False), ('__', True), (None, False), (7, False)],
)
def test_is_valid_code(code, expected):
    assert is_valid_code(code) is expected


@pytest.mark.parametrize(
    'target, expected',
    [
        ('https://go.dev', True),
        ('HTTP://EXAMPLE.COM', True),
        ('https://user:pw@example.com:8443/a?b=c#d', True),
        ('https://[::1]:8080/', True),
        ('https://xn--bcher-kva.example/', True),
        ('go.dev', False),
        (None, False),
    ],
)
def test_is_valid_target(target, expected):
    assert is_valid_target(target) is expected
