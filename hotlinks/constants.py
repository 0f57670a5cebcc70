import re
from enum import StrEnum


class Defaults:
    """Fallback values used when the environment says nothing."""

    CONFIG_PATH = './config.toml'
    LOG_LEVEL = 'INFO'
    APP_ENV = 'prod'


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        LOG_LEVEL = 'LOG_LEVEL'
        CONFIG_PATH = 'HOTLINKS_CONFIG'


# Short codes: ASCII letters, digits, hyphen, underscore
SHORTCODE_PATTERN = re.compile(r'[A-Za-z0-9_-]+')

# Target URL schemes accepted by the validator
ALLOWED_TARGET_SCHEMES = frozenset({'http', 'https'})

# Highest TCP port number
MAX_PORT = 65_535

# Path prefix reserved for the server itself, never routed to a short code
RESERVED_PREFIX = '_'

# Error codes
SHORT_URL_NOT_FOUND = 'SHORT_URL_NOT_FOUND'
MISSING_SHORTCODE = 'MISSING_SHORTCODE'
RESERVED_PATH = 'RESERVED_PATH'
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
