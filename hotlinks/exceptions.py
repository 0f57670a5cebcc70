"""Exceptions raised while validating and reloading the redirect table.

Classes:
    HotlinksError:
        Base class for all application-specific errors.

    ValidationError:
        Base class for a configuration that can't become active.
        Subclasses: ConfigSyntaxError, MissingFieldError, InvalidFieldError,
        InvalidCodeError, InvalidTargetError, DuplicateCodeError.

    ReloadError:
        Base class for a failed reload attempt. The running table is never
        touched when one of these is raised.
        Subclasses: InvalidConfigError, SourceUnavailableError,
        ReloadBusyError, RestartRequiredError.

Example:
    >>> from hotlinks.exceptions import DuplicateCodeError
    >>> raise DuplicateCodeError('go', first=0, duplicate=3)
    Traceback (most recent call last):
        ...
    hotlinks.exceptions.DuplicateCodeError: Short code 'go' at entries[3] duplicates entries[0].
"""


class HotlinksError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:hotlinks_error'


class ValidationError(HotlinksError):
    """Base exception for an invalid configuration document."""

    error_code = 'config:validation_error'


class ConfigSyntaxError(ValidationError):
    """Raised when the configuration text isn't well-formed TOML."""

    error_code = 'config:syntax_error'

    def __init__(self, message: str, line: int | None = None, column: int | None = None):
        location = f' (line {line}, column {column})' if line is not None else ''
        super().__init__(f'Malformed configuration{location}: {message}')
        self.line = line
        self.column = column


class MissingFieldError(ValidationError):
    """Raised when a required setting or entry field is absent."""

    error_code = 'config:missing_field'

    def __init__(self, name: str):
        super().__init__(f"Missing required field '{name}'.")
        self.name = name


class InvalidFieldError(ValidationError):
    """Raised when a setting is present but has the wrong type or range."""

    error_code = 'config:invalid_field'

    def __init__(self, name: str, reason: str):
        super().__init__(f"Invalid field '{name}': {reason}.")
        self.name = name
        self.reason = reason


class InvalidCodeError(ValidationError):
    """Raised when a short code is empty or contains disallowed characters."""

    error_code = 'config:invalid_code'

    def __init__(self, code: str):
        super().__init__(f'Short code {code!r} is empty or contains invalid characters.')
        self.code = code


class InvalidTargetError(ValidationError):
    """Raised when an entry's target isn't a valid absolute http(s) URL."""

    error_code = 'config:invalid_target'

    def __init__(self, code: str, target: object = None):
        super().__init__(f'Target {target!r} of short code {code!r} is not a valid absolute URL.')
        self.code = code
        self.target = target


class DuplicateCodeError(ValidationError):
    """Raised when a short code appears more than once."""

    error_code = 'config:duplicate_code'

    def __init__(self, code: str, first: int | None = None, duplicate: int | None = None):
        if first is None or duplicate is None:
            message = f'Short code {code!r} is defined more than once.'
        else:
            message = f'Short code {code!r} at entries[{duplicate}] duplicates entries[{first}].'
        super().__init__(message)
        self.code = code
        self.first = first
        self.duplicate = duplicate


class ReloadError(HotlinksError):
    """Base exception for a reload attempt that left the active table untouched."""

    error_code = 'reload:reload_error'


class InvalidConfigError(ReloadError):
    """Raised when the candidate configuration fails validation."""

    error_code = 'reload:invalid_config'

    def __init__(self, cause: ValidationError):
        super().__init__(f'Rejected configuration: {cause}')
        self.cause = cause


class SourceUnavailableError(ReloadError):
    """Raised when the configuration source can't be read."""

    error_code = 'reload:source_unavailable'


class ReloadBusyError(ReloadError):
    """Raised by a non-blocking reload while another reload is in progress."""

    error_code = 'reload:busy'


class RestartRequiredError(ReloadError):
    """Raised when a reload changes settings only a restart can apply."""

    error_code = 'reload:restart_required'

    def __init__(self, fields: list[str]):
        names = ', '.join(f"'{name}'" for name in fields)
        super().__init__(f'Changing {names} requires a restart.')
        self.fields = fields
