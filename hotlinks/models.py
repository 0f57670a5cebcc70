from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, UTC
from types import MappingProxyType


# fmt: off
@dataclass(frozen=True)
class RedirectEntry:
    code: str                               # Short code clients present in the path
    target: str                             # Absolute URL the short code redirects to


@dataclass(frozen=True)
class ServerSettings:
    bind_address: str                       # Interface the listener binds to
    port: int                               # TCP port the listener binds to
    watch_interval: float | None = None     # Seconds between config file polls, None disables polling


@dataclass(frozen=True)
class Configuration:
    server: ServerSettings                  # Listener and reload settings
    entries: tuple[RedirectEntry, ...] = ()  # Redirect entries in file order
# fmt: on


@dataclass(frozen=True)
class Snapshot:
    """Validated configuration shared read-only by the store and every reader.

    A snapshot is never mutated after construction. Readers keep a reference
    for the duration of a lookup, so a concurrent reload swapping in a newer
    snapshot can't affect them; the old one is reclaimed once the last
    reference is dropped.

    Attributes:
        version (int):
            Monotonic version number, 1 for the configuration loaded at startup.
        configuration (Configuration):
            The validated configuration this snapshot wraps.
        loaded_at (datetime):
            UTC time the snapshot was created.
        targets (Mapping[str, str]):
            Read-only short code -> target URL table.

    Example:
        >>> snapshot = Snapshot.create(configuration, version=1)
        >>> snapshot.targets['go']
        'https://go.dev'
    """

    version: int
    configuration: Configuration
    loaded_at: datetime
    targets: Mapping[str, str] = field(repr=False, compare=False)

    @classmethod
    def create(cls, configuration: Configuration, version: int) -> 'Snapshot':
        targets = MappingProxyType({entry.code: entry.target for entry in configuration.entries})
        return cls(
            version=version,
            configuration=configuration,
            loaded_at=datetime.now(UTC),
            targets=targets,
        )

    @property
    def server(self) -> ServerSettings:
        return self.configuration.server

    def __len__(self) -> int:
        return len(self.targets)
