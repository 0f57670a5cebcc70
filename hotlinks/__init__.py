from hotlinks.config import ConfigStore, validate, load_store
from hotlinks.lookup import RedirectResolver
from hotlinks.models import Configuration, RedirectEntry, ServerSettings, Snapshot
from hotlinks.reload import ReloadTrigger, FileWatcher


__all__ = [
    'ConfigStore',
    'validate',
    'load_store',
    'RedirectResolver',
    'Configuration',
    'RedirectEntry',
    'ServerSettings',
    'Snapshot',
    'ReloadTrigger',
    'FileWatcher',
]
