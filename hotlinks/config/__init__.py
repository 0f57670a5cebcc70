from hotlinks.config.validator import validate, is_valid_code, is_valid_target
from hotlinks.config.store import ConfigStore
from hotlinks.config.loader import config_path, read_source, load_store


__all__ = [
    'validate',
    'is_valid_code',
    'is_valid_target',
    'ConfigStore',
    'config_path',
    'read_source',
    'load_store',
]
