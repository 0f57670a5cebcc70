from hotlinks.utils.helpers import split_path, guarantee_500_response
from hotlinks.utils.logging import initialize_logging
from hotlinks.utils.runtime import app_env, running_locally


__all__ = [
    'split_path',
    'guarantee_500_response',
    'initialize_logging',
    'app_env',
    'running_locally',
]
