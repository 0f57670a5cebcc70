import os

from hotlinks.constants import ENV, Defaults


def app_env() -> str:
    return os.environ.get(ENV.App.APP_ENV, Defaults.APP_ENV).lower()


def running_locally() -> bool:
    """Return True when running in a developer environment (APP_ENV=local)."""
    return app_env() == 'local'
