"""Run the redirect server

Usage:
    python -m hotlinks [CONFIG] [--log-level LEVEL]

Exit codes:
    0: clean shutdown (SIGINT/SIGTERM)
    1: the startup configuration is missing or invalid
    2: bad command-line usage

Send SIGHUP to reload the configuration from the same path. A failed reload
is logged and the previous table keeps serving.
"""

import argparse
import logging
import signal
import sys

from hotlinks.config.loader import config_path, load_store
from hotlinks.exceptions import SourceUnavailableError, ValidationError
from hotlinks.lookup import RedirectResolver
from hotlinks.reload import FileWatcher, ReloadTrigger
from hotlinks.server.http import make_server
from hotlinks.utils.logging import initialize_logging


logger = logging.getLogger('hotlinks')


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Steps:
        - Parse CLI arguments and initialize logging
        - Load and validate the startup configuration (fail fast)
        - Start the reload worker, SIGHUP handler and optional file watcher
        - Serve redirects until interrupted
    """
    parser = argparse.ArgumentParser(
        prog='hotlinks',
        description='Serve redirects from a single TOML file, reloading it on SIGHUP.',
    )
    parser.add_argument(
        'config',
        nargs='?',
        default=None,
        help='Path to the configuration file (default: $HOTLINKS_CONFIG or ./config.toml)',
    )
    parser.add_argument(
        '--log-level',
        default=None,
        help='Log level, e.g. DEBUG or INFO (default: $LOG_LEVEL or INFO)',
    )
    args = parser.parse_args(argv)

    initialize_logging(args.log_level)
    path = config_path(args.config)

    try:
        store = load_store(path)
    except (SourceUnavailableError, ValidationError) as e:
        logger.error(
            'Cannot start without a valid configuration.',
            extra={'path': str(path), 'error': e.__class__.__name__, 'errorCode': e.error_code, 'reason': str(e)},
        )
        return 1

    settings = store.current().server
    trigger = ReloadTrigger(store, path)
    trigger.start()
    trigger.install_signal_handler()

    watcher = None
    if settings.watch_interval:
        watcher = FileWatcher(path, lambda: trigger.request('file-change'), interval=settings.watch_interval)
        watcher.start()

    try:
        server = make_server(RedirectResolver(store), settings.bind_address, settings.port)
    except OSError as e:
        logger.error(
            'Cannot bind listener.',
            extra={'bindAddress': settings.bind_address, 'port': settings.port, 'reason': str(e)},
        )
        if watcher is not None:
            watcher.stop()
        trigger.stop()
        return 1

    def shutdown(signum: int, frame: object) -> None:
        raise KeyboardInterrupt

    signal.signal(signal.SIGTERM, shutdown)

    logger.info('Serving redirects.', extra={'bindAddress': settings.bind_address, 'port': settings.port})
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info('Shutting down.')
    finally:
        server.server_close()
        if watcher is not None:
            watcher.stop()
        trigger.stop()

    return 0


if __name__ == '__main__':
    sys.exit(main())
