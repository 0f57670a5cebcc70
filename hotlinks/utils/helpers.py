"""Helper utilities for request handlers.

Functions:
    split_path(path: str) -> list[str]
        Split a request path into non-empty segments, dropping the query string
    guarantee_500_response(func: Callable) -> Callable
        Decorator: turn unexpected handler exceptions into a 500 response

Example:
    >>> split_path('/go/?utm=1')
    ['go']
    >>> split_path('/')
    []
"""

import json
import logging
import functools
import urllib.parse
from collections.abc import Callable

from hotlinks.constants import UNKNOWN_INTERNAL_SERVER_ERROR
from hotlinks.types import HttpResponse
from hotlinks.utils.runtime import running_locally


logger = logging.getLogger(__name__)


def split_path(path: str) -> list[str]:
    """Split a request path into its non-empty, percent-decoded segments

    Trailing and repeated slashes are ignored, so '/go/', '//go' and '/go'
    all route to the same short code.

    Args:
        path (str): raw request target, e.g. '/go?x=1'

    Returns:
        list[str]: path segments
    """
    # Only the path matters; '//go' is a path here, not a network location
    raw_path = path.split('?', 1)[0].split('#', 1)[0]
    return [urllib.parse.unquote(segment) for segment in raw_path.split('/') if segment]


def guarantee_500_response(func: Callable[..., HttpResponse]) -> Callable[..., HttpResponse]:
    """Decorator ensuring a handler always answers, even on unexpected errors.

    Outside a local environment any exception escaping the handler is logged
    and converted to a 500 response with a generic body. Locally, the
    exception is re-raised so it shows up in the developer's terminal.

    Example:
        >>> @guarantee_500_response
        ... def handler(path):
        ...     raise RuntimeError('boom')
        >>> handler('/go')['statusCode']
        500
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> HttpResponse:
        try:
            return func(*args, **kwargs)
        except Exception:
            if running_locally():
                raise
            logger.exception('Unhandled error in request handler. Responding with 500.')
            return {
                'statusCode': 500,
                'headers': {'Content-Type': 'application/json'},
                'body': json.dumps(
                    {
                        'message': 'Internal Server Error',
                        'error_code': UNKNOWN_INTERNAL_SERVER_ERROR,
                    }
                ),
            }

    return wrapper
