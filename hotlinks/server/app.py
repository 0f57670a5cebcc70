import json
import logging

from hotlinks.constants import (
    MISSING_SHORTCODE,
    REDIRECT_SUCCESS,
    RESERVED_PATH,
    RESERVED_PREFIX,
    SHORT_URL_NOT_FOUND,
)
from hotlinks.lookup import RedirectResolver
from hotlinks.types import HttpResponse
from hotlinks.utils.helpers import guarantee_500_response, split_path


logger = logging.getLogger(__name__)


def response_404(message: str | None = None, error_code: str | None = None) -> HttpResponse:
    base = 'Not Found'
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return {
        'statusCode': 404,
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps(body),
    }


def response_307(*, location: str) -> HttpResponse:
    return {
        'statusCode': 307,
        'headers': {
            'Location': location,
            'Cache-Control': 'no-store',
        },
        'body': '',
    }


@guarantee_500_response
def handle_request(path: str, resolver: RedirectResolver) -> HttpResponse:
    """Resolve a request path to a redirect response

    This handler follows this procedure:
    - Step 1: Extract the short code from the request path
    - Step 2: Refuse paths in the reserved '/_/' namespace
    - Step 3: Resolve the short code against the current redirect table
    - Step 4: Redirect the client to the target URL

    HTTP responses:
        307: Successful redirect
            headers:
                Location: target URL destination
        404: Not found
            message: missing short code, reserved path, or unknown short code
        500: Internal server error
            message: server experienced an internal error

    Args:
        path (str):
            Raw request target, e.g. '/go' or '/go?ref=mail'.
        resolver (RedirectResolver):
            Lookup facade over the configuration store.

    Returns:
        dict: response with statusCode, headers, and body.

    Example:
        >>> response = handle_request('/go', resolver)
        >>> response['statusCode']
        307
        >>> response['headers']['Location']
        'https://go.dev'
    """
    # 1- Extract short code from request's path
    segments = split_path(path)
    if not segments:
        logger.info('Missing short code in path. Responding with 404.', extra={'event': MISSING_SHORTCODE})
        return response_404(message='missing short code in path', error_code=MISSING_SHORTCODE)

    # 2- Reserved namespace is never routed to a short code
    if segments[0] == RESERVED_PREFIX:
        logger.info('Reserved path requested. Responding with 404.', extra={'path': path, 'event': RESERVED_PATH})
        return response_404(error_code=RESERVED_PATH)

    # Nested paths aren't short codes
    shortcode = '/'.join(segments)

    # 3- Resolve short code against the current snapshot
    target_url = resolver.resolve(shortcode)
    if target_url is None:
        logger.info(
            'Short code not configured. Responding with 404.',
            extra={'shortcode': shortcode, 'event': SHORT_URL_NOT_FOUND},
        )
        return response_404(message=f"short code '{shortcode}' doesn't exist", error_code=SHORT_URL_NOT_FOUND)

    # 4- Redirect client to target URL
    logger.debug(
        'Redirecting client to target URL. Responding with 307.',
        extra={'shortcode': shortcode, 'event': REDIRECT_SUCCESS},
    )
    return response_307(location=target_url)
