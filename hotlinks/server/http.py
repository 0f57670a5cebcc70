"""HTTP listener adapting `handle_request()` to the standard library server

Each request runs on its own thread (ThreadingHTTPServer) and only ever
touches the configuration through the RedirectResolver.

Functions:
    make_server(resolver: RedirectResolver, bind_address: str, port: int) -> ThreadingHTTPServer
        Build a listener serving redirects from `resolver`.
"""

import logging
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

from hotlinks.lookup import RedirectResolver
from hotlinks.server.app import handle_request
from hotlinks.types import HttpResponse


logger = logging.getLogger(__name__)


class RedirectRequestHandler(BaseHTTPRequestHandler):
    server_version = 'hotlinks'
    resolver: RedirectResolver

    def do_GET(self) -> None:
        self._send(handle_request(self.path, self.resolver), include_body=True)

    def do_HEAD(self) -> None:
        self._send(handle_request(self.path, self.resolver), include_body=False)

    def _send(self, response: HttpResponse, include_body: bool) -> None:
        body = response.get('body', '').encode('utf-8')
        self.send_response(response['statusCode'])
        for name, value in response.get('headers', {}).items():
            self.send_header(name, value)
        self.send_header('Content-Length', str(len(body)))
        self.end_headers()
        if include_body and body:
            self.wfile.write(body)

    def log_message(self, format: str, *args) -> None:
        logger.debug(format % args, extra={'client': self.client_address[0]})


def make_server(resolver: RedirectResolver, bind_address: str, port: int) -> ThreadingHTTPServer:
    handler = type('BoundRedirectRequestHandler', (RedirectRequestHandler,), {'resolver': resolver})
    server = ThreadingHTTPServer((bind_address, port), handler)
    server.daemon_threads = True
    return server
