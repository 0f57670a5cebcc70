from hotlinks.server.app import handle_request
from hotlinks.server.http import make_server


__all__ = ['handle_request', 'make_server']
