from typing import Any, TypeAlias


# Type aliases for Python dictionaries
ConfigDocument: TypeAlias = dict[str, Any]
HttpResponse: TypeAlias = dict[str, Any]
