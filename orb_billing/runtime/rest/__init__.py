"""REST runtime abstractions."""

from .adapters import EmptyAdapter, ModelAdapter, PageAdapter, ResponseAdapter, load_json
from .http_client import HTTPClient, RawResponse
from .runner import RestEndpointSpec, RestRunner
from .transport import RESTTransport, path

__all__ = [
    "EmptyAdapter",
    "HTTPClient",
    "ModelAdapter",
    "PageAdapter",
    "RawResponse",
    "RESTTransport",
    "ResponseAdapter",
    "RestEndpointSpec",
    "RestRunner",
    "load_json",
    "path",
]
