"""Exchange layer -- Bybit REST client and its HTTP transport."""

from quicky.exchange.client import BybitRestClient
from quicky.exchange.transport import HttpResponse, HttpTransport, UrllibTransport

__all__ = ["BybitRestClient", "HttpResponse", "HttpTransport", "UrllibTransport"]
