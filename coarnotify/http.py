# coarnotify/http.py
"""
HTTP layer used by the client.

HttpLayer and HttpResponse are the interface the client depends on, so
that a different transport (or a mock, in tests) can be swapped in. The
default implementation uses urllib.request.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

logger = logging.getLogger(__name__)


class HttpResponse(ABC):
    """The parts of an HTTP response the client needs."""

    @abstractmethod
    def header(self, header_name: str) -> Optional[str]:
        """Get a response header, or None if it is not set."""
        pass

    @property
    @abstractmethod
    def status_code(self) -> int:
        pass


class HttpLayer(ABC):
    """
    Interface for the HTTP requests the client makes.

    Implementations return a response for every status the server sends,
    error statuses included, and raise only when no response is received.
    """

    @abstractmethod
    def post(self, url: str, data: str, headers: Optional[Dict[str, str]] = None) -> HttpResponse:
        """
        Make a POST request.

        Args:
            url: The URL to post to
            data: The request body
            headers: Request headers

        Returns:
            The response
        """
        pass

    @abstractmethod
    def get(self, url: str, headers: Optional[Dict[str, str]] = None) -> HttpResponse:
        """Make a GET request."""
        pass


class UrllibHttpResponse(HttpResponse):
    """
    Response from UrllibHttpLayer.

    Args:
        status: The HTTP status code
        headers: The response headers (an email.message.Message)
        body: The response body
    """

    def __init__(self, status: int, headers, body: bytes = b""):
        self._status = status
        self._headers = headers
        self.body = body

    def header(self, header_name: str) -> Optional[str]:
        return self._headers.get(header_name)

    @property
    def status_code(self) -> int:
        return self._status


class UrllibHttpLayer(HttpLayer):
    """
    HttpLayer over urllib.request.

    Args:
        timeout: Request timeout in seconds, or None for the socket default
    """

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout

    def _request(self, method: str, url: str, data: Optional[bytes], headers: Optional[Dict[str, str]]) -> UrllibHttpResponse:
        req = Request(url, data=data, headers=headers or {}, method=method)
        kwargs = {} if self.timeout is None else {"timeout": self.timeout}

        try:
            with urlopen(req, **kwargs) as response:
                return UrllibHttpResponse(response.status, response.headers, response.read())
        except HTTPError as e:
            logger.debug(f"{method} {url} answered HTTP {e.code}")
            return UrllibHttpResponse(e.code, e.headers, e.read())
        except URLError as e:
            raise ConnectionError(f"Failed to connect to {url}: {e.reason}")

    def post(self, url: str, data: str, headers: Optional[Dict[str, str]] = None) -> UrllibHttpResponse:
        body = data.encode("utf-8") if isinstance(data, str) else data
        return self._request("POST", url, body, headers)

    def get(self, url: str, headers: Optional[Dict[str, str]] = None) -> UrllibHttpResponse:
        return self._request("GET", url, None, headers)
