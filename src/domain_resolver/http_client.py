"""
HTTP fetch collaborator.

Downloads the raw Public Suffix List and Root Zone Database text. Any
transport failure surfaces as SourceUnreachable and any non-200 answer as
InvalidSourceResponse; no retry happens here.
"""

from typing import Optional, Protocol

import httpx

from domain_resolver.config import HttpConfig
from domain_resolver.exceptions import InvalidSourceResponse, SourceUnreachable


class HttpClient(Protocol):
    """Anything able to return the text body of a URL."""

    def get_content(self, url: str) -> str:
        ...

    def close(self) -> None:
        ...


class HttpxClient:
    """Synchronous fetcher backed by httpx."""

    def __init__(
        self,
        config: Optional[HttpConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            config: Timeout and user agent settings
            transport: Optional transport, e.g. httpx.MockTransport in tests
        """
        self._config = config or HttpConfig()
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    def __enter__(self) -> "HttpxClient":
        self._client = self._create_client()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _create_client(self) -> httpx.Client:
        return httpx.Client(
            verify=True,
            timeout=httpx.Timeout(self._config.timeout_seconds),
            follow_redirects=True,
            headers={"User-Agent": self._config.user_agent},
            transport=self._transport,
        )

    def get_content(self, url: str) -> str:
        """
        Fetch the body of url as text.

        Raises:
            SourceUnreachable: If the request could not be completed
            InvalidSourceResponse: If the status code is not 200
        """
        if self._client is None:
            self._client = self._create_client()

        try:
            response = self._client.get(url)
        except httpx.HTTPError as e:
            raise SourceUnreachable(url, reason=str(e)) from e

        if response.status_code != 200:
            raise InvalidSourceResponse(url, response.status_code)

        return response.text

    def close(self) -> None:
        if self._client:
            self._client.close()
            self._client = None
