import aiohttp
from typing import Any, Dict, Mapping, Optional, Union

from yarl import URL

from .error import AuthenticationError, NotFoundError, WebhookError

HEADERS = {
    "Accept": "*/*",
    "Accept-Encoding": "gzip, deflate",
    "Content-Type": "application/json; charset=utf-8",
    "Connection": "keep-alive",
}

"""Default timeout in seconds"""
TIMEOUT: float = 10

JSON = Union[Dict[str, Any], list]


class SessionManager:
    """Wrapper around one aiohttp session.

    The session is opened on first use so the manager can be built outside
    a running event loop.
    """

    session: Optional[aiohttp.ClientSession]

    def __init__(
        self,
        headers: Optional[Mapping] = None,
        timeout: float = TIMEOUT,
    ) -> None:
        merged_headers = dict(**HEADERS)
        merged_headers.update(headers or {})
        self.headers = merged_headers
        self.timeout = timeout
        self.session = None

    def _session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(headers=self.headers)
        return self.session

    async def post(
        self,
        url: Union[str, URL],
        data: Optional[JSON] = None,
        headers: Optional[Mapping] = None,
        raise_errors: bool = True,
    ) -> Any:
        """Run a wrapped session HTTP POST request.

        Args:
            url: The url to post to.
            data: The payload to POST to the endpoint, sent as JSON.
            headers: A dict adding to and overriding the session headers.
            raise_errors: Whether or not raise errors on non 2xx answers.

        Returns:
            The response body, decoded as JSON when the server says so.
        """
        headers = {} if headers is None else headers

        async with self._session().post(
            str(url),
            json=data,
            timeout=aiohttp.ClientTimeout(total=self.timeout),
            headers=headers,
        ) as res:
            if res.status == 401:
                raise AuthenticationError("Unauthorized")
            if res.status == 403:
                raise AuthenticationError("Forbidden")
            if res.status == 404:
                raise NotFoundError("Not found")
            if raise_errors and res.status >= 400:
                raise WebhookError(f"{url} answered {res.status}")
            if res.content_type == "application/json":
                return await res.json()
            return await res.text()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}<timeout={self.timeout}>"

    async def close(self) -> None:
        """Close the underlying session"""
        if self.session and not self.session.closed:
            await self.session.close()
        self.session = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
