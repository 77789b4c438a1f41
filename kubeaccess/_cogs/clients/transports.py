"""
The raw HTTP access to the API server: requests, retries, errors, decoding.

The transport knows nothing about the API groups, versions, or resource kinds.
It only performs the requests to the URLs given, and either returns
the JSON-decoded responses or raises the errors (see :mod:`errors`).

Authentication and TLS are not handled here: if needed, an ``aiohttp`` session
with the proper credentials (headers, SSL contexts, connectors) is passed
from outside. Otherwise, a plain session is created on the first request.
"""
import asyncio
import collections.abc
import itertools
import logging
from types import TracebackType
from typing import Any, List, Mapping, Optional, Type

import aiohttp
from typing_extensions import Protocol

from kubeaccess._cogs.aiokits import aiotasks
from kubeaccess._cogs.clients import errors
from kubeaccess._cogs.configs import configuration
from kubeaccess._cogs.helpers import typedefs, versions


class ResponseClass(Protocol):
    """ Anything that can be parsed from a JSON-decoded response payload. """

    @classmethod
    def parse(cls, raw: Mapping[str, Any]) -> Any: ...


class Transport:
    """
    A container for an aiohttp session and the connection-level settings.

    The transport can be shared by several API clients. It is not owned by them:
    it is the transport's creator who closes it when it is not needed anymore.
    """

    server: str
    settings: configuration.ClientSettings
    logger: typedefs.Logger

    def __init__(
            self,
            server: str,
            *,
            session: Optional[aiohttp.ClientSession] = None,
            settings: Optional[configuration.ClientSettings] = None,
            logger: Optional[typedefs.Logger] = None,
    ) -> None:
        super().__init__()
        self.server = server
        self.settings = settings if settings is not None else configuration.ClientSettings()
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self._session = session
        self._own_session = session is None

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} {self.server!r}>'

    async def __aenter__(self) -> "Transport":
        return self

    async def __aexit__(
            self,
            exc_type: Optional[Type[BaseException]],
            exc_val: Optional[BaseException],
            exc_tb: Optional[TracebackType],
    ) -> None:
        await self.close()

    @property
    def session(self) -> aiohttp.ClientSession:
        # The session must be created within a running event loop, so it is created lazily.
        if self._session is None:
            self._session = aiohttp.ClientSession(
                headers={'User-Agent': f'kubeaccess/{versions.version or "unknown"}'},
            )
        return self._session

    async def close(self) -> None:
        # Foreign sessions are closed by their owners, not by us.
        if self._own_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def request(
            self,
            method: str,
            url: str,  # relative to the server/api root.
            *,
            payload: Optional[object] = None,
            headers: Optional[Mapping[str, str]] = None,
            timeout: Optional[aiohttp.ClientTimeout] = None,
    ) -> aiohttp.ClientResponse:
        if '://' not in url:
            url = self.server.rstrip('/') + '/' + url.lstrip('/')

        if timeout is None:
            timeout = aiohttp.ClientTimeout(
                total=self.settings.networking.request_timeout,
                sock_connect=self.settings.networking.connect_timeout,
            )

        backoffs = self.settings.networking.error_backoffs
        backoffs = backoffs if isinstance(backoffs, collections.abc.Iterable) else [backoffs]
        count = len(backoffs) + 1 if isinstance(backoffs, collections.abc.Sized) else None
        backoff: Optional[float]
        for retry, backoff in enumerate(itertools.chain(backoffs, [None]), start=1):
            idx = f"#{retry}/{count}" if count is not None else f"#{retry}"
            what = f"{method.upper()} {url}"
            try:
                if retry > 1:
                    self.logger.debug(f"Request attempt {idx}: {what}")
                else:
                    self.logger.debug(f"Request: {what}")

                response = await self.session.request(
                    method=method,
                    url=url,
                    json=payload,
                    headers=headers,
                    timeout=timeout,
                )
                await errors.check_response(response)  # but do not parse it!

            except (aiohttp.ClientConnectionError, errors.APIServerError, asyncio.TimeoutError) as e:
                if backoff is None:  # i.e. the last or the only attempt.
                    self.logger.error(f"Request attempt {idx} failed; escalating: {what} -> {e!r}")
                    raise
                else:
                    self.logger.error(f"Request attempt {idx} failed; will retry: {what} -> {e!r}")
                    await asyncio.sleep(backoff)  # non-awakable! but still cancellable.
            else:
                if retry > 1:
                    self.logger.debug(f"Request attempt {idx} succeeded: {what}")
                return response

        raise RuntimeError("Broken retryable routine.")  # impossible, but needed for type-checking.

    async def get(
            self,
            url: str,  # relative to the server/api root.
            *,
            response_class: Optional[Type[ResponseClass]] = None,
            headers: Optional[Mapping[str, str]] = None,
            timeout: Optional[aiohttp.ClientTimeout] = None,
    ) -> Any:
        response = await self.request('get', url, headers=headers, timeout=timeout)
        async with response:
            data = await response.json()
        return data if response_class is None else response_class.parse(data)

    async def gets(
            self,
            *urls: str,  # relative to the server/api root.
            response_class: Optional[Type[ResponseClass]] = None,
            headers: Optional[Mapping[str, str]] = None,
            timeout: Optional[aiohttp.ClientTimeout] = None,
    ) -> List[Any]:
        """
        Get several URLs at once, and return the results in the order of URLs.

        The requests are performed concurrently. It is all or nothing:
        if any of the requests fails, the other ones are cancelled (if still
        running), their results are discarded, and the first error is raised.
        """
        tasks = [
            asyncio.create_task(self.get(url, response_class=response_class,
                                         headers=headers, timeout=timeout))
            for url in urls
        ]
        try:
            await aiotasks.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        finally:
            pending = [task for task in tasks if not task.done()]
            await aiotasks.stop(pending, title="Batched request", quiet=True, logger=self.logger)
        await aiotasks.reraise(tasks)
        return [task.result() for task in tasks]

    async def post(
            self,
            url: str,  # relative to the server/api root.
            *,
            payload: Optional[object] = None,
            headers: Optional[Mapping[str, str]] = None,
            timeout: Optional[aiohttp.ClientTimeout] = None,
    ) -> Any:
        response = await self.request('post', url, payload=payload, headers=headers, timeout=timeout)
        async with response:
            return await response.json()

    async def put(
            self,
            url: str,  # relative to the server/api root.
            *,
            payload: Optional[object] = None,
            headers: Optional[Mapping[str, str]] = None,
            timeout: Optional[aiohttp.ClientTimeout] = None,
    ) -> Any:
        response = await self.request('put', url, payload=payload, headers=headers, timeout=timeout)
        async with response:
            return await response.json()

    async def patch(
            self,
            url: str,  # relative to the server/api root.
            *,
            payload: Optional[object] = None,
            headers: Optional[Mapping[str, str]] = None,
            timeout: Optional[aiohttp.ClientTimeout] = None,
    ) -> Any:
        response = await self.request('patch', url, payload=payload, headers=headers, timeout=timeout)
        async with response:
            return await response.json()

    async def delete(
            self,
            url: str,  # relative to the server/api root.
            *,
            payload: Optional[object] = None,
            headers: Optional[Mapping[str, str]] = None,
            timeout: Optional[aiohttp.ClientTimeout] = None,
    ) -> Any:
        response = await self.request('delete', url, payload=payload, headers=headers, timeout=timeout)
        async with response:
            return await response.json()
