"""
The entry point to the API: the resolution of API versions to API clients.

A client maps the ``apiVersion`` of the resource objects to the API clients
of the group-versions (see :mod:`groupversions`), and dispatches the generic CRUD
operations on arbitrary objects to the proper resource clients.

The API clients are created on the first request and cached for the lifetime
of the client. So is the list of API groups, which is fetched only once.
"""
import asyncio
import logging
from types import TracebackType
from typing import Any, Dict, List, Mapping, Optional, Type

import aiohttp

from kubeaccess._cogs.clients import transports
from kubeaccess._cogs.configs import configuration
from kubeaccess._cogs.helpers import typedefs
from kubeaccess._cogs.structs import bodies, discovery
from kubeaccess._core import groupversions, resources


class Client:
    """
    A client of the whole API server, as seen via one transport.

    The transport is shared, not owned: the client does not close it,
    unless explicitly told to (as done by :func:`client`).
    """

    def __init__(
            self,
            transport: transports.Transport,
            *,
            namespace: Optional[str] = None,
            logger: Optional[typedefs.Logger] = None,
            close_transport: bool = False,
    ) -> None:
        super().__init__()
        self.transport = transport
        self.namespace = namespace
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self._close_transport = close_transport
        self._api_clients: Dict[str, groupversions.APIClient] = {}
        self._api_group_list: Optional[discovery.APIGroupList] = None
        self._api_group_list_lock = asyncio.Lock()

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} {self.transport.server!r} namespace={self.namespace!r}>'

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(
            self,
            exc_type: Optional[Type[BaseException]],
            exc_val: Optional[BaseException],
            exc_tb: Optional[TracebackType],
    ) -> None:
        await self.close()

    async def close(self) -> None:
        if self._close_transport:
            await self.transport.close()

    async def version(self) -> Mapping[str, str]:
        """
        Get the server's version & build information; e.g. ``major``, ``minor``.
        """
        rsp: Mapping[str, str] = await self.transport.get('/version')
        return rsp

    def api(self, api_version: str = 'v1') -> groupversions.APIClient:
        """
        Get an API client for a group-version: ``"group/version"`` or ``"version"`` (core).

        It is only created (but never checked) on the first request, and cached.
        No network I/O happens here: if the group-version is not served,
        it fails later, when the API client is used for the first time.
        """
        # No awaiting here, so concurrent coroutines cannot create duplicates.
        if api_version not in self._api_clients:
            self._api_clients[api_version] = groupversions.APIClient(
                self.transport,
                api_version,
                namespace=self.namespace,
                logger=self.logger,
            )
        return self._api_clients[api_version]

    async def api_groups(self) -> discovery.APIGroupList:
        """
        Get the list of API groups, fetching it only once for the client's lifetime.
        """
        if self._api_group_list is None:
            async with self._api_group_list_lock:
                if self._api_group_list is None:
                    self.logger.debug("Discovering the API groups.")
                    self._api_group_list = await self.transport.get(
                        '/apis',
                        response_class=discovery.APIGroupList,
                    )
        return self._api_group_list

    async def apis(
            self,
            *,
            prefetch_resources: bool = False,
    ) -> List[groupversions.APIClient]:
        """
        Get the API clients of all served API groups (the preferred versions).

        If ``prefetch_resources`` is true, the resources of all API groups
        are fetched in one batch, except for the API groups that have their
        resources already loaded. Each fetched list goes to the API client
        of the group-version it declares. The batch is all-or-nothing: if any
        of the group-versions fails, nothing is assigned, and the error is raised.
        """
        api_group_list = await self.api_groups()
        api_clients = [self.api(api_group.preferred_version.group_version)
                       for api_group in api_group_list.groups]

        if prefetch_resources:
            missing = {api_client.group_version: api_client
                       for api_client in api_clients
                       if not api_client.has_api_resources}
            if missing:
                self.logger.debug(f"Discovering the resources of {len(missing)} API groups.")
                api_resource_lists = await self.transport.gets(
                    *[api_client.path for api_client in missing.values()],
                    response_class=discovery.APIResourceList,
                )
                for api_resource_list in api_resource_lists:
                    api_client = self.api(api_resource_list.group_version)
                    api_client.api_resources = api_resource_list.resources

        return api_clients

    async def client_for_resource(
            self,
            resource: Mapping[str, Any],
            *,
            namespace: Optional[str] = None,
    ) -> resources.ResourceClient:
        """
        Get a resource client for the object's ``apiVersion`` & ``kind``.

        It can fetch the resources of that group-version (i.e. do the network
        I/O) if they are not loaded yet. Raises :class:`UnknownResourceError`
        if the group-version is served, but the kind is not in it.
        """
        api_client = self.api(bodies.get_api_version(resource))
        return await api_client.client_for_resource(resource, namespace=namespace)

    async def create_resource(self, resource: Mapping[str, Any]) -> bodies.RawBody:
        client = await self.client_for_resource(resource)
        return await client.create_resource(resource)

    async def get_resource(self, resource: Mapping[str, Any]) -> bodies.RawBody:
        client = await self.client_for_resource(resource)
        return await client.get_resource(resource)

    async def update_resource(self, resource: Mapping[str, Any]) -> bodies.RawBody:
        client = await self.client_for_resource(resource)
        return await client.update_resource(resource)

    async def delete_resource(self, resource: Mapping[str, Any]) -> bodies.RawBody:
        client = await self.client_for_resource(resource)
        return await client.delete_resource(resource)


def client(
        server: str,
        *,
        namespace: Optional[str] = None,
        session: Optional[aiohttp.ClientSession] = None,
        settings: Optional[configuration.ClientSettings] = None,
        logger: Optional[typedefs.Logger] = None,
) -> Client:
    """
    Create a client with its own transport to the server's URL.

    Unlike the manually constructed clients, this one closes the transport
    when closed itself (but never the externally provided ``session``).

    Usage::

        async with kubeaccess.client('https://localhost:6443') as client:
            print(await client.version())
    """
    transport = transports.Transport(server, session=session, settings=settings, logger=logger)
    return Client(transport, namespace=namespace, logger=logger, close_transport=True)
