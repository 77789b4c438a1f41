"""
The access to one API group-version, e.g. ``v1`` (core) or ``apps/v1``.

An API client knows which resource kinds are served by its group-version.
The list of kinds (the "API resources") is either assigned from outside
(from a batched discovery of all groups, see :meth:`Client.apis`),
or fetched on demand when a resource kind is looked up for the first time.

Once loaded, the resources are never reloaded or invalidated implicitly.
"""
import asyncio
import logging
from typing import Any, Iterable, Mapping, Optional, Tuple, cast

from kubeaccess._cogs.clients import errors, transports
from kubeaccess._cogs.helpers import typedefs
from kubeaccess._cogs.structs import bodies, discovery
from kubeaccess._core import resources


class APIClient:

    def __init__(
            self,
            transport: transports.Transport,
            group_version: str,
            *,
            namespace: Optional[str] = None,
            logger: Optional[typedefs.Logger] = None,
    ) -> None:
        super().__init__()
        self.transport = transport
        self.group_version = group_version
        self.namespace = namespace
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self._api_resources: Optional[Tuple[discovery.APIResource, ...]] = None
        self._discovery_lock = asyncio.Lock()

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} {self.group_version!r}>'

    @property
    def path(self) -> str:
        return discovery.api_path(self.group_version)

    @property
    def group(self) -> str:
        """ The API group name; an empty string for the core API group. """
        return self.group_version.rsplit('/', 1)[0] if '/' in self.group_version else ''

    @property
    def version(self) -> str:
        return self.group_version.rsplit('/', 1)[-1]

    @property
    def has_api_resources(self) -> bool:
        """ Whether the resources are loaded -- even if there are none. """
        return self._api_resources is not None

    @property
    def api_resources(self) -> Optional[Tuple[discovery.APIResource, ...]]:
        return self._api_resources

    @api_resources.setter
    def api_resources(self, value: Iterable[discovery.APIResource]) -> None:
        self._api_resources = tuple(value)

    async def fetch_api_resources(self) -> Tuple[discovery.APIResource, ...]:
        """
        Get the resources of this group-version, fetching them if not yet loaded.

        Concurrent callers wait for the same single fetch instead of issuing
        their own ones. Failed fetches leave the client unloaded, so that
        the next call will try again.
        """
        if self._api_resources is None:
            async with self._discovery_lock:
                if self._api_resources is None:
                    self.logger.debug(f"Discovering the resources of {self.group_version!r}.")
                    rsp: discovery.APIResourceList = await self.transport.get(
                        self.path,
                        response_class=discovery.APIResourceList,
                    )
                    self.api_resources = rsp.resources
        return cast(Tuple[discovery.APIResource, ...], self._api_resources)

    async def find_api_resource(self, kind: str) -> discovery.APIResource:
        """
        Find the resource descriptor by its kind; e.g. ``"Pod"``.

        Subresources (e.g. ``pods/status``) have the same kinds as their
        resources, so they are never matched.
        """
        for api_resource in await self.fetch_api_resources():
            if api_resource.kind == kind and not api_resource.is_subresource:
                return api_resource
        raise errors.UnknownResourceError(group_version=self.group_version, kind=kind)

    async def resource(
            self,
            name: str,
            *,
            namespace: Optional[str] = None,
    ) -> resources.ResourceClient:
        """
        Get a resource client by the resource's plural name; e.g. ``"pods"``.
        """
        for api_resource in await self.fetch_api_resources():
            if api_resource.name == name:
                return resources.ResourceClient(
                    self.transport,
                    self.group_version,
                    api_resource,
                    namespace=namespace if namespace is not None else self.namespace,
                    logger=self.logger,
                )
        raise errors.UnknownResourceError(group_version=self.group_version, kind=name)

    async def client_for_resource(
            self,
            resource: Mapping[str, Any],
            *,
            namespace: Optional[str] = None,
    ) -> resources.ResourceClient:
        """
        Get a resource client for the kind of the resource object.

        The effective namespace is, in order of precedence: the explicitly
        given one, the default one of the client, the object's own one.

        It can fetch the resources of this group-version (i.e. do the network
        I/O) if they are not loaded yet, and fail with the API errors if so.
        """
        api_resource = await self.find_api_resource(bodies.get_kind(resource))
        return resources.ResourceClient(
            self.transport,
            self.group_version,
            api_resource,
            namespace=(
                namespace if namespace is not None else
                self.namespace if self.namespace is not None else
                bodies.get_namespace(resource)
            ),
            logger=self.logger,
        )

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
