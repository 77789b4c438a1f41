"""
The access to one specific resource kind in one specific API group-version.

The resource client knows the REST conventions of the Kubernetes API:
the collection and the item URLs, the namespaced and cluster-scoped URLs,
and the HTTP verbs for the CRUD operations. It knows nothing about discovery:
it is given the resource descriptor by its :class:`APIClient`.
"""
import copy
import logging
import urllib.parse
from typing import Any, List, Mapping, Optional, cast

from kubeaccess._cogs.clients import transports
from kubeaccess._cogs.helpers import typedefs
from kubeaccess._cogs.structs import bodies, discovery
from kubeaccess._core import loggers


class ResourceClient:
    """
    CRUD operations for a resource kind, bound to a namespace (if namespaced).

    The bound namespace takes precedence over the objects' own namespaces.
    If not bound, the objects' own namespaces are used.
    """

    def __init__(
            self,
            transport: transports.Transport,
            group_version: str,
            api_resource: discovery.APIResource,
            *,
            namespace: Optional[str] = None,
            logger: Optional[typedefs.Logger] = None,
    ) -> None:
        super().__init__()
        self.transport = transport
        self.group_version = group_version
        self.api_resource = api_resource
        self.namespace = namespace if api_resource.namespaced else None
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    def __repr__(self) -> str:
        return (f'<{self.__class__.__name__} {self.group_version!r} {self.kind!r}'
                f' namespace={self.namespace!r}>')

    @property
    def kind(self) -> str:
        return self.api_resource.kind

    @property
    def namespaced(self) -> bool:
        return self.api_resource.namespaced

    def get_url(
            self,
            *,
            namespace: Optional[str] = None,
            name: Optional[str] = None,
            params: Optional[typedefs.Params] = None,
    ) -> str:
        """
        Build a URL to be used with K8s API.

        If the namespace is not set, a cluster-wide URL is returned.
        For cluster-scoped resources, the namespace is ignored.

        If the name is not set, the URL for the resource list is returned.
        Otherwise (if set), the URL for the individual resource is returned.

        Params go to the query parameters (``?param1=value1&param2=value2...``).
        """
        namespace = namespace if self.namespaced else None
        if self.namespaced and namespace is None and name is not None:
            raise ValueError("Specific namespaces are required for specific namespaced resources.")

        parts: List[Optional[str]] = [
            discovery.api_path(self.group_version),
            'namespaces' if namespace is not None else None,
            namespace,
            self.api_resource.name,
            name,
        ]

        query = urllib.parse.urlencode(params, encoding='utf-8') if params else ''
        path = '/'.join([part.strip('/') for part in parts if part])
        return '/' + path + ('?' if query else '') + query

    def _resolve(self, resource: Mapping[str, Any]) -> bodies.RawBody:
        """
        Put the effective namespace into a copy of the object's body.

        The caller's body is never modified: it is deep-copied if needed.
        """
        body = cast(bodies.RawBody, resource)
        if self.namespaced and self.namespace is not None:
            if bodies.get_namespace(body) != self.namespace:
                body = copy.deepcopy(body)
                body.setdefault('metadata', {})['namespace'] = self.namespace
        return body

    def _require_name(self, body: bodies.RawBody) -> str:
        name = bodies.get_name(body)
        if not name:
            raise ValueError(f"The {self.kind} object has no name: {body!r}")
        return name

    async def list(
            self,
            *,
            label_selector: Optional[str] = None,
            field_selector: Optional[str] = None,
    ) -> List[bodies.RawBody]:
        """
        List the objects of this kind, either in the bound namespace or cluster-wide.

        The items in K8s lists have no ``apiVersion`` & ``kind`` of their own:
        these are taken from the list itself (without the ``List`` suffix).
        """
        params = {}
        if label_selector is not None:
            params['labelSelector'] = label_selector
        if field_selector is not None:
            params['fieldSelector'] = field_selector

        url = self.get_url(namespace=self.namespace, params=params)
        self.logger.debug(f"Listing {self.kind} objects: {url}")
        rsp = await self.transport.get(url)

        items: List[bodies.RawBody] = []
        for item in rsp.get('items', []):
            if 'kind' in rsp:
                item.setdefault('kind', rsp['kind'][:-4] if rsp['kind'][-4:] == 'List' else rsp['kind'])
            if 'apiVersion' in rsp:
                item.setdefault('apiVersion', rsp['apiVersion'])
            items.append(item)
        return items

    async def get(self, name: str) -> bodies.RawBody:
        url = self.get_url(namespace=self.namespace, name=name)
        self.logger.debug(f"Getting {self.kind} {name!r}: {url}")
        body: bodies.RawBody = await self.transport.get(url)
        return body

    async def delete(
            self,
            name: str,
            *,
            propagation_policy: Optional[str] = None,
    ) -> bodies.RawBody:
        """
        Delete an object by name.

        The response is either the deleted object (possibly with the deletion
        timestamp, if it has finalizers), or a ``Status`` object -- as K8s decides.
        """
        url = self.get_url(namespace=self.namespace, name=name)
        payload = {'propagationPolicy': propagation_policy} if propagation_policy else None
        self.logger.debug(f"Deleting {self.kind} {name!r}: {url}")
        body: bodies.RawBody = await self.transport.delete(url, payload=payload)
        return body

    async def patch(
            self,
            name: str,
            patch: Mapping[str, Any],
    ) -> bodies.RawBody:
        """
        Patch an object by name with a JSON merge-patch.
        """
        url = self.get_url(namespace=self.namespace, name=name)
        self.logger.debug(f"Patching {self.kind} {name!r} with {patch!r}: {url}")
        body: bodies.RawBody = await self.transport.patch(
            url,
            payload=patch,
            headers={'Content-Type': 'application/merge-patch+json'},
        )
        return body

    async def create_resource(self, resource: Mapping[str, Any]) -> bodies.RawBody:
        body = self._resolve(resource)
        namespace = bodies.get_namespace(body) if self.namespaced else None
        if self.namespaced and namespace is None:
            raise ValueError(f"Specific namespaces are required to create {self.kind} objects.")

        url = self.get_url(namespace=namespace)
        logger = loggers.ObjectLogger(body=body, parent=self.logger)
        logger.debug(f"Creating {self.kind}: {url}")
        created_body: bodies.RawBody = await self.transport.post(url, payload=body)
        return created_body

    async def get_resource(self, resource: Mapping[str, Any]) -> bodies.RawBody:
        body = self._resolve(resource)
        name = self._require_name(body)
        url = self.get_url(namespace=bodies.get_namespace(body), name=name)
        logger = loggers.ObjectLogger(body=body, parent=self.logger)
        logger.debug(f"Getting {self.kind}: {url}")
        fetched_body: bodies.RawBody = await self.transport.get(url)
        return fetched_body

    async def update_resource(self, resource: Mapping[str, Any]) -> bodies.RawBody:
        body = self._resolve(resource)
        name = self._require_name(body)
        url = self.get_url(namespace=bodies.get_namespace(body), name=name)
        logger = loggers.ObjectLogger(body=body, parent=self.logger)
        logger.debug(f"Updating {self.kind}: {url}")
        updated_body: bodies.RawBody = await self.transport.put(url, payload=body)
        return updated_body

    async def delete_resource(
            self,
            resource: Mapping[str, Any],
            *,
            propagation_policy: Optional[str] = None,
    ) -> bodies.RawBody:
        body = self._resolve(resource)
        name = self._require_name(body)
        url = self.get_url(namespace=bodies.get_namespace(body), name=name)
        payload = {'propagationPolicy': propagation_policy} if propagation_policy else None
        logger = loggers.ObjectLogger(body=body, parent=self.logger)
        logger.debug(f"Deleting {self.kind}: {url}")
        deleted_body: bodies.RawBody = await self.transport.delete(url, payload=payload)
        return deleted_body
