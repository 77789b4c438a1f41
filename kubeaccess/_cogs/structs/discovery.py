"""
The discovery documents of the Kubernetes API, as parsed into typed objects.

The raw payloads are what the API server returns from ``/apis`` (a list of
API groups with their versions) and from ``/api/v1`` or ``/apis/{group}/{version}``
(a list of resources served by that group-version).

Only the fields needed for the API access are parsed. All other fields
are ignored, so that newer servers with extra fields remain compatible.
"""
import dataclasses
from typing import Any, FrozenSet, Mapping, Optional, Tuple

from typing_extensions import TypedDict


class RawGroupVersion(TypedDict, total=False):
    groupVersion: str
    version: str


class RawAPIGroup(TypedDict, total=False):
    name: str
    versions: Tuple[RawGroupVersion, ...]
    preferredVersion: RawGroupVersion


class RawAPIResource(TypedDict, total=False):
    name: str
    singularName: str
    namespaced: bool
    kind: str
    verbs: Tuple[str, ...]
    shortNames: Tuple[str, ...]
    categories: Tuple[str, ...]


def api_path(group_version: str) -> str:
    """
    Build the discovery URL path of a group-version.

    The core API group has no name: its ``apiVersion`` is a bare version
    (e.g. ``"v1"``) and it is served from ``/api/v1``. All other groups are
    served from ``/apis/{group}/{version}`` (e.g. ``/apis/apps/v1``).
    """
    if not group_version or group_version.startswith('/') or group_version.endswith('/'):
        raise ValueError(f"Malformed API version: {group_version!r}")
    return f'/apis/{group_version}' if '/' in group_version else f'/api/{group_version}'


@dataclasses.dataclass(frozen=True)
class GroupVersion:
    group_version: str
    """ E.g. ``"apps/v1"``, or ``"v1"`` for the core group. """

    version: str
    """ E.g. ``"v1"``, ``"v1beta1"``. """

    @classmethod
    def parse(cls, raw: Mapping[str, Any]) -> "GroupVersion":
        return cls(
            group_version=raw['groupVersion'],
            version=raw.get('version') or raw['groupVersion'].rsplit('/', 1)[-1],
        )


@dataclasses.dataclass(frozen=True)
class APIGroup:
    name: str
    versions: Tuple[GroupVersion, ...]
    preferred_version: GroupVersion

    @classmethod
    def parse(cls, raw: Mapping[str, Any]) -> "APIGroup":
        versions = tuple(GroupVersion.parse(version) for version in raw.get('versions') or [])
        preferred = raw.get('preferredVersion')
        if not preferred and not versions:
            raise ValueError(f"The API group {raw.get('name')!r} has no versions.")
        return cls(
            name=raw['name'],
            versions=versions,
            preferred_version=GroupVersion.parse(preferred) if preferred else versions[0],
        )


@dataclasses.dataclass(frozen=True)
class APIGroupList:
    groups: Tuple[APIGroup, ...]

    @classmethod
    def parse(cls, raw: Mapping[str, Any]) -> "APIGroupList":
        return cls(groups=tuple(APIGroup.parse(group) for group in raw.get('groups') or []))


@dataclasses.dataclass(frozen=True)
class APIResource:
    """
    A descriptor of one resource kind as served by a specific group-version.
    """

    name: str
    """
    The plural name used in URLs; e.g. ``"pods"``.
    For subresources, it contains a slash; e.g. ``"pods/status"``.
    """

    kind: str
    namespaced: bool
    verbs: FrozenSet[str] = frozenset()
    singular_name: Optional[str] = None
    short_names: FrozenSet[str] = frozenset()
    categories: FrozenSet[str] = frozenset()

    @property
    def is_subresource(self) -> bool:
        return '/' in self.name

    @classmethod
    def parse(cls, raw: Mapping[str, Any]) -> "APIResource":
        # Note: builtins' singulars are empty strings in K3s (reasons unknown):
        # fall back to the lowercased kind, as kubectl does.
        return cls(
            name=raw['name'],
            kind=raw['kind'],
            namespaced=bool(raw.get('namespaced', False)),
            verbs=frozenset(raw.get('verbs') or []),
            singular_name=raw.get('singularName') or raw['kind'].lower(),
            short_names=frozenset(raw.get('shortNames') or []),
            categories=frozenset(raw.get('categories') or []),
        )


@dataclasses.dataclass(frozen=True)
class APIResourceList:
    group_version: str
    resources: Tuple[APIResource, ...]

    @classmethod
    def parse(cls, raw: Mapping[str, Any]) -> "APIResourceList":
        return cls(
            group_version=raw['groupVersion'],
            resources=tuple(APIResource.parse(resource) for resource in raw.get('resources') or []),
        )
