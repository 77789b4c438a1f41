"""
All the structures coming from/to the Kubernetes API as the resource bodies.

The resources are plain dicts or dict-like mappings, as JSON-decoded from
or JSON-encoded to the API. There are no wrapper classes for them:
only the type definitions for type-checking, and a few accessors.

For strict type-checking, they are detailed to the per-field level
(e.g. `TypedDict` instead of just ``Mapping[Any, Any]``). The callers can use
arbitrary fields at runtime, which are not declared in the type definitions.

The bodies given by the callers are never modified in place. When a body
needs some adjustments before sending, it is deep-copied first.
"""
from typing import Any, List, Mapping, Optional, cast

from typing_extensions import TypedDict

Labels = Mapping[str, str]
Annotations = Mapping[str, str]


class RawMeta(TypedDict, total=False):
    uid: str
    name: str
    namespace: str
    labels: Labels
    annotations: Annotations
    finalizers: List[str]
    resourceVersion: str
    deletionTimestamp: str
    creationTimestamp: str


class RawBody(TypedDict, total=False):
    apiVersion: str
    kind: str
    metadata: RawMeta
    spec: Mapping[str, Any]
    status: Mapping[str, Any]


class ObjectReference(TypedDict, total=False):
    apiVersion: str
    kind: str
    namespace: Optional[str]
    name: str
    uid: str


def get_api_version(body: Mapping[str, Any]) -> str:
    """
    Get the ``apiVersion`` of a body: either "group/version" or "version" (core).

    Some built-in kinds come without it in the listings; a missing value
    is a caller's error, since the API group cannot be guessed by kind.
    """
    try:
        return cast(str, body['apiVersion'])
    except KeyError:
        raise ValueError(f"The resource has no apiVersion: {body!r}") from None


def get_kind(body: Mapping[str, Any]) -> str:
    try:
        return cast(str, body['kind'])
    except KeyError:
        raise ValueError(f"The resource has no kind: {body!r}") from None


def get_name(body: Mapping[str, Any]) -> Optional[str]:
    return cast(Optional[str], body.get('metadata', {}).get('name'))


def get_namespace(body: Mapping[str, Any]) -> Optional[str]:
    return cast(Optional[str], body.get('metadata', {}).get('namespace'))


def build_object_reference(
        body: Mapping[str, Any],
) -> ObjectReference:
    """
    Construct an object reference for logging.

    Keep in mind that some fields can be absent: e.g. ``namespace``
    for cluster resources, or ``name`` for the objects not yet created.
    """
    ref = dict(
        apiVersion=body.get('apiVersion'),
        kind=body.get('kind'),
        name=body.get('metadata', {}).get('name'),
        uid=body.get('metadata', {}).get('uid'),
        namespace=body.get('metadata', {}).get('namespace'),
    )
    return cast(ObjectReference, {key: val for key, val in ref.items() if val})
