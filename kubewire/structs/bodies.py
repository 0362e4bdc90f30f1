"""
All the structures coming from/to the Kubernetes API.

The usage of these types is spread over the codebase, so they are extracted
into a separate module of such type definitions.

Everything marked "raw" is a plain unwrapped unprocessed data as JSON-decoded
from the Kubernetes API. "Input" is a parsed line of the watch-stream as is,
before it is validated and turned into a typed event.
All non-used payload falls into `Any`, and is not type-checked.

The typed resources are built from the raw bodies by the resource kinds
(see `kubewire.kinds`); the raw bodies themselves never leave the clients.
"""
from typing import Any, Collection, List, Mapping

from typing_extensions import TypedDict

Labels = Mapping[str, str]
Annotations = Mapping[str, str]


class RawMeta(TypedDict, total=False):
    uid: str
    name: str
    namespace: str
    labels: Labels
    annotations: Annotations
    resourceVersion: str
    creationTimestamp: str
    deletionTimestamp: str
    selfLink: str


class RawBody(TypedDict, total=False):
    apiVersion: str
    kind: str
    metadata: RawMeta
    spec: Mapping[str, Any]
    status: Mapping[str, Any]


class RawListMeta(TypedDict, total=False):
    resourceVersion: str
    selfLink: str
    # NB: "continue" is a keyword, so it cannot be declared here; it is still accessible.


class RawList(TypedDict, total=False):
    apiVersion: str
    kind: str
    metadata: RawListMeta
    items: List[RawBody]


# As received from the stream before validation: one JSON object per line.
class RawInput(TypedDict, total=True):
    type: str
    object: RawBody


# https://kubernetes.io/docs/reference/generated/kubernetes-api/v1.19/#info-version
class RawVersionInfo(TypedDict, total=False):
    major: str
    minor: str
    gitVersion: str
    gitCommit: str
    gitTreeState: str
    buildDate: str
    goVersion: str
    compiler: str
    platform: str


def is_list(document: object) -> bool:
    """ Check if the decoded document is a list of resources rather than one resource. """
    return isinstance(document, Mapping) and 'items' in document


def items_of(document: RawList) -> Collection[RawBody]:
    """
    Extract the items of a list document with their kinds & API versions ensured.

    Kubernetes omits ``kind`` & ``apiVersion`` in the items of the lists,
    since they are the same for all items. Restore them from the list itself.
    """
    raw_items = document.get('items')
    items: List[RawBody] = []
    for item in raw_items if isinstance(raw_items, list) else []:  # null or garbage is no items
        if not isinstance(item, Mapping):
            items.append(item)
            continue
        item = dict(item)  # type: ignore
        kind = document.get('kind')
        if isinstance(kind, str):
            item.setdefault('kind', kind[:-4] if kind[-4:] == 'List' else kind)
        if 'apiVersion' in document:
            item.setdefault('apiVersion', document['apiVersion'])
        items.append(item)
    return items
