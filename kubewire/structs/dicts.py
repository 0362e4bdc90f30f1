"""
Access to the nested fields of the documents by dotted paths.

The resource kinds address the fields as ``spec.template.spec.containers``
or as tuples, when the keys contain dots themselves (e.g. annotation names).

The documents come from the servers as they are, so the access is lenient:
a non-mapping value on the way to a field (``null``, a string, a list)
is treated as an absent sub-document, never as an error.
"""
import collections.abc
from typing import Any, List, Mapping, MutableMapping, Optional, Tuple, Union

FieldPath = Tuple[str, ...]
FieldSpec = Union[None, str, FieldPath, List[str]]


def parse_field(
        field: FieldSpec,
) -> FieldPath:
    """
    Convert any field into a tuple of nested sub-fields.

    Supported notations:

    * ``None`` (for root of a dict).
    * ``"field.subfield"``
    * ``("field", "subfield")``
    * ``["field", "subfield"]``
    """
    if field is None:
        return tuple()
    elif isinstance(field, str):
        return tuple(field.split('.'))
    elif isinstance(field, (list, tuple)):
        return tuple(field)
    else:
        raise ValueError(f"Field must be either a str, or a list/tuple. Got {field!r}")


def resolve(
        d: Optional[Mapping[Any, Any]],
        field: FieldSpec,
        default: Any = None,
) -> Any:
    """ Retrieve a nested sub-field, or the default if it or any of its parents is absent. """
    result: Any = d
    for key in parse_field(field):
        if not isinstance(result, collections.abc.Mapping) or key not in result:
            return default
        result = result[key]
    return result


def ensure(
        d: MutableMapping[Any, Any],
        field: FieldSpec,
        value: Any,
) -> None:
    """
    Force-set a nested sub-field, creating the missing parents as empty dicts.

    The parents that are not dicts (e.g. ``"metadata": null``) are replaced too.
    """
    path = parse_field(field)
    if not path:
        raise ValueError("Setting a root of a dict is impossible. Provide the specific fields.")
    parent = d
    for key in path[:-1]:
        if not isinstance(parent.get(key), collections.abc.MutableMapping):
            parent[key] = {}
        parent = parent[key]
    parent[path[-1]] = value


def remove(
        d: MutableMapping[Any, Any],
        field: FieldSpec,
) -> None:
    """
    Remove a nested sub-field, and then all the parents left empty by that.

    An absent field is not an error: the goal of removal is achieved anyway.
    """
    path = parse_field(field)
    if not path:
        raise ValueError("Removing a root of a dict is impossible. Provide a specific field.")

    parents: List[MutableMapping[Any, Any]] = [d]
    for key in path[:-1]:
        child = parents[-1].get(key)
        if not isinstance(child, collections.abc.MutableMapping):
            return
        parents.append(child)

    parents[-1].pop(path[-1], None)
    for parent, key in reversed(list(zip(parents[:-1], path[:-1]))):
        if parent[key] == {}:  # but not None, and not False, etc.
            del parent[key]
        else:
            break
