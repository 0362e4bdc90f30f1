"""
Capabilities of the resources, each as an independent mixin.

The kinds compose only those capabilities that their documents have:
e.g. a ``ConfigMap`` has labels and annotations, but neither spec nor status.
All the mixins work on the resource's attributes (see `base.Resource`).
"""
from typing import Any, Dict, Mapping, Optional, TypeVar

from kubewire.structs import dicts

_S = TypeVar('_S', bound="_Attributed")


class _Attributed:
    _attributes: Dict[str, Any]

    def get_attribute(self, field: dicts.FieldSpec, default: Any = None) -> Any:
        raise NotImplementedError

    def set_attribute(self: _S, field: dicts.FieldSpec, value: Any) -> _S:
        raise NotImplementedError


class HasLabels(_Attributed):

    def get_labels(self) -> Dict[str, str]:
        return dict(self.get_attribute('metadata.labels') or {})

    def get_label(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.get_labels().get(name, default)

    def set_labels(self: _S, labels: Mapping[str, str]) -> _S:
        return self.set_attribute('metadata.labels', dict(labels))

    def set_label(self: _S, name: str, value: str) -> _S:
        return self.set_attribute(('metadata', 'labels', name), value)


class HasAnnotations(_Attributed):

    def get_annotations(self) -> Dict[str, str]:
        return dict(self.get_attribute('metadata.annotations') or {})

    def get_annotation(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.get_annotations().get(name, default)

    def set_annotations(self: _S, annotations: Mapping[str, str]) -> _S:
        return self.set_attribute('metadata.annotations', dict(annotations))

    def set_annotation(self: _S, name: str, value: str) -> _S:
        # Annotation names contain dots, so they cannot be a part of a dotted path.
        return self.set_attribute(('metadata', 'annotations', name), value)


class HasSpec(_Attributed):

    def get_spec(self, field: dicts.FieldSpec = None, default: Any = None) -> Any:
        return self.get_attribute(('spec',) + dicts.parse_field(field), default)

    def set_spec(self: _S, field: dicts.FieldSpec, value: Any) -> _S:
        return self.set_attribute(('spec',) + dicts.parse_field(field), value)


class HasStatus(_Attributed):
    """ The status is set by the server only, so it is read-only here. """

    def get_status(self, field: dicts.FieldSpec = None, default: Any = None) -> Any:
        return self.get_attribute(('status',) + dicts.parse_field(field), default)
