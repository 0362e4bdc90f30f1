"""
Collections of typed resources, as returned by the list-operations.
"""
from typing import Any, Generic, Iterable, Iterator, Mapping, Optional, Sequence, TypeVar, \
                   Union, overload

_R = TypeVar('_R')


class ResourceList(Sequence[_R], Generic[_R]):
    """
    An immutable ordered sequence of resources, in the order of the server's list.

    Besides the resources, it keeps the list's own metadata (e.g. ``resourceVersion``),
    which is not a part of any individual resource.
    """

    def __init__(
            self,
            items: Iterable[_R] = (),
            *,
            metadata: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__()
        self._items = tuple(items)
        self._metadata = dict(metadata or {})

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({list(self._items)!r})'

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[_R]:
        return iter(self._items)

    @overload
    def __getitem__(self, index: int) -> _R: ...

    @overload
    def __getitem__(self, index: slice) -> "ResourceList[_R]": ...

    def __getitem__(self, index: Union[int, slice]) -> Union[_R, "ResourceList[_R]"]:
        if isinstance(index, slice):
            return ResourceList(self._items[index], metadata=self._metadata)
        return self._items[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ResourceList):
            return self._items == other._items
        return NotImplemented

    @property
    def metadata(self) -> Mapping[str, Any]:
        return self._metadata

    @property
    def resource_version(self) -> Optional[str]:
        return self._metadata.get('resourceVersion')
