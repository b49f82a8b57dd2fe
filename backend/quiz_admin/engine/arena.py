import itertools
from typing import Dict, Generic, Iterator, List, TypeVar

from quiz_admin.errors import IndexOutOfRange

T = TypeVar("T")


class Arena(Generic[T]):
    """
    Ordered storage that hands out a stable slot key per item.

    Items are addressed by their current position from the outside, but
    the position is resolved to a slot key at call time, so removing or
    moving one item never changes which object another key points at.
    Keys are never reused within one arena.
    """

    def __init__(self, label: str = "item"):
        self._label = label
        self._items: Dict[int, T] = {}
        self._order: List[int] = []
        self._keys = itertools.count()

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[T]:
        for key in self._order:
            yield self._items[key]

    def append(self, item: T) -> int:
        key = next(self._keys)
        self._items[key] = item
        self._order.append(key)
        return key

    def key_at(self, index: int) -> int:
        # Negative indices are rejected rather than counted from the end.
        if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index < len(self._order):
            raise IndexOutOfRange(f"{self._label} index {index!r} out of range (0..{len(self._order) - 1})")
        return self._order[index]

    def at(self, index: int) -> T:
        return self._items[self.key_at(index)]

    def pop(self, index: int) -> T:
        key = self.key_at(index)
        self._order.remove(key)
        return self._items.pop(key)

    def move(self, from_index: int, to_index: int) -> None:
        key = self.key_at(from_index)
        self.key_at(to_index)
        self._order.remove(key)
        self._order.insert(to_index, key)

    def clear(self) -> None:
        self._items.clear()
        self._order.clear()
