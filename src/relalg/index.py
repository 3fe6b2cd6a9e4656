'''
Primary key index.

An in-memory B-tree mapping `KeyType` -> stored tuple. Keys are unique, every
node except the root keeps between `order - 1` and `2 * order - 1` keys, and
all leafs sit at the same depth, so lookups and inserts are O(log n).

'''
from __future__ import annotations

from bisect import bisect_left, bisect_right
from typing import Any, Iterator

from relalg.errors import KeyConflict
from relalg.structs import FrozenStruct


class KeyType(FrozenStruct, frozen=True, order=True):
    '''
    Composite key value, the projection of a tuple onto the key attributes.
    Ordering is lexicographic over `values`.

    '''
    values: tuple[Any, ...]

    def __str__(self) -> str:
        return '{' + ', '.join(str(v) for v in self.values) + '}'


class _Node:
    __slots__ = ('keys', 'values', 'children')

    def __init__(
        self,
        keys: list[KeyType] | None = None,
        values: list[tuple] | None = None,
        children: list[_Node] | None = None,
    ) -> None:
        self.keys: list[KeyType] = keys or []
        self.values: list[tuple] = values or []
        self.children: list[_Node] = children or []

    @property
    def is_leaf(self) -> bool:
        return not self.children


class PrimaryIndex:
    def __init__(self, name: str, *, order: int = 32) -> None:
        if order < 2:
            raise ValueError(f'B-tree order must be >= 2, got {order}')

        self.name = name
        self.order = order
        self._root = _Node()
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def __contains__(self, key: KeyType) -> bool:
        return self.get(key) is not None

    def __iter__(self) -> Iterator[KeyType]:
        for key, _ in self.items():
            yield key

    def get(self, key: KeyType) -> tuple | None:
        node = self._root
        while True:
            i = bisect_left(node.keys, key)
            if i < len(node.keys) and node.keys[i] == key:
                return node.values[i]

            if node.is_leaf:
                return None

            node = node.children[i]

    def insert(self, key: KeyType, row: tuple) -> None:
        '''
        Map `key` to `row`, raise `KeyConflict` leaving the tree untouched if
        `key` is already present.

        '''
        if key in self:
            raise KeyConflict(self.name, key)

        root = self._root
        if len(root.keys) == 2 * self.order - 1:
            root = _Node(children=[root])
            self._split_child(root, 0)
            self._root = root

        self._insert_non_full(root, key, row)
        self._size += 1

    def _split_child(self, parent: _Node, i: int) -> None:
        t = self.order
        child = parent.children[i]

        right = _Node(
            keys=child.keys[t:],
            values=child.values[t:],
            children=child.children[t:],
        )

        # median moves up
        parent.keys.insert(i, child.keys[t - 1])
        parent.values.insert(i, child.values[t - 1])
        parent.children.insert(i + 1, right)

        child.keys = child.keys[:t - 1]
        child.values = child.values[:t - 1]
        child.children = child.children[:t]

    def _insert_non_full(self, node: _Node, key: KeyType, row: tuple) -> None:
        while True:
            i = bisect_right(node.keys, key)
            if node.is_leaf:
                node.keys.insert(i, key)
                node.values.insert(i, row)
                return

            if len(node.children[i].keys) == 2 * self.order - 1:
                self._split_child(node, i)
                if key > node.keys[i]:
                    i += 1

            node = node.children[i]

    def items(self) -> Iterator[tuple[KeyType, tuple]]:
        '''Iterate all (key, row) pairs in key order.'''
        return self.range()

    def range(
        self,
        lo: KeyType | None = None,
        hi: KeyType | None = None,
    ) -> Iterator[tuple[KeyType, tuple]]:
        '''
        Iterate (key, row) pairs with `lo <= key <= hi` in key order, a None
        bound is open.

        '''
        yield from self._range(self._root, lo, hi)

    def _range(
        self,
        node: _Node,
        lo: KeyType | None,
        hi: KeyType | None,
    ) -> Iterator[tuple[KeyType, tuple]]:
        start = 0 if lo is None else bisect_left(node.keys, lo)
        for i in range(start, len(node.keys)):
            if not node.is_leaf:
                yield from self._range(node.children[i], lo, hi)

            key = node.keys[i]
            if hi is not None and key > hi:
                return

            yield key, node.values[i]

        if not node.is_leaf:
            yield from self._range(node.children[len(node.keys)], lo, hi)

    def depth(self) -> int:
        node, d = self._root, 1
        while not node.is_leaf:
            node = node.children[0]
            d += 1

        return d
