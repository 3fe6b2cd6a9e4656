from __future__ import annotations

from typing import Any, Iterable, Sequence, TYPE_CHECKING

from relalg.errors import KeyConflict, TypeMismatch


if TYPE_CHECKING:
    from relalg.table import Table


class TableBuilder:
    '''
    Bulk loader on top of `Table.insert_or_raise`.

    - extend() drops only the offending rows (type mismatch or duplicate key)
      and keeps the good ones, rejected rows are kept with their error for
      inspection.

    '''

    def __init__(self, table: Table):
        self._table = table
        self.rejected: list[tuple[Sequence[Any], TypeMismatch | KeyConflict]] = []
        self._count = 0

    def append(self, row: Sequence[Any]) -> bool:
        try:
            self._table.insert_or_raise(row)

        except (TypeMismatch, KeyConflict) as e:
            self.rejected.append((row, e))
            return False

        self._count += 1
        return True

    def extend(self, rows: Iterable[Sequence[Any]]) -> int:
        '''Insert every row, return how many were accepted.'''
        before = self._count
        for row in rows:
            self.append(row)

        return self._count - before

    def rows(self) -> int:
        return self._count
