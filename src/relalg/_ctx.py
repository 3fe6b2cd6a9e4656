from __future__ import annotations

import logging
from itertools import count
from logging import Logger
from pathlib import Path
from typing import TYPE_CHECKING, Sequence

from relalg import storage
from relalg._utils import get_root_datadir
from relalg.errors import PersistenceError, SchemaDefinitionError, TypeMismatch

if TYPE_CHECKING:
    from relalg.table import Table


log = logging.getLogger(__name__)


class Session:
    '''
    Evaluation context shared by a family of tables: owns the counter used
    to name derived tables, a registry of named base tables and the snapshot
    directory.

    '''
    def __init__(
        self,
        tables: Sequence[Table] = (),
        *,
        datadir: str | Path | None = None,
        log: Logger = log
    ) -> None:
        self.datadir: Path = Path(datadir) if datadir else get_root_datadir()
        self._counter = count()
        self._table_map: dict[str, Table] = {}
        self._log = log

        for table in tables:
            self.register(table)

    def __getattr__(self, name: str) -> Table:
        '''
        If a normal attribute wasn't found, try resolving it as a table.

        '''
        try:
            return self.__dict__['_table_map'][name]

        except KeyError:
            raise AttributeError(
                f"{type(self).__name__!s} has no attribute {name!r} "
                f"(and no table with that name)"
            ) from None

    def __getitem__(self, name: str) -> Table:
        return self._table_map[name]

    def __contains__(self, name: str) -> bool:
        return name in self._table_map

    def __dir__(self) -> list[str]:
        base = super().__dir__()
        return sorted(set(base) | set(self._table_map))

    @property
    def tables(self) -> tuple[Table, ...]:
        return tuple(self._table_map.values())

    def next_name(self, base: str) -> str:
        return f'{base}{next(self._counter)}'

    def register(self, table: Table) -> Table:
        if table.ctx is not self:
            raise ValueError(
                f'Table {table.name} belongs to a different session'
            )

        self._table_map[table.name] = table
        self._log.debug(f'registered table {table.name}')
        return table

    def create_table(
        self,
        name: str,
        attributes: str,
        domains: str,
        key: str,
    ) -> Table:
        from relalg.table import Table

        return self.register(
            Table.from_strings(name, attributes, domains, key, ctx=self)
        )

    def save(self, table: str | Table) -> Path:
        if isinstance(table, str):
            if table not in self._table_map:
                raise PersistenceError(
                    f'No table named {table} registered in this session'
                )

            table = self._table_map[table]

        return storage.save_table(table, self.datadir)

    def load(self, name: str) -> Table:
        '''
        Load the snapshot for `name` into this session, replacing any
        registered table with that name.

        '''
        from relalg.table import Table

        meta = storage.load_snapshot(name, self.datadir)
        try:
            table = Table.from_meta(meta, ctx=self)

        except (TypeMismatch, SchemaDefinitionError) as e:
            raise PersistenceError(f'Invalid snapshot for {name}: {e}') from e

        return self.register(table)
