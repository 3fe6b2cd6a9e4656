from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Iterator, Sequence

import polars as pl

from relalg import algebra
from relalg._ctx import Session
from relalg.algebra import AttributeList, Predicate
from relalg.dtypes import Domain
from relalg.errors import KeyConflict, TypeMismatch
from relalg.index import KeyType, PrimaryIndex
from relalg.schema import Schema, SchemaLike
from relalg.storage import TableMeta
from relalg.table.builder import TableBuilder


log = logging.getLogger(__name__)


class Table:
    '''
    A named relation: schema, tuples in insertion order and a primary key
    index kept in lock step with `insert`.

    Tables produced by the algebra operators share the session of their left
    operand and start with an empty index, so `select` by key only finds
    tuples inserted into that table directly.

    '''
    def __init__(
        self,
        name: str,
        schema: SchemaLike,
        *,
        ctx: Session | None = None,
    ) -> None:
        self.name = name
        self.schema = Schema.from_like(schema)
        self.ctx = ctx if ctx else Session()

        self._rows: list[tuple] = []
        self.index = PrimaryIndex(name)

    @staticmethod
    def from_strings(
        name: str,
        attributes: str,
        domains: str,
        key: str,
        *,
        ctx: Session | None = None,
    ) -> Table:
        table = Table(name, Schema.from_strings(attributes, domains, key), ctx=ctx)
        log.debug(f'DDL> create table {name} ({attributes})')
        return table

    @staticmethod
    def from_meta(meta: TableMeta, *, ctx: Session | None = None) -> Table:
        '''
        Rebuild a table from its snapshot, re-populating the index. Snapshots
        of derived tables may repeat a key value, only its first tuple gets
        indexed.

        '''
        table = Table(meta.name, meta.schema, ctx=ctx)
        schema = table.schema
        for row in meta.rows:
            tup = schema.validate(row)
            key = schema.key_of(tup)
            if key not in table.index:
                table.index.insert(key, tup)

            table._rows.append(tup)

        return table

    @staticmethod
    def from_frame(
        name: str,
        frame: pl.DataFrame,
        domains: str | Sequence[Domain],
        key: str | Iterable[str],
        *,
        ctx: Session | None = None,
    ) -> Table:
        if isinstance(domains, str):
            domains = [Domain.parse(d) for d in domains.split()]

        schema = Schema(zip(frame.columns, domains, strict=True), key)
        table = Table(name, schema, ctx=ctx)

        builder = TableBuilder(table)
        builder.extend(frame.iter_rows())
        if builder.rejected:
            log.warning(
                f'{len(builder.rejected):,} row(s) rejected while loading {name}'
            )

        return table

    @staticmethod
    def load(name: str, *, ctx: Session | None = None) -> Table:
        return (ctx or Session()).load(name)

    def derive(
        self,
        name: str,
        schema: Schema,
        rows: list[tuple],
        *,
        ctx: Session,
    ) -> Table:
        '''
        Build a result table around already validated `rows`, the index is
        left empty.

        '''
        table = Table(name, schema, ctx=ctx)
        table._rows = rows
        return table

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[tuple]:
        return iter(self._rows)

    def __repr__(self) -> str:
        return f'Table({self.name!r}, {self.schema!r}, rows={len(self._rows)})'

    @property
    def rows(self) -> tuple[tuple, ...]:
        return tuple(self._rows)

    @property
    def attributes(self) -> tuple[str, ...]:
        return self.schema.attributes

    @property
    def domains(self) -> tuple[Domain, ...]:
        return self.schema.domains

    @property
    def key(self) -> tuple[str, ...]:
        return self.schema.key

    def col(self, attribute: str) -> int | None:
        return self.schema.resolve_column(attribute)

    # data manipulation

    def insert_or_raise(self, row: Sequence[Any]) -> tuple:
        '''
        Type check `row` and append it, raising `TypeMismatch` or
        `KeyConflict` without touching tuples or index on failure.

        '''
        log.debug(f'DML> insert into {self.name} values ({row})')

        tup = self.schema.validate(row)
        self.index.insert(self.schema.key_of(tup), tup)
        self._rows.append(tup)
        return tup

    def insert(self, row: Sequence[Any]) -> bool:
        try:
            self.insert_or_raise(row)
            return True

        except (TypeMismatch, KeyConflict) as e:
            log.warning(f'insert into {self.name} rejected: {e}')
            return False

    # relational algebra

    def project(self, attributes: AttributeList) -> Table:
        return algebra.project(self, attributes)

    def select(self, condition: str | Predicate | KeyType | Any) -> Table:
        '''
        Dispatch on the condition type:

            - str with whitespace: "<attribute> <op> <integer>" condition
            - callable: predicate over the tuple
            - anything else, including a single token str: primary key
              value, see `algebra.coerce_key`

        '''
        match condition:
            case str() if len(condition.split()) > 1:
                return algebra.select_condition(self, condition)

            case KeyType():
                return algebra.select_key(self, condition)

            case _ if callable(condition):
                return algebra.select_where(self, condition)

        return algebra.select_key(self, condition)

    def select_key(self, key: Any) -> Table:
        return algebra.select_key(self, key)

    def union(self, other: Table) -> Table:
        return algebra.union(self, other)

    def minus(self, other: Table) -> Table:
        return algebra.minus(self, other)

    def equi_join(
        self,
        attributes1: AttributeList,
        attributes2: AttributeList,
        other: Table,
    ) -> Table:
        return algebra.equi_join(self, attributes1, attributes2, other)

    def theta_join(self, condition: str, other: Table) -> Table:
        return algebra.theta_join(self, condition, other)

    def natural_join(self, other: Table, *, project_right: bool = False) -> Table:
        return algebra.natural_join(self, other, project_right=project_right)

    def join(self, *args: Any, **kwargs: Any) -> Table:
        '''
        Overloaded join:

            - join(other): natural join
            - join(condition, other): theta join
            - join(attributes1, attributes2, other): equi join

        '''
        match args:
            case (Table() as other,):
                return self.natural_join(other, **kwargs)

            case _ if kwargs:
                raise TypeError(
                    f'Only the natural join accepts keyword arguments, got {sorted(kwargs)}'
                )

            case (str() as condition, Table() as other):
                return self.theta_join(condition, other)

            case (attrs1, attrs2, Table() as other):
                return self.equi_join(attrs1, attrs2, other)

        raise TypeError(f'No join variant accepts {args!r}')

    def i_join(
        self,
        attributes1: AttributeList,
        attributes2: AttributeList,
        other: Table,
    ) -> Table:
        return algebra.i_join(self, attributes1, attributes2, other)

    def h_join(
        self,
        attributes1: AttributeList,
        attributes2: AttributeList,
        other: Table,
    ) -> Table:
        return algebra.h_join(self, attributes1, attributes2, other)

    # display

    def pretty_str(self, width: int = 15) -> str:
        '''Return the tuples as a fixed width grid.'''
        rule = '|-' + '-' * (width * len(self.schema)) + '-|'
        header = '| ' + ''.join(f'{a:>{width}}' for a in self.attributes) + ' |'
        lines = [f' Table {self.name}', rule, header, rule]
        for row in self._rows:
            lines.append('| ' + ''.join(f'{str(v):>{width}}' for v in row) + ' |')
        lines.append(rule)
        return '\n'.join(lines)

    def index_pretty_str(self) -> str:
        lines = [f' Index for {self.name}', '-' * 19]
        for key, row in self.index.items():
            lines.append(f'{key} -> {list(row)}')
        lines.append('-' * 19)
        return '\n'.join(lines)

    def to_frame(self) -> pl.DataFrame:
        return pl.DataFrame(
            self._rows, schema=self.schema.as_polars(), orient='row'
        )

    # persistence

    def encode(self) -> TableMeta:
        return TableMeta(
            name=self.name,
            schema=self.schema.encode(),
            rows=list(self._rows),
        )

    def save(self) -> Path:
        return self.ctx.save(self)
