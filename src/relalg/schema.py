from __future__ import annotations

import logging
from functools import cached_property
from typing import Any, Iterable, Sequence

import polars as pl

from relalg.dtypes import Domain
from relalg.errors import (
    SchemaDefinitionError,
    SchemaMismatch,
    TypeMismatch,
    UnresolvedAttribute,
)
from relalg.index import KeyType
from relalg.structs import FrozenStruct


log = logging.getLogger(__name__)


class Column(FrozenStruct, frozen=True):
    name: str
    domain: Domain

    @staticmethod
    def from_like(c: ColumnLike) -> Column:
        match c:
            case Column():
                return c

            case (str() as name, Domain() as domain):
                return Column(name, domain)

            case (str() as name, str() as domain):
                return Column(name, Domain.parse(domain))

            case dict():
                return Column.convert(c)

        raise SchemaDefinitionError(f'Can not build a column out of {c!r}')

    def renamed(self, name: str) -> Column:
        return Column(name, self.domain)


ColumnLike = (
    tuple[str, Domain]
    | tuple[str, str]
    | dict
    | Column
)


class SchemaMeta(FrozenStruct, frozen=True):
    columns: list[Column]
    key: list[str]


class Schema:
    '''
    Ordered (attribute, domain) pairs plus the key attribute names. Key order
    is the order in which key values are built, see `key_of`.

    '''

    def __init__(
        self,
        columns: Iterable[ColumnLike],
        key: str | Iterable[str],
    ) -> None:
        self._columns: tuple[Column, ...] = tuple(
            Column.from_like(c) for c in columns
        )
        self._key: tuple[str, ...] = tuple(
            key.split() if isinstance(key, str) else key
        )

        self._positions: dict[str, int] = {}
        for i, col in enumerate(self._columns):
            if col.name in self._positions:
                raise SchemaDefinitionError(
                    f'Duplicate attribute name {col.name}'
                )
            self._positions[col.name] = i

        if not self._key:
            raise SchemaDefinitionError('Schema key can not be empty')

        missing = [k for k in self._key if k not in self._positions]
        if missing:
            raise SchemaDefinitionError(
                f'Key attribute(s) {", ".join(missing)} not in schema'
            )

    @staticmethod
    def from_like(s: SchemaLike) -> Schema:
        match s:
            case Schema():
                return s

            case dict() | SchemaMeta():
                if isinstance(s, dict):
                    s = SchemaMeta.convert(s)

                return Schema(s.columns, s.key)

        raise SchemaDefinitionError(f'Can not build a schema out of {s!r}')

    @staticmethod
    def from_strings(attributes: str, domains: str, key: str) -> Schema:
        '''
        Build a schema from the space separated textual form:

            Schema.from_strings(
                'title year length genre studioName producerNo',
                'String Integer Integer String String Integer',
                'title year'
            )

        '''
        names = attributes.split()
        kinds = domains.split()
        if len(names) != len(kinds):
            raise SchemaDefinitionError(
                f'Got {len(names)} attributes but {len(kinds)} domains'
            )

        return Schema(
            (Column(name, Domain.parse(kind)) for name, kind in zip(names, kinds)),
            key,
        )

    def __len__(self) -> int:
        return len(self._columns)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Schema):
            return NotImplemented

        return self._columns == other._columns and self._key == other._key

    def __hash__(self) -> int:
        return hash((self._columns, self._key))

    def __repr__(self) -> str:
        cols = ', '.join(f'{c.name}:{c.domain.label}' for c in self._columns)
        return f'Schema({cols}; key={" ".join(self._key)})'

    @property
    def columns(self) -> tuple[Column, ...]:
        return self._columns

    @property
    def key(self) -> tuple[str, ...]:
        return self._key

    @cached_property
    def attributes(self) -> tuple[str, ...]:
        return tuple(c.name for c in self._columns)

    @cached_property
    def domains(self) -> tuple[Domain, ...]:
        return tuple(c.domain for c in self._columns)

    @cached_property
    def key_positions(self) -> tuple[int, ...]:
        return tuple(self._positions[k] for k in self._key)

    # column resolution

    def resolve_column(self, name: str) -> int | None:
        return self._positions.get(name)

    def resolve_columns(self, names: Sequence[str]) -> tuple[int, ...]:
        '''
        Resolve every name to its position, raising `UnresolvedAttribute` with
        all the missing names if any of them is not in the schema.

        '''
        missing = [n for n in names if n not in self._positions]
        if missing:
            raise UnresolvedAttribute(missing, self.attributes)

        return tuple(self._positions[n] for n in names)

    # compatibility & type checks

    def _mismatch(self, other: Schema) -> SchemaMismatch | None:
        if len(self) != len(other):
            return SchemaMismatch(
                f'Schemas have different arity: {len(self)} != {len(other)}'
            )

        for i, (a, b) in enumerate(zip(self.domains, other.domains)):
            if a != b:
                return SchemaMismatch(
                    f'Schemas disagree on domain {i}: {a.label} != {b.label}',
                    position=i,
                )

        return None

    def compatible(self, other: Schema) -> bool:
        err = self._mismatch(other)
        if err:
            log.debug(f'compatible: {err}')
            return False

        return True

    def check_compatible(self, other: Schema) -> None:
        err = self._mismatch(other)
        if err:
            raise err

    def validate(self, row: Sequence[Any]) -> tuple[Any, ...]:
        '''
        Return `row` as a tuple if every value matches the domain at its
        position, raise `TypeMismatch` otherwise.

        '''
        if len(row) != len(self._columns):
            raise TypeMismatch(
                f'Expected {len(self._columns)} values, got {len(row)}'
            )

        for i, (col, value) in enumerate(zip(self._columns, row)):
            if not col.domain.accepts(value):
                raise TypeMismatch(
                    f'Value {value!r} for {col.name} is not a {col.domain.label}',
                    position=i,
                )

        return tuple(row)

    def type_check(self, row: Sequence[Any]) -> bool:
        try:
            self.validate(row)
            return True

        except TypeMismatch:
            return False

    def key_of(self, row: Sequence[Any]) -> KeyType:
        return KeyType(tuple(row[i] for i in self.key_positions))

    # derived schemas

    def project(self, names: Sequence[str]) -> Schema:
        '''
        Schema with exactly `names` as columns; key is kept if all of its
        attributes survive, otherwise `names` itself becomes the key.

        '''
        positions = self.resolve_columns(names)
        key = self._key if set(self._key) <= set(names) else names
        return Schema((self._columns[i] for i in positions), key)

    def disambiguate(self, taken: Iterable[str]) -> Schema:
        '''
        Copy of this schema where every attribute colliding with a name in
        `taken` gets the first free integer suffix starting at 2. Key names
        follow their columns.

        '''
        used = set(taken)
        renames: dict[str, str] = {}
        columns: list[Column] = []
        for col in self._columns:
            name = col.name
            if name in used:
                suffix = 2
                while f'{col.name}{suffix}' in used:
                    suffix += 1

                name = f'{col.name}{suffix}'

            used.add(name)
            renames[col.name] = name
            columns.append(col.renamed(name))

        return Schema(columns, (renames[k] for k in self._key))

    def concat(self, other: Schema) -> Schema:
        '''
        Columns of self followed by columns of other, key of self. Caller is
        responsible for disambiguating `other` first.

        '''
        return Schema((*self._columns, *other._columns), self._key)

    # display & serialization

    def as_polars(self) -> pl.Schema:
        return pl.Schema(
            (col.name, col.domain.as_polars()) for col in self._columns
        )

    def pretty_str(self) -> str:
        '''Return a human-readable representation of the schema.'''
        lines = ['Schema:']
        for col in self._columns:
            key_str = ' (key)' if col.name in self._key else ''
            lines.append(f'  - {col.name}: {col.domain.label}{key_str}')
        lines.append(f'Key: {" ".join(self._key)}')
        return '\n'.join(lines)

    def encode(self) -> SchemaMeta:
        return SchemaMeta(columns=list(self._columns), key=list(self._key))


SchemaLike = dict | SchemaMeta | Schema
