'''
Relational algebra operators.

Every operator is a plain function reading one or two tables and returning a
new derived table, the operands are never modified. Derived tables are named
after their left (or only) operand plus the next value of the evaluation
context counter, and carry a schema and tuples but an empty primary key index.

All operators are nested loop scans except `select_key`, which is a single
index lookup.

'''
from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Any, Callable, Sequence

from relalg.conditions import parse_select, parse_theta
from relalg.errors import MalformedCondition, TypeMismatch, UnsupportedOperation
from relalg.index import KeyType
from relalg.schema import Schema

if TYPE_CHECKING:
    from relalg._ctx import Session
    from relalg.table import Table


log = logging.getLogger(__name__)


Predicate = Callable[[tuple], bool]

AttributeList = str | Sequence[str]


# stands in for every NaN so exact tuple equality treats NaN as equal to itself
_nan = object()


def exact_row(row: tuple) -> tuple:
    return tuple(
        _nan if isinstance(v, float) and math.isnan(v) else v for v in row
    )


def attribute_list(attrs: AttributeList) -> tuple[str, ...]:
    if isinstance(attrs, str):
        return tuple(attrs.split())

    return tuple(attrs)


def _derive(
    source: Table,
    schema: Schema,
    rows: list[tuple],
    ctx: Session | None,
) -> Table:
    ctx = ctx or source.ctx
    return source.derive(ctx.next_name(source.name), schema, rows, ctx=ctx)


# unary operators


def project(
    table: Table,
    attributes: AttributeList,
    *,
    ctx: Session | None = None,
) -> Table:
    '''
    Keep only `attributes` (in the given order) of every tuple, preserving
    row order and duplicates.

    '''
    attrs = attribute_list(attributes)
    log.debug(f'RA> {table.name}.project({" ".join(attrs)})')

    schema = table.schema.project(attrs)
    positions = table.schema.resolve_columns(attrs)

    rows = [tuple(row[i] for i in positions) for row in table]
    return _derive(table, schema, rows, ctx)


def select_where(
    table: Table,
    predicate: Predicate,
    *,
    ctx: Session | None = None,
) -> Table:
    log.debug(f'RA> {table.name}.select({predicate})')
    rows = [row for row in table if predicate(row)]
    return _derive(table, table.schema, rows, ctx)


def select_condition(
    table: Table,
    condition: str,
    *,
    ctx: Session | None = None,
) -> Table:
    '''
    Filter with a "<attribute> <op> <integer>" condition. The condition is
    fully validated before the scan starts.

    '''
    log.debug(f'RA> {table.name}.select({condition})')

    cmp = parse_select(condition)
    (pos,) = table.schema.resolve_columns((cmp.left,))

    domain = table.schema.domains[pos]
    if domain.kind != 'numeric':
        raise MalformedCondition(
            condition,
            f'integer literal compared against {domain.label} attribute {cmp.left}',
        )

    rows = [row for row in table if cmp.test(row[pos], cmp.right)]
    return _derive(table, table.schema, rows, ctx)


def coerce_key(schema: Schema, key: Any) -> KeyType:
    '''
    Accept a `KeyType`, a tuple/list of key values or a bare scalar for
    single attribute keys, and type check it against the key domains.

    '''
    match key:
        case KeyType():
            values = key.values

        case tuple() | list():
            values = tuple(key)

        case _:
            values = (key,)

    domains = [schema.domains[i] for i in schema.key_positions]
    if len(values) != len(domains):
        raise TypeMismatch(
            f'Key has {len(domains)} attribute(s), got {len(values)} value(s)'
        )

    for i, (domain, value) in enumerate(zip(domains, values)):
        if not domain.accepts(value):
            raise TypeMismatch(
                f'Key value {value!r} is not a {domain.label}', position=i
            )

    return KeyType(values)


def select_key(
    table: Table,
    key: Any,
    *,
    ctx: Session | None = None,
) -> Table:
    '''
    Point lookup through the primary key index, result has at most one
    tuple. Only meaningful on tables whose index was populated by inserts.

    '''
    key = coerce_key(table.schema, key)
    log.debug(f'RA> {table.name}.select({key})')

    row = table.index.get(key)
    rows = [row] if row is not None else []
    return _derive(table, table.schema, rows, ctx)


# set operators


def union(
    table: Table,
    other: Table,
    *,
    ctx: Session | None = None,
) -> Table:
    '''
    All tuples of `table` followed by the tuples of `other` not already
    present in the result. Raises `SchemaMismatch` on incompatible schemas.

    '''
    log.debug(f'RA> {table.name}.union({other.name})')
    table.schema.check_compatible(other.schema)

    rows = list(table)
    seen = {exact_row(row) for row in rows}
    for row in other:
        key = exact_row(row)
        if key not in seen:
            rows.append(row)
            seen.add(key)

    return _derive(table, table.schema, rows, ctx)


def minus(
    table: Table,
    other: Table,
    *,
    ctx: Session | None = None,
) -> Table:
    log.debug(f'RA> {table.name}.minus({other.name})')
    table.schema.check_compatible(other.schema)

    exclude = {exact_row(row) for row in other}
    rows = [row for row in table if exact_row(row) not in exclude]
    return _derive(table, table.schema, rows, ctx)


# joins


def equi_join(
    table: Table,
    attributes1: AttributeList,
    attributes2: AttributeList,
    other: Table,
    *,
    ctx: Session | None = None,
) -> Table:
    '''
    Join on pairwise equality of `attributes1` (from `table`) and
    `attributes2` (from `other`). Output tuples are the concatenation of both
    sides; right hand attribute names clashing with left ones get a numeric
    suffix in the result schema, `other` itself keeps its names.

    '''
    t_attrs = attribute_list(attributes1)
    u_attrs = attribute_list(attributes2)
    log.debug(
        f'RA> {table.name}.join({" ".join(t_attrs)}, {" ".join(u_attrs)}, '
        f'{other.name})'
    )

    if len(t_attrs) != len(u_attrs):
        raise MalformedCondition(
            f'{" ".join(t_attrs)} = {" ".join(u_attrs)}',
            'join attribute lists differ in length',
        )

    t_pos = table.schema.resolve_columns(t_attrs)
    u_pos = other.schema.resolve_columns(u_attrs)

    schema = table.schema.concat(other.schema.disambiguate(table.attributes))

    rows: list[tuple] = []
    for t_row in table:
        t_values = tuple(t_row[i] for i in t_pos)
        for u_row in other:
            if all(v == u_row[j] for v, j in zip(t_values, u_pos)):
                rows.append(t_row + u_row)

    return _derive(table, schema, rows, ctx)


def theta_join(
    table: Table,
    condition: str,
    other: Table,
    *,
    ctx: Session | None = None,
) -> Table:
    '''
    Join on a single "<attribute1> <op> <attribute2>" comparison, attribute1
    from `table`, attribute2 from `other`.

    '''
    log.debug(f'RA> {table.name}.join({condition}, {other.name})')

    cmp = parse_theta(condition)
    (t_pos,) = table.schema.resolve_columns((cmp.left,))
    (u_pos,) = other.schema.resolve_columns((cmp.right,))

    t_domain = table.schema.domains[t_pos]
    u_domain = other.schema.domains[u_pos]
    if not t_domain.comparable_with(u_domain):
        raise MalformedCondition(
            condition,
            f'can not compare {t_domain.label} with {u_domain.label}',
        )

    schema = table.schema.concat(other.schema.disambiguate(table.attributes))

    rows: list[tuple] = []
    for t_row in table:
        t_value = t_row[t_pos]
        for u_row in other:
            if cmp.test(t_value, u_row[u_pos]):
                rows.append(t_row + u_row)

    return _derive(table, schema, rows, ctx)


def natural_join(
    table: Table,
    other: Table,
    *,
    project_right: bool = False,
    ctx: Session | None = None,
) -> Table:
    '''
    Join on equality of every attribute name both schemas share.

    With shared attributes each qualifying pair emits the left tuple only.
    Note the result schema departs from the usual description of this
    operator, which appends the right hand names to the left schema: here it
    is the left schema unchanged, because appended names would have no
    values in the tuples and every row would break the schema arity.
    `project_right=True` gives the textbook result instead, appending the
    right hand non shared columns to both schema and tuples. Without shared
    attributes this is the cartesian product.

    '''
    log.debug(f'RA> {table.name}.join({other.name})')

    common = [a for a in table.attributes if other.schema.resolve_column(a) is not None]
    if not common:
        schema = table.schema.concat(other.schema)
        rows = [t_row + u_row for t_row in table for u_row in other]
        return _derive(table, schema, rows, ctx)

    t_pos = table.schema.resolve_columns(common)
    u_pos = other.schema.resolve_columns(common)

    rest = [
        i for i, a in enumerate(other.attributes)
        if table.schema.resolve_column(a) is None
    ]

    if project_right:
        schema = Schema(
            (*table.schema.columns, *(other.schema.columns[i] for i in rest)),
            table.key,
        )

    else:
        schema = table.schema

    rows: list[tuple] = []
    for t_row in table:
        t_values = tuple(t_row[i] for i in t_pos)
        for u_row in other:
            if all(v == u_row[j] for v, j in zip(t_values, u_pos)):
                if project_right:
                    rows.append(t_row + tuple(u_row[i] for i in rest))

                else:
                    rows.append(t_row)

    return _derive(table, schema, rows, ctx)


def i_join(
    table: Table,
    attributes1: AttributeList,
    attributes2: AttributeList,
    other: Table,
    *,
    ctx: Session | None = None,
) -> Table:
    raise UnsupportedOperation('index join')


def h_join(
    table: Table,
    attributes1: AttributeList,
    attributes2: AttributeList,
    other: Table,
    *,
    ctx: Session | None = None,
) -> Table:
    raise UnsupportedOperation('hash join')
