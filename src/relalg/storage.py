'''
Whole table snapshots.

A table is persisted as one msgpack encoded `TableMeta` at
`<datadir>/<name>.dbf`. Writes go to a temporary sibling file first and are
moved into place with `os.replace`, so a snapshot is either the old or the
new version, never a partial one.

'''
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, TYPE_CHECKING

import msgspec

from relalg.errors import PersistenceError
from relalg.schema import SchemaMeta
from relalg.structs import FrozenStruct

if TYPE_CHECKING:
    from relalg.table import Table


log = logging.getLogger(__name__)


EXT = 'dbf'


class TableMeta(FrozenStruct, frozen=True):
    name: str
    schema: SchemaMeta
    rows: list[tuple[Any, ...]]


def snapshot_path(name: str, datadir: str | Path) -> Path:
    return Path(datadir) / f'{name}.{EXT}'


def save_table(table: Table, datadir: str | Path) -> Path:
    path = snapshot_path(table.name, datadir)
    tmp = path.with_name(path.name + '.tmp')

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_bytes(table.encode().encode())
        os.replace(tmp, path)

    except OSError as e:
        tmp.unlink(missing_ok=True)
        raise PersistenceError(f'Could not save {table.name} to {path}: {e}') from e

    log.info(f'saved {table.name} ({len(table):,} rows) to {path}')
    return path


def load_snapshot(name: str, datadir: str | Path) -> TableMeta:
    path = snapshot_path(name, datadir)

    try:
        raw = path.read_bytes()

    except OSError as e:
        raise PersistenceError(f'Could not read snapshot {path}: {e}') from e

    try:
        meta = TableMeta.from_bytes(raw)

    except msgspec.DecodeError as e:
        raise PersistenceError(f'Corrupt snapshot {path}: {e}') from e

    log.info(f'loaded {meta.name} ({len(meta.rows):,} rows) from {path}')
    return meta
