'''
Glossary:
    - Domain: The scalar kind of an attribute, one of eight (Integer64 ...
      String).
    - Schema: Ordered attribute name / domain pairs plus the key attributes.
    - Table: A named schema, its tuples in insertion order and a primary key
      index.
    - Derived Table: The result of a relational algebra operator, owns its
      tuples but starts with an empty index.
    - Session: The evaluation context a table belongs to, names derived
      tables and holds the snapshot directory.

'''

from .dtypes import Domain as Domain

from .schema import Column as Column, Schema as Schema

from .index import KeyType as KeyType

from ._ctx import Session as Session

from .table import Table as Table

from ._log import setup_logging as setup_logging

from .errors import (
    RelAlgError as RelAlgError,
    SchemaDefinitionError as SchemaDefinitionError,
    SchemaMismatch as SchemaMismatch,
    UnresolvedAttribute as UnresolvedAttribute,
    MalformedCondition as MalformedCondition,
    TypeMismatch as TypeMismatch,
    KeyConflict as KeyConflict,
    UnsupportedOperation as UnsupportedOperation,
    PersistenceError as PersistenceError,
)
