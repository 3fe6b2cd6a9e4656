from __future__ import annotations

from typing import Any, Iterable


class RelAlgError(Exception): ...


class SchemaDefinitionError(RelAlgError): ...


class SchemaMismatch(RelAlgError):
    '''
    Union/minus over schemas that disagree on arity (`position` is None) or on
    the domain at `position`.

    '''
    def __init__(self, message: str, *, position: int | None = None) -> None:
        super().__init__(message)
        self.position = position


class UnresolvedAttribute(RelAlgError):
    def __init__(self, names: Iterable[str], available: Iterable[str]) -> None:
        self.names = tuple(names)
        self.available = tuple(available)
        super().__init__(
            f'Unresolved attribute(s) {", ".join(self.names)}, '
            f'available: {", ".join(self.available)}'
        )


class MalformedCondition(RelAlgError):
    def __init__(self, condition: str, reason: str) -> None:
        self.condition = condition
        self.reason = reason
        super().__init__(f'Malformed condition "{condition}": {reason}')


class TypeMismatch(RelAlgError):
    def __init__(self, message: str, *, position: int | None = None) -> None:
        super().__init__(message)
        self.position = position


class KeyConflict(RelAlgError):
    def __init__(self, table: str, key: Any) -> None:
        self.table = table
        self.key = key
        super().__init__(f'Duplicate key {key} in table {table}')


class UnsupportedOperation(RelAlgError):
    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f'{operation} is not available')


class PersistenceError(RelAlgError): ...
