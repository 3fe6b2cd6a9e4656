'''
# Overview

Every attribute of a schema carries one `Domain`, a closed set of scalar
kinds known at schema definition time. Values themselves are plain python
scalars, the domain at each schema position is what tags them:

    - Integer64 / Integer32 / Integer16 / Integer8: `int` within the signed
      range of the width (`bool` is rejected even though it subclasses int)
    - Float64: `float`
    - Float32: `float` representable in single precision range
    - Character: a `str` of length 1
    - String: any `str`

Numeric kinds compare numerically, text kinds lexicographically, which is
exactly python's native ordering for these scalars.

# Textual names

Domains can be spelled three ways when building a schema from text:

    - kind names: `Integer64`, `Integer32`, ..., `Character`, `String`
    - legacy class names: `Long`, `Integer`, `Short`, `Byte`, `Double`,
      `Float`, `Character`, `String`
    - short tags: `i64`, `i32`, `i16`, `i8`, `f64`, `f32`, `char`, `string`

'''

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Literal

import polars as pl

from relalg.errors import SchemaDefinitionError


# simple type kind distinction, decides which values are comparable
TypeKind = Literal['numeric', 'text']


FLOAT32_MAX = 3.4028234663852886e38


class Domain(Enum):
    INTEGER64 = 'i64'
    INTEGER32 = 'i32'
    INTEGER16 = 'i16'
    INTEGER8 = 'i8'
    FLOAT64 = 'f64'
    FLOAT32 = 'f32'
    CHARACTER = 'char'
    STRING = 'string'

    @staticmethod
    def parse(name: str) -> Domain:
        try:
            return domain_names[name.lower()]

        except KeyError:
            raise SchemaDefinitionError(
                f'Unknown domain name: {name}'
            ) from None

    @property
    def label(self) -> str:
        return domain_labels[self]

    @property
    def kind(self) -> TypeKind:
        if self in (Domain.CHARACTER, Domain.STRING):
            return 'text'

        return 'numeric'

    def as_polars(self) -> type[pl.DataType]:
        return polars_types[self]

    def accepts(self, value: Any) -> bool:
        '''
        Runtime kind check of a single python value against this domain.

        '''
        match self:
            case Domain.STRING:
                return isinstance(value, str)

            case Domain.CHARACTER:
                return isinstance(value, str) and len(value) == 1

            case Domain.FLOAT64:
                return isinstance(value, float)

            case Domain.FLOAT32:
                return isinstance(value, float) and (
                    not math.isfinite(value) or abs(value) <= FLOAT32_MAX
                )

        if not isinstance(value, int) or isinstance(value, bool):
            return False

        bound = 1 << (integer_bits[self] - 1)
        return -bound <= value < bound

    def comparable_with(self, other: Domain) -> bool:
        return self.kind == other.kind


integer_bits: dict[Domain, int] = {
    Domain.INTEGER64: 64,
    Domain.INTEGER32: 32,
    Domain.INTEGER16: 16,
    Domain.INTEGER8: 8,
}


domain_labels: dict[Domain, str] = {
    Domain.INTEGER64: 'Integer64',
    Domain.INTEGER32: 'Integer32',
    Domain.INTEGER16: 'Integer16',
    Domain.INTEGER8: 'Integer8',
    Domain.FLOAT64: 'Float64',
    Domain.FLOAT32: 'Float32',
    Domain.CHARACTER: 'Character',
    Domain.STRING: 'String',
}


legacy_names: dict[str, Domain] = {
    'long': Domain.INTEGER64,
    'integer': Domain.INTEGER32,
    'short': Domain.INTEGER16,
    'byte': Domain.INTEGER8,
    'double': Domain.FLOAT64,
    'float': Domain.FLOAT32,
}


# every accepted spelling, lower cased
domain_names: dict[str, Domain] = {
    **{d.value: d for d in Domain},
    **{label.lower(): d for d, label in domain_labels.items()},
    **legacy_names,
}


polars_types: dict[Domain, type[pl.DataType]] = {
    Domain.INTEGER64: pl.Int64,
    Domain.INTEGER32: pl.Int32,
    Domain.INTEGER16: pl.Int16,
    Domain.INTEGER8: pl.Int8,
    Domain.FLOAT64: pl.Float64,
    Domain.FLOAT32: pl.Float32,
    Domain.CHARACTER: pl.String,
    Domain.STRING: pl.String,
}
