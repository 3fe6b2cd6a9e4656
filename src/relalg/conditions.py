'''
Condition mini languages, both three tokens separated by whitespace:

    - select:     "<attribute> <op> <integer literal>"   eg: "year == 1977"
    - theta join: "<attribute1> <op> <attribute2>"       eg: "year < birth"

with op one of ==, !=, <, <=, >, >=.

Parsing happens before any tuple is scanned so a bad condition never yields a
partial result.

'''
from __future__ import annotations

import operator
import re
from typing import Any, Callable, Literal

from relalg.errors import MalformedCondition
from relalg.structs import FrozenStruct


Operator = Literal['==', '!=', '<', '<=', '>', '>=']


operators: dict[str, Callable[[Any, Any], bool]] = {
    '==': operator.eq,
    '!=': operator.ne,
    '<': operator.lt,
    '<=': operator.le,
    '>': operator.gt,
    '>=': operator.ge,
}


int_literal = re.compile(r'[+-]?\d+')


class Comparison(FrozenStruct, frozen=True):
    left: str
    op: Operator
    right: str | int

    def test(self, a: Any, b: Any) -> bool:
        return operators[self.op](a, b)

    def __str__(self) -> str:
        return f'{self.left} {self.op} {self.right}'


def _tokenize(condition: str) -> tuple[str, str, str]:
    tokens = condition.split()
    if len(tokens) != 3:
        raise MalformedCondition(
            condition, f'expected 3 tokens, got {len(tokens)}'
        )

    left, op, right = tokens
    if op not in operators:
        raise MalformedCondition(condition, f'unsupported operator {op}')

    return left, op, right


def parse_select(condition: str) -> Comparison:
    left, op, right = _tokenize(condition)
    if not int_literal.fullmatch(right):
        raise MalformedCondition(
            condition, f'literal {right} is not a decimal integer'
        )

    return Comparison(left, op, int(right))


def parse_theta(condition: str) -> Comparison:
    left, op, right = _tokenize(condition)
    return Comparison(left, op, right)
