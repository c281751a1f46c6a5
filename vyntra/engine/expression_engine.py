"""
Expression engine for condition nodes.

Grammar: ``<left> <op> <right>`` with ``op`` one of ``== != >= <= > <``.
Operands starting with ``$`` are path lookups, anything else is a literal.
Malformed expressions evaluate to False so the default branch is taken.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any

from .json_path import MISSING, Missing, resolve_json_path

logger = logging.getLogger(__name__)

_EXPRESSION = re.compile(r"^\s*(.+?)\s*(==|!=|>=|<=|>|<)\s*(.+)\s*$")
_DECIMAL = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_INTEGER = re.compile(r"^[+-]?\d+$")
_PREFIXED = re.compile(r"^0([xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)$")


def to_number(value: Any) -> float:
    """Numeric coercion used by ordering comparisons.

    Non-numeric values become NaN, so every ordering comparison on them is False.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        if text in ("Infinity", "+Infinity"):
            return math.inf
        if text == "-Infinity":
            return -math.inf
        if _PREFIXED.match(text):
            return float(int(text, 0))
        if _DECIMAL.match(text):
            return float(text)
    return math.nan


def strict_equals(left: Any, right: Any) -> bool:
    """Equality without cross-type coercion (``True`` is not ``1``)."""
    if isinstance(left, Missing) or isinstance(right, Missing):
        return left is right
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right
    if type(left) is not type(right):
        return False
    return left == right


class ExpressionEngine:
    """Evaluates binary comparison expressions against an execution context."""

    def parse_literal(self, raw: str) -> Any:
        """Parse a literal operand: quoted string, boolean, null, number or raw text."""
        value = raw.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
            return value[1:-1]
        if value == "true":
            return True
        if value == "false":
            return False
        if value == "null":
            return None
        number = to_number(value)
        if not math.isnan(number):
            if _INTEGER.match(value):
                return int(value)
            return number
        return value

    def resolve_operand(self, context: dict[str, Any], raw: str) -> Any:
        value = raw.strip()
        if value.startswith("$"):
            return resolve_json_path(context, value, default=MISSING)
        return self.parse_literal(value)

    def evaluate(self, context: dict[str, Any], expression: str) -> bool:
        """Evaluate ``expression``; anything unparseable is False."""
        match = _EXPRESSION.match(expression or "")
        if not match:
            logger.debug("Unparseable condition expression: %r", expression)
            return False

        left_raw, op, right_raw = match.groups()
        left = self.resolve_operand(context, left_raw)
        right = self.resolve_operand(context, right_raw)

        if op == "==":
            return strict_equals(left, right)
        if op == "!=":
            return not strict_equals(left, right)

        left_num, right_num = to_number(left), to_number(right)
        if op == ">":
            return left_num > right_num
        if op == "<":
            return left_num < right_num
        if op == ">=":
            return left_num >= right_num
        if op == "<=":
            return left_num <= right_num
        return False


# Singleton instance
expression_engine = ExpressionEngine()
