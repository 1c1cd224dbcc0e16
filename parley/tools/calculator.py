"""Arithmetic expression tool."""

from __future__ import annotations

import ast
import math
import operator
from typing import Any, Callable

from parley.tools.base import BaseTool, ToolResponse, action
from parley.utils.logging import get_logger

log = get_logger(__name__)

_BINARY_OPS: dict[type[ast.operator], Callable[[Any, Any], Any]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
    ast.Pow: operator.pow,
}

_UNARY_OPS: dict[type[ast.unaryop], Callable[[Any], Any]] = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}

# Bounds on "**" so that "9**9**9" or "((10**999)**999)**999" can't pin the CPU.
_MAX_EXPONENT = 1000
_MAX_RESULT_DIGITS = 1000


class InvalidExpression(ValueError):
    pass


def evaluate(expression: str) -> float:
    """Evaluate a pure arithmetic expression without ``eval``."""
    try:
        tree = ast.parse(expression.strip(), mode="eval")
    except SyntaxError as e:
        raise InvalidExpression(str(e)) from e
    try:
        return float(_eval_node(tree.body))
    except (TypeError, OverflowError) as e:
        # complex results, or floats past the double range
        raise InvalidExpression(str(e)) from e


def _eval_node(node: ast.AST) -> Any:
    if isinstance(node, ast.Constant) and type(node.value) in (int, float):
        return node.value
    if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPS:
        left, right = _eval_node(node.left), _eval_node(node.right)
        if isinstance(node.op, ast.Pow):
            _check_power(left, right)
        try:
            return _BINARY_OPS[type(node.op)](left, right)
        except ZeroDivisionError as e:
            raise InvalidExpression("Division by zero") from e
    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
        return _UNARY_OPS[type(node.op)](_eval_node(node.operand))
    raise InvalidExpression(f"Unsupported element: {ast.dump(node)}")


def _check_power(base: Any, exponent: Any) -> None:
    if abs(exponent) > _MAX_EXPONENT:
        raise InvalidExpression(f"Exponent exceeds {_MAX_EXPONENT}")
    # log10 accepts arbitrarily large ints, so this never builds the result
    if abs(base) > 1 and exponent > 0 and exponent * math.log10(abs(base)) > _MAX_RESULT_DIGITS:
        raise InvalidExpression(f"Power result exceeds {_MAX_RESULT_DIGITS} digits")


class Calculator(BaseTool):
    @action(
        "Evaluates a pure math expression",
        lambda p: p.property("input", type="string", description="Math expression", required=True),
    )
    def execute(self, input: str) -> ToolResponse:
        log.debug("calculator_execute", input=input)
        try:
            result = evaluate(input)
        except InvalidExpression:
            return self.tool_response(content=f'"{input}" is an invalid mathematical expression')
        return self.tool_response(content=str(result))
