"""
Energy Model Service

Evaluates user-configured equipment energy formulas.

Formulas are plain arithmetic over two variables, ``power`` (watts) and
``time`` (hours), and return kWh. They are parsed with :mod:`ast` and
walked by a small evaluator that only knows the four arithmetic
operators, unary signs, numeric literals and the two variables, so a
stored formula can never reach names, calls or attributes.
"""

import ast
import functools
import logging
import math
import operator

from constants import DEFAULT_ENERGY_FORMULA, FORMULA_VARIABLES, MAX_FORMULA_LENGTH
from .numbers import normalize_number

logger = logging.getLogger(__name__)

_BINARY_OPS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
}

_UNARY_OPS = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}


class FormulaError(ValueError):
    """Raised when an energy formula is not arithmetic over power and time."""


def default_energy(power, time):
    """kWh for `power` watts over `time` hours: (power/1000) * time."""
    return (power / 1000) * time


def _check(node):
    """Reject anything that is not part of the arithmetic grammar."""
    if isinstance(node, ast.BinOp):
        if type(node.op) not in _BINARY_OPS:
            raise FormulaError(f"Operator not allowed: {type(node.op).__name__}")
        _check(node.left)
        _check(node.right)
    elif isinstance(node, ast.UnaryOp):
        if type(node.op) not in _UNARY_OPS:
            raise FormulaError(f"Operator not allowed: {type(node.op).__name__}")
        _check(node.operand)
    elif isinstance(node, ast.Constant):
        # bool is an int subclass; True/False are not numeric literals here
        if isinstance(node.value, bool) or not isinstance(node.value, (int, float)):
            raise FormulaError(f"Only numeric literals are allowed, got {node.value!r}")
    elif isinstance(node, ast.Name):
        if node.id not in FORMULA_VARIABLES:
            raise FormulaError(f"Unknown variable: {node.id}")
    else:
        raise FormulaError(f"Expression not allowed: {type(node).__name__}")


def _evaluate(node, values):
    if isinstance(node, ast.BinOp):
        op = _BINARY_OPS[type(node.op)]
        return op(_evaluate(node.left, values), _evaluate(node.right, values))
    if isinstance(node, ast.UnaryOp):
        return _UNARY_OPS[type(node.op)](_evaluate(node.operand, values))
    if isinstance(node, ast.Constant):
        return float(node.value)
    return values[FORMULA_VARIABLES[node.id]]


@functools.lru_cache(maxsize=256)
def compile_formula(expression):
    """
    Compile an energy formula into a function of (power, time).

    A blank expression compiles the default formula.

    Raises:
        FormulaError: if the expression is too long, does not parse, or
            uses anything beyond + - * /, parentheses, numbers, power and time.
    """
    text = (expression or '').strip() or DEFAULT_ENERGY_FORMULA
    if len(text) > MAX_FORMULA_LENGTH:
        raise FormulaError(f"Formula longer than {MAX_FORMULA_LENGTH} characters")

    try:
        tree = ast.parse(text, mode='eval')
    except (SyntaxError, ValueError) as e:
        raise FormulaError(f"Invalid formula: {e}") from e
    body = tree.body
    _check(body)

    def formula(power, time):
        return _evaluate(body, {'power': power, 'time': time})

    return formula


def validate_formula(expression):
    """Return an error message for an unusable formula, or None if it compiles."""
    if not isinstance(expression, str):
        return 'Formula must be text'
    try:
        compile_formula(expression)
    except FormulaError as e:
        return str(e)
    return None


def compute_energy(power, time, formula=None):
    """
    Energy in kWh used by equipment of `power` watts running `time` hours.

    Falls back to the default formula when `formula` is blank, fails to
    compile, raises while evaluating, or produces a non-finite number.
    Never raises.
    """
    p = normalize_number(power, 0.0)
    t = normalize_number(time, 0.0)
    expression = formula.strip() if isinstance(formula, str) else ''
    expression = expression or DEFAULT_ENERGY_FORMULA

    try:
        result = compile_formula(expression)(p, t)
    except (ValueError, ArithmeticError, RecursionError) as e:
        logger.warning("Energy formula %r failed (%s), using default", expression, e)
        return normalize_number(default_energy(p, t), 0.0)

    if not math.isfinite(result):
        logger.warning("Energy formula %r gave %r, using default", expression, result)
        result = default_energy(p, t)

    return normalize_number(result, 0.0)
