"""
symbolic.py — LaTeX / plain-text rendering of a parsed expression via SymPy.

SymPy is only used for display here; numeric evaluation always goes
through the compiled closure in expression.py.
"""
import logging

import sympy as sp

from .expression import BinOp, Call, Num, UnaryOp, Var

logger = logging.getLogger(__name__)

_SYMPY_FUNCTIONS = {
    'sin': sp.sin,
    'cos': sp.cos,
    'tan': sp.tan,
    'asin': sp.asin,
    'acos': sp.acos,
    'atan': sp.atan,
    'sinh': sp.sinh,
    'cosh': sp.cosh,
    'tanh': sp.tanh,
    'log': sp.log,
    'exp': sp.exp,
    'sqrt': sp.sqrt,
    'abs': sp.Abs,
}

_SYMPY_CONSTANTS = {'pi': sp.pi, 'e': sp.E}


def _number(value):
    """Keep integers exact so 2*x renders as 2 x rather than 2.0 x."""
    if value.is_integer():
        return sp.Integer(int(value))
    return sp.Float(value)


def to_sympy(node):
    """Map a syntax tree onto an unevaluated-as-possible SymPy expression."""
    if isinstance(node, Num):
        if node.label:
            return _SYMPY_CONSTANTS[node.label]
        return _number(node.value)
    if isinstance(node, Var):
        return sp.Symbol(node.name)
    if isinstance(node, UnaryOp):
        return -to_sympy(node.operand)
    if isinstance(node, BinOp):
        left, right = to_sympy(node.left), to_sympy(node.right)
        if node.op == '+':
            return sp.Add(left, right, evaluate=False)
        if node.op == '-':
            return sp.Add(left, sp.Mul(-1, right, evaluate=False), evaluate=False)
        if node.op == '*':
            return sp.Mul(left, right, evaluate=False)
        if node.op == '/':
            return sp.Mul(left, sp.Pow(right, -1, evaluate=False), evaluate=False)
        return sp.Pow(left, right, evaluate=False)
    if isinstance(node, Call):
        return _SYMPY_FUNCTIONS[node.name](to_sympy(node.arg))
    raise TypeError(f'Unknown node {node!r}')


def render(parsed):
    """
    Return {'latex': ..., 'plain': ...} for a ParsedFunction.
    Falls back to the normalized text if SymPy cannot build the expression.
    """
    if parsed.tree is None:
        return {'latex': parsed.expression, 'plain': parsed.expression}
    try:
        expr = to_sympy(parsed.tree)
        return {'latex': sp.latex(expr), 'plain': sp.sstr(expr)}
    except Exception as exc:
        logger.debug('SymPy rendering failed for %r: %s', parsed.expression, exc)
        return {'latex': parsed.expression, 'plain': parsed.expression}
