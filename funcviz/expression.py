"""
expression.py — Tokenizer, implicit-multiplication repair and evaluator
=======================================================================
A small recursive-descent parser for the expression language typed into
the visualizer:

  • numbers (2, 2.5, .5, 1e3), the variables x y z t u v, pi and e
  • binary  + - * / ^   (^ is right-associative)
  • unary minus / plus
  • sin cos tan asin acos atan sinh cosh tanh log exp sqrt abs  (ln → log)

Precedence, low → high:
    additive  <  multiplicative  <  unary sign  <  ^  <  call / grouping

so  -x^2 == -(x^2)  and  2^-1 == 0.5.

The tree is compiled once into a closure  f(bindings) -> float.  The
compiled closure is allowed to raise (domain errors, division by zero,
overflow, unbound variable); making it total is the caller's job.
"""
import math
import operator
import re
from typing import NamedTuple

from .config import SUPPORTED_VARIABLES


class ExpressionError(ValueError):
    """Raised when text cannot be tokenized or parsed."""


# ── Vocabulary ──────────────────────────────────────────────

FUNCTIONS = {
    'sin': math.sin,
    'cos': math.cos,
    'tan': math.tan,
    'asin': math.asin,
    'acos': math.acos,
    'atan': math.atan,
    'sinh': math.sinh,
    'cosh': math.cosh,
    'tanh': math.tanh,
    'log': math.log,
    'exp': math.exp,
    'sqrt': math.sqrt,
    'abs': math.fabs,
}

# Spellings rewritten during normalization
FUNCTION_ALIASES = {'ln': 'log'}

CONSTANTS = {'pi': math.pi, 'e': math.e}

# Longest first, so "sinh" wins over "sin" and "exp" over "e"
_WORDS = sorted(set(FUNCTIONS) | set(FUNCTION_ALIASES) | set(CONSTANTS),
                key=len, reverse=True)

_SCAN_RE = re.compile(
    r'(?P<num>(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)'
    r'|(?P<name>[A-Za-z]+)'
    r'|(?P<op>[-+*/^()])'
    r'|(?P<other>.)',
    re.DOTALL,
)

NUM, VAR, CONST, FUNC, NAME, OP, OTHER = (
    'num', 'var', 'const', 'func', 'name', 'op', 'other')


class Token(NamedTuple):
    kind: str
    text: str


# ── Tokenizer ───────────────────────────────────────────────

def _split_name(run):
    """
    Break a run of letters into functions, constants and single-letter
    variables, e.g. "xsin" → x, sin  and  "xy" → x, y.
    Anything that does not decompose becomes one NAME token.
    """
    tokens = []
    i = 0
    while i < len(run):
        for word in _WORDS:
            if run.startswith(word, i):
                if word in CONSTANTS:
                    tokens.append(Token(CONST, word))
                else:
                    tokens.append(Token(FUNC, FUNCTION_ALIASES.get(word, word)))
                i += len(word)
                break
        else:
            if run[i] in SUPPORTED_VARIABLES:
                tokens.append(Token(VAR, run[i]))
                i += 1
            else:
                tokens.append(Token(NAME, run[i:]))
                break
    return tokens


def tokenize(text):
    """Split whitespace-free text into tokens. Never raises."""
    tokens = []
    for m in _SCAN_RE.finditer(text):
        kind = m.lastgroup
        if kind == 'name':
            tokens.extend(_split_name(m.group()))
        else:
            tokens.append(Token(kind, m.group()))
    return tokens


def _ends_operand(tok):
    return tok.kind in (NUM, VAR, CONST) or tok.text == ')'


def _starts_operand(tok):
    return tok.kind in (NUM, VAR, CONST, FUNC) or tok.text == '('


def normalize(raw):
    """
    Strip whitespace and make implicit multiplication explicit.

    Every seam between an operand end (number, variable, constant, ")")
    and an operand start (number, variable, constant, function, "(") gets
    a "*", all in one left-to-right pass.  Two adjacent numbers are left
    alone, so a malformed literal such as 1.2.3 stays a syntax error:

        2x → 2*x     x2 → x*2     xy → x*y     )x → )*x     x( → x*(
        x2y → x*2*y      2sin(x) → 2*sin(x)      ln(x) → log(x)
    """
    text = re.sub(r'\s+', '', raw)
    out = []
    prev = None
    for tok in tokenize(text):
        if (prev is not None and _ends_operand(prev) and _starts_operand(tok)
                and not (prev.kind == NUM and tok.kind == NUM)):
            out.append('*')
        out.append(tok.text)
        prev = tok
    return ''.join(out)


# ── Syntax tree ─────────────────────────────────────────────

class Num(NamedTuple):
    value: float
    label: str = ''      # 'pi' / 'e' for named constants


class Var(NamedTuple):
    name: str


class UnaryOp(NamedTuple):
    op: str
    operand: object


class BinOp(NamedTuple):
    op: str
    left: object
    right: object


class Call(NamedTuple):
    name: str
    arg: object


# ── Parser ──────────────────────────────────────────────────

class _Parser:
    """Recursive descent over a token list, one method per precedence level."""

    def __init__(self, tokens):
        self.tokens = tokens
        self.pos = 0

    def peek(self):
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def consume(self):
        tok = self.peek()
        if tok is None:
            raise ExpressionError('Unexpected end of expression')
        self.pos += 1
        return tok

    def _at(self, *ops):
        tok = self.peek()
        return tok is not None and tok.kind == OP and tok.text in ops

    def expect(self, text):
        tok = self.consume()
        if tok.text != text:
            raise ExpressionError(f"Expected '{text}', found '{tok.text}'")

    def parse(self):
        if not self.tokens:
            raise ExpressionError('Empty expression')
        node = self.additive()
        if self.peek() is not None:
            raise ExpressionError(f"Unexpected '{self.peek().text}'")
        return node

    def additive(self):
        node = self.multiplicative()
        while self._at('+', '-'):
            op = self.consume().text
            node = BinOp(op, node, self.multiplicative())
        return node

    def multiplicative(self):
        node = self.unary()
        while self._at('*', '/'):
            op = self.consume().text
            node = BinOp(op, node, self.unary())
        return node

    def unary(self):
        if self._at('-'):
            self.consume()
            return UnaryOp('-', self.unary())
        if self._at('+'):
            self.consume()
            return self.unary()
        return self.power()

    def power(self):
        base = self.primary()
        if self._at('^'):
            self.consume()
            # The exponent may carry its own sign: 2^-x
            return BinOp('^', base, self.unary())
        return base

    def primary(self):
        tok = self.consume()
        if tok.kind == NUM:
            return Num(float(tok.text))
        if tok.kind == VAR:
            return Var(tok.text)
        if tok.kind == CONST:
            return Num(CONSTANTS[tok.text], tok.text)
        if tok.kind == FUNC:
            self.expect('(')
            arg = self.additive()
            self.expect(')')
            return Call(tok.text, arg)
        if tok.text == '(':
            node = self.additive()
            self.expect(')')
            return node
        if tok.kind == NAME:
            raise ExpressionError(f"Unknown name '{tok.text}'")
        raise ExpressionError(f"Unexpected '{tok.text}'")


def parse_tree(text):
    """Parse normalized text into a syntax tree. Raises ExpressionError."""
    return _Parser(tokenize(text)).parse()


# ── Compiler ────────────────────────────────────────────────

_BINARY = {
    '+': operator.add,
    '-': operator.sub,
    '*': operator.mul,
    '/': operator.truediv,
    '^': math.pow,
}


def compile_tree(node):
    """
    Turn a syntax tree into a closure  f(bindings) -> float.

    The closure raises KeyError for an unbound variable, and whatever the
    math module raises for domain errors, overflow or division by zero.
    """
    if isinstance(node, Num):
        value = node.value
        return lambda bindings: value

    if isinstance(node, Var):
        name = node.name
        return lambda bindings: float(bindings[name])

    if isinstance(node, UnaryOp):
        operand = compile_tree(node.operand)
        return lambda bindings: -operand(bindings)

    if isinstance(node, BinOp):
        fn = _BINARY[node.op]
        left = compile_tree(node.left)
        right = compile_tree(node.right)
        return lambda bindings: fn(left(bindings), right(bindings))

    if isinstance(node, Call):
        fn = FUNCTIONS[node.name]
        arg = compile_tree(node.arg)
        return lambda bindings: fn(arg(bindings))

    raise ExpressionError(f'Unknown node {node!r}')
