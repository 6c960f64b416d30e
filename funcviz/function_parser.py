"""
function_parser.py — Turn user-typed text into a ParsedFunction
================================================================
    parse("sin(x)*cos(y)")  →  ParsedFunction(variables=('x', 'y'),
                                              expression='sin(x)*cos(y)',
                                              type=FunctionType.BIVARIATE)

parse() never raises.  The visualizer re-parses on every keystroke, so a
half-typed expression is the normal case: anything that does not compile
becomes the fallback  f(x, y) = 0.  Likewise ParsedFunction.evaluate never
raises and never returns NaN or ±inf; bad points evaluate to 0.0.
"""
import enum
import logging
import math
import re
from dataclasses import dataclass, field

from .config import DEFAULT_VARIABLES, FALLBACK_EXPRESSION, SUPPORTED_VARIABLES
from .expression import compile_tree, normalize, parse_tree

logger = logging.getLogger(__name__)


class FunctionType(str, enum.Enum):
    SINGLE = 'single'
    BIVARIATE = 'bivariate'
    TRIVARIATE = 'trivariate'
    PARAMETRIC = 'parametric'


SAMPLE_FUNCTIONS = {
    'Linear (1D)': 'x',
    'Quadratic (1D)': 'x^2',
    'Sine Wave (1D)': 'sin(x)',
    'Paraboloid (2D)': 'x^2 + y^2',
    'Saddle (2D)': 'x^2 - y^2',
    'Sine Wave (2D)': 'sin(x) * cos(y)',
    'Ripple (2D)': 'sin(sqrt(x^2 + y^2))',
    'Gaussian (2D)': 'exp(-(x^2 + y^2))',
    'Sphere (3D)': 'sqrt(1 - x^2 - y^2)',
    'Torus (3D)': '(sqrt(x^2 + y^2) - 2)^2 + z^2',
    'Wave Function (3D)': 'sin(x) * cos(y) * sin(z)',
}

# One whole-token pattern per alphabet symbol, in reporting order
_VARIABLE_PATTERNS = [(v, re.compile(rf'\b{v}\b')) for v in SUPPORTED_VARIABLES]


def _zero(bindings):
    return 0.0


@dataclass(frozen=True)
class ParsedFunction:
    variables: tuple
    expression: str
    type: FunctionType
    evaluator: object = field(default=_zero, compare=False, repr=False)
    tree: object = field(default=None, compare=False, repr=False)

    @property
    def is_fallback(self):
        return self.tree is None

    def evaluate(self, bindings=None):
        """Evaluate at a point. Total: failures and non-finite results give 0.0."""
        try:
            result = float(self.evaluator(bindings or {}))
        except Exception:
            return 0.0
        return result if math.isfinite(result) else 0.0

    def __call__(self, bindings=None):
        return self.evaluate(bindings)

    def to_dict(self):
        return {
            'variables': list(self.variables),
            'expression': self.expression,
            'type': self.type.value,
        }


FALLBACK = ParsedFunction(DEFAULT_VARIABLES, FALLBACK_EXPRESSION, FunctionType.BIVARIATE)


def detect_variables(expression):
    """
    Return the alphabet symbols that occur as whole tokens, in the fixed
    order x y z t u v (not the order they appear in the text).
    """
    found = tuple(v for v, pattern in _VARIABLE_PATTERNS if pattern.search(expression))
    return found or DEFAULT_VARIABLES


def classify(variables):
    count = len(variables)
    if count == 1:
        return FunctionType.SINGLE
    if count == 2:
        return FunctionType.BIVARIATE
    if count == 3:
        return FunctionType.TRIVARIATE
    return FunctionType.PARAMETRIC


def visualization_mode(parsed):
    """Rendering strategy the front end should pick for this function."""
    return {
        FunctionType.SINGLE: 'line',
        FunctionType.BIVARIATE: 'surface',
        FunctionType.TRIVARIATE: 'volume',
    }.get(parsed.type, 'parametric')


def parse(raw):
    """Parse user text into a ParsedFunction; falls back to f(x, y) = 0."""
    try:
        expression = normalize(raw)
        tree = parse_tree(expression)
        evaluator = compile_tree(tree)
    except Exception as exc:
        logger.debug('Falling back for %r: %s', raw, exc)
        return FALLBACK

    variables = detect_variables(expression)
    return ParsedFunction(variables, expression, classify(variables), evaluator, tree)
