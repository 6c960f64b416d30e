"""funcviz — expression parsing and sampling for the function visualizer."""
from .expression import ExpressionError
from .function_parser import (
    FALLBACK, SAMPLE_FUNCTIONS, FunctionType, ParsedFunction,
    classify, detect_variables, parse, visualization_mode,
)

__version__ = '0.1.0'
