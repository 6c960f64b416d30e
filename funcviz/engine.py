"""
engine.py — JSON bridge for the front end
==========================================
The browser (or the Flask app in app.py) talks to the parser through
these functions.  None of them raise; a bad expression comes back as the
fallback function with  "ok": false.

    function_info_json("2x + y")
    → {"ok": true, "variables": ["x", "y"], "expression": "2*x+y",
       "type": "bivariate", "mode": "surface", "latex": "...", "plain": "..."}
"""
import json

import numpy as np
import sympy

from .function_parser import parse, visualization_mode
from .symbolic import render


def engine_info():
    """Return JSON info about the library versions in use."""
    return json.dumps({
        'sympy_version': sympy.__version__,
        'numpy_version': np.__version__,
    })


def function_info(raw):
    """Parse `raw` and describe the result as a plain dict."""
    parsed = parse(raw)
    info = {'ok': not parsed.is_fallback}
    info.update(parsed.to_dict())
    info['mode'] = visualization_mode(parsed)
    info.update(render(parsed))
    return info


def function_info_json(raw):
    return json.dumps(function_info(raw))


def evaluate_json(raw, bindings):
    """Evaluate `raw` at one point; the value is 0 wherever f is undefined."""
    parsed = parse(raw)
    return json.dumps({
        'ok': not parsed.is_fallback,
        'result': parsed.evaluate(bindings),
    })
