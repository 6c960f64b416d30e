"""
config.py — Constants shared by the parser, the sampler and the HTTP app.
==========================================================================
Everything tunable lives here.  The host, port and log level can be
overridden through the environment:

    FUNCVIZ_HOST       (default 0.0.0.0)
    FUNCVIZ_PORT       (default 5000)
    FUNCVIZ_LOG_LEVEL  (default INFO)
    FUNCVIZ_LOG_FILE   (default: console only)
"""
import logging
import os

# ── Expression language ─────────────────────────────────────

# Variable alphabet, in the order variables are reported
SUPPORTED_VARIABLES = ('x', 'y', 'z', 't', 'u', 'v')

# Used whenever detection finds nothing or the parse fails
DEFAULT_VARIABLES = ('x', 'y')

FALLBACK_EXPRESSION = '0'

# ── Sampling ────────────────────────────────────────────────

# Heights outside this band are clamped before the display transform
CLAMP_MIN = -20.0
CLAMP_MAX = 20.0

# Surface plane: side length and number of segments per side
SURFACE_SIZE = 10.0
SURFACE_RESOLUTION = 50

# 1D sweep
LINE_DOMAIN = (-10.0, 10.0)
LINE_RESOLUTION = 200

# Upper bounds accepted from HTTP clients, segments per axis.
# A surface costs (resolution + 1) ** 2 evaluations.
MAX_RESOLUTION = 400
MAX_SURFACE_RESOLUTION = 100

# ── Server ──────────────────────────────────────────────────

HOST = os.environ.get('FUNCVIZ_HOST', '0.0.0.0')
PORT = int(os.environ.get('FUNCVIZ_PORT', '5000'))
LOG_LEVEL = getattr(logging, os.environ.get('FUNCVIZ_LOG_LEVEL', 'INFO').upper(), logging.INFO)
LOG_FILE = os.environ.get('FUNCVIZ_LOG_FILE') or None
