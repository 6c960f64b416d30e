"""
sampling.py — Sample a ParsedFunction for the 3D view
=====================================================
    mode         geometry
    line         polyline over a 1D sweep of the first variable
    surface      height-mapped grid over the first two variables
    volume       one marker at the origin (no volume rendering)
    parametric   one marker at the origin (no parametric tracing)

`mode` is the same value visualization_mode() reports; `geometry` says
what was actually sampled.

Heights are clamped to [CLAMP_MIN, CLAMP_MAX] first; the display
transform (scale, reflection, translation per axis) is applied after.
"""
import math
from dataclasses import dataclass, field

import numpy as np

from .config import (
    CLAMP_MAX, CLAMP_MIN, LINE_DOMAIN, LINE_RESOLUTION,
    SURFACE_RESOLUTION, SURFACE_SIZE,
)
from .function_parser import FunctionType, visualization_mode

AXES = ('x', 'y', 'z')


def _finite(value):
    # bool is an int subclass; strings like 'inf' must not slip through float()
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f'{value!r} is not a number')
    try:
        value = float(value)
    except OverflowError:
        raise ValueError(f'{value!r} is out of range')
    if not math.isfinite(value):
        raise ValueError(f'{value!r} is not finite')
    return value


def _flag(value):
    if not isinstance(value, bool):
        raise ValueError(f'{value!r} is not true or false')
    return value


def _axis_dict(source, default, check):
    if source is None:
        source = {}
    if not isinstance(source, dict):
        raise TypeError(f'expected an object with x/y/z keys, got {source!r}')
    return {axis: check(source.get(axis, default)) for axis in AXES}


@dataclass(frozen=True)
class Transform:
    translation: dict = field(default_factory=lambda: dict.fromkeys(AXES, 0.0))
    scale: dict = field(default_factory=lambda: dict.fromkeys(AXES, 1.0))
    reflection: dict = field(default_factory=lambda: dict.fromkeys(AXES, False))

    @classmethod
    def from_dict(cls, data):
        """
        Build from {'translation': {...}, 'scale': {...}, 'reflection': {...}}.
        Raises TypeError / ValueError for anything but finite numbers
        (translation, scale) and real booleans (reflection).
        """
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise TypeError(f'expected an object, got {data!r}')
        return cls(
            translation=_axis_dict(data.get('translation'), 0.0, _finite),
            scale=_axis_dict(data.get('scale'), 1.0, _finite),
            reflection=_axis_dict(data.get('reflection'), False, _flag),
        )

    def apply(self, axis, values):
        factor = self.scale[axis] * (-1.0 if self.reflection[axis] else 1.0)
        return np.asarray(values, dtype=float) * factor + self.translation[axis]


IDENTITY = Transform()


def clamp(values):
    return np.clip(values, CLAMP_MIN, CLAMP_MAX)


def sample_line(parsed, domain=LINE_DOMAIN, resolution=LINE_RESOLUTION, transform=IDENTITY):
    """Sweep the first variable over `domain`; returns {'x': [...], 'y': [...]}."""
    var = parsed.variables[0]
    xs = np.linspace(domain[0], domain[1], resolution + 1)
    ys = clamp(np.array([parsed.evaluate({var: x}) for x in xs]))
    return {
        'x': transform.apply('x', xs).tolist(),
        'y': transform.apply('y', ys).tolist(),
    }


def sample_surface(parsed, size=SURFACE_SIZE, resolution=SURFACE_RESOLUTION, transform=IDENTITY):
    """
    Sample a size × size square centred on the origin with `resolution`
    segments per side.  Returns {'x', 'y', 'z'} as nested lists of shape
    (resolution + 1, resolution + 1), z being the height.

    Cost is one closure call per vertex, (resolution + 1) ** 2 in all;
    HTTP callers are capped at MAX_SURFACE_RESOLUTION.
    """
    u, v = parsed.variables[:2]
    half = size / 2.0
    axis = np.linspace(-half, half, resolution + 1)
    xs, ys = np.meshgrid(axis, axis)
    zs = np.empty_like(xs)
    for idx in np.ndindex(xs.shape):
        zs[idx] = parsed.evaluate({u: xs[idx], v: ys[idx]})
    zs = clamp(zs)
    return {
        'x': transform.apply('x', xs).tolist(),
        'y': transform.apply('y', ys).tolist(),
        'z': transform.apply('z', zs).tolist(),
    }


def sample_point(parsed, transform=IDENTITY):
    """Marker at the origin, height = f(0, 0, ...)."""
    height = clamp(parsed.evaluate(dict.fromkeys(parsed.variables, 0.0)))
    return {
        'x': float(transform.apply('x', 0.0)),
        'y': float(transform.apply('y', 0.0)),
        'z': float(transform.apply('z', height)),
    }


def render(parsed, transform=IDENTITY, resolution=None, domain=LINE_DOMAIN, size=SURFACE_SIZE):
    """Pick the sampling strategy from the function's arity."""
    mode = visualization_mode(parsed)
    if parsed.type == FunctionType.SINGLE:
        points = sample_line(parsed, domain, resolution or LINE_RESOLUTION, transform)
        return {'mode': mode, 'geometry': 'line', 'points': points}
    if parsed.type == FunctionType.BIVARIATE:
        grid = sample_surface(parsed, size, resolution or SURFACE_RESOLUTION, transform)
        return {'mode': mode, 'geometry': 'surface', 'grid': grid}
    return {'mode': mode, 'geometry': 'points', 'points': [sample_point(parsed, transform)]}
