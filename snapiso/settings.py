"""
snapiso/settings.py
-------------------
Configuration for a ContourPlot recompute cycle.
"""
import math

# Red below the midpoint of the value range, blue above, clear in between
DEFAULT_GRADIENT = ((0.0, '#f11d0e'), (0.5, 'transparent'), (1.0, '#58a6ff'))


class PlotSettings:
    ''' Tunable parameters of one build/refine/extract cycle.

    Attributes:
        resolution (float): Maximum number of pixels per lattice subdivision.
        tolerance (float): Refinement error tolerance in field units.
        min_degree (int): Refinement passes applied to every triangle.
        max_degree (int): Hard ceiling on triangle degree.
        levels (tuple of float): Explicit isoline thresholds. Takes
            precedence over `num_levels`.
        num_levels (int): Number of evenly spaced thresholds inside the
            plot's value range when `levels` is empty.
        gradient_stops (tuple): (offset, color) pairs of the density colormap.
        gradient_size (int): Number of discrete colors in the colormap.
        smooth_gradient (bool): Interpolate colors across triangles instead
            of flat shading.
        max_chase_depth (int): Recursion cap for base-edge chasing.
        check_conformity (bool): Verify mesh connectivity after every
            build and refine (slow, for debugging).
    '''
    __slots__ = ['resolution', 'tolerance', 'min_degree', 'max_degree',
                 'levels', 'num_levels', 'gradient_stops', 'gradient_size',
                 'smooth_gradient', 'max_chase_depth', 'check_conformity']

    def __init__(self, resolution=100.0, tolerance=0.1, min_degree=1,
                 max_degree=10, levels=(), num_levels=0,
                 gradient_stops=DEFAULT_GRADIENT, gradient_size=5,
                 smooth_gradient=False, max_chase_depth=64,
                 check_conformity=False):

        if not (resolution > 0) or not math.isfinite(resolution):
            raise ValueError(f'resolution must be positive, got {resolution}')
        if not (tolerance > 0):
            raise ValueError(f'tolerance must be positive, got {tolerance}')
        if min_degree < 0 or max_degree < min_degree:
            raise ValueError(
                f'need 0 <= min_degree <= max_degree, got {min_degree}, {max_degree}')
        if num_levels < 0:
            raise ValueError(f'num_levels must be non-negative, got {num_levels}')
        if gradient_size < 2:
            raise ValueError(f'gradient_size must be at least 2, got {gradient_size}')
        if len(gradient_stops) < 2:
            raise ValueError('gradient needs at least two color stops')
        if max_chase_depth < 1:
            raise ValueError(f'max_chase_depth must be positive, got {max_chase_depth}')

        self.resolution = float(resolution)
        self.tolerance = float(tolerance)
        self.min_degree = int(min_degree)
        self.max_degree = int(max_degree)
        self.levels = tuple(float(level) for level in levels)
        self.num_levels = int(num_levels)
        self.gradient_stops = tuple((float(o), c) for o, c in gradient_stops)
        self.gradient_size = int(gradient_size)
        self.smooth_gradient = bool(smooth_gradient)
        self.max_chase_depth = int(max_chase_depth)
        self.check_conformity = bool(check_conformity)

    def copy(self, **changes):
        ''' Returns a new PlotSettings with some fields replaced. '''
        values = {name: getattr(self, name) for name in self.__slots__}
        values.update(changes)
        return PlotSettings(**values)

    def __repr__(self):
        return (f'PlotSettings(resolution={self.resolution}, tolerance={self.tolerance}, '
                f'degrees={self.min_degree}..{self.max_degree}, '
                f'levels={self.levels or self.num_levels})')
