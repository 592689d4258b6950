"""
snapiso/contour_plot.py
-----------------------
Drives one full recompute cycle (subdivide -> build -> refine -> extract)
for a field over a paned domain, and coalesces redraw requests coming from
the host (resize, pan, zoom, new function).
"""
import logging
import time

import numpy as np

from . import plotting
from .grid import axis_resolution, pane_coords, subdivide_coords
from .isolines import contour_levels, extract_segments, segment_buffer
from .mesh import Mesh
from .refine import centroid_error_predicate, isoline_error_predicate
from .settings import PlotSettings

logger = logging.getLogger("snapiso")


class ContourFrame:
    ''' Output buffers of one recompute cycle, ready for a renderer.

    Attributes:
        vertex_buffer (np.ndarray): float32, (x, y, value) per vertex.
        index_buffer (np.ndarray): uint32, three vertex indices per triangle.
        segment_buffer (np.ndarray): float32, (x, y) pairs, two per segment.
        levels (np.ndarray): Thresholds the segments were extracted at.
        segment_levels (np.ndarray): Threshold of each segment.
        value_range (tuple): (min, max) used for coloring.
        max_degree (int): Deepest refinement reached.
        timings (dict): Seconds spent per stage.
    '''
    __slots__ = ['vertex_buffer', 'index_buffer', 'segment_buffer', 'levels',
                 'segment_levels', 'value_range', 'max_degree', 'timings']

    def __init__(self, vertex_buffer, index_buffer, segment_buffer, levels,
                 segment_levels, value_range, max_degree, timings):
        self.vertex_buffer = vertex_buffer
        self.index_buffer = index_buffer
        self.segment_buffer = segment_buffer
        self.levels = levels
        self.segment_levels = segment_levels
        self.value_range = value_range
        self.max_degree = max_degree
        self.timings = timings

    @property
    def vertex_count(self):
        return len(self.vertex_buffer) // 3

    @property
    def triangle_count(self):
        return len(self.index_buffer) // 3

    @property
    def segment_count(self):
        return len(self.segment_buffer) // 4

    def __repr__(self):
        return (f'ContourFrame(vertices={self.vertex_count}, '
                f'triangles={self.triangle_count}, segments={self.segment_count})')


class RedrawScheduler:
    """
    Coalesces bursts of redraw requests into a single callback run.

    The host calls request() whenever an input changes and flush() once per
    frame (or idle tick). A running callback is never interrupted; requests
    made while it runs schedule one more run.
    """
    def __init__(self, callback):
        self.callback = callback
        self.pending = False
        self.requests = 0
        self.runs = 0

    def request(self):
        """ Marks a redraw as pending. Returns True if one was not already pending. """
        self.requests += 1
        if self.pending:
            return False
        self.pending = True
        return True

    def cancel(self):
        self.pending = False

    def flush(self):
        """ Runs the callback if a redraw is pending and returns its result. """
        if not self.pending:
            return None
        self.pending = False
        self.runs += 1
        return self.callback()


class ContourPlot:
    """
    Adaptive density + isoline plot of f(x, y) over a paned domain.

    Usage:
        plot = ContourPlot(f, (-2, 2), x_panes=[(-2, 0), (0, 2)],
                           y_panes=[(-2, 0), (0, 2)], scale=(100, 100))
        frame = plot.recompute()
        plot.draw(ax)
    """
    def __init__(self, f, f_range, x_panes, y_panes, scale=(1.0, 1.0), settings=None):
        self._f = f
        self._f_range = (float(f_range[0]), float(f_range[1]))
        self._x_panes = list(x_panes)
        self._y_panes = list(y_panes)
        self._scale = (float(scale[0]), float(scale[1]))
        self._settings = settings if settings is not None else PlotSettings()

        self.mesh = Mesh(check=self._settings.check_conformity,
                         max_chase_depth=self._settings.max_chase_depth)
        self.frame = None
        self.scheduler = RedrawScheduler(self.recompute)
        self.scheduler.request()

    # --- Inputs: changing any of them invalidates the current frame ---
    def _invalidate(self):
        self.frame = None
        self.scheduler.request()

    @property
    def f(self):
        return self._f

    @f.setter
    def f(self, value):
        self._f = value
        self._invalidate()

    @property
    def f_range(self):
        return self._f_range

    @f_range.setter
    def f_range(self, value):
        self._f_range = (float(value[0]), float(value[1]))
        self._invalidate()

    @property
    def scale(self):
        return self._scale

    @scale.setter
    def scale(self, value):
        self._scale = (float(value[0]), float(value[1]))
        self._invalidate()

    @property
    def settings(self):
        return self._settings

    @settings.setter
    def settings(self, value):
        self._settings = value
        self.mesh.check = value.check_conformity
        self.mesh.max_chase_depth = value.max_chase_depth
        self._invalidate()

    def set_panes(self, x_panes, y_panes):
        self._x_panes = list(x_panes)
        self._y_panes = list(y_panes)
        self._invalidate()

    # --- Derived values ---
    def axes(self):
        """ Returns the subdivided (x_coords, y_coords) for the current zoom. """
        res = self._settings.resolution
        xs = subdivide_coords(pane_coords(self._x_panes), axis_resolution(res, self._scale[0]))
        ys = subdivide_coords(pane_coords(self._y_panes), axis_resolution(res, self._scale[1]))
        return xs, ys

    def levels(self):
        """ Isoline thresholds: explicit levels, else evenly spaced in f_range. """
        s = self._settings
        if s.levels:
            return np.array(s.levels, dtype=np.float64)
        return contour_levels(self._f_range[0], self._f_range[1], s.num_levels)

    def predicate(self, levels):
        """ Refinement policy: isoline accuracy when drawing isolines, else centroid error. """
        tol = self._settings.tolerance
        if len(levels):
            return isoline_error_predicate(self._f, levels, tol)
        return centroid_error_predicate(self._f, tol)

    # --- The cycle ---
    def recompute(self):
        """
        Runs subdivide -> build -> refine -> extract to completion.

        Exceptions raised by the field function abort the cycle and leave
        `frame` empty; there is no partially refined result.
        """
        s = self._settings
        f = self._f
        timings = {}

        self.frame = None
        self.scheduler.cancel()

        t0 = time.perf_counter()
        xs, ys = self.axes()
        levels = self.levels()
        timings['subdivide'] = time.perf_counter() - t0

        t0 = time.perf_counter()
        self.mesh.build(xs, ys, f)
        timings['build'] = time.perf_counter() - t0

        t0 = time.perf_counter()
        self.mesh.refine(f, self.predicate(levels),
                         min_degree=s.min_degree, max_degree=s.max_degree)
        timings['refine'] = time.perf_counter() - t0

        t0 = time.perf_counter()
        segments, segment_levels = extract_segments(self.mesh, levels)
        timings['extract'] = time.perf_counter() - t0

        degrees = self.mesh.degrees
        frame = ContourFrame(
            vertex_buffer=self.mesh.vertex_buffer(),
            index_buffer=self.mesh.index_buffer(),
            segment_buffer=segment_buffer(segments),
            levels=levels,
            segment_levels=segment_levels,
            value_range=self._f_range,
            max_degree=int(degrees.max()) if len(degrees) else 0,
            timings=timings,
        )

        logger.info(
            f"Recomputed contour plot: {frame.vertex_count} vertices, "
            f"{frame.triangle_count} triangles, {frame.segment_count} segments "
            f"(build {timings['build']:.3f}s, refine {timings['refine']:.3f}s, "
            f"extract {timings['extract']:.3f}s)")

        self.frame = frame
        return frame

    def current_frame(self):
        """ Returns the cached frame, recomputing only if inputs changed. """
        if self.frame is None:
            return self.recompute()
        return self.frame

    def draw(self, ax, wireframe=False):
        """ Renders the current frame onto a matplotlib Axes. """
        frame = self.current_frame()
        s = self._settings
        cmap = plotting.linear_gradient(s.gradient_stops, s.gradient_size)
        plotting.plot_density(ax, frame, frame.value_range, cmap, s.smooth_gradient)
        if wireframe:
            plotting.plot_mesh(ax, frame, color='gray')
        plotting.plot_isolines(ax, frame.segment_buffer)
        return frame
