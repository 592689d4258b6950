"""
snapiso/plotting.py
-------------------
Rendering collaborator: turns the numeric buffers of a ContourFrame (or a
Mesh) into matplotlib artists. Nothing here touches the mesh algorithms.
"""
import numpy as np
import matplotlib.pyplot as plt
import matplotlib.tri as mtri
from matplotlib.collections import LineCollection
from matplotlib.colors import LinearSegmentedColormap, ListedColormap, to_rgba

from .mesh import FLOATS_PER_VERTEX, INDICES_PER_TRIANGLE
from .settings import DEFAULT_GRADIENT


def _to_rgba(color):
    # CSS style 'transparent' is not a matplotlib color name
    if isinstance(color, str) and color.lower() == 'transparent':
        return 0.0, 0.0, 0.0, 0.0
    return to_rgba(color)


def linear_gradient(color_stops, size=255, name='snapiso_gradient'):
    """
    Builds a discrete colormap from (offset, color) stops.

    Args:
        color_stops (sequence): (offset in [0, 1], color) pairs, increasing.
        size (int): Number of colors sampled from the gradient.

    Returns:
        ListedColormap with `size` entries.
    """
    stops = [(float(offset), _to_rgba(color)) for offset, color in color_stops]
    smooth = LinearSegmentedColormap.from_list(name + '_smooth', stops, N=size)
    samples = smooth(np.linspace(0.0, 1.0, size))
    return ListedColormap(samples, name=name)


def _triangulation(vertex_buffer, index_buffer):
    verts = np.asarray(vertex_buffer, dtype=np.float64).reshape(-1, FLOATS_PER_VERTEX)
    tris = np.asarray(index_buffer, dtype=np.int64).reshape(-1, INDICES_PER_TRIANGLE)
    return mtri.Triangulation(verts[:, 0], verts[:, 1], tris), verts[:, 2]


def _buffers(source):
    """ Accepts a Mesh or a ContourFrame. """
    if hasattr(source, 'vertex_buffer') and callable(source.vertex_buffer):
        return source.vertex_buffer(), source.index_buffer()
    return source.vertex_buffer, source.index_buffer


def plot_density(ax, source, value_range=None, cmap=None, smooth=False):
    """
    Draws the field as colored triangles.

    Args:
        ax: matplotlib Axes.
        source: Mesh or ContourFrame.
        value_range (tuple, optional): (min, max) mapped onto the colormap.
            Defaults to the range of the vertex values.
        cmap: Colormap, defaults to a 5 step red/clear/blue gradient.
        smooth (bool): Gouraud shading instead of flat per-triangle color.
    """
    tri, values = _triangulation(*_buffers(source))
    if cmap is None:
        cmap = linear_gradient(DEFAULT_GRADIENT, 5)
    if value_range is None:
        value_range = (values.min(), values.max())

    return ax.tripcolor(tri, values, cmap=cmap,
                        shading='gouraud' if smooth else 'flat',
                        vmin=value_range[0], vmax=value_range[1])


def plot_isolines(ax, segments, color='white', linewidth=1.0):
    """ Draws isoline segments given as (n, 2, 2) points or a flat buffer. """
    segs = np.asarray(segments, dtype=np.float64).reshape(-1, 2, 2)
    lines = LineCollection(segs, colors=color, linewidths=linewidth)
    ax.add_collection(lines)
    return lines


def plot_mesh(ax, source, color='k', linewidth=0.3):
    """ Wireframe of the triangulation, useful to inspect refinement. """
    tri, _ = _triangulation(*_buffers(source))
    return ax.triplot(tri, color=color, linewidth=linewidth)


def show_frame(frame, value_range=None, cmap=None, smooth=False, wireframe=False):
    """ Opens a figure with the density, isolines and optional wireframe. """
    fig, ax = plt.subplots(figsize=(6, 6))
    ax.set_facecolor('black')
    plot_density(ax, frame, value_range, cmap, smooth)
    if wireframe:
        plot_mesh(ax, frame, color='gray')
    plot_isolines(ax, frame.segment_buffer)
    ax.set_aspect('equal')
    plt.show()
    return fig
