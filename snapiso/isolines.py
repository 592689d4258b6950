"""
snapiso/isolines.py
-------------------
Marching-triangles extraction of contour segments from a finished mesh.

Each (triangle, threshold) pair yields zero or one straight segment: the
field is linear inside a triangle, so the set where it equals the
threshold is a line joining two interpolated edge points.
"""
import logging
import time

import numpy as np

from .geometry import interpolate_endpoint

logger = logging.getLogger("snapiso")


def analyze_triangle(vertices, threshold):
    """
    Finds where a threshold crosses one triangle.

    A vertex is "above" when value > threshold; a value exactly equal to the
    threshold counts as below, so an isoline running through a shared vertex
    is emitted once rather than twice or not at all.

    Args:
        vertices: Three (x, y, value) rows.
        threshold (float): Level to extract.

    Returns:
        np.ndarray | None: (2, 3) array of interpolated (x, y, value)
        endpoints, or None when all three vertices are on the same side.
    """
    v1, v2, v3 = vertices[0], vertices[1], vertices[2]
    b1 = v1[2] > threshold
    b2 = v2[2] > threshold
    b3 = v3[2] > threshold

    if b1 == b2:
        if b2 == b3:
            return None
        # v3 is the odd one out
        return np.array([interpolate_endpoint(threshold, v1, v3),
                         interpolate_endpoint(threshold, v2, v3)])

    if b2 != b3:
        # v2 is the odd one out
        return np.array([interpolate_endpoint(threshold, v1, v2),
                         interpolate_endpoint(threshold, v3, v2)])

    # v1 is the odd one out
    return np.array([interpolate_endpoint(threshold, v2, v1),
                     interpolate_endpoint(threshold, v3, v1)])


def extract_segments(mesh, thresholds):
    """
    Runs analyze_triangle over every (triangle, threshold) pair.

    Segments are ordered by triangle index first, then by the position of
    the threshold in `thresholds`.

    Returns:
        segments (np.ndarray): (n, 2, 2) endpoint coordinates.
        levels (np.ndarray): (n,) threshold of each segment.
    """
    thresholds = [float(level) for level in thresholds]
    t_start = time.perf_counter()

    vertices = mesh.vertices
    segments = []
    levels = []
    for elements in mesh.triangles:
        tri = vertices[elements]
        for level in thresholds:
            seg = analyze_triangle(tri, level)
            if seg is not None:
                segments.append(seg[:, :2])
                levels.append(level)

    logger.debug(
        f"Extracted {len(segments)} isoline segments over {len(thresholds)} "
        f"levels ({time.perf_counter() - t_start:.3f}s)")

    if not segments:
        return np.zeros((0, 2, 2), dtype=np.float64), np.zeros(0, dtype=np.float64)
    return np.array(segments, dtype=np.float64), np.array(levels, dtype=np.float64)


def segment_buffer(segments):
    """ Flat float32 buffer of (x, y) pairs, two per segment. """
    return np.asarray(segments, dtype=np.float32).reshape(-1)


def contour_levels(lo, hi, count):
    """
    Returns `count` evenly spaced levels strictly inside (lo, hi).

    Example:
        contour_levels(0, 1, 3) -> [0.25, 0.5, 0.75]
    """
    if count < 0:
        raise ValueError(f"level count must be non-negative, got {count}")
    if hi < lo:
        raise ValueError(f"empty value range ({lo}, {hi})")
    return np.linspace(lo, hi, count + 2)[1:-1]
