"""
snapiso/grid.py
---------------
Builds the lattice axes fed to Mesh.build.

The host hands us sparse "pane" boundaries (for example one pane per unit
of a zoomable plot). These are subdivided so that no spacing exceeds the
resolution implied by the current zoom scale.
"""
import math

import numpy as np


class InvalidDomainError(ValueError):
    """Raised when axis coordinates cannot describe a 2D domain."""


def pane_coords(panes):
    """
    Flattens a row of panes into their boundary coordinates.

    Example:
        [(0, 1), (1, 2), (2, 3)] -> [0, 1, 2, 3]
    """
    panes = list(panes)
    if not panes:
        raise InvalidDomainError("at least one pane is required")
    return [float(panes[0][0])] + [float(pane[1]) for pane in panes]


def axis_resolution(pixels_per_subdivision, scale):
    """
    Converts a target pixel density into domain units per subdivision.

    Args:
        pixels_per_subdivision (float): Maximum number of pixels between
            two lattice lines.
        scale (float): Current zoom scale in pixels per domain unit.
    """
    if scale <= 0:
        raise InvalidDomainError(f"scale must be positive, got {scale}")
    return pixels_per_subdivision / scale


def subdivide_coords(coords, res):
    """
    Subdivides an increasing coordinate sequence so no step exceeds `res`.

    Every input coordinate is kept (the first and last exactly). Between two
    consecutive inputs c1 < c2 the interval is cut into ceil((c2 - c1) / res)
    equal steps. A zero-length interval adds nothing, since its coordinate is
    already present.

    Args:
        coords (sequence of float): Boundary coordinates, at least 2,
            monotonically increasing, with a non-zero total span.
        res (float): Maximum spacing in domain units.

    Returns:
        np.ndarray: The subdivided coordinates (float64).
    """
    coords = np.asarray(coords, dtype=np.float64).ravel()

    if coords.size < 2:
        raise InvalidDomainError(
            f"need at least 2 coordinates, got {coords.size}")
    if not np.all(np.isfinite(coords)):
        raise InvalidDomainError("coordinates must be finite")
    if np.any(np.diff(coords) < 0):
        raise InvalidDomainError("coordinates must be monotonically increasing")
    if coords[-1] == coords[0]:
        raise InvalidDomainError(
            f"domain has zero span ({coords[0]} .. {coords[-1]})")
    if not (res > 0) or not math.isfinite(res):
        raise InvalidDomainError(f"resolution must be positive, got {res}")

    new_coords = [float(coords[0])]

    for c1, c2 in zip(coords[:-1], coords[1:]):
        c1 = float(c1)
        c2 = float(c2)
        if c2 == c1:
            continue

        num_subdivisions = math.ceil((c2 - c1) / res)
        for i in range(num_subdivisions):
            t = (i + 1) / num_subdivisions
            new_coords.append(c1 * (1 - t) + c2 * t)

    return np.array(new_coords, dtype=np.float64)


def validate_axis(coords, name="axis"):
    """
    Checks that an axis can be used as lattice coordinates.

    Returns the axis as a float64 array. Raises InvalidDomainError when it
    has fewer than 2 entries or is not strictly increasing.
    """
    axis = np.asarray(coords, dtype=np.float64).ravel()
    if axis.size < 2:
        raise InvalidDomainError(
            f"{name} needs at least 2 coordinates, got {axis.size}")
    if not np.all(np.isfinite(axis)):
        raise InvalidDomainError(f"{name} coordinates must be finite")
    if np.any(np.diff(axis) <= 0):
        raise InvalidDomainError(f"{name} must be strictly increasing")
    return axis
