"""
snapiso/refine.py
-----------------
Refinement policies for Mesh.refine.

The mesh engine only knows *how* to split triangles; these factories
decide *which* ones to split. Each returns a plain callable
predicate(vertices) -> bool taking the (3, 3) array of (x, y, value) rows.
"""
from .geometry import centroid
from .isolines import analyze_triangle


def centroid_error_predicate(f, tolerance=0.1):
    """
    Refines where the field at the centroid disagrees with the mean of the
    three vertex values (the linear interpolant at that point).
    """
    def predicate(vertices):
        cx, cy, interpolated = centroid(vertices)
        actual = f(cx, cy)
        return abs(actual - interpolated) > tolerance

    return predicate


def isoline_error_predicate(f, thresholds, tolerance=0.01):
    """
    Refines triangles where an isoline is placed inaccurately.

    For every threshold crossing the triangle, the field is evaluated at the
    midpoint of the extracted segment. Linear interpolation puts the
    threshold there, so any difference is interpolation error.
    """
    thresholds = [float(level) for level in thresholds]

    def predicate(vertices):
        for level in thresholds:
            seg = analyze_triangle(vertices, level)
            if seg is None:
                continue
            mx = 0.5 * (seg[0, 0] + seg[1, 0])
            my = 0.5 * (seg[0, 1] + seg[1, 1])
            if abs(f(mx, my) - level) > tolerance:
                return True
        return False

    return predicate


def any_predicate(*predicates):
    """ Refines when any of the given policies asks to. """
    def predicate(vertices):
        return any(p(vertices) for p in predicates)

    return predicate


def never(vertices):
    """ Policy that never asks for refinement beyond min_degree. """
    return False


def refine_uniform(mesh, f, passes=1):
    """
    Refines every triangle of `mesh` to degree `passes`, in place.

    Unlike a 1-to-4 global split this keeps the bisection hierarchy, so the
    result can still be refined adaptively afterwards.

    Returns:
        int: Number of base-edge splits performed.
    """
    return mesh.refine(f, never, min_degree=passes, max_degree=passes)
