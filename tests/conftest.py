# conftest.py
import math

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from snapiso.grid import subdivide_coords
from snapiso.mesh import Mesh


def cos_field(x, y):
    return math.cos(x) + math.cos(y)


@pytest.fixture
def cos_lattice():
    """
    Provides the 5x5 lattice over [-2, 2]^2 sampled from cos(x) + cos(y):
        32 triangles, 25 vertices, all degree 0.
    """
    xs = subdivide_coords([-2.0, 2.0], 1.0)
    ys = subdivide_coords([-2.0, 2.0], 1.0)
    return Mesh(check=True).build(xs, ys, cos_field)


@pytest.fixture
def unit_cell():
    """
    Provides a single grid cell split into two triangles:
        v0 = (0, 0), v1 = (0, 1), v2 = (1, 0), v3 = (1, 1)
        tri 0 = (0, 3, 2), tri 1 = (3, 0, 1), field f = x + 10 y
    """
    return Mesh(check=True).build([0.0, 1.0], [0.0, 1.0], lambda x, y: x + 10 * y)


def t_junctions(mesh, tol=1e-9):
    """ Returns vertices lying strictly inside some triangle edge. """
    xy = mesh.vertices[:, :2]
    hits = []
    for elements in mesh.triangles:
        for s in range(3):
            a = xy[elements[s]]
            b = xy[elements[(s + 1) % 3]]
            ab = b - a
            ap = xy - a
            cross = ab[0] * ap[:, 1] - ab[1] * ap[:, 0]
            dot = ap @ ab
            inside = (np.abs(cross) < tol) & (dot > tol) & (dot < ab @ ab - tol)
            hits.extend(int(v) for v in np.nonzero(inside)[0])
    return sorted(set(hits))


def total_area(mesh):
    verts = mesh.vertices
    tris = mesh.triangles
    p1, p2, p3 = verts[tris[:, 0]], verts[tris[:, 1]], verts[tris[:, 2]]
    cross = ((p2[:, 0] - p1[:, 0]) * (p3[:, 1] - p1[:, 1]) -
             (p3[:, 0] - p1[:, 0]) * (p2[:, 1] - p1[:, 1]))
    return 0.5 * np.abs(cross).sum()
