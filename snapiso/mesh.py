import logging
import time
from collections import deque

import numpy as np

from .geometry import midpoint
from .grid import validate_axis
from .topology import NO_NEIGHBOR, check_conformity

logger = logging.getLogger("snapiso")

# Layout of the flat output buffers handed to the rendering layer
FLOATS_PER_POSITION = 2
FLOATS_PER_VALUE = 1
FLOATS_PER_VERTEX = FLOATS_PER_POSITION + FLOATS_PER_VALUE
INDICES_PER_TRIANGLE = 3

_INITIAL_CAPACITY = 64


class RefinementDivergedError(RuntimeError):
    """Raised when chasing base edges recurses deeper than allowed."""


# --- The Mesh Class ---
class Mesh:
    """
    Append-only arena of vertices and triangles for an adaptive contour mesh.

    Everything lives in flat numpy arrays indexed by integer position:

        vertices            (n_vert, 3)  x, y, field value
        triangles           (n_tri, 3)   vertex indices, fixed winding
        neighbor_triangles  (n_tri, 3)   triangle glued to each side, or -1
        neighbor_edges      (n_tri, 3)   side of that neighbor, or -1
        degrees             (n_tri,)     subdivision generation

    Side 0 of a triangle (elements[0] -> elements[1]) is its base edge and
    the only edge that is ever split. Vertices are never removed, and a
    triangle index keeps describing the same region of the domain (it only
    shrinks as the triangle is bisected).

    Usage:
        mesh = Mesh()
        mesh.build(xs, ys, f)
        mesh.refine(f, predicate, max_degree=10)
        verts, idx = mesh.vertex_buffer(), mesh.index_buffer()
    """
    def __init__(self, check=False, max_chase_depth=64):
        self.check = check
        self.max_chase_depth = int(max_chase_depth)
        self.init()

    def init(self):
        """ Resets the arena to an empty mesh. """
        self._vertices = np.zeros((_INITIAL_CAPACITY, 3), dtype=np.float64)
        self._elements = np.zeros((_INITIAL_CAPACITY, 3), dtype=np.int64)
        self._adj_tri = np.full((_INITIAL_CAPACITY, 3), NO_NEIGHBOR, dtype=np.int64)
        self._adj_edge = np.full((_INITIAL_CAPACITY, 3), NO_NEIGHBOR, dtype=np.int64)
        self._degree = np.zeros(_INITIAL_CAPACITY, dtype=np.int64)
        self.num_vertices = 0
        self.num_triangles = 0
        return self

    # ------------------------------------------------------------------
    # Array views
    # ------------------------------------------------------------------
    @property
    def vertex_count(self):
        return self.num_vertices

    @property
    def triangle_count(self):
        return self.num_triangles

    @property
    def vertices(self):
        return self._vertices[:self.num_vertices]

    @property
    def triangles(self):
        return self._elements[:self.num_triangles]

    @property
    def neighbor_triangles(self):
        return self._adj_tri[:self.num_triangles]

    @property
    def neighbor_edges(self):
        return self._adj_edge[:self.num_triangles]

    @property
    def degrees(self):
        return self._degree[:self.num_triangles]

    def __len__(self):
        return self.num_triangles

    def __repr__(self):
        return f"Mesh(vertices={self.num_vertices}, triangles={self.num_triangles})"

    # ------------------------------------------------------------------
    # Arena growth
    # ------------------------------------------------------------------
    @staticmethod
    def _grow(arr, needed, fill):
        cap = len(arr)
        if needed <= cap:
            return arr
        while cap < needed:
            cap *= 2
        grown = np.full((cap,) + arr.shape[1:], fill, dtype=arr.dtype)
        grown[:len(arr)] = arr
        return grown

    def _reserve(self, n_vertices, n_triangles):
        self._vertices = self._grow(self._vertices, n_vertices, 0.0)
        self._elements = self._grow(self._elements, n_triangles, 0)
        self._adj_tri = self._grow(self._adj_tri, n_triangles, NO_NEIGHBOR)
        self._adj_edge = self._grow(self._adj_edge, n_triangles, NO_NEIGHBOR)
        self._degree = self._grow(self._degree, n_triangles, 0)

    def add_vertex(self, x, y, value):
        """Appends a vertex and returns its index."""
        self._reserve(self.num_vertices + 1, self.num_triangles)
        vid = self.num_vertices
        self._vertices[vid] = (x, y, value)
        self.num_vertices += 1
        return vid

    def add_triangle(self, v0, v1, v2, degree=0):
        """Appends an unconnected triangle and returns its index."""
        self._reserve(self.num_vertices, self.num_triangles + 1)
        tid = self.num_triangles
        self._elements[tid] = (v0, v1, v2)
        self._adj_tri[tid] = NO_NEIGHBOR
        self._adj_edge[tid] = NO_NEIGHBOR
        self._degree[tid] = degree
        self.num_triangles += 1
        return tid

    # ------------------------------------------------------------------
    # Connectivity
    # ------------------------------------------------------------------
    def neighbor(self, t, side):
        """ Returns (triangle, side) glued to `side` of `t`, or None on the boundary. """
        u = int(self._adj_tri[t, side])
        if u == NO_NEIGHBOR:
            return None
        return u, int(self._adj_edge[t, side])

    def _link(self, t, s, u, su):
        self._adj_tri[t, s] = u
        self._adj_edge[t, s] = su
        self._adj_tri[u, su] = t
        self._adj_edge[u, su] = s

    def _attach(self, t, s, u, su):
        """ Glues (t, s) to (u, su), or marks (t, s) as boundary when u is -1. """
        if u == NO_NEIGHBOR:
            self._adj_tri[t, s] = NO_NEIGHBOR
            self._adj_edge[t, s] = NO_NEIGHBOR
        else:
            self._link(t, s, u, su)

    def triangle_vertices(self, t):
        """ Returns the (3, 3) array of (x, y, value) rows for triangle `t`. """
        return self._vertices[self._elements[t]]

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    def build(self, x_coords, y_coords, f):
        """
        Samples `f` on the lattice x_coords * y_coords and triangulates it.

        Vertex (i, j) sits at index i * ny + j. Every grid cell is split
        along its bottom-left -> top-right diagonal, which becomes the base
        edge of both halves:

            even 2c   : (bl, tr, br)  side 1 = right edge, side 2 = bottom edge
            odd  2c+1 : (tr, bl, tl)  side 1 = left edge,  side 2 = top edge

        Connectivity follows directly from the lattice position.
        """
        xs = validate_axis(x_coords, "x axis")
        ys = validate_axis(y_coords, "y axis")
        nx, ny = xs.size, ys.size
        ncols, nrows = nx - 1, ny - 1

        t_start = time.perf_counter()
        self.init()
        self._reserve(nx * ny, 2 * ncols * nrows)

        # --- 1. Sample the Field ---
        for i in range(nx):
            for j in range(ny):
                x = xs[i]
                y = ys[j]
                self.add_vertex(x, y, float(f(x, y)))

        # --- 2. Split Cells ---
        for i in range(ncols):
            for j in range(nrows):
                bl = i * ny + j
                br = (i + 1) * ny + j
                tl = i * ny + j + 1
                tr = (i + 1) * ny + j + 1
                self.add_triangle(bl, tr, br)
                self.add_triangle(tr, bl, tl)

        # --- 3. Lattice Connectivity ---
        for i in range(ncols):
            for j in range(nrows):
                c = i * nrows + j
                even = 2 * c
                odd = even + 1

                # Shared diagonal
                self._link(even, 0, odd, 0)

                # Right neighbor: odd triangle of the next column, its left edge
                if i < ncols - 1:
                    self._link(even, 1, 2 * (c + nrows) + 1, 1)

                # Bottom neighbor: odd triangle of the row below, its top edge
                if j > 0:
                    self._link(even, 2, 2 * (c - 1) + 1, 2)

        logger.debug(
            f"Built {nx}x{ny} lattice: {self.num_vertices} vertices, "
            f"{self.num_triangles} triangles ({time.perf_counter() - t_start:.3f}s)")

        if self.check:
            check_conformity(self)
        return self

    # ------------------------------------------------------------------
    # Refinement
    # ------------------------------------------------------------------
    def refine(self, f, predicate, min_degree=1, max_degree=10):
        """
        Adaptively bisects triangles until the predicate is satisfied.

        Triangles are processed in FIFO order. A triangle below `min_degree`
        is always split; otherwise it is split only when
        predicate(triangle_vertices) is true. Nothing is ever split to a
        degree above `max_degree`.

        Args:
            f (callable): Field evaluator f(x, y) -> float.
            predicate (callable): predicate(vertices (3, 3)) -> bool.
            min_degree (int): Unconditional refinement depth.
            max_degree (int): Hard refinement ceiling.

        Returns:
            int: Number of base-edge splits performed.
        """
        if min_degree < 0 or max_degree < 0:
            raise ValueError("refinement degrees must be non-negative")
        if min_degree > max_degree:
            raise ValueError(
                f"min_degree ({min_degree}) exceeds max_degree ({max_degree})")

        t_start = time.perf_counter()
        n_vert_before = self.num_vertices

        queue = deque((t, int(self._degree[t])) for t in range(self.num_triangles))
        splits = 0

        while queue:
            t, degree = queue.popleft()

            # Stale entry: split since it was queued
            if self._degree[t] != degree:
                continue
            if degree >= max_degree:
                continue
            if degree >= min_degree and not predicate(self.triangle_vertices(t)):
                continue

            touched = self.refine_triangle_base(t, f)
            splits += 1
            for u in touched:
                d = int(self._degree[u])
                if d < max_degree:
                    queue.append((u, d))

        logger.debug(
            f"Refined mesh: {self.num_vertices - n_vert_before} new vertices, "
            f"{self.num_triangles} triangles, max degree "
            f"{int(self.degrees.max()) if self.num_triangles else 0} "
            f"({time.perf_counter() - t_start:.3f}s)")

        if self.check:
            check_conformity(self)
        return splits

    def refine_triangle_base(self, t, f):
        """
        Bisects the base edge of triangle `t`, keeping the mesh conforming.

        The triangle glued to the base edge is split along the same edge
        (sharing the new midpoint vertex). If that neighbor is glued by one
        of its other sides it is refined first, which turns the shared edge
        into the base edge of one of its children.

        Returns:
            list of int: Triangles created or modified, in split order.
        """
        return list(dict.fromkeys(self._refine_base(t, f, 0)))

    def _refine_base(self, t, f, depth):
        if depth > self.max_chase_depth:
            raise RefinementDivergedError(
                f"Base edge chase from triangle {t} exceeded depth "
                f"{self.max_chase_depth}")

        touched = []

        # --- 1. Make the base neighbor a mirror ---
        mirror = int(self._adj_tri[t, 0])
        while mirror != NO_NEIGHBOR and self._adj_edge[t, 0] != 0:
            touched.extend(self._refine_base(mirror, f, depth + 1))
            mirror = int(self._adj_tri[t, 0])

        # --- 2. One New Vertex at the Base Midpoint ---
        v0, v1 = self._elements[t, 0], self._elements[t, 1]
        mx, my = midpoint(self._vertices[v0], self._vertices[v1])
        m = self.add_vertex(mx, my, float(f(mx, my)))

        # --- 3. Bisect Both Sides ---
        u = self._bisect(t, m)
        if mirror == NO_NEIGHBOR:
            touched.extend((t, u))
            return touched

        mu = self._bisect(mirror, m)

        # t now holds (v1, v2, m): side 2 is m -> v1.
        # The mirror's second half (w2, v1, m) has side 1 = v1 -> m.
        self._link(t, 2, mu, 1)
        self._link(u, 1, mirror, 2)

        touched.extend((t, u, mirror, mu))
        return touched

    def _bisect(self, t, m):
        """
        Splits `t` = (v0, v1, v2) into (v1, v2, m) in place and a new
        (v2, v0, m). Both halves inherit one old outer edge as their base.
        The two half-base sides (t, 2) and (new, 1) are left unattached.
        """
        v0, v1, v2 = (int(v) for v in self._elements[t])
        degree = int(self._degree[t]) + 1

        n1_tri, n1_edge = int(self._adj_tri[t, 1]), int(self._adj_edge[t, 1])
        n2_tri, n2_edge = int(self._adj_tri[t, 2]), int(self._adj_edge[t, 2])

        u = self.add_triangle(v2, v0, m, degree)

        self._elements[t] = (v1, v2, m)
        self._degree[t] = degree

        self._attach(t, 0, n1_tri, n1_edge)
        self._link(t, 1, u, 2)
        self._attach(u, 0, n2_tri, n2_edge)

        self._attach(t, 2, NO_NEIGHBOR, NO_NEIGHBOR)
        return u

    # ------------------------------------------------------------------
    # Output buffers
    # ------------------------------------------------------------------
    def vertex_buffer(self):
        """ Flat float32 buffer of (x, y, value) per vertex, in creation order. """
        return self.vertices.astype(np.float32).ravel()

    def index_buffer(self):
        """ Flat uint32 buffer with three vertex indices per triangle. """
        return self.triangles.astype(np.uint32).ravel()

    def value_range(self):
        """ Returns (min, max) of the sampled field values. """
        if self.num_vertices == 0:
            raise ValueError("mesh has no vertices")
        values = self.vertices[:, 2]
        return float(values.min()), float(values.max())
