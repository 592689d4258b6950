import numpy as np

# Sentinel stored in the connectivity arrays for "no neighbor" (mesh boundary)
NO_NEIGHBOR = -1


class ConformityError(AssertionError):
    ''' Raised when the triangle connectivity no longer describes a
        conforming (crack free) mesh. This is always a defect in the
        subdivision logic, never a recoverable runtime condition. '''


def edge_vertices(elements, side):
    ''' Returns the (start, end) vertex indices of one side of a triangle.

    Side 0 is the base edge (elements[0] -> elements[1]), side 1 runs
    elements[1] -> elements[2] and side 2 closes the loop back to elements[0].
    '''
    return int(elements[side]), int(elements[(side + 1) % 3])


def signed_area(p1, p2, p3):
    ''' Calculates 2D cross product to determine signed area.
    Result > 0 : Counter-Clockwise (CCW)
    Result < 0 : Clockwise (CW)
    '''
    return 0.5 * ((p2[0] - p1[0]) * (p3[1] - p1[1]) -
                  (p3[0] - p1[0]) * (p2[1] - p1[1]))


def check_conformity(mesh):
    ''' Verifies the conformity invariant on every glued edge of a mesh.

    For every triangle T and side s with neighbor (U, s'), U must point back
    to (T, s) and both sides must run over the same two vertices in opposite
    directions. Raises ConformityError on the first violation found.

    Returns the number of glued (interior) edges, counted once per pair.
    '''
    elements = mesh.triangles
    adj_tri = mesh.neighbor_triangles
    adj_edge = mesh.neighbor_edges
    n_tri = len(elements)

    glued = 0
    for t in range(n_tri):
        for s in range(3):
            u = int(adj_tri[t, s])
            if u == NO_NEIGHBOR:
                continue
            su = int(adj_edge[t, s])

            if not (0 <= u < n_tri) or not (0 <= su < 3):
                raise ConformityError(
                    f'Triangle {t} side {s} points outside the arena: ({u}, {su})')

            if int(adj_tri[u, su]) != t or int(adj_edge[u, su]) != s:
                raise ConformityError(
                    f'Triangle {t} side {s} -> ({u}, {su}) but '
                    f'({u}, {su}) -> ({int(adj_tri[u, su])}, {int(adj_edge[u, su])})')

            a, b = edge_vertices(elements[t], s)
            c, d = edge_vertices(elements[u], su)
            if (a, b) != (d, c):
                raise ConformityError(
                    f'Triangle {t} side {s} spans ({a}, {b}) but its neighbor '
                    f'{u} side {su} spans ({c}, {d})')

            if t < u:
                glued += 1

    return glued


def boundary_edges(mesh):
    ''' Returns a list of (triangle, side) pairs with no neighbor. '''
    adj_tri = mesh.neighbor_triangles
    rows, cols = np.nonzero(adj_tri == NO_NEIGHBOR)
    return [(int(t), int(s)) for t, s in zip(rows, cols)]
