''' geometry.py
    -----------
    Small geometric helpers shared by the mesh engine and the isoline
    extractor. Every point here is an (x, y, value) triple so that the
    field value travels with the position it was sampled at.
'''
import numpy as np


def midpoint(p1, p2):
    ''' Returns the (x, y) midpoint of two points. '''
    return 0.5 * (p1[0] + p2[0]), 0.5 * (p1[1] + p2[1])


def centroid(vertices):
    ''' Returns the (x, y, value) average of a triangle's three vertices. '''
    v = np.asarray(vertices, dtype=np.float64)
    return v[:3].mean(axis=0)


def inverse_mix(t, lo, hi):
    """
    Returns the parameter at which the segment lo -> hi reaches t.

    When lo > hi the complementary parametrization is used so the result
    still lands in [0, 1] for any t between the two. Equal endpoints
    return 0.0: both already sit on the threshold within the
    classification tolerance.
    """
    if lo > hi:
        return 1.0 - inverse_mix(t, hi, lo)
    if hi == lo:
        return 0.0
    return (t - lo) / (hi - lo)


def interpolate_endpoint(threshold, v1, v2):
    """
    Linearly interpolates the point on edge v1 -> v2 where the field
    equals `threshold`.

    Returns:
        np.ndarray: (x, y, value) of the crossing.
    """
    p1 = np.asarray(v1, dtype=np.float64)
    p2 = np.asarray(v2, dtype=np.float64)
    t = inverse_mix(threshold, p1[2], p2[2])
    return p1 + (p2 - p1) * t
