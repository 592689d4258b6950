"""
ex02_build_and_refine.py
------------------------
Goal: Build a lattice over [-2, 2]^2 and refine it around five isolines
      of cos(x) + cos(y), raising the degree ceiling step by step.
"""
import math

import matplotlib.pyplot as plt

from snapcore.display import RefinementDisplay
from snapiso.grid import subdivide_coords
from snapiso.isolines import extract_segments
from snapiso.mesh import Mesh
from snapiso.quality import MeshQuality
from snapiso.refine import isoline_error_predicate


def f(x, y):
    return math.cos(x) + math.cos(y)


def run():
    max_degree = 10
    levels = [-1.0, -0.5, 0.0, 0.5, 1.0]
    display = RefinementDisplay("cos(x) + cos(y)", f"5x5 lattice | max degree {max_degree}")
    display.header()

    xs = subdivide_coords([-2.0, 2.0], 1.0)
    ys = subdivide_coords([-2.0, 2.0], 1.0)
    predicate = isoline_error_predicate(f, levels, tolerance=0.01)

    display.section("Refinement")

    # Rebuild per ceiling so each row shows the mesh that ceiling produces
    mesh = Mesh(check=True)
    for ceiling in range(0, max_degree + 1, 2):
        mesh.build(xs, ys, f)
        mesh.refine(f, predicate, min_degree=0, max_degree=ceiling)
        segments, segment_levels = extract_segments(mesh, levels)
        display.log_mesh(f"<= {ceiling}", mesh, segments, segment_levels, f)

    display.success()

    inspector = MeshQuality(mesh)
    inspector.print_report()
    inspector.plot_histograms()
    plt.show()


if __name__ == "__main__":
    run()
