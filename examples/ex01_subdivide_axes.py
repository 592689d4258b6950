"""
ex01_subdivide_axes.py
----------------------
Goal: Turn sparse pane boundaries into lattice axes for a given zoom.
      - One pane per unit, 100 pixels per subdivision.
      - Zooming in adds lattice lines, zooming out removes them.
"""
import numpy as np

from snapiso.grid import pane_coords, axis_resolution, subdivide_coords


def run():
    panes = [(-2.0, -1.0), (-1.0, 0.0), (0.0, 1.0), (1.0, 2.0)]
    coords = pane_coords(panes)
    print(f"Pane boundaries: {coords}")

    for scale in [50.0, 100.0, 250.0]:
        res = axis_resolution(100.0, scale)
        axis = subdivide_coords(coords, res)
        spacing = np.diff(axis).max()
        print(f"  scale {scale:6.1f} px/unit -> res {res:.3f}, "
              f"{len(axis):3d} coords, max spacing {spacing:.3f}")


if __name__ == "__main__":
    run()
