"""
ex03_cos_contours.py
--------------------
Goal: Full plot cycle for cos(x) + cos(y).
      - Density colored with the red/clear/blue gradient.
      - Isolines at five levels, refined until accurate.
      - A zoom changes the lattice, and the redraw is coalesced.
"""
import math

import matplotlib.pyplot as plt

from snapcore.display import RefinementDisplay
from snapiso.contour_plot import ContourPlot
from snapiso.settings import PlotSettings


def f(x, y):
    return math.cos(x) + math.cos(y)


def run():
    panes = [(-4.0, -2.0), (-2.0, 0.0), (0.0, 2.0), (2.0, 4.0)]
    settings = PlotSettings(resolution=80, tolerance=0.01, num_levels=5)
    plot = ContourPlot(f, (-2.0, 2.0), panes, panes, scale=(60.0, 60.0), settings=settings)

    display = RefinementDisplay("cos(x) + cos(y)", f"4x4 panes | {settings}")
    display.header()

    display.section("First frame")
    frame = plot.scheduler.flush()
    display.log_mesh("initial", frame, f=f)
    display.log_timings(frame.timings)

    # Three inputs change, one redraw
    plot.scale = (90.0, 90.0)
    plot.scale = (120.0, 120.0)
    plot.settings = settings.copy(smooth_gradient=True)

    display.section("Zoomed in")
    frame = plot.scheduler.flush()
    display.log_mesh("zoomed", frame, f=f)
    display.log_timings(frame.timings)
    display.success(f"{plot.scheduler.requests} requests, {plot.scheduler.runs} runs")

    fig, ax = plt.subplots(figsize=(7, 7))
    ax.set_facecolor('black')
    plot.draw(ax, wireframe=True)
    ax.set_aspect('equal')
    ax.set_title("cos(x) + cos(y)")
    plt.show()


if __name__ == "__main__":
    run()
