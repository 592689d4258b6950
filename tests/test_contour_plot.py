"""Tests for the recompute cycle, redraw coalescing and settings."""

import matplotlib.pyplot as plt
import numpy as np
import pytest

from snapiso.contour_plot import ContourPlot, RedrawScheduler
from snapiso.grid import InvalidDomainError
from snapiso.settings import PlotSettings

from conftest import cos_field

PANES = [(-2.0, 0.0), (0.0, 2.0)]


def make_plot(**settings):
    # 100 pixels per subdivision at 100 pixels per unit -> 1 unit spacing
    return ContourPlot(cos_field, (-2.0, 2.0), PANES, PANES, scale=(100.0, 100.0),
                       settings=PlotSettings(**settings))


def test_axes_follow_zoom():
    plot = make_plot()
    xs, ys = plot.axes()
    np.testing.assert_allclose(xs, [-2, -1, 0, 1, 2])

    plot.scale = (200.0, 50.0)
    xs, ys = plot.axes()
    assert len(xs) == 9
    np.testing.assert_allclose(ys, [-2, 0, 2])


def test_recompute_produces_buffers():
    plot = make_plot(levels=[0.0], tolerance=0.01, check_conformity=True)
    frame = plot.recompute()

    assert frame.vertex_count == plot.mesh.vertex_count
    assert frame.triangle_count == plot.mesh.triangle_count
    assert frame.vertex_buffer.dtype == np.float32
    assert frame.index_buffer.dtype == np.uint32
    assert frame.segment_buffer.dtype == np.float32
    assert frame.segment_count > 0
    assert len(frame.segment_levels) == frame.segment_count
    assert frame.max_degree <= 10
    assert frame.value_range == (-2.0, 2.0)
    assert set(frame.timings) == {"subdivide", "build", "refine", "extract"}
    np.testing.assert_array_equal(frame.index_buffer, plot.mesh.index_buffer())


def test_default_settings_draw_no_isolines():
    frame = make_plot().recompute()
    assert len(frame.levels) == 0
    assert frame.segment_count == 0
    # Centroid policy still refines beyond the lattice
    assert frame.triangle_count > 32


def test_num_levels_spread_over_range():
    plot = make_plot(num_levels=3)
    np.testing.assert_allclose(plot.levels(), [-1.0, 0.0, 1.0])


def test_scheduler_coalesces_requests():
    calls = []
    scheduler = RedrawScheduler(lambda: calls.append(1) or len(calls))

    assert scheduler.flush() is None
    assert scheduler.request()
    assert not scheduler.request()
    assert not scheduler.request()
    assert scheduler.flush() == 1
    assert scheduler.flush() is None
    assert calls == [1]
    assert scheduler.requests == 3
    assert scheduler.runs == 1

    scheduler.request()
    scheduler.cancel()
    assert scheduler.flush() is None


def test_plot_redraws_once_per_burst():
    plot = make_plot()
    # Construction schedules the first draw
    first = plot.scheduler.flush()
    assert first is plot.frame

    plot.scale = (150.0, 150.0)
    plot.f_range = (-1.0, 1.0)
    plot.set_panes(PANES, PANES)
    assert plot.frame is None

    runs = plot.scheduler.runs
    second = plot.scheduler.flush()
    assert second is not None
    assert plot.scheduler.runs == runs + 1
    assert plot.scheduler.flush() is None


def test_current_frame_is_cached():
    plot = make_plot()
    frame = plot.current_frame()
    assert plot.current_frame() is frame
    assert not plot.scheduler.pending

    plot.f = lambda x, y: x + y
    assert plot.current_frame() is not frame


def test_field_error_aborts_cycle():
    def broken(x, y):
        raise ValueError("cannot evaluate")

    plot = make_plot()
    plot.f = broken
    with pytest.raises(ValueError, match="cannot evaluate"):
        plot.recompute()
    assert plot.frame is None


def test_invalid_panes():
    plot = make_plot()
    plot.set_panes([], PANES)
    with pytest.raises(InvalidDomainError):
        plot.recompute()


def test_draw_onto_axes():
    plot = make_plot(levels=[0.0, 1.0], smooth_gradient=True)
    fig, ax = plt.subplots()
    frame = plot.draw(ax, wireframe=True)

    assert frame is plot.frame
    assert len(ax.collections) >= 2
    plt.close(fig)


def test_settings_validation():
    with pytest.raises(ValueError):
        PlotSettings(min_degree=3, max_degree=2)
    with pytest.raises(ValueError):
        PlotSettings(resolution=0)
    with pytest.raises(ValueError):
        PlotSettings(tolerance=-1)
    with pytest.raises(ValueError):
        PlotSettings(gradient_size=1)
    with pytest.raises(ValueError):
        PlotSettings(num_levels=-2)


def test_settings_copy():
    base = PlotSettings(levels=[0.5])
    changed = base.copy(max_degree=4)
    assert changed.max_degree == 4
    assert changed.levels == (0.5,)
    assert base.max_degree == 10


def test_settings_update_mesh_options():
    plot = make_plot()
    plot.settings = PlotSettings(max_chase_depth=5, check_conformity=True)
    assert plot.mesh.max_chase_depth == 5
    assert plot.mesh.check
    assert plot.scheduler.pending
