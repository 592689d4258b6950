"""Tests for the shared console display and logging setup."""

import logging

import pytest

from snapcore.display import MESH_COLUMNS, RefinementDisplay, format_value, worst_isoline_error
from snapcore.log import configure_logging
from snapiso.contour_plot import ContourPlot
from snapiso.isolines import extract_segments
from snapiso.settings import PlotSettings


def test_header(capsys):
    RefinementDisplay("cos(x) + cos(y)", "5x5 lattice | max degree 10").header()
    out = capsys.readouterr().out

    assert "SnapIso :: cos(x) + cos(y)" in out
    assert "Config  :: 5x5 lattice | max degree 10" in out


def test_format_value():
    assert format_value(3, 4) == "   3"
    assert format_value(0.25, 8) == "  0.2500"
    assert format_value(0.001, 8) == "1.00e-03"
    assert format_value(0.0, 6) == "0.0000"
    assert format_value("-", 3) == "  -"


def test_table_rows(capsys):
    display = RefinementDisplay("test", "none")
    display.set_columns([("Pass", 6), ("Tris", 8), ("Error", 10)])
    assert "  Pass      Tris       Error" in capsys.readouterr().out

    assert display.format_row(1, 64, 0.25) == "     1        64      0.2500"
    with pytest.raises(ValueError):
        display.format_row(1, 2)


def test_log_mesh_without_segments(unit_cell, capsys):
    display = RefinementDisplay("x + 10y", "1x1 cell")
    values = display.log_mesh("build", unit_cell)

    assert values == ("build", 0, 2, 4, 0, "-")
    out = capsys.readouterr().out
    assert "Max Deg" in out
    assert display.columns == MESH_COLUMNS


def test_log_mesh_with_isolines(unit_cell):
    f = lambda x, y: x + 10 * y
    unit_cell.refine(f, lambda v: False, min_degree=1, max_degree=1)
    segments, levels = extract_segments(unit_cell, [5.0])

    values = RefinementDisplay("x + 10y", "1x1 cell").log_mesh(1, unit_cell, segments, levels, f)

    assert values[1] == 1
    assert values[2] == 4
    assert values[4] == len(segments) > 0
    # Linear field: interpolated endpoints are exact
    assert values[5] < 1e-9


def test_log_mesh_from_frame():
    panes = [(0.0, 1.0)]
    plot = ContourPlot(lambda x, y: x - y, (-1.0, 1.0), panes, panes,
                       settings=PlotSettings(levels=[0.25]))
    frame = plot.current_frame()

    values = RefinementDisplay("x - y", "1 pane").log_mesh("frame", frame, f=plot.f)

    assert values[1:5] == (frame.max_degree, frame.triangle_count,
                           frame.vertex_count, frame.segment_count)
    assert frame.segment_count > 0
    # float32 segment buffer
    assert values[5] < 1e-5


def test_worst_isoline_error():
    segments = [[[0.0, 0.0], [1.0, 0.0]], [[0.0, 2.0], [0.0, 3.0]]]
    f = lambda x, y: x + y
    assert worst_isoline_error(f, segments, [0.5, 2.0]) == pytest.approx(1.0)
    assert worst_isoline_error(f, [], []) == 0.0


def test_log_timings(capsys):
    total = RefinementDisplay("t", "c").log_timings({"build": 1.0, "refine": 3.0})
    out = capsys.readouterr().out

    assert total == pytest.approx(4.0)
    assert "75.0%" in out
    assert "total" in out


def test_success_and_error(capsys):
    display = RefinementDisplay("test", "none")
    display.success("Done")
    display.error("bad field")
    out = capsys.readouterr().out

    assert ">> Done (" in out
    assert "!! CRITICAL ERROR: bad field !!" in out


def test_configure_logging_replaces_handlers(tmp_path):
    logfile = tmp_path / "snapiso.log"
    configure_logging("snapiso_test", level=logging.DEBUG)
    logger = configure_logging("snapiso_test", level=logging.DEBUG, logfile=str(logfile))

    assert len(logger.handlers) == 2
    assert logger.level == logging.DEBUG

    logger.debug("refined 16 triangles")
    for handler in logger.handlers:
        handler.flush()
    assert "refined 16 triangles" in logfile.read_text()

    logger = configure_logging("snapiso_test")
    assert len(logger.handlers) == 1


def test_recompute_logs_summary(caplog):
    from snapiso.contour_plot import ContourPlot

    panes = [(0.0, 1.0)]
    plot = ContourPlot(lambda x, y: x * y, (0.0, 1.0), panes, panes)
    with caplog.at_level(logging.INFO, logger="snapiso"):
        plot.recompute()

    assert "Recomputed contour plot" in caplog.text
