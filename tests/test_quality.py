"""Tests for the mesh inspector and conformity checks."""

import matplotlib.pyplot as plt
import numpy as np
import pytest

from snapiso.quality import MeshQuality
from snapiso.refine import never
from snapiso.topology import ConformityError, check_conformity

from conftest import cos_field


def test_quality_of_lattice(cos_lattice):
    inspector = MeshQuality(cos_lattice).analyze()

    assert inspector.total_area() == pytest.approx(16.0)
    np.testing.assert_allclose(inspector.min_angles, 45.0)
    # circumradius / (2 * inradius) of a right isosceles triangle
    np.testing.assert_allclose(inspector.aspect_ratios, (1 + np.sqrt(2)) / 2)
    assert inspector.degree_histogram() == {0: 32}
    assert inspector.conforming
    assert inspector.glued_edges == 40


def test_quality_after_refinement(cos_lattice):
    cos_lattice.refine(cos_field, never, min_degree=3, max_degree=3)
    inspector = MeshQuality(cos_lattice)

    assert inspector.degree_histogram() == {3: 256}
    assert inspector.total_area() == pytest.approx(16.0)
    # Newest-vertex bisection only ever produces right isosceles triangles here
    np.testing.assert_allclose(inspector.min_angles, 45.0)


def test_print_report(cos_lattice, capsys):
    MeshQuality(cos_lattice).print_report()
    out = capsys.readouterr().out

    assert "Mesh Quality Report (32 Triangles, 25 Vertices)" in out
    assert "Conformity: [OK] 40 shared edges" in out
    assert "[OK] Good" in out


def test_plot_histograms(cos_lattice):
    fig = MeshQuality(cos_lattice).plot_histograms()
    assert len(fig.axes) == 3
    plt.close(fig)


def test_degree_histogram_has_one_bar_per_degree(cos_lattice):
    cos_lattice.refine(cos_field, lambda v: v[:, 0].min() < -1.0, min_degree=1, max_degree=3)
    degrees = cos_lattice.degrees

    fig = MeshQuality(cos_lattice).plot_histograms()
    degree_ax = fig.axes[1]

    assert degree_ax.get_title() == "Refinement Degree"
    assert len(degree_ax.patches) == degrees.max() - degrees.min() + 1
    heights = sorted(int(bar.get_height()) for bar in degree_ax.patches)
    assert sum(heights) == cos_lattice.triangle_count
    plt.close(fig)


def test_broken_back_pointer_detected(unit_cell):
    unit_cell.neighbor_edges[0, 0] = 2
    with pytest.raises(ConformityError):
        check_conformity(unit_cell)

    inspector = MeshQuality(unit_cell).analyze()
    assert inspector.conforming is False


def test_mismatched_shared_edge_detected(unit_cell):
    # Pointers still agree but the glued edge no longer spans the same vertices
    unit_cell.triangles[1] = [3, 1, 0]
    with pytest.raises(ConformityError):
        check_conformity(unit_cell)


def test_conformity_error_is_assertion():
    assert issubclass(ConformityError, AssertionError)
