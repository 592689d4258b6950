"""
snapcore/display.py
-------------------
Console reporting for refinement runs: a banner, one table row per mesh
state (step, deepest degree, triangle/vertex/segment counts, worst isoline
error) and the per-stage timing breakdown of a recompute cycle.
"""
import time
import numpy as np

# (title, width) of the table written by log_mesh
MESH_COLUMNS = (("Step", 8), ("Max Deg", 8), ("Tris", 8), ("Verts", 8),
                ("Segments", 9), ("Worst Err", 10))


def format_value(value, width):
    """ Right-aligns one table cell. Floats pick fixed or scientific notation. """
    if isinstance(value, (int, np.integer)):
        text = str(int(value))
    elif isinstance(value, (float, np.floating)):
        if value == 0 or 1e-2 <= abs(value) < 1e5:
            text = f"{value:.4f}"
        else:
            text = f"{value:.2e}"
    else:
        text = str(value)
    return text.rjust(width)


def worst_isoline_error(f, segments, levels):
    """ Largest |f(p) - level| over all segment endpoints p (0.0 when empty). """
    points = np.asarray(segments, dtype=np.float64).reshape(-1, 2)
    if len(points) == 0:
        return 0.0
    # both endpoints of a segment share its level
    point_levels = np.repeat(np.asarray(levels, dtype=np.float64), 2)
    return max(abs(f(x, y) - level) for (x, y), level in zip(points, point_levels))


class RefinementDisplay:
    def __init__(self, title, context_info):
        """
        Args:
            title (str): Field or script being refined, e.g. "cos(x) + cos(y)".
            context_info (str): Lattice and degree limits, e.g. "5x5 | max degree 10".
        """
        self.title = title
        self.context = context_info
        self.start_time = time.perf_counter()
        self.columns = ()

    def header(self):
        rule = "=" * 70
        print(rule)
        print(f"SnapIso :: {self.title}")
        print(f"Config  :: {self.context}")
        print(rule + "\n")

    def section(self, name):
        print(f"--- {name} ---")

    def set_columns(self, columns):
        """ Starts a table. `columns` is a sequence of (title, width). """
        self.columns = tuple(columns)
        titles = "  ".join(title.rjust(width) for title, width in self.columns)
        print("\n" + titles)
        print("-" * len(titles))

    def format_row(self, *values):
        if len(values) != len(self.columns):
            raise ValueError(
                f"table has {len(self.columns)} columns, got {len(values)} values")
        return "  ".join(format_value(v, width) for v, (_, width) in zip(values, self.columns))

    def log_row(self, *values):
        print(self.format_row(*values))

    def log_mesh(self, step, source, segments=None, levels=None, f=None):
        """
        Writes one MESH_COLUMNS row for a Mesh or a ContourFrame.

        A ContourFrame brings its own segments and levels. For a Mesh pass
        the output of extract_segments. With the field `f` the worst
        endpoint error is reported, otherwise that cell reads "-".

        Returns:
            tuple: The row values.
        """
        if self.columns != MESH_COLUMNS:
            self.set_columns(MESH_COLUMNS)

        max_degree = getattr(source, "max_degree", None)
        if max_degree is None:
            degrees = source.degrees
            max_degree = int(degrees.max()) if len(degrees) else 0

        if segments is None and hasattr(source, "segment_buffer"):
            segments = source.segment_buffer.reshape(-1, 2, 2)
            levels = source.segment_levels
        n_segments = 0 if segments is None else len(segments)

        error = "-"
        if f is not None and segments is not None:
            error = float(worst_isoline_error(f, segments, levels))

        values = (step, max_degree, source.triangle_count, source.vertex_count,
                  n_segments, error)
        self.log_row(*values)
        return values

    def log_timings(self, timings):
        """ Prints seconds and share of the total per stage. Returns the total. """
        total = sum(timings.values())
        for stage, seconds in timings.items():
            share = 100.0 * seconds / total if total > 0 else 0.0
            print(f"  {stage:<10} {seconds:8.4f}s  {share:5.1f}%")
        print(f"  {'total':<10} {total:8.4f}s")
        return total

    def success(self, message="Refinement Complete"):
        elapsed = time.perf_counter() - self.start_time
        print(f"\n>> {message} ({elapsed:.2f}s)\n")

    def error(self, message):
        print(f"\n!! CRITICAL ERROR: {message} !!\n")
