"""
snapiso/quality.py
------------------
Tools for inspecting an adaptively refined mesh.
Calculates Area, Minimum Angle, Aspect Ratio and refinement Degree per
triangle, and checks that the connectivity is still conforming.
"""
import numpy as np
import matplotlib.pyplot as plt

from .topology import ConformityError, check_conformity


class MeshQuality:
    """
    Inspector class for a Mesh object.

    Usage:
        inspector = MeshQuality(mesh)
        inspector.analyze()
        inspector.print_report()
        inspector.plot_histograms()
    """
    def __init__(self, mesh):
        self.mesh = mesh
        # Metric Storage
        self.areas = np.zeros(0)
        self.min_angles = np.zeros(0)
        self.aspect_ratios = np.zeros(0)
        self.degrees = np.zeros(0, dtype=int)
        self.glued_edges = 0
        self.conforming = None

        self._analyzed = False

    def analyze(self):
        """
        Computes metrics for every triangle (vectorized over the arena).
        """
        verts = self.mesh.vertices
        tris = self.mesh.triangles

        p1 = verts[tris[:, 0], :2]
        p2 = verts[tris[:, 1], :2]
        p3 = verts[tris[:, 2], :2]

        # Edge Lengths
        a = np.linalg.norm(p2 - p1, axis=1)
        b = np.linalg.norm(p3 - p2, axis=1)
        c = np.linalg.norm(p1 - p3, axis=1)

        # Area (Shoelace, unsigned: the lattice winding is clockwise)
        cross = ((p2[:, 0] - p1[:, 0]) * (p3[:, 1] - p1[:, 1]) -
                 (p3[:, 0] - p1[:, 0]) * (p2[:, 1] - p1[:, 1]))
        area = 0.5 * np.abs(cross)

        # Aspect Ratio (circumradius / (2 * inradius), 1.0 = equilateral)
        s = 0.5 * (a + b + c)
        with np.errstate(divide='ignore', invalid='ignore'):
            r_in = area / s
            r_circ = (a * b * c) / (4 * area)
            ar = np.where(area > 1e-15, r_circ / (2 * r_in), 999.0)

        # Angles (Cosine Rule)
        angles = []
        for edge_len, adj1, adj2 in [(a, b, c), (b, a, c), (c, a, b)]:
            denom = 2 * adj1 * adj2
            with np.errstate(divide='ignore', invalid='ignore'):
                cos_theta = (adj1**2 + adj2**2 - edge_len**2) / denom
            cos_theta = np.clip(np.nan_to_num(cos_theta, nan=1.0), -1.0, 1.0)
            angles.append(np.degrees(np.arccos(cos_theta)))

        self.areas = area
        self.min_angles = np.min(angles, axis=0) if len(tris) else np.zeros(0)
        self.aspect_ratios = ar
        self.degrees = self.mesh.degrees.copy()

        try:
            self.glued_edges = check_conformity(self.mesh)
            self.conforming = True
        except ConformityError:
            self.conforming = False

        self._analyzed = True
        return self

    def total_area(self):
        if not self._analyzed: self.analyze()
        return float(self.areas.sum())

    def degree_histogram(self):
        """ Returns {degree: triangle count}. """
        if not self._analyzed: self.analyze()
        values, counts = np.unique(self.degrees, return_counts=True)
        return {int(v): int(n) for v, n in zip(values, counts)}

    def print_report(self):
        """ Prints a summary to stdout. """
        if not self._analyzed: self.analyze()

        print(f"--- Mesh Quality Report ({len(self.areas)} Triangles, "
              f"{self.mesh.vertex_count} Vertices) ---")
        if len(self.areas) == 0:
            print("Empty mesh.")
            return

        print(f"Area:")
        print(f"  Min: {self.areas.min():.2e}")
        print(f"  Max: {self.areas.max():.2e}")

        min_ang = self.min_angles.min()
        print(f"Min Angle: {min_ang:.2f} deg  ", end="")
        if min_ang < 10.0: print("[!] WARNING: Slivers Detected")
        elif min_ang < 20.0: print("[~] CAUTION: Low Quality")
        else: print("[OK] Good")

        max_ar = self.aspect_ratios.max()
        print(f"Max Aspect Ratio: {max_ar:.2f}  ", end="")
        if max_ar > 10.0: print("[!] WARNING: Highly Stretched")
        elif max_ar > 3.0: print("[~] CAUTION")
        else: print("[OK]")

        print(f"Degree: {self.degrees.min()} .. {self.degrees.max()}")
        for degree, count in self.degree_histogram().items():
            print(f"  {degree:3d}: {count}")

        if self.conforming:
            print(f"Conformity: [OK] {self.glued_edges} shared edges")
        else:
            print("Conformity: [!] BROKEN connectivity")

    def plot_histograms(self):
        """ Visualizes the distribution of quality metrics. """
        if not self._analyzed: self.analyze()

        fig, ax = plt.subplots(1, 3, figsize=(15, 4))

        def metric_hist(axis, data, color, title, xlabel, integer=False, limit_line=None):
            axis.set_title(title)
            axis.set_xlabel(xlabel)
            if len(data) == 0:
                return

            lo, hi = data.min(), data.max()
            if integer:
                # one bar per refinement degree
                bins = np.arange(lo, hi + 2) - 0.5
            elif np.isclose(lo, hi):
                # every triangle alike after uniform bisection
                pad = max(1e-6, 0.1 * abs(lo))
                bins = np.linspace(lo - pad, hi + pad, 10)
            else:
                bins = 20
            axis.hist(data, bins=bins, color=color, edgecolor='black')

            if limit_line:
                axis.axvline(limit_line, color='red', linestyle='--', label='Limit')
                axis.legend()

        metric_hist(ax[0], self.min_angles, 'skyblue',
                    "Minimum Angle (Target > 20°)", "Degrees", limit_line=20)
        metric_hist(ax[1], self.degrees, 'lightgreen',
                    "Refinement Degree", "Degree", integer=True)
        metric_hist(ax[2], self.areas, 'salmon', "Triangle Areas", "Area")

        plt.tight_layout()
        return fig
