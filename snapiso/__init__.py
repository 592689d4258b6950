# snapiso/__init__.py

__version__ = "0.1.0"

from snapcore.log import configure_logging

# Import the Mesh engine
from .mesh import Mesh, RefinementDivergedError

# Import Grid, Isolines and Refinement policies
from .grid import InvalidDomainError, subdivide_coords, pane_coords, axis_resolution
from .isolines import analyze_triangle, extract_segments, segment_buffer, contour_levels
from .refine import centroid_error_predicate, isoline_error_predicate, any_predicate, refine_uniform
from .topology import ConformityError, check_conformity

# Import the Plot driver
from .settings import PlotSettings
from .contour_plot import ContourPlot, ContourFrame, RedrawScheduler

configure_logging("snapiso")
