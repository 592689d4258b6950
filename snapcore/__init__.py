''' snapcore: console reporting and logging shared by the Snap packages. '''
__version__ = "0.7.0"

from .display import RefinementDisplay
from .log import configure_logging
