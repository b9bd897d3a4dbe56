__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'flint'
__author__ = 'Eiko Reishin (影皇嶺臣)'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .binding import *
from .codec import *
from .dispatcher import *
from .faults import *
from .parsing import *
from .programs import *
from .registry import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 0, 0, "final", 0, "")

__all__ = (
    "__path__",
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the program layer
__all__ += programs.__all__  # type: ignore[attr-defined]
# Load the exposed API of the registry and its codec
__all__ += registry.__all__  # type: ignore[attr-defined]
__all__ += codec.__all__  # type: ignore[attr-defined]
# Load the exposed API of the run-time pipeline
__all__ += parsing.__all__  # type: ignore[attr-defined]
__all__ += binding.__all__  # type: ignore[attr-defined]
__all__ += dispatcher.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
