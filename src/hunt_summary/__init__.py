"""Hunt: Showdown match summary extractor.

Turns the game client's flat ``attributes.xml`` dump into de-duplicated,
timestamped CSV snapshots of every team and player in the last match.
"""

from .version import __version__, __author__, __email__
from .config import AppSettings, get_settings

__all__ = [
    "__version__",
    "__author__",
    "__email__",
    "AppSettings",
    "get_settings",
    # Key subpackages
    "models",
    "io_clients",
    "schema",
    "transformers",
    "storage",
    "watch",
    "pipelines",
]
