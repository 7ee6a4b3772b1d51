"""FileFinder - recursive file search by name and content.

Walks a directory tree, matches file names and contents (plain text and
optionally PDF), and reports matches together with run statistics.
"""

__version__ = "0.1.0"
__author__ = "FileFinder Contributors"

from filefinder.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__"]
