"""prx: branch and pull request workflows driven by issue trackers and templates."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("gh-prx")
except PackageNotFoundError:
    # Fallback for development mode
    __version__ = "0.0.0-dev"
