"""shotchain: continuity and version state engine for storyboard editors."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("shotchain")
except PackageNotFoundError:  # pragma: no cover - fallback for editable installs
    __version__ = "0.1.0"

__all__ = ["__version__"]
