"""jsast static analysis scanner for JavaScript and TypeScript."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("jsast")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "1.0.0-dev"

__all__ = ["__version__"]
