"""rulemcp: coding-convention rules served over a small JSON protocol."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("rulemcp")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"
