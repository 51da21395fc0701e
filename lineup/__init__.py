"""lineup: repository convention linter."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("lineup")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"
