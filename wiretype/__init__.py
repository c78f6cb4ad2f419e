"""Wiretype - XML-RPC wire type classification for host types."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("wiretype")
except PackageNotFoundError:
    __version__ = "(local)"
