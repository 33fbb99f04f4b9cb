from importlib import metadata

try:
    __version__ = metadata.version("permscout")
except metadata.PackageNotFoundError:
    __version__ = "0.1.0"

from .cli import main

__all__ = ["__version__", "main"]
