"""envyoink - grab (yoink) environment variable names from a workspace into an env example file."""
from .version import __version__, get_version

__all__ = ["__version__", "get_version"]
