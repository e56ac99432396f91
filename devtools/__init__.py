from .core import SERVER_VERSION as __version__

__all__ = ["__version__"]
