"""Community platform API access."""

from .client import PlatformClient

__all__ = ["PlatformClient"]
