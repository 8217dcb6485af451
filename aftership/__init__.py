"""Python client and command line tool for the AfterShip tracking API."""

from aftership.version import __version__
from aftership.core.aftership import AfterShip

__all__ = ["AfterShip", "__version__"]
