__all__ = ["__version__"]

from importlib.metadata import version, PackageNotFoundError

# Derive the package version from installed distribution metadata when
# available. A bare source checkout falls back to a dev version string that
# still parses as a semantic version.
try:
	__version__ = version("version-watch")
except PackageNotFoundError:
	__version__ = "0.1.0-dev"
