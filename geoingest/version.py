from importlib.metadata import version as pkg_version

GEOINGEST_PKG_NAME = "geoingest"
__version__ = pkg_version(GEOINGEST_PKG_NAME)
