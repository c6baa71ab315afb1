from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pdfbuilder")
except PackageNotFoundError:
    # package is not installed, return default
    __version__ = "0.0"
