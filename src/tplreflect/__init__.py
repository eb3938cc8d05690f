"""tplreflect: static variable and block discovery for template markup."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("tplreflect")
except PackageNotFoundError:
    __version__ = "dev"
