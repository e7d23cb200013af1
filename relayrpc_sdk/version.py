"""
Version information for the relay RPC SDK.
"""
import importlib.metadata
import pathlib

import tomli

DISTRIBUTION_NAME = "relayrpc-sdk"
FALLBACK_VERSION = "0.1.0"


def _read_version() -> str:
    """Installed metadata first, then the source tree's pyproject.toml"""
    try:
        return importlib.metadata.version(DISTRIBUTION_NAME)
    except importlib.metadata.PackageNotFoundError:
        pass

    pyproject = pathlib.Path(__file__).parent.parent / "pyproject.toml"
    try:
        with pyproject.open("rb") as f:
            return tomli.load(f)["project"]["version"]
    except (OSError, KeyError, tomli.TOMLDecodeError):
        return FALLBACK_VERSION


__version__ = _read_version()
