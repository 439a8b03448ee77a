"""
Exposes the version of geomappable
"""
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
import re
from typing import Optional

_VERSION_LINE = re.compile(r'^\s*v?(\d+\.\d+\.\d+(?:\.[a-zA-Z0-9]+)?)\s*$')


def _read_version_file() -> Optional[str]:
    """
    Reads the version from the VERSION file at the root of a source checkout, in
    the same format setup.py accepts. Used when the package isn't installed.
    """
    path = Path(__file__).resolve().parents[1] / 'VERSION'
    try:
        lines = path.read_text(encoding='utf-8').splitlines()
    except OSError:
        return None

    for line in lines:
        match = _VERSION_LINE.match(line)
        if match:
            return match.group(1)

    return None


try:
    __version__ = version('geomappable')
except PackageNotFoundError:
    __version__ = _read_version_file()

__all__ = ['__version__']
