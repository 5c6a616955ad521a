"""activity-logger: embedded trip and location store for detected activities."""

import tomllib
from pathlib import Path

try:
    # Read from pyproject.toml first so development checkouts report the
    # version being worked on
    pyproject_path = Path(__file__).parent.parent.parent / "pyproject.toml"
    with open(pyproject_path, "rb") as f:
        data = tomllib.load(f)
    __version__ = data["project"]["version"]
except (OSError, KeyError, tomllib.TOMLDecodeError):
    # Installed in non-editable mode: use package metadata
    from importlib.metadata import PackageNotFoundError, version

    try:
        __version__ = version("activity-logger")
    except PackageNotFoundError:
        __version__ = "0.0.0-dev"
