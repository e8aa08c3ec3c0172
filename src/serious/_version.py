"""Version lookup for serious."""

import tomllib
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version
from pathlib import Path

_PYPROJECT = Path(__file__).parent.parent.parent / "pyproject.toml"


def get_version() -> str:
    """Installed distribution version, or the source checkout's ``pyproject.toml`` version."""
    try:
        return _metadata_version("serious")
    except PackageNotFoundError:
        pass
    if _PYPROJECT.exists():
        with _PYPROJECT.open("rb") as f:
            return str(tomllib.load(f).get("project", {}).get("version", "0.0.0"))
    return "0.0.0"
