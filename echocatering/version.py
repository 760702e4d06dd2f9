"""
Version retrieval module.

Reads the project version from pyproject.toml.
"""

from pathlib import Path

import tomli
from pydantic import validate_call


@validate_call(validate_return=True)
def get_version() -> str:
    """
    Retrieve the version from pyproject.toml.

    Returns:
        str: Project version
    """
    pyproject_path = Path(__file__).parent.parent / "pyproject.toml"

    with open(pyproject_path, "rb") as f:
        pyproject_data = tomli.load(f)

    return pyproject_data["project"]["version"]


@validate_call(validate_return=True)
def get_api_version() -> str:
    """
    Returns the API version prefix, ``v1`` for any 0.x release.
    """
    major_version = get_version().split(".")[0]
    if major_version == "0":
        major_version = "1"
    return f"v{major_version}"
