# Repository: https://gitlab.com/quantify-os/quantify-scheduler
# Licensed according to the LICENCE file on the main branch
"""Module containing YAML utilities."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import ruamel.yaml as ry

if TYPE_CHECKING:
    from pathlib import Path

# The "rt" (round-trip) loader retains comments and key order of the YAML files and
# handles the tags of the registered classes.
yaml = ry.YAML(typ="rt")


def dump_to_file(obj: Any, filename: str | Path) -> None:
    """Serialize a registered object to a YAML file."""
    with open(filename, "w") as file:
        yaml.dump(obj, file)


def load_from_file(filename: str | Path) -> Any:
    """Read YAML data from a file and convert it to instances of the registered classes."""
    with open(filename) as file:
        return yaml.load(file)


__all__ = ["yaml", "dump_to_file", "load_from_file"]
