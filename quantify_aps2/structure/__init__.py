# Repository: https://gitlab.com/quantify-os/quantify-scheduler
# Licensed according to the LICENCE file on the main branch
"""
Validated and serializable data structures using :mod:`pydantic`.

In this module we provide a :class:`pre-configured Pydantic model <.DataStructure>`
used for the configuration of the compiler.
"""

from .model import DataStructure

__all__ = ["DataStructure"]
