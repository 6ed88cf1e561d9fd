#!/usr/bin/env python

"""The setup script."""
from setuptools import find_packages, setup

install_requires = [
    "setuptools>=66.1",
    "numpy",
    "h5py",
    "pydantic>=2.0",
    "ruamel.yaml",
    "dataclasses-json",
    "columnar",
]


def get_version(pkg_path):
    """Load version.py module without importing the whole package."""
    import os
    from importlib.util import module_from_spec, spec_from_file_location

    spec = spec_from_file_location("version", os.path.join(pkg_path, "_version.py"))
    module = module_from_spec(spec)
    spec.loader.exec_module(module)
    return module.__version__


setup(
    name="quantify-aps2",
    description="Compiler of resolved pulse sequences to APS2 sequence files.",
    version=get_version(r"quantify_aps2"),
    packages=find_packages(include=["quantify_aps2", "quantify_aps2.*"]),
    python_requires=">=3.9",
    install_requires=install_requires,
    extras_require={"test": ["pytest"]},
)
