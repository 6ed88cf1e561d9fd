# Repository: https://gitlab.com/quantify-os/quantify-scheduler
# Licensed according to the LICENCE file on the main branch
"""Validated base model of the compiler configuration."""

import ruamel.yaml as ry
from pydantic import BaseModel, ConfigDict


class DataStructure(BaseModel):
    """
    Base of the configuration models of the compiler, such as
    :class:`~quantify_aps2.settings.CompilerSettings`.

    Unknown fields are rejected and every assignment is validated, so a misspelled
    or out of range setting fails where it is made rather than during compilation.
    Subclasses registered with :data:`quantify_aps2.yaml_utils.yaml` are written to
    YAML as a mapping tagged with the class name, holding only the fields that were
    set explicitly.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    @classmethod
    def to_yaml(cls, representer: ry.Representer, node: BaseModel) -> ry.MappingNode:
        """Represent the explicitly set fields as a ``!ClassName`` mapping."""
        return representer.represent_mapping(
            f"!{cls.__name__}", node.model_dump(exclude_unset=True)
        )

    @classmethod
    def from_yaml(cls, constructor: ry.Constructor, node: ry.MappingNode) -> "DataStructure":
        """Validate a ``!ClassName`` mapping into an instance of the class."""
        fields = ry.CommentedMap()
        constructor.construct_mapping(node, maptyp=fields, deep=True)
        return cls.model_validate(dict(fields))
