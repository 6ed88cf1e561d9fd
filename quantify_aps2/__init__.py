# Repository: https://gitlab.com/quantify-os/quantify-scheduler
# Licensed according to the LICENCE file on the main branch
"""
.. list-table::
    :header-rows: 1
    :widths: auto

    * - Import alias
      - Target
    * - :func:`.compile_sequence`
      - :func:`!quantify_aps2.compile_sequence`
    * - :class:`.CompilerSettings`
      - :class:`!quantify_aps2.CompilerSettings`
    * - :class:`.ChannelMap`
      - :class:`!quantify_aps2.ChannelMap`
    * - :func:`.read_sequence_file`
      - :func:`!quantify_aps2.read_sequence_file`
"""

from ._version import __version__
from .exceptions import (
    CompilationError,
    InvalidChannelMapError,
    RangeViolationError,
    UnsupportedConstructError,
)
from .file_io import read_sequence_file, write_sequence_file
from .instructions import Instruction, decompile_instructions, format_instructions
from .sequence_compiler import CompiledProgram, compile_sequence
from .settings import CompilerSettings
from .types import (
    AnalogChannel,
    ChannelMap,
    FramePulse,
    MarkerChannel,
    Pulse,
    PulseBlock,
)

__all__ = [
    "__version__",
    "compile_sequence",
    "CompiledProgram",
    "CompilerSettings",
    "ChannelMap",
    "AnalogChannel",
    "MarkerChannel",
    "Pulse",
    "FramePulse",
    "PulseBlock",
    "Instruction",
    "decompile_instructions",
    "format_instructions",
    "read_sequence_file",
    "write_sequence_file",
    "CompilationError",
    "InvalidChannelMapError",
    "RangeViolationError",
    "UnsupportedConstructError",
]
