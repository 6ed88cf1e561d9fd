# Repository: https://gitlab.com/quantify-os/quantify-scheduler
# Licensed according to the LICENCE file on the main branch
"""Settings controlling how sequences are compiled."""
from __future__ import annotations

from pydantic import Field

from quantify_aps2 import constants
from quantify_aps2.structure.model import DataStructure
from quantify_aps2.yaml_utils import yaml


@yaml.register_class
class CompilerSettings(DataStructure):
    """
    Settings of the APS2 sequence compiler.

    Phase and frequency offsets of analog pulses are either baked into the waveform
    samples (the default) or applied at runtime with modulator instructions. For each
    of the two quantities exactly one of these policies is active.

    .. admonition:: Example

        .. code-block:: python

            settings = CompilerSettings(use_phase_offset_instruction=True)
    """

    use_phase_offset_instruction: bool = False
    """If True, the pulse phase is applied with a set phase instruction instead of
    rotating the waveform samples."""
    use_pulse_frequency_instruction: bool = False
    """If True, the pulse frequency offset is applied with set frequency instructions
    instead of modulating the waveform samples."""
    nco_select: int = Field(default=constants.NCO_SELECT, ge=0, le=0xF)
    """Four bit NCO select mask used to modulate the analog pair."""
    reset_phase_nco_select: int = Field(default=constants.RESET_PHASE_NCO_SELECT, ge=0, le=0xF)
    """Four bit NCO select mask used when resetting the phase before a trigger."""
