# Repository: https://gitlab.com/quantify-os/quantify-scheduler
# Licensed according to the LICENCE file on the main branch
"""Encoding of modulator (NCO) instructions, which produce no output by themselves."""

from __future__ import annotations

from quantify_aps2 import helpers
from quantify_aps2.enums import ModulationOp
from quantify_aps2.exceptions import UnsupportedConstructError
from quantify_aps2.instructions import modulation_instruction


def encode_modulation(op: ModulationOp | int, nco_select: int, payload: int = 0) -> int:
    """
    Packs a modulator instruction for any of the supported operations.

    Parameters
    ----------
    op
        The modulator operation, or its raw operation code.
    nco_select
        Four bit mask selecting the NCO(s).
    payload
        Signed 32 bit immediate.

    Raises
    ------
    UnsupportedConstructError
        If ``op`` is not one of the modulator operations.

    """
    try:
        op = ModulationOp(op)
    except ValueError as exc:
        raise UnsupportedConstructError(
            f"Untranslated modulation operation {op!r}."
        ) from exc
    return modulation_instruction(op, nco_select, payload)


def reset_phase(nco_select: int) -> int:
    """Zeros the phase and frame accumulators of the selected NCOs."""
    return encode_modulation(ModulationOp.RESET_PHASE, nco_select)


def set_frequency(nco_select: int, frequency_hz: float) -> int:
    """Sets the frequency of the selected NCOs."""
    return encode_modulation(
        ModulationOp.SET_FREQ,
        nco_select,
        helpers.get_nco_set_frequency_arguments(frequency_hz),
    )


def set_phase(nco_select: int, phase_rad: float) -> int:
    """Sets the phase offset of the selected NCOs."""
    return encode_modulation(
        ModulationOp.SET_PHASE, nco_select, helpers.get_nco_phase_arguments(phase_rad)
    )


def update_frame(nco_select: int, angle: float) -> int:
    """Rotates the frame of the selected NCOs by ``angle`` cycles."""
    return encode_modulation(
        ModulationOp.UPDATE_FRAME, nco_select, helpers.get_nco_frame_arguments(angle)
    )


def modulate(nco_select: int, count: int) -> int:
    """
    Advances the selected NCOs alongside an envelope.

    Parameters
    ----------
    nco_select
        Four bit mask selecting the NCO(s).
    count
        Number of quanta of the envelope minus one, i.e. the count of the waveform
        instruction that follows.

    """
    return encode_modulation(ModulationOp.MODULATE, nco_select, count)
