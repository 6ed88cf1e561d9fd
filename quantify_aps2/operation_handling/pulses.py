# Repository: https://gitlab.com/quantify-os/quantify-scheduler
# Licensed according to the LICENCE file on the main branch
"""Encoding of analog and digital pulses."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

import numpy as np

from quantify_aps2 import constants, helpers
from quantify_aps2.exceptions import InvalidChannelMapError
from quantify_aps2.instruction_library import Marker, Waveform
from quantify_aps2.instructions import marker_instruction, waveform_instruction

if TYPE_CHECKING:
    from quantify_aps2.instruction_library import InstructionLibrary, WaveformMemory
    from quantify_aps2.settings import CompilerSettings
    from quantify_aps2.types import Pulse

logger = logging.getLogger(__name__)

RISING_TRANSITION_WORDS = (0b1111, 0b0111, 0b0011, 0b0001)
"""Transition words of a marker going high, indexed by the duration modulo 4."""
FALLING_TRANSITION_WORDS = (0b0000, 0b1000, 0b1100, 0b1110)
"""Transition words of a marker going low, indexed by the duration modulo 4."""


def generate_waveform_data(pulse: Pulse, settings: CompilerSettings) -> np.ndarray:
    """
    Samples a pulse and scales it to the DAC range.

    The phase and the frequency offset of the pulse are folded into the samples
    unless the settings defer them to modulator instructions.

    Parameters
    ----------
    pulse
        The analog pulse to sample.
    settings
        The compiler settings selecting the phase and frequency policies.

    Returns
    -------
    :
        Complex samples with integer valued parts, clamped to the 14 bit DAC range.

    """
    wf = pulse.amp * pulse.waveform(constants.DAC_CLOCK)
    if not settings.use_phase_offset_instruction:
        wf = wf * np.exp(1j * pulse.phase)
    if not settings.use_pulse_frequency_instruction and pulse.frequency != 0:
        # bake the pulse frequency into the waveform
        time_steps = np.arange(1, len(wf) + 1)
        wf = wf * np.exp(-1j * 2 * np.pi * pulse.frequency / constants.DAC_CLOCK * time_steps)
    return helpers.clamp_to_dac(wf)


def encode_waveform(
    pulse: Pulse, memory: WaveformMemory, settings: CompilerSettings
) -> Waveform:
    """
    Encodes an analog pulse, storing its samples in waveform memory.

    A pulse whose samples are all identical is stored as a single quantum and marked
    as a time-amplitude pair. Other pulses are zero-padded to a multiple of
    :data:`~.constants.ADDRESS_UNIT` and stored in full.

    Parameters
    ----------
    pulse
        The analog pulse to encode.
    memory
        The waveform memory the samples are appended to.
    settings
        The compiler settings.

    Returns
    -------
    :
        The encoded record.

    Raises
    ------
    RangeViolationError
        If the pulse has no samples, is too long for the count field, or the address
        or the memory size exceed the hardware limits.

    """
    wf = generate_waveform_data(pulse, settings)
    num_samples = helpers.check_range(
        f"Length of pulse {pulse.label!r}", len(wf), constants.MAX_WAVEFORM_PTS, minimum=1
    )
    is_ta = bool(np.all(wf == wf[0]))

    quantized_length = helpers.quantize_length(num_samples)
    if is_ta:
        stored = np.full(constants.ADDRESS_UNIT, wf[0])
    else:
        if quantized_length != num_samples:
            logger.warning(
                f"Pulse {pulse.label!r} has {num_samples} samples, which is not a multiple "
                f"of {constants.ADDRESS_UNIT}; padding with zeros to {quantized_length}."
            )
        stored = np.zeros(quantized_length, dtype=complex)
        stored[:num_samples] = wf

    count = helpers.check_range(
        f"Count of pulse {pulse.label!r}",
        quantized_length // constants.ADDRESS_UNIT - 1,
        constants.WFM_COUNT_MASK,
    )
    address = memory.allocate(stored) // constants.ADDRESS_UNIT
    helpers.check_range("Waveform address", address, constants.WFM_ADDR_MASK)

    # time-amplitude pairs occupy a single quantum of memory
    stored_count = len(stored) // constants.ADDRESS_UNIT - 1
    instruction = waveform_instruction(address, stored_count, is_ta, write_flag=True)
    logger.debug(
        f"Encoded pulse {pulse.label!r}: addr={address}, count={count}, isTA={is_ta}."
    )
    return Waveform(
        address=address,
        count=count,
        is_ta=is_ta,
        write_flag=True,
        instruction=instruction,
    )


def create_wf_instrs(
    instr_lib: InstructionLibrary,
    pulses: Iterable[Pulse],
    memory: WaveformMemory,
    settings: CompilerSettings,
) -> None:
    """
    Encodes the analog pulses of a channel in order into ``instr_lib``.

    Every listed pulse is sampled and allocated afresh; no deduplication of identical
    waveforms takes place.
    """
    for pulse in pulses:
        instr_lib[pulse] = encode_waveform(pulse, memory, settings)


def encode_marker(pulse: Pulse, marker_select: int) -> Marker:
    """
    Encodes a digital pulse as a marker instruction.

    The duration is expressed in quanta, rounded down. The remaining samples select
    the transition word, which defines at which sample of the last quantum the
    output changes.

    Parameters
    ----------
    pulse
        The digital pulse. The marker is high during the pulse if ``pulse.amp > 0.5``.
    marker_select
        The 1-based index of the marker output.

    Returns
    -------
    :
        The encoded record.

    Raises
    ------
    RangeViolationError
        If the duration exceeds :data:`~.constants.MAX_MARKER_COUNT` samples or does
        not fit in the count field.
    InvalidChannelMapError
        If ``marker_select`` is not one of the four marker outputs.

    """
    if not 1 <= marker_select <= constants.NUM_MARKERS:
        raise InvalidChannelMapError(
            f"Marker index {marker_select} of pulse {pulse.label!r} is outside "
            f"1..{constants.NUM_MARKERS}."
        )
    num_points = helpers.check_range(
        f"Length of marker pulse {pulse.label!r}",
        helpers.to_samples(pulse.length),
        constants.MAX_MARKER_COUNT,
    )
    quad_count = helpers.check_range(
        f"Count of marker pulse {pulse.label!r}",
        num_points // constants.ADDRESS_UNIT,
        constants.MARKER_COUNT_MASK,
    )
    count_rem = num_points % constants.ADDRESS_UNIT
    state = pulse.amp > 0.5
    if state:
        transition_word = RISING_TRANSITION_WORDS[count_rem]
    else:
        transition_word = FALLING_TRANSITION_WORDS[count_rem]
    instruction = marker_instruction(
        marker_select, state, quad_count, transition_word, write_flag=True
    )
    return Marker(
        marker_select=marker_select,
        state=state,
        count=quad_count,
        transition_word=transition_word,
        write_flag=True,
        instruction=instruction,
    )


def create_marker_instrs(
    instr_lib: InstructionLibrary, pulses: Iterable[Pulse], marker_select: int
) -> None:
    """Encodes the digital pulses of marker ``marker_select`` into ``instr_lib``."""
    for pulse in pulses:
        instr_lib[pulse] = encode_marker(pulse, marker_select)
