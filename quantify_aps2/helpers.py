# Repository: https://gitlab.com/quantify-os/quantify-scheduler
# Licensed according to the LICENCE file on the main branch
"""Helper functions for quantizing times, amplitudes and NCO arguments."""
from __future__ import annotations

import math

import numpy as np

from quantify_aps2 import constants
from quantify_aps2.exceptions import RangeViolationError


def to_samples(duration: float, sampling_rate: float = constants.DAC_CLOCK) -> int:
    """
    Converts a duration in seconds to the nearest integer number of samples.

    Parameters
    ----------
    duration
        A duration in seconds.
    sampling_rate
        The sampling rate in samples per second.

    Returns
    -------
    :
        The number of samples.

    """
    return int(round(duration * sampling_rate))


def quantize_length(num_samples: int, address_unit: int = constants.ADDRESS_UNIT) -> int:
    """Rounds a number of samples up to the next multiple of ``address_unit``."""
    return address_unit * math.ceil(num_samples / address_unit)


def is_quantized(num_samples: int, address_unit: int = constants.ADDRESS_UNIT) -> bool:
    """Whether ``num_samples`` is a multiple of ``address_unit``."""
    return num_samples % address_unit == 0


def check_range(quantity: str, value: int, limit: int, minimum: int = 0) -> int:
    """
    Verifies that ``minimum <= value <= limit``.

    Parameters
    ----------
    quantity
        Description of the value used in the exception message.
    value
        The value to check.
    limit
        The largest allowed value.
    minimum
        The smallest allowed value.

    Returns
    -------
    :
        The value, unmodified.

    Raises
    ------
    RangeViolationError
        If the value is outside ``[minimum, limit]``.

    """
    if value < minimum or value > limit:
        raise RangeViolationError(quantity, value, limit, minimum)
    return value


def clamp_to_dac(waveform: np.ndarray) -> np.ndarray:
    """
    Scales a normalized complex waveform to the 14 bit DAC range.

    The real and imaginary parts are rounded to the nearest integer (ties to even)
    and clipped to :data:`~.constants.MAX_WAVEFORM_VALUE`.

    Parameters
    ----------
    waveform
        Complex samples, nominally within the unit circle.

    Returns
    -------
    :
        Complex array with integer valued real and imaginary parts.

    """
    waveform = np.asarray(waveform, dtype=complex)
    limit = constants.MAX_WAVEFORM_VALUE
    real = np.clip(np.round(limit * waveform.real), -limit, limit)
    imag = np.clip(np.round(limit * waveform.imag), -limit, limit)
    return real + 1j * imag


def get_nco_set_frequency_arguments(frequency_hz: float) -> int:
    """
    Converts a frequency in Hz to the tuning word of the NCO set frequency instruction.

    The tuning word is the phase increment per FPGA clock cycle as a fraction of a
    full cycle, expressed with :data:`~.constants.NCO_FREQ_BITS` fractional bits. The
    sign is inverted to match the convention of the modulator.

    Parameters
    ----------
    frequency_hz
        The frequency in Hz.

    Returns
    -------
    :
        The signed tuning word.

    """
    return int(round(-frequency_hz / constants.FPGA_CLOCK * 2**constants.NCO_FREQ_BITS))


def get_nco_frame_arguments(angle: float) -> int:
    """
    Converts a frame change to the argument of the NCO update frame instruction.

    Parameters
    ----------
    angle
        The frame rotation in cycles. The rotation is applied in the negative sense
        and taken modulo one cycle.

    Returns
    -------
    :
        The frame change as a fraction of a cycle with 28 fractional bits.

    """
    num_steps = 2**constants.NCO_FREQ_BITS
    return int(round((-angle % 1) * num_steps)) % num_steps


def get_nco_phase_arguments(phase_rad: float) -> int:
    """
    Converts a phase in radians to the argument of the NCO set phase instruction.

    We take the phase modulo one cycle to account for negative phases and phases
    larger than :math:`2\\pi`.

    Parameters
    ----------
    phase_rad
        The phase in radians.

    Returns
    -------
    :
        The phase as a fraction of a cycle with 28 fractional bits.

    """
    num_steps = 2**constants.NCO_FREQ_BITS
    return int(round((phase_rad / (2 * np.pi) % 1) * num_steps)) % num_steps
