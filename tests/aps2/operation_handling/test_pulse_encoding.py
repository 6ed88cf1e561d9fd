# Repository: https://gitlab.com/quantify-os/quantify-scheduler
# Licensed according to the LICENCE file on the main branch
"""Tests for the encoding of analog and marker pulses."""
import logging

import numpy as np
import pytest

from quantify_aps2 import constants
from quantify_aps2.exceptions import InvalidChannelMapError, RangeViolationError
from quantify_aps2.instruction_library import InstructionLibrary, WaveformMemory
from quantify_aps2.instructions import Instruction, marker_instruction, waveform_instruction
from quantify_aps2.operation_handling import pulses
from quantify_aps2.settings import CompilerSettings
from quantify_aps2.types import Pulse
from tests.fixtures.sequences import ramp_pulse, square_pulse


def test_constant_pulse_is_time_amplitude_pair(settings):
    memory = WaveformMemory()
    record = pulses.encode_waveform(square_pulse(16), memory, settings)

    assert record.is_ta
    assert record.address == 0
    assert record.count == 3
    assert record.write_flag
    # a single quantum is stored and played
    assert record.instruction == waveform_instruction(0, 0, True)
    assert memory.size == constants.ADDRESS_UNIT
    real, imag = memory.to_arrays()
    np.testing.assert_array_equal(real, [4096] * 4)
    np.testing.assert_array_equal(imag, [0] * 4)


def test_shaped_pulse(settings):
    memory = WaveformMemory()
    memory.allocate(np.zeros(8))
    record = pulses.encode_waveform(ramp_pulse(16), memory, settings)

    assert not record.is_ta
    assert record.address == 2
    assert record.count == 3
    assert record.instruction == waveform_instruction(2, 3, False)
    assert memory.size == 24

    instr = Instruction.unflatten(record.instruction)
    assert instr.count == record.count
    assert instr.address == record.address


def test_unquantized_pulse_is_zero_padded(settings, caplog):
    memory = WaveformMemory()
    with caplog.at_level(logging.WARNING, logger="quantify_aps2.operation_handling.pulses"):
        record = pulses.encode_waveform(ramp_pulse(10), memory, settings)

    assert "padding with zeros to 12" in caplog.text
    assert record.count == 2
    assert memory.size == 12
    real, _ = memory.to_arrays()
    assert real[9] != 0
    np.testing.assert_array_equal(real[10:], [0, 0])


def test_empty_pulse(settings):
    with pytest.raises(RangeViolationError):
        pulses.encode_waveform(Pulse("empty", 0.0), WaveformMemory(), settings)


def test_phase_is_baked_into_samples():
    wf = pulses.generate_waveform_data(
        square_pulse(8, amp=1.0, phase=np.pi / 2), CompilerSettings()
    )
    np.testing.assert_array_equal(wf, np.full(8, 8191j))


def test_phase_is_deferred():
    wf = pulses.generate_waveform_data(
        square_pulse(8, amp=1.0, phase=np.pi / 2),
        CompilerSettings(use_phase_offset_instruction=True),
    )
    np.testing.assert_array_equal(wf, np.full(8, 8191))


def test_frequency_is_baked_into_samples():
    frequency = 100e6
    wf = pulses.generate_waveform_data(
        square_pulse(8, amp=1.0, frequency=frequency), CompilerSettings()
    )
    expected = 8191 * np.exp(-2j * np.pi * frequency / constants.DAC_CLOCK * np.arange(1, 9))
    np.testing.assert_allclose(wf, expected, atol=1)


def test_frequency_is_deferred():
    settings = CompilerSettings(use_pulse_frequency_instruction=True)
    pulse = square_pulse(8, amp=1.0, frequency=100e6)
    np.testing.assert_array_equal(pulses.generate_waveform_data(pulse, settings), np.full(8, 8191))
    assert pulses.encode_waveform(pulse, WaveformMemory(), settings).is_ta


def test_amplitude_is_clamped(settings):
    wf = pulses.generate_waveform_data(square_pulse(4, amp=-1.5), settings)
    np.testing.assert_array_equal(wf, np.full(4, -8191))


def test_create_wf_instrs_does_not_deduplicate(settings):
    pulse = ramp_pulse(8)
    other = ramp_pulse(8)
    instr_lib = InstructionLibrary()
    memory = WaveformMemory()

    pulses.create_wf_instrs(instr_lib, [pulse, other, pulse], memory, settings)

    assert len(instr_lib) == 2
    assert memory.size == 24
    assert instr_lib[other].address == 2
    assert instr_lib[pulse].address == 4


@pytest.mark.parametrize(
    "num_points, state, transition_word",
    [
        (12, True, 0b1111),
        (13, True, 0b0111),
        (14, True, 0b0011),
        (15, True, 0b0001),
        (12, False, 0b0000),
        (13, False, 0b1000),
        (14, False, 0b1100),
        (15, False, 0b1110),
    ],
)
def test_encode_marker(num_points, state, transition_word):
    pulse = square_pulse(num_points, amp=1.0 if state else 0.0)
    record = pulses.encode_marker(pulse, 2)

    assert record.marker_select == 2
    assert record.state is state
    assert record.count == 3
    assert record.transition_word == transition_word
    assert record.instruction == marker_instruction(2, state, 3, transition_word)


def test_marker_state_threshold():
    assert not pulses.encode_marker(square_pulse(8, amp=0.5), 1).state
    assert pulses.encode_marker(square_pulse(8, amp=0.51), 1).state


@pytest.mark.parametrize("num_points", [2**30, 2**32])
def test_marker_too_long(num_points):
    with pytest.raises(RangeViolationError):
        pulses.encode_marker(square_pulse(num_points, amp=1.0), 1)


def test_create_marker_instrs():
    trigger = square_pulse(40, amp=1.0, label="trigger")
    instr_lib = InstructionLibrary()
    pulses.create_marker_instrs(instr_lib, [trigger], 4)

    record = instr_lib[trigger]
    assert record.count == 10
    assert Instruction.unflatten(record.instruction).marker_select == 4


@pytest.mark.parametrize("marker_select", [0, 5, -1])
def test_marker_index_out_of_range(marker_select):
    with pytest.raises(InvalidChannelMapError, match=f"Marker index {marker_select}"):
        pulses.encode_marker(square_pulse(8, amp=1.0), marker_select)

    with pytest.raises(InvalidChannelMapError):
        pulses.create_marker_instrs(
            InstructionLibrary(), [square_pulse(8, amp=1.0)], marker_select
        )
