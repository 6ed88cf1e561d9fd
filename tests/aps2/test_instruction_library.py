# Repository: https://gitlab.com/quantify-os/quantify-scheduler
# Licensed according to the LICENCE file on the main branch
import numpy as np
import pytest

from quantify_aps2 import constants
from quantify_aps2.exceptions import RangeViolationError
from quantify_aps2.instruction_library import (
    InstructionLibrary,
    Marker,
    Waveform,
    WaveformMemory,
)
from quantify_aps2.instructions import waveform_instruction
from quantify_aps2.types import Pulse


def test_library_is_keyed_by_pulse_identity():
    pulse = Pulse("X", 20e-9)
    twin = Pulse("X", 20e-9)
    record = Waveform(
        address=0,
        count=5,
        is_ta=False,
        write_flag=True,
        instruction=waveform_instruction(0, 5, False),
    )
    instr_lib = InstructionLibrary()
    instr_lib[pulse] = record

    assert instr_lib[pulse] is record
    assert pulse in instr_lib
    assert twin not in instr_lib
    assert len(instr_lib) == 1
    assert list(instr_lib) == [pulse.uid]


def test_missing_pulse():
    with pytest.raises(KeyError, match="has not been encoded"):
        InstructionLibrary()[Pulse("Y", 20e-9)]


def test_to_dict():
    pulse = Pulse("trigger", 10e-9)
    record = Marker(
        marker_select=1,
        state=True,
        count=3,
        transition_word=0b1111,
        write_flag=True,
        instruction=0,
    )
    instr_lib = InstructionLibrary()
    instr_lib[pulse] = record

    assert instr_lib.to_dict() == {
        pulse.uid: {
            "marker_select": 1,
            "state": True,
            "count": 3,
            "transition_word": 0b1111,
            "write_flag": True,
            "instruction": 0,
        }
    }


def test_waveform_memory_addresses():
    memory = WaveformMemory()
    assert memory.allocate(np.ones(8)) == 0
    assert memory.allocate(np.full(4, 2 + 3j)) == 8
    assert memory.size == 12

    real, imag = memory.to_arrays()
    assert real.dtype == np.int16
    np.testing.assert_array_equal(real, [1] * 8 + [2] * 4)
    np.testing.assert_array_equal(imag, [0] * 8 + [3] * 4)


def test_empty_waveform_memory():
    real, imag = WaveformMemory().to_arrays()
    assert len(real) == 0
    assert len(imag) == 0
    assert real.dtype == np.int16


def test_waveform_memory_overflow():
    memory = WaveformMemory()
    memory.size = constants.MAX_WAVEFORM_PTS - 4
    with pytest.raises(RangeViolationError):
        memory.allocate(np.zeros(8))
