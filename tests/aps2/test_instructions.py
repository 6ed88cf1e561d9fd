# Repository: https://gitlab.com/quantify-os/quantify-scheduler
# Licensed according to the LICENCE file on the main branch
"""Tests for the instruction packing module."""
import pytest

from quantify_aps2 import instructions
from quantify_aps2.enums import CompareOp, ModulationOp, Opcode, WaveformOp
from quantify_aps2.exceptions import RangeViolationError
from quantify_aps2.instructions import Instruction


@pytest.mark.parametrize(
    "word, expected",
    [
        (instructions.waveform_instruction(0, 1, False), 0x0D00_0000_0100_0000),
        (instructions.waveform_instruction(5, 0, True), 0x0D00_2000_0000_0005),
        (instructions.waveform_instruction(5, 0, True, write_flag=False), 0x0C00_2000_0000_0005),
        (instructions.marker_instruction(2, True, 3, 0b0111), 0x1500_000F_0000_0003),
        (instructions.marker_instruction(1, False, 0, 0b0000), 0x1100_0000_0000_0000),
        (instructions.modulation_instruction(ModulationOp.MODULATE, 0x1, 1), 0xA100_0100_0000_0001),
        (instructions.modulation_instruction(ModulationOp.RESET_PHASE, 0x7), 0xA100_2700_0000_0000),
        (instructions.modulation_instruction(ModulationOp.SET_FREQ, 0x1, -1), 0xA100_6100_FFFF_FFFF),
        (instructions.sync_instruction(), 0x9100_8000_0000_0000),
        (instructions.wait_instruction(), 0x2100_4000_0000_0000),
        (instructions.control_instruction(Opcode.GOTO, 42), 0x6100_0000_0000_002A),
        (instructions.waveform_prefetch_instruction(3), 0x0D00_C000_0000_0003),
    ],
)
def test_packed_words(word, expected):
    assert word == expected


def test_payload_truncated_to_56_bits():
    word = instructions.pack_instruction(Opcode.GOTO, 2**60 + 7)
    assert word == (Opcode.GOTO << 60) | 7


@pytest.mark.parametrize("payload", [2**31, -(2**31) - 1])
def test_modulation_payload_out_of_range(payload):
    with pytest.raises(RangeViolationError):
        instructions.modulation_instruction(ModulationOp.SET_FREQ, 0x1, payload)


def test_unflatten_waveform():
    word = instructions.waveform_instruction(0x123, 0x45, True)
    instr = Instruction.unflatten(word)

    assert instr.flatten() == word
    assert instr.opcode == Opcode.WFM
    assert instr.engine_select == 0x3
    assert instr.write_flag
    assert instr.waveform_op == WaveformOp.PLAY_WFM
    assert instr.is_ta
    assert instr.count == 0x45
    assert instr.address == 0x123


def test_unflatten_marker():
    instr = Instruction.unflatten(instructions.marker_instruction(4, False, 1000, 0b1100))

    assert instr.opcode == Opcode.MARKER
    assert instr.marker_select == 4
    assert not instr.state
    assert instr.transition_word == 0b1100
    assert instr.quad_count == 1000


def test_unflatten_modulation_signed_payload():
    instr = Instruction.unflatten(
        instructions.modulation_instruction(ModulationOp.UPDATE_FRAME, 0x1, -12345)
    )

    assert instr.opcode == Opcode.MODULATOR
    assert instr.modulation_op == ModulationOp.UPDATE_FRAME
    assert instr.nco_select == 0x1
    assert instr.immediate == -12345


def test_unflatten_compare():
    word = instructions.control_instruction(Opcode.CMP, (CompareOp.LESSTHAN << 8) | 17)
    instr = Instruction.unflatten(word)

    assert instr.compare_op == CompareOp.LESSTHAN
    assert instr.compare_value == 17


@pytest.mark.parametrize(
    "word, expected",
    [
        (
            instructions.waveform_instruction(2, 1, False),
            "WFM; engine=3, write=1 | PLAY_WFM; TA_bit=0, count=1, addr=2",
        ),
        (
            instructions.marker_instruction(1, True, 2, 0b0011),
            "MARKER; engine=0, write=1 | PLAY_WFM; state=1, transition=0b0011, count=2",
        ),
        (
            instructions.modulation_instruction(ModulationOp.SET_FREQ, 0x1, -5),
            "MODULATOR | SET_FREQ; nco_select=0x1, payload=-5",
        ),
        (
            instructions.modulation_instruction(ModulationOp.RESET_PHASE, 0x7),
            "MODULATOR | RESET_PHASE; nco_select=0x7",
        ),
        (instructions.control_instruction(Opcode.GOTO, 9), "GOTO | target_addr=9"),
        (instructions.control_instruction(Opcode.LOAD_REPEAT, 3), "LOAD_REPEAT | count=3"),
        (instructions.control_instruction(Opcode.RETURN), "RETURN"),
        (instructions.wait_instruction(), "WAIT"),
    ],
)
def test_str(word, expected):
    assert str(Instruction.unflatten(word)) == expected


def test_decompile_instructions():
    words = [instructions.sync_instruction(), instructions.wait_instruction()]
    decoded = instructions.decompile_instructions(words)
    assert [instr.opcode for instr in decoded] == [Opcode.SYNC, Opcode.WAIT]


def test_format_instructions_unaligned():
    words = [instructions.sync_instruction(), instructions.control_instruction(Opcode.GOTO, 0)]
    listing = instructions.format_instructions(words, align_fields=False)
    assert listing == (
        "0: 0x9100800000000000 SYNC\n" "1: 0x6100000000000000 GOTO | target_addr=0\n"
    )


def test_format_instructions_aligned():
    words = [
        instructions.waveform_instruction(0, 1, False),
        instructions.control_instruction(Opcode.GOTO, 12),
    ]
    listing = instructions.format_instructions(words)

    assert "0x0d00000001000000" in listing
    assert "GOTO | target_addr=12" in listing


def test_format_instructions_without_op_codes():
    words = [instructions.wait_instruction()]
    listing = instructions.format_instructions(words, display_op_codes=False, align_fields=False)
    assert listing == "0: WAIT\n"


def test_format_no_instructions():
    assert instructions.format_instructions([]) == ""
