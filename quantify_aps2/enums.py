# Repository: https://gitlab.com/quantify-os/quantify-scheduler
# Licensed according to the LICENCE file on the main branch
"""Enums for the APS2 instruction set."""

from enum import IntEnum, unique


@unique
class Opcode(IntEnum):
    """Four bit opcodes stored in the top nibble of every instruction."""

    WFM = 0x0
    MARKER = 0x1
    WAIT = 0x2
    LOAD_REPEAT = 0x3
    DEC_REPEAT = 0x4
    CMP = 0x5
    GOTO = 0x6
    CALL = 0x7
    RETURN = 0x8
    SYNC = 0x9
    MODULATOR = 0xA
    LOAD_CMP = 0xB
    PREFETCH = 0xC


@unique
class WaveformOp(IntEnum):
    """Sub-operations shared by the waveform, marker and trigger instructions."""

    PLAY_WFM = 0x0
    WAIT_TRIG = 0x1
    WAIT_SYNC = 0x2
    WFM_PREFETCH = 0x3


@unique
class ModulationOp(IntEnum):
    """Operation codes of the modulator (NCO) instructions."""

    MODULATE = 0x00
    RESET_PHASE = 0x02
    SET_FREQ = 0x06
    SET_PHASE = 0x0A
    UPDATE_FRAME = 0x0E


@unique
class CompareOp(IntEnum):
    """Comparison operators of the compare instruction."""

    EQUAL = 0x0
    NOTEQUAL = 0x1
    GREATERTHAN = 0x2
    LESSTHAN = 0x3

    @classmethod
    def from_symbol(cls, symbol: str) -> "CompareOp":
        """Look up the operator for one of ``==``, ``!=``, ``>`` or ``<``."""
        return _CMP_SYMBOLS[symbol]


_CMP_SYMBOLS = {
    "==": CompareOp.EQUAL,
    "!=": CompareOp.NOTEQUAL,
    ">": CompareOp.GREATERTHAN,
    "<": CompareOp.LESSTHAN,
}
