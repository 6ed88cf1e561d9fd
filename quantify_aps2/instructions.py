# Repository: https://gitlab.com/quantify-os/quantify-scheduler
# Licensed according to the LICENCE file on the main branch
"""
Packing and unpacking of 64 bit APS2 instruction words.

Every instruction consists of an 8 bit header and a 56 bit payload:

.. code-block:: none

    63      60 59 58 57 56 55                                            0
    | opcode  | sel | - | w |                 payload                      |

The meaning of the engine/marker select bits and of the payload depend on the
opcode. The functions in this module only pack already quantized fields, the
quantization itself happens in :mod:`~quantify_aps2.operation_handling`.
"""
from __future__ import annotations

from dataclasses import dataclass

from columnar import columnar
from columnar.exceptions import TableOverflowError

from quantify_aps2 import constants
from quantify_aps2.enums import CompareOp, ModulationOp, Opcode, WaveformOp
from quantify_aps2.exceptions import RangeViolationError

HEADER_OFFSET = 56

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


def pack_instruction(
    opcode: Opcode, payload: int, engine_select: int = 0, write_flag: bool = False
) -> int:
    """
    Packs an opcode, the select bits, the write flag and a payload into a word.

    Parameters
    ----------
    opcode
        The four bit opcode.
    payload
        The opcode specific payload, truncated to 56 bits.
    engine_select
        Two bit engine (waveform) or marker select.
    write_flag
        Value of the write enable bit.

    Returns
    -------
    :
        The instruction as an unsigned 64 bit integer.

    """
    header = (int(opcode) << 4) | ((engine_select & 0x3) << 2) | (int(write_flag) & 0x1)
    return (header << HEADER_OFFSET) | (int(payload) & constants.PAYLOAD_MASK)


def waveform_instruction(address: int, count: int, is_ta: bool, write_flag: bool = True) -> int:
    """
    Packs a waveform play instruction broadcast to both waveform engines.

    Parameters
    ----------
    address
        Waveform memory address in units of :data:`~.constants.ADDRESS_UNIT`.
    count
        Number of quanta to play minus one.
    is_ta
        Whether the waveform is a time-amplitude pair.
    write_flag
        Value of the write enable bit.

    """
    payload = (
        (WaveformOp.PLAY_WFM << constants.WFM_OP_OFFSET)
        | (int(is_ta) << constants.TA_PAIR_BIT)
        | ((count & constants.WFM_COUNT_MASK) << constants.WFM_CT_OFFSET)
        | (address & constants.WFM_ADDR_MASK)
    )
    return pack_instruction(Opcode.WFM, payload, engine_select=0x3, write_flag=write_flag)


def waveform_prefetch_instruction(address: int) -> int:
    """Packs an instruction prefetching the waveform at ``address`` into the cache."""
    payload = (WaveformOp.WFM_PREFETCH << constants.WFM_OP_OFFSET) | (
        address & constants.WFM_ADDR_MASK
    )
    return pack_instruction(Opcode.WFM, payload, engine_select=0x3, write_flag=True)


def marker_instruction(
    marker_select: int,
    state: bool,
    quad_count: int,
    transition_word: int,
    write_flag: bool = True,
) -> int:
    """
    Packs a marker play instruction.

    Parameters
    ----------
    marker_select
        The 1-based marker index (1 to 4).
    state
        The output state of the marker during this entry.
    quad_count
        Duration in units of :data:`~.constants.ADDRESS_UNIT`.
    transition_word
        Four bit word describing the sample within the last quantum at which the
        output changes.
    write_flag
        Value of the write enable bit.

    """
    payload = (
        (WaveformOp.PLAY_WFM << constants.WFM_OP_OFFSET)
        | ((transition_word & 0xF) << constants.MARKER_TRANSITION_OFFSET)
        | (int(state) << constants.MARKER_STATE_BIT)
        | (quad_count & constants.MARKER_COUNT_MASK)
    )
    return pack_instruction(
        Opcode.MARKER, payload, engine_select=marker_select - 1, write_flag=write_flag
    )


def modulation_instruction(op: ModulationOp, nco_select: int, payload: int = 0) -> int:
    """
    Packs a modulator instruction.

    Parameters
    ----------
    op
        The modulator operation.
    nco_select
        Four bit mask selecting the NCO(s) the operation applies to.
    payload
        Signed 32 bit immediate, e.g. a count, tuning word or phase word.

    Raises
    ------
    RangeViolationError
        If the payload does not fit in a signed 32 bit integer.

    """
    payload = int(payload)
    if not _INT32_MIN <= payload <= _INT32_MAX:
        raise RangeViolationError("Modulation payload", payload, _INT32_MAX, _INT32_MIN)
    body = (
        (int(op) << constants.MODULATOR_OP_OFFSET)
        | ((nco_select & 0xF) << constants.NCO_SELECT_OP_OFFSET)
        | (payload & constants.IMMEDIATE_MASK)
    )
    return pack_instruction(Opcode.MODULATOR, body, write_flag=True)


def control_instruction(opcode: Opcode, payload: int = 0, write_flag: bool = True) -> int:
    """Packs a control-flow instruction with the payload in the low order bits."""
    return pack_instruction(opcode, payload, write_flag=write_flag)


def sync_instruction() -> int:
    """Packs an instruction waiting for the synchronization of all channels."""
    return control_instruction(Opcode.SYNC, WaveformOp.WAIT_SYNC << constants.WFM_OP_OFFSET)


def wait_instruction() -> int:
    """Packs an instruction waiting for a hardware trigger."""
    return control_instruction(Opcode.WAIT, WaveformOp.WAIT_TRIG << constants.WFM_OP_OFFSET)


def _to_int32(value: int) -> int:
    value &= constants.IMMEDIATE_MASK
    return value - 2**32 if value > _INT32_MAX else value


@dataclass(frozen=True)
class Instruction:
    """
    A decoded view on a packed instruction word.

    Mostly used to inspect compiled programs. The properties extract the fields of
    the different instruction families; it is up to the caller to only use the
    properties that make sense for the :attr:`opcode` at hand.
    """

    header: int
    payload: int

    @classmethod
    def unflatten(cls, word: int) -> Instruction:
        """Splits a 64 bit word into its header and payload."""
        word = int(word)
        return cls(
            header=(word >> HEADER_OFFSET) & 0xFF,
            payload=word & constants.PAYLOAD_MASK,
        )

    def flatten(self) -> int:
        """Packs the instruction back into a 64 bit word."""
        return (self.header << HEADER_OFFSET) | (self.payload & constants.PAYLOAD_MASK)

    @property
    def opcode(self) -> Opcode:
        return Opcode(self.header >> 4)

    @property
    def engine_select(self) -> int:
        return (self.header >> 2) & 0x3

    @property
    def write_flag(self) -> bool:
        return bool(self.header & 0x1)

    @property
    def waveform_op(self) -> WaveformOp:
        return WaveformOp((self.payload >> constants.WFM_OP_OFFSET) & 0x3)

    @property
    def is_ta(self) -> bool:
        return bool((self.payload >> constants.TA_PAIR_BIT) & 0x1)

    @property
    def count(self) -> int:
        """The count field of a waveform instruction."""
        return (self.payload >> constants.WFM_CT_OFFSET) & constants.WFM_COUNT_MASK

    @property
    def address(self) -> int:
        """The address field of a waveform instruction, in quanta."""
        return self.payload & constants.WFM_ADDR_MASK

    @property
    def marker_select(self) -> int:
        """The 1-based marker index of a marker instruction."""
        return self.engine_select + 1

    @property
    def state(self) -> bool:
        return bool((self.payload >> constants.MARKER_STATE_BIT) & 0x1)

    @property
    def transition_word(self) -> int:
        return (self.payload >> constants.MARKER_TRANSITION_OFFSET) & 0xF

    @property
    def quad_count(self) -> int:
        """The count field of a marker instruction."""
        return self.payload & constants.MARKER_COUNT_MASK

    @property
    def modulation_op(self) -> ModulationOp:
        return ModulationOp((self.payload >> constants.MODULATOR_OP_OFFSET) & 0xF)

    @property
    def nco_select(self) -> int:
        return (self.payload >> constants.NCO_SELECT_OP_OFFSET) & 0xF

    @property
    def immediate(self) -> int:
        """The signed 32 bit immediate of a modulation instruction."""
        return _to_int32(self.payload)

    @property
    def target(self) -> int:
        """The target address (or repeat count) of a control-flow instruction."""
        return self.payload & (constants.MAX_NUM_INSTRUCTIONS - 1)

    @property
    def compare_op(self) -> CompareOp:
        return CompareOp((self.payload >> constants.CMP_OP_OFFSET) & 0x3)

    @property
    def compare_value(self) -> int:
        return self.payload & 0xFF

    def __str__(self) -> str:
        opcode = self.opcode
        out = opcode.name
        if opcode in (Opcode.WFM, Opcode.MARKER):
            out += f"; engine={self.engine_select}, write={int(self.write_flag)} | "
            out += self.waveform_op.name
            if opcode == Opcode.WFM:
                out += f"; TA_bit={int(self.is_ta)}, count={self.count}, addr={self.address}"
            else:
                out += (
                    f"; state={int(self.state)}, transition=0b{self.transition_word:04b}"
                    f", count={self.quad_count}"
                )
        elif opcode == Opcode.MODULATOR:
            out += f" | {self.modulation_op.name}; nco_select=0x{self.nco_select:x}"
            if self.modulation_op != ModulationOp.RESET_PHASE:
                out += f", payload={self.immediate}"
        elif opcode == Opcode.CMP:
            out += f" | {self.compare_op.name}, value={self.compare_value}"
        elif opcode in (Opcode.GOTO, Opcode.CALL, Opcode.DEC_REPEAT, Opcode.PREFETCH):
            out += f" | target_addr={self.target}"
        elif opcode == Opcode.LOAD_REPEAT:
            out += f" | count={self.target}"
        return out


def decompile_instructions(words) -> list[Instruction]:
    """Decodes an iterable of instruction words."""
    return [Instruction.unflatten(word) for word in words]


def format_instructions(
    words,
    display_op_codes: bool = True,
    align_fields: bool = True,
    terminal_width: int = 200,
) -> str:
    """
    Renders a listing of the instruction words with one instruction per line.

    Parameters
    ----------
    words
        Iterable of 64 bit instruction words.
    display_op_codes
        If True, include the raw hexadecimal word in the listing.
    align_fields
        If True, the index, the raw word and the disassembly are aligned in columns
        using `columnar`. Otherwise the fields are separated by single spaces.
    terminal_width
        Width available to the aligned listing.

    """
    rows = []
    for idx, word in enumerate(words):
        row = [f"{idx}:"]
        if display_op_codes:
            row.append(f"0x{int(word):016x}")
        row.append(str(Instruction.unflatten(word)))
        rows.append(row)
    if not rows:
        return ""
    if align_fields:
        try:
            table = columnar(
                rows,
                headers=None,
                no_borders=True,
                wrap_max=0,
                terminal_width=terminal_width,
            )
            # columnar inserts a newline before all the rows
            return table.split("\n", 1)[1]
        except TableOverflowError:
            pass
    return "\n".join(" ".join(row) for row in rows) + "\n"
