# Repository: https://gitlab.com/quantify-os/quantify-scheduler
# Licensed according to the LICENCE file on the main branch
"""Encoding of control-flow operations."""

from __future__ import annotations

from typing import Callable, Dict, Type

from quantify_aps2 import constants, helpers
from quantify_aps2.enums import CompareOp, Opcode
from quantify_aps2.exceptions import UnsupportedConstructError
from quantify_aps2.instructions import control_instruction, sync_instruction, wait_instruction
from quantify_aps2.types import (
    Call,
    Compare,
    ControlFlow,
    Goto,
    LoadCompare,
    LoadRepeat,
    Prefetch,
    Repeat,
    Return,
    Sync,
    Wait,
)


def _target(entry: ControlFlow) -> int:
    return helpers.check_range(
        f"Target address of {type(entry).__name__}",
        entry.target,
        constants.MAX_NUM_INSTRUCTIONS - 1,
    )


def _load_repeat(entry: LoadRepeat) -> int:
    count = helpers.check_range("Repeat count", entry.count, constants.MAX_REPEAT_COUNT)
    return control_instruction(Opcode.LOAD_REPEAT, count)


def _compare(entry: Compare) -> int:
    try:
        operator = CompareOp.from_symbol(entry.operator)
    except KeyError as exc:
        raise UnsupportedConstructError(
            f"Untranslated comparison operator {entry.operator!r}."
        ) from exc
    value = helpers.check_range("Comparison value", entry.value, 0xFF)
    return control_instruction(Opcode.CMP, (operator << constants.CMP_OP_OFFSET) | value)


_ENCODERS: Dict[Type[ControlFlow], Callable[..., int]] = {
    Wait: lambda entry: wait_instruction(),
    Sync: lambda entry: sync_instruction(),
    Goto: lambda entry: control_instruction(Opcode.GOTO, _target(entry)),
    Call: lambda entry: control_instruction(Opcode.CALL, _target(entry)),
    Return: lambda entry: control_instruction(Opcode.RETURN),
    LoadRepeat: _load_repeat,
    Repeat: lambda entry: control_instruction(Opcode.DEC_REPEAT, _target(entry)),
    Compare: _compare,
    LoadCompare: lambda entry: control_instruction(Opcode.LOAD_CMP),
    Prefetch: lambda entry: control_instruction(Opcode.PREFETCH, _target(entry)),
}


def encode_control_flow(entry: ControlFlow) -> int:
    """
    Converts a control-flow operation to an instruction word.

    Parameters
    ----------
    entry
        The control-flow operation. Targets are absolute instruction addresses.

    Returns
    -------
    :
        The packed instruction.

    Raises
    ------
    UnsupportedConstructError
        If there is no encoding for the type of ``entry``.
    RangeViolationError
        If a target address or a repeat count exceeds the hardware limits.

    """
    try:
        encoder = _ENCODERS[type(entry)]
    except KeyError as exc:
        raise UnsupportedConstructError(
            f"Untranslated control flow instruction {entry!r}."
        ) from exc
    return encoder(entry)
