# Repository: https://gitlab.com/quantify-os/quantify-scheduler
# Licensed according to the LICENCE file on the main branch
"""
Compiler turning a resolved sequence into an APS2 program and waveform memory.

The compiler walks the sequence in order. Control-flow operations are translated
one-to-one, except that every :class:`~quantify_aps2.types.Wait` is preceded by a
synchronization and a reset of the modulator. Pulse blocks are serialized by
repeatedly emitting the next element of every channel that is furthest behind in
time, so that the single instruction stream interleaves the channels in the order
in which their pulses start.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence

import numpy as np

from quantify_aps2 import constants, helpers
from quantify_aps2.exceptions import UnsupportedConstructError
from quantify_aps2.file_io import PathLike, write_sequence_file
from quantify_aps2.instruction_library import InstructionLibrary, WaveformMemory
from quantify_aps2.instructions import sync_instruction
from quantify_aps2.operation_handling import virtual
from quantify_aps2.operation_handling.control_flow import encode_control_flow
from quantify_aps2.operation_handling.pulses import create_marker_instrs, create_wf_instrs
from quantify_aps2.settings import CompilerSettings
from quantify_aps2.types import (
    AnalogChannel,
    Channel,
    ChannelMap,
    ControlFlow,
    FramePulse,
    Pulse,
    PulseBlock,
    SequenceEntry,
    Wait,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompiledProgram:
    """The result of compiling a sequence."""

    instructions: np.ndarray
    """The program as unsigned 64 bit words."""
    waveforms_real: np.ndarray
    """Waveform memory of the first analog output."""
    waveforms_imag: np.ndarray
    """Waveform memory of the second analog output."""
    instruction_library: InstructionLibrary
    """The encoded record of every pulse."""


def _serialize_pulse(
    instrs: List[int],
    pulse: Pulse,
    chan: Channel,
    instr_lib: InstructionLibrary,
    chan_freq: float,
    settings: CompilerSettings,
) -> int:
    """Appends the instructions of one pulse and returns the number of quanta it lasts."""
    record = instr_lib[pulse]
    nco = settings.nco_select
    if isinstance(chan, AnalogChannel):
        if settings.use_phase_offset_instruction:
            instrs.append(virtual.set_phase(nco, pulse.phase))
        retune = settings.use_pulse_frequency_instruction and pulse.frequency != 0
        if retune:
            instrs.append(virtual.set_frequency(nco, chan_freq + pulse.frequency))
        instrs.append(virtual.modulate(nco, record.count))
        instrs.append(record.instruction)
        if retune:
            instrs.append(virtual.set_frequency(nco, chan_freq))
    else:
        instrs.append(record.instruction)
    return record.count + 1


def serialize_pulse_block(
    block: PulseBlock,
    instr_lib: InstructionLibrary,
    chans: Sequence[Channel],
    chan_freq: float = 0.0,
    settings: Optional[CompilerSettings] = None,
) -> List[int]:
    """
    Serializes the pulses of a block into a single time ordered instruction list.

    All channels start at time zero. In every round, each channel whose elapsed time
    is not larger than the minimum elapsed time of the channels with pending pulses
    emits its next element. Channels with equal elapsed time are visited in the order
    of ``chans``.

    Parameters
    ----------
    block
        The pulse block.
    instr_lib
        Library holding the encoded record of every pulse in the block.
    chans
        The channels to serialize, in tie-break order.
    chan_freq
        Carrier frequency of the analog channel, used to restore the NCO after pulses
        with a frequency offset when these are not baked into the waveforms.
    settings
        The compiler settings.

    Returns
    -------
    :
        The instruction words.

    Raises
    ------
    UnsupportedConstructError
        If the block contains an element that is neither a pulse nor a frame change.

    """
    settings = settings or CompilerSettings()
    num_chans = len(chans)
    time_stamp = [0] * num_chans
    idx = [0] * num_chans
    entries = [block.pulses_for(chan) for chan in chans]
    all_done = [len(chan_entries) == 0 for chan_entries in entries]

    instrs: List[int] = []
    # round-robin through the channels until all are exhausted
    while not all(all_done):
        next_instr_time = min(
            stamp for stamp, done in zip(time_stamp, all_done) if not done
        )
        for ct, chan in enumerate(chans):
            if all_done[ct] or time_stamp[ct] > next_instr_time:
                continue
            next_entry = entries[ct][idx[ct]]
            if isinstance(next_entry, Pulse):
                time_stamp[ct] += _serialize_pulse(
                    instrs, next_entry, chan, instr_lib, chan_freq, settings
                )
            elif isinstance(next_entry, FramePulse):
                instrs.append(virtual.update_frame(settings.nco_select, next_entry.angle))
            else:
                raise UnsupportedConstructError(
                    f"Untranslated pulse block entry {next_entry!r} on channel {chan.label!r}."
                )
            idx[ct] += 1
            all_done[ct] = idx[ct] >= len(entries[ct])

    logger.debug(
        f"Serialized pulse block into {len(instrs)} instructions; "
        f"channel durations {time_stamp} quanta."
    )
    return instrs


def create_instrs(
    seqs: Sequence[SequenceEntry],
    instr_lib: InstructionLibrary,
    chans: Sequence[Channel],
    chan_freq: float = 0.0,
    settings: Optional[CompilerSettings] = None,
) -> np.ndarray:
    """
    Translates a sequence into the program.

    Every :class:`~quantify_aps2.types.Wait` is preceded by a sync, a reset of the
    phase and frame of all modulators, and setting the NCO to the carrier
    frequency, so that the state of the modulator is the same at every trigger.

    Parameters
    ----------
    seqs
        The resolved sequence.
    instr_lib
        Library holding the encoded record of every pulse of ``chans``.
    chans
        The channels to serialize, in tie-break order.
    chan_freq
        Carrier frequency of the analog channel in Hz.
    settings
        The compiler settings.

    Returns
    -------
    :
        The program as unsigned 64 bit words.

    Raises
    ------
    UnsupportedConstructError
        If an entry of the sequence or of a pulse block has no translation.
    RangeViolationError
        If the program exceeds :data:`~.constants.MAX_NUM_INSTRUCTIONS`.

    """
    settings = settings or CompilerSettings()
    reset_phase_instr = virtual.reset_phase(settings.reset_phase_nco_select)
    chan_freq_instr = virtual.set_frequency(settings.nco_select, chan_freq)
    sync_instr = sync_instruction()

    instrs: List[int] = []
    for entry in seqs:
        if isinstance(entry, PulseBlock):
            instrs.extend(serialize_pulse_block(entry, instr_lib, chans, chan_freq, settings))
        elif isinstance(entry, ControlFlow):
            if isinstance(entry, Wait):
                # inject a sync and reset the modulator before waiting for a trigger
                instrs.append(sync_instr)
                instrs.append(reset_phase_instr)
                instrs.append(chan_freq_instr)
            instrs.append(encode_control_flow(entry))
        else:
            raise UnsupportedConstructError(f"Untranslated sequence entry {entry!r}.")

    helpers.check_range("Number of instructions", len(instrs), constants.MAX_NUM_INSTRUCTIONS)
    return np.array(instrs, dtype=np.uint64)


def collect_pulses(
    seqs: Sequence[SequenceEntry], chans: Sequence[Channel]
) -> Dict[Channel, List[Pulse]]:
    """
    Lists the distinct pulses played on each channel, in order of first appearance.
    """
    pulses: Dict[Channel, List[Pulse]] = {chan: [] for chan in chans}
    seen: Dict[Channel, set] = {chan: set() for chan in chans}
    for entry in seqs:
        if not isinstance(entry, PulseBlock):
            continue
        for chan in chans:
            for element in entry.pulses_for(chan):
                if isinstance(element, Pulse) and element.uid not in seen[chan]:
                    seen[chan].add(element.uid)
                    pulses[chan].append(element)
    return pulses


def compile_sequence(
    filename: Optional[PathLike],
    seqs: Sequence[SequenceEntry],
    channel_map: ChannelMap,
    pulses: Optional[Mapping[Channel, Sequence[Pulse]]] = None,
    settings: Optional[CompilerSettings] = None,
) -> CompiledProgram:
    """
    Compiles a sequence and writes it to a sequence file.

    The pulses of the analog pair are encoded into waveform memory and the pulses
    of the markers into marker instructions. The sequence is then translated into
    the program. The file is only written once the whole sequence compiled
    successfully.

    Parameters
    ----------
    filename
        Path of the sequence file to write. If None, no file is written.
    seqs
        The resolved sequence.
    channel_map
        Assigns the channels of the sequence to the outputs.
    pulses
        The pulses to encode for each channel. Every listed occurrence is encoded
        separately. By default the distinct pulses of each channel are collected
        from ``seqs``.
    settings
        The compiler settings.

    Returns
    -------
    :
        The compiled program.

    Raises
    ------
    InvalidChannelMapError
        If the channel map assigns nothing to encode.
    UnsupportedConstructError
        If an entry of the sequence has no translation.
    RangeViolationError
        If the program or the waveforms exceed the hardware limits.

    """
    settings = settings or CompilerSettings()
    channel_map.validate()
    if pulses is None:
        pulses = collect_pulses(seqs, channel_map.channels)

    instr_lib = InstructionLibrary()
    memory = WaveformMemory()
    if not channel_map.markers_only:
        create_wf_instrs(instr_lib, pulses.get(channel_map.ch12, ()), memory, settings)
    for marker_select, marker_chan in channel_map.markers:
        create_marker_instrs(instr_lib, pulses.get(marker_chan, ()), marker_select)

    instructions = create_instrs(
        seqs, instr_lib, channel_map.channels, channel_map.frequency, settings
    )
    waveforms_real, waveforms_imag = memory.to_arrays()
    logger.info(
        f"Compiled {len(instructions)} instructions and {memory.size} waveform samples."
    )

    program = CompiledProgram(
        instructions=instructions,
        waveforms_real=waveforms_real,
        waveforms_imag=waveforms_imag,
        instruction_library=instr_lib,
    )
    if filename is not None:
        write_sequence_file(filename, instructions, waveforms_real, waveforms_imag)
    return program
