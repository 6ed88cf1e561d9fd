# Repository: https://gitlab.com/quantify-os/quantify-scheduler
# Licensed according to the LICENCE file on the main branch
"""Encoded pulse records and the containers they are stored in."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Tuple, Union

import numpy as np
from dataclasses_json import DataClassJsonMixin

from quantify_aps2 import constants, helpers
from quantify_aps2.types import Pulse


@dataclass(frozen=True)
class Waveform(DataClassJsonMixin):
    """An analog pulse encoded as a waveform play instruction."""

    address: int
    """Address in waveform memory, in units of :data:`~.constants.ADDRESS_UNIT`."""
    count: int
    """Number of quanta the pulse lasts, minus one. For time-amplitude pairs this is
    the full duration, not the single quantum stored in memory."""
    is_ta: bool
    """Whether the pulse is a constant stored as a single quantum."""
    write_flag: bool
    instruction: int
    """The packed waveform play instruction."""


@dataclass(frozen=True)
class Marker(DataClassJsonMixin):
    """A digital pulse encoded as a marker play instruction."""

    marker_select: int
    """The 1-based marker index."""
    state: bool
    count: int
    """Duration in units of :data:`~.constants.ADDRESS_UNIT`, rounded down."""
    transition_word: int
    write_flag: bool
    instruction: int
    """The packed marker play instruction."""


Record = Union[Waveform, Marker]


class InstructionLibrary:
    """
    Maps pulses to their encoded records.

    Records are keyed by the :attr:`~quantify_aps2.types.Pulse.uid` of the pulse, so
    every distinct pulse maps to exactly one record, however often it occurs in the
    sequence.
    """

    def __init__(self) -> None:
        self._records: Dict[int, Record] = {}

    def __setitem__(self, pulse: Pulse, record: Record) -> None:
        self._records[pulse.uid] = record

    def __getitem__(self, pulse: Pulse) -> Record:
        try:
            return self._records[pulse.uid]
        except KeyError as exc:
            raise KeyError(
                f"Pulse {pulse!r} has not been encoded; it is not assigned to a "
                f"channel of the channel map."
            ) from exc

    def __contains__(self, pulse: Pulse) -> bool:
        return pulse.uid in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[int]:
        return iter(self._records)

    def to_dict(self) -> Dict[int, dict]:
        """Returns the records as plain dictionaries, keyed by pulse uid."""
        return {uid: record.to_dict() for uid, record in self._records.items()}


class WaveformMemory:
    """
    The waveform memory image shared by all analog pulses.

    Samples are appended in allocation order; the address of every allocation is
    the number of samples stored before it.
    """

    def __init__(self) -> None:
        self._chunks: List[np.ndarray] = []
        self.size = 0
        """Number of samples allocated so far."""

    def allocate(self, samples: np.ndarray) -> int:
        """
        Appends ``samples`` to the memory.

        Parameters
        ----------
        samples
            Complex samples with integer valued parts within the DAC range. The
            number of samples must be a multiple of :data:`~.constants.ADDRESS_UNIT`.

        Returns
        -------
        :
            The address of the first sample.

        Raises
        ------
        RangeViolationError
            If the memory would exceed :data:`~.constants.MAX_WAVEFORM_PTS` samples.

        """
        address = self.size
        helpers.check_range(
            "Waveform memory size", address + len(samples), constants.MAX_WAVEFORM_PTS
        )
        self._chunks.append(np.asarray(samples, dtype=complex))
        self.size += len(samples)
        return address

    def to_arrays(self) -> Tuple[np.ndarray, np.ndarray]:
        """Splits the memory into its real and imaginary 16 bit components."""
        if not self._chunks:
            return np.zeros(0, dtype=np.int16), np.zeros(0, dtype=np.int16)
        wf_vec = np.concatenate(self._chunks)
        return wf_vec.real.astype(np.int16), wf_vec.imag.astype(np.int16)
