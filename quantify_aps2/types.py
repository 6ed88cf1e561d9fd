# Repository: https://gitlab.com/quantify-os/quantify-scheduler
# Licensed according to the LICENCE file on the main branch
"""
Python dataclasses describing the resolved, timed sequences consumed by the compiler.

A program is a list of sequence entries, each either a :class:`PulseBlock` or a
:class:`ControlFlow` operation. Branch targets are already resolved to absolute
instruction indices.
"""
from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from quantify_aps2 import constants
from quantify_aps2.exceptions import InvalidChannelMapError

_pulse_uids = itertools.count()


@dataclass(frozen=True)
class Channel:
    """A physical output lane."""

    label: str


@dataclass(frozen=True)
class AnalogChannel(Channel):
    """An I/Q pair of analog outputs driven through the modulator."""

    frequency: float = 0.0
    """Carrier frequency in Hz of the NCO driving this channel."""


@dataclass(frozen=True)
class MarkerChannel(Channel):
    """A digital marker output."""


@dataclass(frozen=True, eq=False)
class Pulse:
    """
    A pulse on an analog or marker channel.

    Every pulse gets a unique :attr:`uid` when it is created, which the
    :class:`~quantify_aps2.instruction_library.InstructionLibrary` uses to look up
    the encoded record of the pulse.
    """

    label: str
    length: float
    """Duration of the pulse in seconds."""
    amp: float = 1.0
    """Amplitude scaling of the shape. Marker pulses are high if ``amp > 0.5``."""
    phase: float = 0.0
    """Phase in radians."""
    frequency: float = 0.0
    """Frequency offset in Hz with respect to the channel frequency."""
    shape: Union[Callable[[np.ndarray], np.ndarray], Sequence[complex], None] = None
    """Normalized pulse shape. Either a function of the time axis, the samples at the
    DAC rate, or None for a square pulse."""
    uid: int = field(default_factory=lambda: next(_pulse_uids), repr=False)

    def waveform(self, sampling_rate: float = constants.DAC_CLOCK) -> np.ndarray:
        """
        Samples the normalized shape of the pulse, without amplitude scaling.

        Parameters
        ----------
        sampling_rate
            The sampling rate used to generate the time axis values.

        Returns
        -------
        :
            The complex samples of the shape.

        """
        if self.shape is None or callable(self.shape):
            num_samples = int(round(self.length * sampling_rate))
            if self.shape is None:
                return np.ones(num_samples, dtype=complex)
            t = np.arange(num_samples) / sampling_rate
            return np.asarray(self.shape(t), dtype=complex)
        return np.asarray(self.shape, dtype=complex)


@dataclass(frozen=True)
class FramePulse:
    """A zero duration rotation of the phase frame of a channel."""

    angle: float
    """The frame rotation in cycles."""
    label: str = "Z"


PulseElement = Union[Pulse, FramePulse]


@dataclass(frozen=True)
class PulseBlock:
    """
    Pulses on several channels that start at the same time.

    Time restarts at zero for every channel at the start of a block.
    """

    pulses: Mapping[Channel, Sequence[PulseElement]]

    def pulses_for(self, channel: Channel) -> Sequence[PulseElement]:
        """The elements played on ``channel``, empty if the channel is idle."""
        return self.pulses.get(channel, ())


@dataclass(frozen=True)
class ControlFlow:
    """Base class of the control-flow operations."""


@dataclass(frozen=True)
class Wait(ControlFlow):
    """Wait for a hardware trigger."""


@dataclass(frozen=True)
class Sync(ControlFlow):
    """Wait for all channels to synchronize."""


@dataclass(frozen=True)
class Goto(ControlFlow):
    """Jump to an absolute instruction address."""

    target: int


@dataclass(frozen=True)
class Call(ControlFlow):
    """Jump to an absolute instruction address, pushing the return address."""

    target: int


@dataclass(frozen=True)
class Return(ControlFlow):
    """Return to the address on top of the call stack."""


@dataclass(frozen=True)
class LoadRepeat(ControlFlow):
    """Load the repeat counter."""

    count: int


@dataclass(frozen=True)
class Repeat(ControlFlow):
    """Decrement the repeat counter and jump to ``target`` unless it is exhausted."""

    target: int


@dataclass(frozen=True)
class Compare(ControlFlow):
    """Compare the comparison register with ``value``, setting the condition flag."""

    operator: str
    """One of ``==``, ``!=``, ``>`` and ``<``."""
    value: int


@dataclass(frozen=True)
class LoadCompare(ControlFlow):
    """Load the comparison register from the external input."""


@dataclass(frozen=True)
class Prefetch(ControlFlow):
    """Prefetch the instruction cache line starting at ``target``."""

    target: int


SequenceEntry = Union[PulseBlock, ControlFlow]

MARKER_ROLES: Tuple[str, ...] = ("m1", "m2", "m3", "m4")


@dataclass(frozen=True)
class ChannelMap:
    """
    Assigns front-end channels to the outputs of an APS2.

    The order of the roles (``ch12`` followed by ``m1`` to ``m4``) is the order in
    which the channels are visited while serializing a :class:`PulseBlock`.
    """

    ch12: Optional[AnalogChannel] = None
    """The channel driving the analog pair (outputs 1 and 2)."""
    m1: Optional[MarkerChannel] = None
    m2: Optional[MarkerChannel] = None
    m3: Optional[MarkerChannel] = None
    m4: Optional[MarkerChannel] = None

    @property
    def markers_only(self) -> bool:
        return self.ch12 is None

    @property
    def markers(self) -> List[Tuple[int, MarkerChannel]]:
        """The assigned marker channels with their 1-based marker index."""
        return [
            (idx, getattr(self, role))
            for idx, role in enumerate(MARKER_ROLES, start=1)
            if getattr(self, role) is not None
        ]

    @property
    def channels(self) -> List[Channel]:
        """All assigned channels in role order."""
        chans: List[Channel] = [] if self.ch12 is None else [self.ch12]
        return chans + [chan for _, chan in self.markers]

    @property
    def frequency(self) -> float:
        """The carrier frequency of the analog pair, zero if there is none."""
        return 0.0 if self.ch12 is None else self.ch12.frequency

    @classmethod
    def from_dict(cls, mapping: Dict[str, Channel]) -> ChannelMap:
        """Creates a channel map from a ``{role: channel}`` dictionary."""
        unknown = set(mapping) - {"ch12", *MARKER_ROLES}
        if unknown:
            raise InvalidChannelMapError(f"Unknown channel roles {sorted(unknown)}.")
        return cls(**mapping)

    def validate(self) -> None:
        """
        Checks that there is something to encode.

        Raises
        ------
        InvalidChannelMapError
            If neither the analog pair nor any marker is assigned, or if a channel of
            the wrong kind is assigned to a role.

        """
        if self.ch12 is None and not self.markers:
            raise InvalidChannelMapError(
                "The channel map assigns neither an analog pair nor a marker channel."
            )
        if self.ch12 is not None and not isinstance(self.ch12, AnalogChannel):
            raise InvalidChannelMapError(
                f"Role 'ch12' requires an AnalogChannel, got {self.ch12!r}."
            )
        for role in MARKER_ROLES:
            chan = getattr(self, role)
            if chan is not None and not isinstance(chan, MarkerChannel):
                raise InvalidChannelMapError(
                    f"Role '{role}' requires a MarkerChannel, got {chan!r}."
                )
