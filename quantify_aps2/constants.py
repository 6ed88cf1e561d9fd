# Repository: https://gitlab.com/quantify-os/quantify-scheduler
# Licensed according to the LICENCE file on the main branch
"""Constants for compilation to APS2 hardware."""


DAC_CLOCK: float = 1.2e9
"""Sampling rate of the APS2 DACs in samples per second."""
FPGA_CLOCK: float = 300e6
"""Clock rate of the sequencing engine and the modulator NCOs."""
ADDRESS_UNIT: int = 4
"""Granularity of waveform memory addresses and lengths, in samples. All addresses
and lengths passed to the hardware are multiples of this value."""
MIN_ENTRY_LENGTH: int = 8
"""Minimum length of a waveform entry in samples."""
MAX_WAVEFORM_PTS: int = 2**28
"""Maximum size of the waveform memory in samples."""
WAVEFORM_CACHE_SIZE: int = 2**17
"""Size of the waveform cache in samples. Repeated pulses are not deduplicated, so
this value is informational only."""
MAX_WAVEFORM_VALUE: int = 2**13 - 1
"""Maximum waveform value, i.e. the positive range of the 14 bit DACs."""
MAX_NUM_INSTRUCTIONS: int = 2**26
"""Maximum number of instructions in a program."""
MAX_REPEAT_COUNT: int = 2**16 - 1
"""Maximum count loaded into the repeat counter."""
MAX_MARKER_COUNT: int = 2**32 - 1
"""Maximum duration of a single marker entry in samples."""

WFM_COUNT_MASK: int = 0x000F_FFFF
"""Mask of the 20 bit count field of waveform instructions."""
WFM_ADDR_MASK: int = 0x00FF_FFFF
"""Mask of the 24 bit address field of waveform instructions."""
MARKER_COUNT_MASK: int = 0x0FFF_FFFF
"""Mask of the 28 bit quad count field of marker instructions."""
PAYLOAD_MASK: int = 0x00FF_FFFF_FFFF_FFFF
"""Mask of the 56 bit payload of an instruction."""
IMMEDIATE_MASK: int = 0xFFFF_FFFF
"""Mask of the 32 bit immediate of modulation instructions."""

WFM_OP_OFFSET: int = 46
"""Bit offset of the waveform/marker sub-operation code."""
TA_PAIR_BIT: int = 45
"""Bit flagging a waveform instruction as a time-amplitude pair."""
WFM_CT_OFFSET: int = 24
"""Bit offset of the count field of waveform instructions."""
MARKER_TRANSITION_OFFSET: int = 33
"""Bit offset of the 4 bit transition word of marker instructions."""
MARKER_STATE_BIT: int = 32
"""Bit holding the output state of marker instructions."""
MODULATOR_OP_OFFSET: int = 44
"""Bit offset of the modulator operation code."""
NCO_SELECT_OP_OFFSET: int = 40
"""Bit offset of the NCO select field of modulation instructions."""
CMP_OP_OFFSET: int = 8
"""Bit offset of the comparison operator of compare instructions."""

NUM_MARKERS: int = 4
"""Number of digital marker outputs, addressed 1 to 4."""

NCO_SELECT: int = 0x1
"""NCO selector used for channel modulation."""
RESET_PHASE_NCO_SELECT: int = 0x7
"""NCO selector used to reset the phase of all modulators before a trigger."""
NCO_FREQ_BITS: int = 28
"""Number of fractional bits of NCO frequency tuning words and phase words."""

FILE_VERSION: float = 4.0
"""Version of the sequence file format."""
TARGET_HARDWARE: str = "APS2"
"""Target hardware identifier written to sequence files."""
MIN_FIRMWARE_VERSION: float = 4.0
"""Minimum firmware version required to play sequence files."""
CHANNEL_DATA_FOR: tuple = (1, 2)
"""Physical channels holding waveform data in sequence files."""
