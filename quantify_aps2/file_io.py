# Repository: https://gitlab.com/quantify-os/quantify-scheduler
# Licensed according to the LICENCE file on the main branch
"""Reading and writing APS2 sequence files."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple, Union

import h5py
import numpy as np

from quantify_aps2 import constants

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


@dataclass(frozen=True)
class SequenceFile:
    """The contents of a sequence file."""

    version: float
    target_hardware: str
    minimum_firmware_version: float
    channel_data_for: Tuple[int, ...]
    instructions: np.ndarray
    """The program as unsigned 64 bit words."""
    waveforms: Tuple[np.ndarray, np.ndarray]
    """The real and imaginary waveform memory as signed 16 bit samples."""


def write_sequence_file(
    filename: PathLike,
    instructions: np.ndarray,
    waveforms_real: np.ndarray,
    waveforms_imag: np.ndarray,
) -> Path:
    """
    Writes a compiled program to an HDF5 sequence file.

    The file holds the file version, the target hardware, the minimum firmware
    version and the channels that carry waveform data as attributes of the root
    group. The groups ``chan_1`` and ``chan_2`` each hold the waveform memory of one
    output in a ``waveforms`` dataset; ``chan_1`` also holds the ``instructions``.

    If writing fails the incomplete file is removed before the error propagates.

    Parameters
    ----------
    filename
        Path of the file to create. An existing file is overwritten.
    instructions
        The program.
    waveforms_real
        The waveform memory of the first output.
    waveforms_imag
        The waveform memory of the second output.

    Returns
    -------
    :
        The path of the written file.

    """
    path = Path(filename)
    try:
        with h5py.File(path, "w") as fid:
            fid.attrs["Version"] = constants.FILE_VERSION
            fid.attrs["target hardware"] = constants.TARGET_HARDWARE
            fid.attrs["minimum firmware version"] = constants.MIN_FIRMWARE_VERSION
            fid.attrs["channelDataFor"] = np.array(constants.CHANNEL_DATA_FOR, dtype=np.uint16)
            chan_1 = fid.create_group("chan_1")
            chan_1.create_dataset("waveforms", data=np.asarray(waveforms_real, dtype=np.int16))
            chan_1.create_dataset("instructions", data=np.asarray(instructions, dtype=np.uint64))
            chan_2 = fid.create_group("chan_2")
            chan_2.create_dataset("waveforms", data=np.asarray(waveforms_imag, dtype=np.int16))
    except BaseException:
        path.unlink(missing_ok=True)
        raise
    logger.info(f"Wrote {len(instructions)} instructions to {path}.")
    return path


def read_sequence_file(filename: PathLike) -> SequenceFile:
    """Reads the metadata, instructions and waveforms of a sequence file."""
    with h5py.File(filename, "r") as fid:
        target_hardware = fid.attrs["target hardware"]
        if isinstance(target_hardware, bytes):
            target_hardware = target_hardware.decode("utf-8")
        return SequenceFile(
            version=float(fid.attrs["Version"]),
            target_hardware=str(target_hardware),
            minimum_firmware_version=float(fid.attrs["minimum firmware version"]),
            channel_data_for=tuple(int(ch) for ch in fid.attrs["channelDataFor"]),
            instructions=fid["chan_1/instructions"][()],
            waveforms=(fid["chan_1/waveforms"][()], fid["chan_2/waveforms"][()]),
        )


def raw_instructions(filename: PathLike) -> np.ndarray:
    """Reads the instruction words of a sequence file."""
    with h5py.File(filename, "r") as fid:
        return fid["chan_1/instructions"][()]
