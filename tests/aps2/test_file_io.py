# Repository: https://gitlab.com/quantify-os/quantify-scheduler
# Licensed according to the LICENCE file on the main branch
import h5py
import numpy as np
import pytest

from quantify_aps2.file_io import raw_instructions, read_sequence_file, write_sequence_file


@pytest.fixture
def program():
    instructions = np.array([0x9100_8000_0000_0000, 0xFFFF_FFFF_FFFF_FFFF], dtype=np.uint64)
    real = np.array([1, -2, 8191, -8191], dtype=np.int16)
    imag = np.array([0, 5, -5, 0], dtype=np.int16)
    return instructions, real, imag


def test_layout(tmp_path, program):
    filename = write_sequence_file(tmp_path / "seq.h5", *program)

    with h5py.File(filename, "r") as fid:
        assert fid.attrs["Version"] == 4.0
        assert fid.attrs["minimum firmware version"] == 4.0
        assert list(fid.attrs["channelDataFor"]) == [1, 2]
        assert fid.attrs["channelDataFor"].dtype == np.uint16
        assert set(fid.keys()) == {"chan_1", "chan_2"}
        assert fid["chan_1/instructions"].dtype == np.uint64
        assert fid["chan_1/waveforms"].dtype == np.int16
        assert fid["chan_2/waveforms"].dtype == np.int16
        assert "instructions" not in fid["chan_2"]


def test_round_trip(tmp_path, program):
    instructions, real, imag = program
    filename = write_sequence_file(str(tmp_path / "seq.h5"), instructions, real, imag)

    seq_file = read_sequence_file(filename)

    assert seq_file.version == 4.0
    assert seq_file.target_hardware == "APS2"
    assert seq_file.minimum_firmware_version == 4.0
    assert seq_file.channel_data_for == (1, 2)
    np.testing.assert_array_equal(seq_file.instructions, instructions)
    np.testing.assert_array_equal(seq_file.waveforms[0], real)
    np.testing.assert_array_equal(seq_file.waveforms[1], imag)
    np.testing.assert_array_equal(raw_instructions(filename), instructions)


def test_empty_waveforms(tmp_path):
    empty = np.zeros(0, dtype=np.int16)
    filename = write_sequence_file(
        tmp_path / "seq.h5", np.array([0], dtype=np.uint64), empty, empty
    )
    seq_file = read_sequence_file(filename)
    assert seq_file.waveforms[0].shape == (0,)
    assert seq_file.waveforms[1].shape == (0,)


def test_existing_file_is_overwritten(tmp_path, program):
    filename = tmp_path / "seq.h5"
    filename.write_text("stale")
    write_sequence_file(filename, *program)
    assert len(read_sequence_file(filename).instructions) == 2


def test_failed_write_removes_file(tmp_path, program):
    filename = tmp_path / "seq.h5"
    instructions, real, _ = program
    with pytest.raises(TypeError):
        write_sequence_file(filename, instructions, real, np.array([object()]))
    assert not filename.exists()
