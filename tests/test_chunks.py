import struct

import pytest

from aifwav.chunks import (
    AiffError,
    Loop,
    Marker,
    parse_common_chunk,
    parse_filler_chunk,
    parse_form_chunk,
    parse_instrument_chunk,
    parse_marker_chunk,
    parse_sample_rate,
    parse_sound_data_chunk,
)


def _extended(rate):
    exponent = rate.bit_length() - 1
    fraction = rate << (63 - exponent)
    return struct.pack(">HQ", exponent + 16383, fraction)


def _common(channels=2, frames=10, sample_size=16, rate=44100):
    return (
        b"COMM"
        + struct.pack(">ihIh", 18, channels, frames, sample_size)
        + _extended(rate)
    )


def _sound_data(samples, offset=0, block_size=0):
    return b"SSND" + struct.pack(">iII", len(samples) + 8, offset, block_size) + samples


def _marker(marker_id, position, name):
    return struct.pack(">hIB", marker_id, position, len(name)) + name


def _marker_chunk(*markers):
    body = b"".join(markers)
    return b"MARK" + struct.pack(">iH", len(body) + 2, len(markers)) + body


def _instrument(
    size=20,
    base_note=60,
    detune=0,
    low_note=1,
    high_note=127,
    low_vel=1,
    high_vel=127,
    gain=0,
    loops=(1, 1, 2, 0, 0, 0),
):
    return (
        b"INST"
        + struct.pack(">i", size)
        + bytes(
            v & 0xFF
            for v in (base_note, detune, low_note, high_note, low_vel, high_vel)
        )
        + struct.pack(">h6h", gain, *loops)
    )


def test_sample_rate_44100_wire_bytes():
    assert parse_sample_rate(bytes.fromhex("400EAC44000000000000")) == 44100


def test_sample_rate_48000_wire_bytes():
    assert parse_sample_rate(bytes.fromhex("400EBB80000000000000")) == 48000


@pytest.mark.parametrize("rate", [8000, 11025, 22050, 32000, 96000, 192000])
def test_sample_rate_round_trip(rate):
    assert parse_sample_rate(_extended(rate)) == rate


def test_sample_rate_truncated():
    with pytest.raises(AiffError):
        parse_sample_rate(b"\x40\x0e\xac")


def test_form_chunk_valid():
    data = b"FORM" + struct.pack(">i", 20) + b"AIFF" + bytes(16)
    form = parse_form_chunk(data, len(data))
    assert form.chunk_id == b"FORM"
    assert form.form_type == b"AIFF"
    assert form.chunk_size == len(data) - 8
    assert data[form.subchunks_offset:] == bytes(16)


def test_form_chunk_wrong_size():
    data = b"FORM" + struct.pack(">i", 21) + b"AIFF" + bytes(16)
    with pytest.raises(AiffError):
        parse_form_chunk(data, len(data))


@pytest.mark.parametrize(
    "chunk_id,form_type", [(b"RIFF", b"AIFF"), (b"FORM", b"AIFC"), (b"FORM", b"WAVE")]
)
def test_form_chunk_wrong_ids(chunk_id, form_type):
    data = chunk_id + struct.pack(">i", 4) + form_type
    with pytest.raises(AiffError):
        parse_form_chunk(data, len(data))


def test_common_chunk_fields():
    common = parse_common_chunk(_common(channels=2, frames=10, sample_size=24, rate=48000))
    assert common.chunk_id == b"COMM"
    assert common.chunk_size == 18
    assert common.num_channels == 2
    assert common.num_sample_frames == 10
    assert common.sample_size == 24
    assert common.sample_rate == 48000
    assert common.bytes_per_sample * 8 == common.sample_size
    assert common.sample_bytes == 10 * 2 * common.bytes_per_sample


def test_common_chunk_rate_not_multiple_of_100():
    with pytest.raises(AiffError):
        parse_common_chunk(_common(rate=44101))


@pytest.mark.parametrize("sample_size", [0, 33, -16])
def test_common_chunk_sample_size_out_of_range(sample_size):
    with pytest.raises(AiffError):
        parse_common_chunk(_common(sample_size=sample_size))


@pytest.mark.parametrize("sample_size", [1, 32])
def test_common_chunk_sample_size_bounds_accepted(sample_size):
    assert parse_common_chunk(_common(sample_size=sample_size)).sample_size == sample_size


def test_common_chunk_truncated():
    with pytest.raises(AiffError):
        parse_common_chunk(_common()[:20])


def test_sound_data_chunk_samples():
    samples = bytes(range(12))
    chunk = parse_sound_data_chunk(_sound_data(samples) + b"NEXT")
    assert chunk.chunk_id == b"SSND"
    assert chunk.samples == samples
    assert chunk.declared_sample_bytes == len(samples)
    assert chunk.offset == 0 and chunk.block_size == 0


@pytest.mark.parametrize("offset,block_size", [(4, 0), (0, 8)])
def test_sound_data_nonzero_offset_or_block_size(offset, block_size):
    with pytest.raises(AiffError):
        parse_sound_data_chunk(_sound_data(bytes(4), offset, block_size))


def test_marker_chunk_parses_all_markers():
    data = _marker_chunk(_marker(1, 0, b"start"), _marker(2, 100, b"end"))
    chunk = parse_marker_chunk(data, 100)
    assert chunk.chunk_id == b"MARK"
    assert chunk.total_markers == 2
    assert chunk.markers == (Marker(1, 0, b"start"), Marker(2, 100, b"end"))
    assert chunk.position_of(1) == 0
    assert chunk.position_of(2) == 100


def test_marker_chunk_empty():
    assert parse_marker_chunk(_marker_chunk(), 10).markers == ()


@pytest.mark.parametrize("marker_id", [0, -1])
def test_marker_id_must_be_positive(marker_id):
    with pytest.raises(AiffError):
        parse_marker_chunk(_marker_chunk(_marker(marker_id, 0, b"x")), 10)


def test_marker_position_beyond_frames():
    with pytest.raises(AiffError):
        parse_marker_chunk(_marker_chunk(_marker(1, 11, b"x")), 10)


def test_marker_ids_must_be_unique():
    data = _marker_chunk(_marker(3, 1, b"a"), _marker(3, 2, b"b"))
    with pytest.raises(AiffError):
        parse_marker_chunk(data, 10)


def test_marker_name_truncated():
    data = _marker_chunk(_marker(1, 1, b"abcdef"))[:-3]
    with pytest.raises(AiffError):
        parse_marker_chunk(data, 10)


@pytest.mark.parametrize("marker_id", [0, 3])
def test_position_of_unknown_marker(marker_id):
    chunk = parse_marker_chunk(_marker_chunk(_marker(1, 0, b""), _marker(2, 5, b"")), 10)
    with pytest.raises(AiffError):
        chunk.position_of(marker_id)


def test_instrument_chunk_fields():
    data = _instrument(
        base_note=60, detune=-50, low_note=10, high_note=90, low_vel=5, high_vel=120,
        gain=-6, loops=(1, 1, 2, 2, 3, 4),
    )
    inst = parse_instrument_chunk(data)
    assert inst.chunk_id == b"INST"
    assert inst.chunk_size == 20
    assert (inst.base_note, inst.detune, inst.low_note, inst.high_note) == (60, -50, 10, 90)
    assert (inst.low_velocity, inst.high_velocity, inst.gain) == (5, 120, -6)
    assert inst.sustain_loop == Loop(1, 1, 2)
    assert inst.release_loop == Loop(2, 3, 4)


def test_instrument_chunk_size_must_be_20():
    with pytest.raises(AiffError):
        parse_instrument_chunk(_instrument(size=22))


@pytest.mark.parametrize("detune", [51, -51])
def test_instrument_detune_out_of_range(detune):
    with pytest.raises(AiffError):
        parse_instrument_chunk(_instrument(detune=detune))


@pytest.mark.parametrize(
    "field", ["low_note", "high_note", "low_vel", "high_vel"]
)
@pytest.mark.parametrize("value", [0, 128])
def test_instrument_midi_values_out_of_range(field, value):
    with pytest.raises(AiffError):
        parse_instrument_chunk(_instrument(**{field: value}))


def test_instrument_truncated():
    with pytest.raises(AiffError):
        parse_instrument_chunk(_instrument()[:20])


def test_filler_chunk():
    filler = parse_filler_chunk(b"FLLR" + struct.pack(">I", 4044) + bytes(8))
    assert filler.chunk_id == b"FLLR"
    assert filler.total_filler_bytes == 4044


def test_filler_chunk_truncated():
    with pytest.raises(AiffError):
        parse_filler_chunk(b"FLLR\x00")