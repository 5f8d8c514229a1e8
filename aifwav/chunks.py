"""Parsing and validation of the individual chunks of an AIFF file.

Every parser takes the bytes of a file starting at the first byte of the
chunk's header and returns an immutable record of the decoded values.
Numbers are stored big-endian in AIFF; the records hold native integers.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Tuple, Union

from .chunkid import ID_WIDTH

Buffer = Union[bytes, bytearray, memoryview]

BITS_IN_BYTE = 8
EXTENDED_WIDTH = 10
CHUNK_HEADER_SIZE = ID_WIDTH + 4
INSTRUMENT_CHUNK_SIZE = 20
MARKER_ID_MAX = 0x7FFF

_EXPONENT_BIAS = 16383
_FORM_HEADER = struct.Struct(">4si4s")
_COMMON_HEADER = struct.Struct(">4sihIh")
_SOUND_DATA_HEADER = struct.Struct(">4siII")
_MARKER_CHUNK_HEADER = struct.Struct(">4siH")
_MARKER_HEADER = struct.Struct(">hIB")
_INSTRUMENT = struct.Struct(">4sibbbbbbh6h")
_FILLER = struct.Struct(">4sI")


class AiffError(ValueError):
    """Raised when AIFF data does not meet the specification."""


def _unpack(layout: struct.Struct, data: Buffer, offset: int, what: str) -> tuple:
    try:
        return layout.unpack_from(data, offset)
    except struct.error as exc:
        raise AiffError(f"{what} is truncated") from exc


def _check_id(value: bytes, expected: bytes, name: str) -> None:
    if value != expected:
        raise AiffError(
            f"{name}: expected to read ID {expected!r} but instead read {value!r}"
        )


def _check_equal(value: int, expected: int, name: str) -> None:
    if value != expected:
        raise AiffError(f"{name}: expected {expected} but read {value}")


def _check_range(value: int, low: int, high: int, name: str) -> None:
    if not low <= value <= high:
        raise AiffError(
            f"{name}: value {value} is not within the bounds {low} and {high}"
        )


@dataclass(frozen=True)
class FormChunk:
    """The FORM chunk that wraps a whole AIFF file."""

    chunk_id: bytes
    chunk_size: int
    form_type: bytes
    subchunks_offset: int = _FORM_HEADER.size


@dataclass(frozen=True)
class CommonChunk:
    """The COMM chunk: channel count, frame count, sample size and rate."""

    chunk_id: bytes
    chunk_size: int
    num_channels: int
    num_sample_frames: int
    sample_size: int
    sample_rate: int

    @property
    def bytes_per_sample(self) -> int:
        return self.sample_size // BITS_IN_BYTE

    @property
    def sample_bytes(self) -> int:
        """Number of sample bytes the chunk's metadata calls for."""
        return self.num_sample_frames * self.num_channels * self.bytes_per_sample


@dataclass(frozen=True)
class SoundDataChunk:
    """The SSND chunk holding the big-endian sample frames."""

    chunk_id: bytes
    chunk_size: int
    offset: int
    block_size: int
    samples: bytes

    @property
    def declared_sample_bytes(self) -> int:
        """Sample bytes declared by the chunk size, less offset and block size."""
        return self.chunk_size - 8


@dataclass(frozen=True)
class Marker:
    """A named position in the sample frames."""

    marker_id: int
    position: int
    name: bytes


@dataclass(frozen=True)
class MarkerChunk:
    """The MARK chunk and its markers, in file order."""

    chunk_id: bytes
    chunk_size: int
    markers: Tuple[Marker, ...]

    @property
    def total_markers(self) -> int:
        return len(self.markers)

    def position_of(self, marker_id: int) -> int:
        """Sample frame position of a marker, taking IDs as 1-based positions."""
        index = marker_id - 1
        if not 0 <= index < len(self.markers):
            raise AiffError(f"no marker with ID {marker_id}")
        return self.markers[index].position


@dataclass(frozen=True)
class Loop:
    """A sustain or release loop of an instrument."""

    play_mode: int
    begin_loop_marker: int
    end_loop_marker: int


@dataclass(frozen=True)
class InstrumentChunk:
    """The INST chunk describing how a sampler should play the sound."""

    chunk_id: bytes
    chunk_size: int
    base_note: int
    detune: int
    low_note: int
    high_note: int
    low_velocity: int
    high_velocity: int
    gain: int
    sustain_loop: Loop
    release_loop: Loop


@dataclass(frozen=True)
class FillerChunk:
    """The undocumented FLLR chunk announcing a run of bytes to skip."""

    chunk_id: bytes
    total_filler_bytes: int


def parse_sample_rate(data: Buffer) -> int:
    """Decode a 10-byte extended-precision float into an integer rate.

    The sign bit is assumed clear; any fraction is truncated.
    """
    exponent_field, fraction = _unpack(
        struct.Struct(">HQ"), data, 0, "sample rate"
    )
    shift = 63 - (exponent_field - _EXPONENT_BIAS)
    if shift < 0:
        raise AiffError(f"sample rate exponent {exponent_field} is too large")
    return (fraction >> shift) & 0xFFFFFFFF


def parse_form_chunk(data: Buffer, file_size: int) -> FormChunk:
    """Parse and check the FORM chunk at the start of a file."""
    chunk_id, chunk_size, form_type = _unpack(_FORM_HEADER, data, 0, "Form chunk")
    _check_equal(chunk_size, file_size - CHUNK_HEADER_SIZE, "Form chunk size")
    _check_id(chunk_id, b"FORM", "Form chunk ID")
    _check_id(form_type, b"AIFF", "Form type")
    return FormChunk(chunk_id, chunk_size, form_type)


def parse_common_chunk(data: Buffer) -> CommonChunk:
    """Parse and check a COMM chunk."""
    chunk_id, chunk_size, channels, frames, sample_size = _unpack(
        _COMMON_HEADER, data, 0, "Common chunk"
    )
    view = memoryview(data)[_COMMON_HEADER.size:]
    sample_rate = parse_sample_rate(view)
    _check_equal(sample_rate % 100, 0, "sample rate modulo 100")
    _check_range(sample_size, 1, 32, "sample size")
    return CommonChunk(chunk_id, chunk_size, channels, frames, sample_size, sample_rate)


def parse_sound_data_chunk(data: Buffer) -> SoundDataChunk:
    """Parse and check an SSND chunk; offset and block size must be zero."""
    chunk_id, chunk_size, offset, block_size = _unpack(
        _SOUND_DATA_HEADER, data, 0, "Sound Data chunk"
    )
    _check_equal(offset, 0, "Sound Data offset")
    _check_equal(block_size, 0, "Sound Data block size")
    start = _SOUND_DATA_HEADER.size
    end = max(CHUNK_HEADER_SIZE + chunk_size, start)
    samples = bytes(data[start:end])
    return SoundDataChunk(chunk_id, chunk_size, offset, block_size, samples)


def parse_marker_chunk(data: Buffer, num_sample_frames: int) -> MarkerChunk:
    """Parse a MARK chunk, checking marker IDs, positions and uniqueness."""
    chunk_id, chunk_size, total = _unpack(
        _MARKER_CHUNK_HEADER, data, 0, "Marker chunk"
    )
    offset = _MARKER_CHUNK_HEADER.size
    markers = []
    for _ in range(total):
        marker_id, position, name_len = _unpack(_MARKER_HEADER, data, offset, "Marker")
        _check_range(marker_id, 1, MARKER_ID_MAX, "marker ID")
        _check_range(position, 0, num_sample_frames, f"position of marker {marker_id}")
        name_start = offset + _MARKER_HEADER.size
        name = bytes(data[name_start:name_start + name_len])
        if len(name) != name_len:
            raise AiffError("Marker name is truncated")
        markers.append(Marker(marker_id, position, name))
        offset = name_start + name_len

    ids = [marker.marker_id for marker in markers]
    if len(set(ids)) != len(ids):
        raise AiffError("markers do not have unique IDs")
    return MarkerChunk(chunk_id, chunk_size, tuple(markers))


def parse_instrument_chunk(data: Buffer) -> InstrumentChunk:
    """Parse and check an INST chunk."""
    (
        chunk_id,
        chunk_size,
        base_note,
        detune,
        low_note,
        high_note,
        low_velocity,
        high_velocity,
        gain,
        *loops,
    ) = _unpack(_INSTRUMENT, data, 0, "Instrument chunk")
    _check_equal(chunk_size, INSTRUMENT_CHUNK_SIZE, "Instrument chunk size")
    _check_range(detune, -50, 50, "detune")
    _check_range(low_note, 1, 127, "low note")
    _check_range(high_note, 1, 127, "high note")
    _check_range(low_velocity, 1, 127, "low velocity")
    _check_range(high_velocity, 1, 127, "high velocity")
    return InstrumentChunk(
        chunk_id,
        chunk_size,
        base_note,
        detune,
        low_note,
        high_note,
        low_velocity,
        high_velocity,
        gain,
        Loop(*loops[:3]),
        Loop(*loops[3:]),
    )


def parse_filler_chunk(data: Buffer) -> FillerChunk:
    """Parse a FLLR chunk header."""
    chunk_id, total = _unpack(_FILLER, data, 0, "Filler chunk")
    return FillerChunk(chunk_id, total)