"""Assembly of a little-endian WAV file from a parsed AIFF file."""

from __future__ import annotations

import os
import struct
from typing import Optional, Union

from .aiff import AiffFile
from .chunkid import ChunkType
from .chunks import AiffError, InstrumentChunk, Loop, MarkerChunk
from .samples import swap_sample_bytes

AIF_NO_LOOP = 0
AIF_FWD_LOOP = 1
AIF_FWD_BACK_LOOP = 2
WAV_FWD_LOOP = 0
WAV_FWD_BACK_LOOP = 1

PCM_FORMAT = 1
PCM_FMT_CHUNK_SIZE = 16
INST_CHUNK_SIZE = 7
SAMPLER_HEADER_SIZE = 36
NANOSECONDS_PER_SECOND = 1_000_000_000

_RIFF = struct.Struct("<4sI4s")
_FMT = struct.Struct("<4sIHHIIHH")
_DATA = struct.Struct("<4sI")
_INST = struct.Struct("<4sI8B")
_SAMPLER = struct.Struct("<4sI9I")
_SAMPLE_LOOP = struct.Struct("<6I")

_U8 = 0xFF
_U16 = 0xFFFF
_U32 = 0xFFFFFFFF


def _wav_size_and_loops(aiff: AiffFile) -> tuple[int, int]:
    """Number of bytes the WAV file takes, and the number of sample loops."""
    needed = _RIFF.size + _FMT.size + _DATA.size + aiff.common.sample_bytes
    if needed % 2:
        needed += 1

    num_loops = 0
    for kind in aiff.chunk_order:
        if kind is ChunkType.MARKER:
            marker_chunk = aiff.marker_chunk
            if marker_chunk is not None and marker_chunk.total_markers > 0:
                needed += _SAMPLER.size
        elif kind is ChunkType.INSTRUMENT and aiff.instrument is not None:
            # WAV instrument chunks hold 7 bytes, so one more keeps alignment.
            needed += _INST.size + 1
            for loop in (aiff.instrument.sustain_loop, aiff.instrument.release_loop):
                if loop.begin_loop_marker:
                    needed += _SAMPLE_LOOP.size
                    num_loops += 1
    return needed, num_loops


def _sample_loop(loop: Loop, marker_chunk: Optional[MarkerChunk], name: str) -> bytes:
    if not AIF_FWD_LOOP <= loop.play_mode <= AIF_FWD_BACK_LOOP:
        raise AiffError(
            f"{name} play mode: value {loop.play_mode} is not within the bounds "
            f"{AIF_FWD_LOOP} and {AIF_FWD_BACK_LOOP}"
        )
    loop_type = WAV_FWD_LOOP if loop.play_mode == AIF_FWD_LOOP else WAV_FWD_BACK_LOOP
    if marker_chunk is None:
        raise AiffError(f"{name} refers to markers but the file has no Marker chunk")
    start = marker_chunk.position_of(loop.begin_loop_marker)
    end = marker_chunk.position_of(loop.end_loop_marker)
    return _SAMPLE_LOOP.pack(0, loop_type, start & _U32, end & _U32, 0, 0)


def _sampler_chunk(aiff: AiffFile, num_loops: int, sample_rate: int) -> bytes:
    instrument = aiff.instrument
    if instrument is None:
        raise AiffError("found a Marker chunk but no Instrument chunk")
    if sample_rate == 0:
        raise AiffError("cannot compute a sample period for a sample rate of zero")

    header = _SAMPLER.pack(
        b"smpl",
        (SAMPLER_HEADER_SIZE + num_loops * _SAMPLE_LOOP.size) & _U32,
        0,
        0,
        NANOSECONDS_PER_SECOND // sample_rate,
        instrument.base_note & _U32,
        instrument.detune & _U32,
        0,
        0,
        num_loops & _U32,
        0,
    )
    loops = [
        _sample_loop(loop, aiff.marker_chunk, name)
        for name, loop in (
            ("sustain loop", instrument.sustain_loop),
            ("release loop", instrument.release_loop),
        )
        if loop.play_mode != AIF_NO_LOOP
    ]
    return header + b"".join(loops)


def _inst_chunk(instrument: Optional[InstrumentChunk]) -> bytes:
    if instrument is None:
        raise AiffError("Instrument chunk was not parsed")
    return _INST.pack(
        b"inst",
        INST_CHUNK_SIZE,
        instrument.base_note & _U8,
        instrument.detune & _U8,
        instrument.gain & _U8,
        instrument.low_note & _U8,
        instrument.high_note & _U8,
        instrument.low_velocity & _U8,
        instrument.high_velocity & _U8,
        0,
    )


def build_wav(aiff: AiffFile) -> bytes:
    """Return the bytes of the WAV file that corresponds to ``aiff``.

    Besides the format and data chunks, the result carries a sampler chunk
    for a Marker chunk and an instrument chunk for an Instrument chunk, so
    that pitch and loop points survive the conversion.
    """
    common = aiff.common
    needed, num_loops = _wav_size_and_loops(aiff)

    bytes_per_sample = common.bytes_per_sample & _U16
    num_channels = common.num_channels & _U16
    sample_rate = common.sample_rate & _U32

    parts = [
        _RIFF.pack(b"RIFF", (needed - 8) & _U32, b"WAVE"),
        _FMT.pack(
            b"fmt ",
            PCM_FMT_CHUNK_SIZE,
            PCM_FORMAT,
            num_channels,
            sample_rate,
            (sample_rate * num_channels * bytes_per_sample) & _U32,
            (num_channels * bytes_per_sample) & _U16,
            common.sample_size & _U16,
        ),
    ]
    for kind in aiff.chunk_order:
        if kind is ChunkType.MARKER:
            parts.append(_sampler_chunk(aiff, num_loops, sample_rate))
        elif kind is ChunkType.INSTRUMENT:
            parts.append(_inst_chunk(aiff.instrument))
    parts.append(_DATA.pack(b"data", common.sample_bytes & _U32))

    samples = swap_sample_bytes(
        aiff.sound_data.samples,
        common.sample_size,
        common.num_channels,
        common.num_sample_frames,
    )
    header = b"".join(parts)
    if len(header) >= needed or len(header) + len(samples) > needed:
        raise AiffError("the WAV chunks do not fit in the space computed for them")
    return (header + samples).ljust(needed, b"\0")


def wav_filename(path: Union[str, os.PathLike]) -> str:
    """Replace everything after the last dot of ``path`` with ``wav``."""
    name = os.fspath(path)
    stem, dot, _ = name.rpartition(".")
    if not dot:
        raise ValueError(f"file name {name!r} has no extension to replace")
    return f"{stem}.wav"