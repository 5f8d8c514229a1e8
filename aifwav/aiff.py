"""Reading a whole AIFF file: chunk scanning, validation and parsing."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from .chunkid import ChunkType, lookup_chunk_id
from .chunks import (
    CHUNK_HEADER_SIZE,
    AiffError,
    Buffer,
    CommonChunk,
    FillerChunk,
    FormChunk,
    InstrumentChunk,
    MarkerChunk,
    SoundDataChunk,
    parse_common_chunk,
    parse_filler_chunk,
    parse_form_chunk,
    parse_instrument_chunk,
    parse_marker_chunk,
    parse_sound_data_chunk,
)

MAX_UNIMPORTANT_CHUNKS = 25
"""Size of the chunk directory; one slot of it is never used."""

_SOUND_DATA_BOILERPLATE = 8


@dataclass(frozen=True)
class AiffFile:
    """A parsed and validated AIFF file."""

    form: FormChunk
    common: CommonChunk
    sound_data: SoundDataChunk
    marker_chunk: Optional[MarkerChunk]
    instrument: Optional[InstrumentChunk]
    fillers: Tuple[FillerChunk, ...]
    chunk_order: Tuple[ChunkType, ...]
    """Kinds of the chunks other than COMM and SSND, in file order."""


def validate_aif(
    counts: Mapping[ChunkType, int],
    common: Optional[CommonChunk],
    sound_data: Optional[SoundDataChunk],
) -> None:
    """Check chunk counts and the agreement between COMM and SSND.

    Raises AiffError when the file breaks the specification.
    """
    common_count = counts.get(ChunkType.COMMON, 0)
    if common_count == 0 or common is None:
        raise AiffError("this .aif file does not contain a Common chunk")
    if common_count > 1:
        raise AiffError("this .aif file contains more than one Common chunk")

    sound_count = counts.get(ChunkType.SOUND_DATA, 0)
    if common.num_sample_frames > 0 and sound_count == 0:
        raise AiffError(
            "the file reports sound samples but has no Sound Data chunk"
        )
    if sound_count > 1:
        raise AiffError("this .aif file contains more than one Sound Data chunk")

    # A missing Sound Data chunk counts as one whose size field is zero.
    if sound_data is None:
        declared = -_SOUND_DATA_BOILERPLATE
    else:
        declared = sound_data.declared_sample_bytes
    if common.sample_bytes != declared:
        raise AiffError(
            "the Common chunk's sample byte count does not match the Sound Data chunk"
        )

    if counts.get(ChunkType.INSTRUMENT, 0) > 1:
        raise AiffError("this .aif file contains more than one Instrument chunk")


def read_aiff(data: Buffer) -> AiffFile:
    """Parse and validate the bytes of a complete AIFF file."""
    view = memoryview(bytes(data))
    form = parse_form_chunk(view, len(view))

    counts: Counter[ChunkType] = Counter()
    common: Optional[CommonChunk] = None
    sound_data: Optional[SoundDataChunk] = None
    directory: list[tuple[ChunkType, int]] = []

    offset = form.subchunks_offset
    while offset < len(view):
        header = view[offset:offset + CHUNK_HEADER_SIZE]
        if len(header) < CHUNK_HEADER_SIZE:
            raise AiffError("chunk header is truncated")
        kind = lookup_chunk_id(header[:4])
        if kind is None:
            raise AiffError("this .aif file's metadata appears to be corrupted")
        if kind is ChunkType.FORM:
            raise AiffError("this .aif file contains more than one Form chunk")
        if kind is ChunkType.COMMON:
            common = parse_common_chunk(view[offset:])
        elif kind is ChunkType.SOUND_DATA:
            sound_data = parse_sound_data_chunk(view[offset:])
        else:
            if len(directory) >= MAX_UNIMPORTANT_CHUNKS - 1:
                raise AiffError(".aif file contains more chunks than expected")
            directory.append((kind, offset))
        counts[kind] += 1

        size = int.from_bytes(header[4:], "big", signed=True)
        if size < 0:
            raise AiffError(f"chunk size {size} is negative")
        offset += CHUNK_HEADER_SIZE + size

    validate_aif(counts, common, sound_data)
    assert common is not None and sound_data is not None

    marker_chunk: Optional[MarkerChunk] = None
    instrument: Optional[InstrumentChunk] = None
    fillers: list[FillerChunk] = []
    for kind, chunk_offset in directory:
        chunk = view[chunk_offset:]
        if kind is ChunkType.MARKER:
            parsed = parse_marker_chunk(chunk, common.num_sample_frames)
            if marker_chunk is None:
                marker_chunk = parsed
        elif kind is ChunkType.INSTRUMENT:
            instrument = parse_instrument_chunk(chunk)
        elif kind is ChunkType.FILLER:
            fillers.append(parse_filler_chunk(chunk))
        else:
            raise AiffError(
                f"encountered unexpected chunk {kind.chunk_id!r} "
                "when converting .aif chunk data"
            )

    return AiffFile(
        form=form,
        common=common,
        sound_data=sound_data,
        marker_chunk=marker_chunk,
        instrument=instrument,
        fillers=tuple(fillers),
        chunk_order=tuple(kind for kind, _ in directory),
    )