"""Perfect hashing of the four-character chunk IDs found in AIFF files."""

from __future__ import annotations

import enum
from typing import Union

ID_WIDTH = 4
"""Every AIFF chunk ID is exactly four ASCII characters."""

MIN_HASH_VALUE = 0
MAX_HASH_VALUE = 30
HASHED_CHUNK_ID_ARRAY_SIZE = MAX_HASH_VALUE + 1
TOTAL_IMPORTANT_CHUNK_TYPES = 3

ChunkIdLike = Union[bytes, bytearray, memoryview, str]

_DEFAULT_WEIGHT = 31

# Weights for the characters that occur at positions 0 and 3 of the known IDs;
# every other byte value weighs _DEFAULT_WEIGHT.
_WEIGHTS = {
    ord(" "): 9,
    ord("("): 4,
    ord("A"): 4,
    ord("C"): 10,
    ord("D"): 15,
    ord("E"): 9,
    ord("F"): 15,
    ord("H"): 4,
    ord("I"): 0,
    ord("K"): 9,
    ord("L"): 5,
    ord("M"): 5,
    ord("N"): 15,
    ord("O"): 0,
    ord("R"): 10,
    ord("S"): 15,
    ord("T"): 0,
}


class ChunkType(enum.IntEnum):
    """Chunk kinds, valued by the hash of their four-character ID."""

    FORM = 20
    COMMON = 15
    SOUND_DATA = 30
    MARKER = 14
    INSTRUMENT = 0
    COMMENT = 10
    NAME = 24
    AUTHOR = 8
    COPYRIGHT = 13
    ANNOTATION = 4
    AUDIO_RECORDING = 19
    MIDI = 5
    APPLICATION_SPECIFIC = 9
    FILLER = 25

    @property
    def chunk_id(self) -> bytes:
        """The four-byte ID this chunk carries in a file."""
        return _IDS[self]


_IDS = {
    ChunkType.FORM: b"FORM",
    ChunkType.COMMON: b"COMM",
    ChunkType.SOUND_DATA: b"SSND",
    ChunkType.MARKER: b"MARK",
    ChunkType.INSTRUMENT: b"INST",
    ChunkType.COMMENT: b"COMT",
    ChunkType.NAME: b"NAME",
    ChunkType.AUTHOR: b"AUTH",
    ChunkType.COPYRIGHT: b"(c) ",
    ChunkType.ANNOTATION: b"ANNO",
    ChunkType.AUDIO_RECORDING: b"AESD",
    ChunkType.MIDI: b"MIDI",
    ChunkType.APPLICATION_SPECIFIC: b"APPL",
    ChunkType.FILLER: b"FLLR",
}


def _as_bytes(chunk_id: ChunkIdLike) -> bytes:
    if isinstance(chunk_id, str):
        return chunk_id.encode("latin-1")
    return bytes(chunk_id)


def chunk_hash(chunk_id: ChunkIdLike) -> int:
    """Hash the first four characters of a chunk ID.

    The result equals the matching ChunkType value for every known ID; an
    unknown ID may collide with a known one or fall outside the table.
    """
    raw = _as_bytes(chunk_id)
    if len(raw) < ID_WIDTH:
        raise ValueError(
            f"chunk ID needs at least {ID_WIDTH} bytes, got {len(raw)}"
        )
    return _WEIGHTS.get(raw[3], _DEFAULT_WEIGHT) + _WEIGHTS.get(
        raw[0], _DEFAULT_WEIGHT
    )


def lookup_chunk_id(chunk_id: ChunkIdLike) -> ChunkType | None:
    """Return the ChunkType for a known four-character ID, or None."""
    raw = _as_bytes(chunk_id)
    if len(raw) != ID_WIDTH:
        return None
    key = chunk_hash(raw)
    if key > MAX_HASH_VALUE:
        return None
    try:
        candidate = ChunkType(key)
    except ValueError:
        return None
    return candidate if candidate.chunk_id == raw else None