"""Conversion of big-endian AIFF sample frames into little-endian WAV order."""

from __future__ import annotations

from .chunks import BITS_IN_BYTE, AiffError, Buffer

SUPPORTED_SAMPLE_SIZES = (16, 24)
"""Bit depths whose samples can be converted."""


def swap_sample_bytes(
    data: Buffer,
    sample_size: int,
    num_channels: int,
    num_sample_frames: int,
) -> bytes:
    """Return the samples of ``data`` with each sample's byte order reversed.

    Only as many bytes as the frame count, channel count and sample size call
    for are converted; anything after them is ignored. Raises AiffError for a
    sample size other than 16 or 24 bits, or when ``data`` holds too few bytes.
    """
    if sample_size not in SUPPORTED_SAMPLE_SIZES:
        raise AiffError(
            f"expected sample size of either 16 or 24 but read {sample_size} instead"
        )

    width = sample_size // BITS_IN_BYTE
    count = max(num_sample_frames * num_channels * width, 0)
    source = bytes(memoryview(data)[:count])
    if len(source) < count:
        raise AiffError(
            f"sound data holds {len(source)} sample bytes but {count} are needed"
        )

    converted = bytearray(count)
    for position in range(width):
        converted[position::width] = source[width - 1 - position::width]
    return bytes(converted)