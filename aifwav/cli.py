"""Command-line entry point that converts an AIFF file into a WAV file."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional, Sequence, Union

from .aiff import read_aiff
from .chunks import AiffError
from .wav import build_wav, wav_filename

MAX_FILENAME_LEN = 255

_USAGE = (
    "\n\n  ===== How to use this program =====  \n\n"
    "Type:\n\n"
    "  aifwav <InputFile.aif>\n\n"
    "where <InputFile.aif> represents the name of the .aif file\n"
    "you wish to convert to a .wav file.\n\n"
    "Put the filename directly after \"aifwav\", with a space in between.\n\n"
    "Note that if your filename contains spaces, it must be enclosed in "
    "quotation marks.\n"
)


def convert_file(path: Union[str, os.PathLike]) -> str:
    """Convert the AIFF file at ``path`` and write the WAV file beside it.

    The output name is the input name with its extension replaced by ``wav``.
    Returns that name. Raises AiffError for an empty or invalid file and
    OSError when the file cannot be read or written.
    """
    source = Path(path)
    data = source.read_bytes()
    if not data:
        raise AiffError(f"{os.fspath(path)!r} is empty")

    wav_bytes = build_wav(read_aiff(data))
    target = wav_filename(path)
    Path(target).write_bytes(wav_bytes)
    return target


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the converter on the single file named in ``argv``."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        print(_USAGE)
        return 1

    filename = args[0]
    if len(filename) > MAX_FILENAME_LEN + 1:
        print(
            "\n\nThis program only accepts filenames whose lengths are "
            f"{MAX_FILENAME_LEN} or fewer.\n"
        )

    try:
        target = convert_file(filename)
    except (OSError, ValueError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    print(f"Conversion successful. Please find the .wav file\n\n  {target}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())