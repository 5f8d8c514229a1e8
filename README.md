# aifwav

`aifwav` converts `.aif` (AIFF) files into `.wav` files. It keeps the
metadata that samplers rely on, which general-purpose audio tools often drop:
the root note, the fine tuning, the gain, the key and velocity ranges, and the
sustain and release loop points.

## What it does

1. It reads the AIFF file and walks through its chunks.
2. It checks the file against the AIFF rules and raises an error when:
   - the file does not start with a `FORM` chunk of type `AIFF`, or the
     `FORM` size does not match the file size, or a second `FORM` appears;
   - there is not exactly one `COMM` chunk;
   - the file has sample frames but no `SSND` chunk, or has more than one;
   - the `COMM` and `SSND` chunks disagree on the number of sample bytes;
   - there is more than one `INST` chunk;
   - the sample rate is not a multiple of 100, or the sample size is not
     between 1 and 32 bits;
   - the `SSND` offset or block size is not zero;
   - a marker ID is outside 1 to 32767, a marker position is beyond the last
     sample frame, or two markers share an ID;
   - the `INST` chunk size is not 20, the detune is outside -50 to 50, or a
     note or velocity is outside 1 to 127;
   - a chunk ID is not one of the known AIFF chunk IDs, or there are more
     than 24 chunks besides `COMM` and `SSND`.
3. It converts the big-endian AIFF data to little-endian WAV data.
4. It writes a WAV file with these chunks, in this order:
   - `RIFF` and `fmt ` (PCM);
   - a `smpl` chunk with its sample loops for the `MARK` chunk, and an
     `inst` chunk for the `INST` chunk, in the order those chunks appear in
     the AIFF file;
   - the `data` chunk, padded to an even length.

## Limits

- Only PCM samples of 16 or 24 bits are converted.
- Besides `COMM` and `SSND`, only `MARK`, `INST` and `FLLR` chunks are
  accepted. A file that carries text chunks such as `NAME`, `AUTH`,
  `(c) `, `ANNO` or `COMT`, or `AESD`, `MIDI` or `APPL` chunks, is
  rejected rather than converted; their contents are never written to the
  WAV file.
- A file with a `MARK` chunk must also have an `INST` chunk. Loop markers
  are looked up by taking the marker ID as its 1-based place in the `MARK`
  chunk.

## Installation

```
pip install .
```

## Command line

```
aifwav InputFile.aif
```

The converted file is written next to the input. It keeps the same name, with
everything after the last dot replaced by `wav`. If the file cannot be read,
is invalid or is not supported, the command prints an error to standard error
and exits with status 1. Called with anything other than one file name, it
prints usage help and exits with status 1.

## Library use

```python
from aifwav.aiff import read_aiff
from aifwav.wav import build_wav, wav_filename

with open("piano_C4.aif", "rb") as f:
    aiff = read_aiff(f.read())

with open(wav_filename("piano_C4.aif"), "wb") as f:
    f.write(build_wav(aiff))
```

`aifwav.cli.convert_file(path)` does the same in one call and returns the
name of the WAV file it wrote.

The modules:

- `aifwav.aiff`: `read_aiff(data)` returns an `AiffFile` holding the parsed
  `form`, `common`, `sound_data`, `marker_chunk`, `instrument` and `fillers`;
  `validate_aif(counts, common, sound_data)` runs the chunk-count checks.
- `aifwav.chunks`: one parser and one frozen dataclass per chunk
  (`parse_common_chunk` and `CommonChunk`, `parse_marker_chunk` and
  `MarkerChunk`, and so on), plus `parse_sample_rate` for the 10-byte
  extended-precision rate field.
- `aifwav.samples`: `swap_sample_bytes(data, sample_size, num_channels,
  num_sample_frames)` reverses the byte order of each 16- or 24-bit sample.
- `aifwav.wav`: `build_wav(aiff)` and `wav_filename(path)`.
- `aifwav.chunkid`: `ChunkType`, `chunk_hash(chunk_id)` and
  `lookup_chunk_id(chunk_id)` for recognising the four-character chunk IDs.

Invalid input raises `aifwav.chunks.AiffError`, a subclass of `ValueError`.

## Running the tests

```
pip install .[test]
pytest
```