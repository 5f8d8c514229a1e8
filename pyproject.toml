[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "aifwav"
version = "0.1.0"
description = "Convert AIFF audio files to WAV while keeping sampler metadata such as loop points and instrument settings"
requires-python = ">=3.10"
dependencies = []
keywords = ["aiff", "aif", "wav", "audio", "conversion", "sampler", "loop", "riff"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Conversion",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
aifwav = "aifwav.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["aifwav"]

[tool.pytest.ini_options]
addopts = "-ra"
