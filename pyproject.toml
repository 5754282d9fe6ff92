[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ezp3"
version = "0.1.0"
description = "YouTube video and playlist conversion pipeline with quality analysis, progress reporting and batch jobs"
requires-python = ">=3.10"
dependencies = []
keywords = ["youtube", "audio", "video", "conversion", "mp3", "playlist", "batch"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Framework :: AsyncIO",
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
test = ["pytest", "pytest-asyncio"]

[project.scripts]
ezp3 = "ezp3.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["ezp3"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
