"""ISO base media file format (MP4) box definitions, box type registry and box header I/O."""

__version__ = "0.1.0"

__all__ = [
    "box",
    "containers",
    "headers",
    "tables",
    "fragments",
    "sample_entries",
    "codecs",
    "metadata",
    "descriptors",
    "webvtt",
    "protection",
]