"""
Read and write the descriptive tags of mp3, flac, m4a, and ogg files through a single format-agnostic model.
"""

from .common.enums import MusicFormat, ImageFormat
from .files import (
    MusicTag, Artwork, BytesSource, read_from_path, read_from_bytes, write_to_path, split_artist, split_artists,
)
from .files.exceptions import (
    MusicException, TagException, TagFormatError, Id3TagError, FlacTagError, Mp4TagError, ProbeError,
    PictureDecodeError, FileAccessError, UnsupportedFormat, NotSupported, ImageSizeError,
)
from .text import Lyrics, LyricsDuration, parse_timestamp
