from .track import MusicTag, read_from_path, read_from_bytes, write_to_path, split_artist, split_artists
from .cover import Artwork
from .exceptions import (
    MusicException, TagException, TagFormatError, Id3TagError, FlacTagError, Mp4TagError, ProbeError,
    PictureDecodeError, FileAccessError, UnsupportedFormat, NotSupported, ImageSizeError,
)
from .stream import BytesSource
