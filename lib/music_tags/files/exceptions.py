"""
Exceptions raised while reading or writing tags
"""

from __future__ import annotations

from ..common.enums import MusicFormat

__all__ = [
    'MusicException', 'TagException', 'TagFormatError', 'Id3TagError', 'FlacTagError', 'Mp4TagError', 'ProbeError',
    'PictureDecodeError', 'FileAccessError', 'UnsupportedFormat', 'NotSupported', 'ImageSizeError',
]


class MusicException(Exception):
    """Base Exception class for the music_tags package"""


class TagException(MusicException):
    """Generic exception related to problems with tags"""


class TagFormatError(TagException):
    """Exception to be raised when the underlying container library fails to read or write a tag"""
    fmt: MusicFormat | None = None

    def __init__(self, message, path=None):
        super().__init__(message)
        self.path = path

    def __str__(self) -> str:
        prefix = f'[{self.fmt.value}] ' if self.fmt is not None else ''
        location = f' ({self.path})' if self.path is not None else ''
        return f'{prefix}{self.args[0]}{location}'


class Id3TagError(TagFormatError):
    """Exception to be raised when an ID3 tag cannot be read or written"""
    fmt = MusicFormat.MP3


class FlacTagError(TagFormatError):
    """Exception to be raised when FLAC metadata blocks cannot be read or written"""
    fmt = MusicFormat.FLAC


class Mp4TagError(TagFormatError):
    """Exception to be raised when MP4 metadata atoms cannot be read or written"""
    fmt = MusicFormat.M4A


class ProbeError(TagException):
    """Exception to be raised when probing an Ogg container fails for a reason other than I/O"""


class PictureDecodeError(TagException):
    """Exception to be raised when an embedded METADATA_BLOCK_PICTURE value is not valid base64"""


class FileAccessError(MusicException):
    """Exception to be raised when the file containing a tag cannot be accessed"""


class UnsupportedFormat(MusicException):
    """Exception to be raised when a path does not have a supported file extension"""


class NotSupported(MusicException):
    """Exception to be raised for operations that are not implemented for a given format"""


class ImageSizeError(MusicException):
    """Exception to be raised when the dimensions of an image cannot be determined from its header"""
