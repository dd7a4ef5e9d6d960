"""
Cover art extraction from and embedding into the native picture structures of each tag format
"""

from __future__ import annotations

import logging
import struct
from base64 import b64decode
from binascii import Error as Base64Error
from dataclasses import dataclass, field
from io import BytesIO
from typing import TYPE_CHECKING, Iterable, Iterator, Optional

from mutagen.flac import Picture, error as FlacError
from mutagen.id3 import APIC, PictureType, Encoding
from mutagen.mp4 import MP4Cover
from PIL.Image import Image as PILImage, open as open_image

from ..common.enums import ImageFormat
from ..constants import PICTURE_BLOCK_OFFSETS
from .exceptions import ImageSizeError, PictureDecodeError

if TYPE_CHECKING:
    from ..typing import ImageTag

__all__ = [
    'Artwork', 'image_size', 'bytes_to_image', 'artworks_from_pictures', 'artworks_from_mp4_covers',
    'artwork_from_picture_block', 'apic_for_artwork', 'picture_for_artwork', 'mp4_cover_for_artwork',
]
log = logging.getLogger(__name__)

MP4_FORMAT_MAP = {ImageFormat.JPEG: MP4Cover.FORMAT_JPEG, ImageFormat.PNG: MP4Cover.FORMAT_PNG}


@dataclass
class Artwork:
    data: bytes = field(repr=False)
    fmt: ImageFormat = ImageFormat.JPEG
    width: int = 0
    height: int = 0

    def __post_init__(self):
        self.data = bytes(self.data)

    @classmethod
    def from_bytes(cls, data: bytes, fmt: ImageFormat = ImageFormat.JPEG) -> Artwork:
        """
        :param data: Raw image file content
        :param fmt: The image format to record for the given data
        :return: An Artwork with dimensions read from the image header
        :raises: :class:`ImageSizeError` if the image header could not be read
        """
        width, height = image_size(data)
        return cls(data, fmt, width, height)

    @property
    def mime_type(self) -> str:
        return self.fmt.mime_type

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height


# region Image Header Helpers


def bytes_to_image(data: bytes) -> PILImage:
    try:
        return open_image(BytesIO(data))
    except (OSError, ValueError, EOFError) as e:  # UnidentifiedImageError is an OSError
        raise ImageSizeError(f'Unable to read image header from {len(data)} bytes: {e}') from e


def image_size(data: bytes) -> tuple[int, int]:
    with bytes_to_image(data) as image:
        return image.size


def _image_depth(data: bytes) -> int:
    try:
        with bytes_to_image(data) as image:
            return 1 if image.mode == '1' else 32 if image.mode in ('I', 'F') else 8 * len(image.getbands())
    except ImageSizeError as e:
        log.debug(f'Unable to determine color depth: {e}')
        return 0


# endregion

# region Extraction


def _artwork_from_picture(picture: ImageTag) -> Optional[Artwork]:
    if picture.type != PictureType.COVER_FRONT:
        log.debug(f'Skipping picture with type={picture.type!r}')
        return None
    try:
        return Artwork.from_bytes(picture.data, ImageFormat.from_mime(picture.mime))
    except ImageSizeError as e:
        log.debug(f'Skipping front cover picture: {e}')
        return None


def artworks_from_pictures(pictures: Iterable[APIC | Picture]) -> list[Artwork]:
    """
    :param pictures: ID3 APIC frames or FLAC picture blocks
    :return: Artwork for each front cover picture whose image header could be read
    """
    return [artwork for pic in pictures if (artwork := _artwork_from_picture(pic)) is not None]


def _iter_mp4_artworks(covers: Iterable[MP4Cover]) -> Iterator[Artwork]:
    for cover in covers:
        fmt = ImageFormat.PNG if cover.imageformat == MP4Cover.FORMAT_PNG else ImageFormat.JPEG
        try:
            yield Artwork.from_bytes(bytes(cover), fmt)
        except ImageSizeError as e:
            log.debug(f'Skipping MP4 cover: {e}')


def artworks_from_mp4_covers(covers: Iterable[MP4Cover]) -> list[Artwork]:
    """MP4 covers have no picture type, so every readable cover is included"""
    return list(_iter_mp4_artworks(covers))


def decode_picture_block(value: str) -> bytes:
    try:
        return b64decode(value)
    except (Base64Error, ValueError) as e:
        raise PictureDecodeError(f'Invalid base64 METADATA_BLOCK_PICTURE value: {e}') from e


def _artwork_from_offsets(block: bytes) -> Optional[Artwork]:
    for offset in PICTURE_BLOCK_OFFSETS:
        try:
            return Artwork.from_bytes(block[offset:], ImageFormat.JPEG)
        except ImageSizeError:
            pass
    log.debug(f'Skipping unreadable picture block with length={len(block)}')
    return None


def artwork_from_picture_block(value: str) -> Optional[Artwork]:
    """
    Extract the front cover from a base64-encoded ``METADATA_BLOCK_PICTURE`` Vorbis comment value.

    The decoded value is parsed as a FLAC picture block.  If it is malformed, the image data is located by trying
    the header lengths that the block would have with an empty description.

    :param value: The base64 text of the Vorbis comment
    :return: The front cover Artwork, or None if the picture is not a front cover or could not be read
    :raises: :class:`PictureDecodeError` if the value is not valid base64
    """
    block = decode_picture_block(value)
    try:
        picture = Picture(block)
    except (FlacError, struct.error) as e:
        log.debug(f'Unable to parse picture block: {e}')
        return _artwork_from_offsets(block)
    return _artwork_from_picture(picture)


# endregion

# region Embedding


def apic_for_artwork(artwork: Artwork) -> APIC:
    return APIC(
        encoding=Encoding.UTF8, mime=artwork.mime_type, type=PictureType.COVER_FRONT, desc='', data=artwork.data  # noqa
    )


def picture_for_artwork(artwork: Artwork) -> Picture:
    picture = Picture()
    picture.type = PictureType.COVER_FRONT  # noqa
    picture.mime = artwork.mime_type
    picture.width, picture.height = artwork.size
    picture.depth = _image_depth(artwork.data)
    picture.data = artwork.data
    return picture


def mp4_cover_for_artwork(artwork: Artwork) -> MP4Cover:
    return MP4Cover(artwork.data, MP4_FORMAT_MAP[artwork.fmt])


# endregion
