"""
The format-agnostic tag model, and dispatch to the format-specific handlers for reading and writing it.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Optional, Union

from ...common.enums import MusicFormat, ImageFormat
from ...text.lyrics import Lyrics
from ..cover import Artwork
from ..exceptions import UnsupportedFormat, NotSupported
from ..stream import BytesSource
from .formats import TagFormat
from .parsing import split_artist

if TYPE_CHECKING:
    from ...typing import OptInt, OptStr, PathLike, StrIter

__all__ = ['MusicTag', 'read_from_path', 'read_from_bytes', 'write_to_path']
log = logging.getLogger(__name__)


def _clean_names(names: Union[str, StrIter, None]) -> list[str]:
    if names is None:
        return []
    elif isinstance(names, str):
        return split_artist(names)
    return [name for value in names if (name := value.strip())]


def _clean_text(value: OptStr) -> OptStr:
    if value is None:
        return None
    return value.strip() or None


class MusicTag:
    """
    Descriptive metadata read from one of the supported container formats.

    The format is fixed when the tag is created; every other field may be modified via its property.  Artist and
    album artist values are always stored as trimmed, non-empty names.
    """

    def __init__(
        self,
        fmt: Union[MusicFormat, str],
        path: Optional[PathLike] = None,
        *,
        title: OptStr = None,
        artists: Union[str, StrIter, None] = None,
        album: OptStr = None,
        album_artists: Union[str, StrIter, None] = None,
        year: OptInt = None,
        lyrics: OptStr = None,
        artworks: Iterable[Artwork] = (),
    ):
        self._fmt = MusicFormat.get(fmt)
        self._path = Path(path) if path is not None else None
        self.title = title
        self.artists = artists
        self.album = album
        self.album_artists = album_artists
        self.year = year
        self.lyrics_text = lyrics
        self._artworks = list(artworks)

    def __repr__(self) -> str:
        location = self._path.as_posix() if self._path is not None else '<bytes>'
        return f'<{self.__class__.__name__}[{self._fmt.name}]({location!r})>'

    @property
    def path(self) -> Optional[Path]:
        return self._path

    @property
    def fmt(self) -> MusicFormat:
        return self._fmt

    # region Text Fields

    @property
    def title(self) -> OptStr:
        return self._title

    @title.setter
    def title(self, value: OptStr):
        self._title = _clean_text(value)

    @property
    def album(self) -> OptStr:
        return self._album

    @album.setter
    def album(self, value: OptStr):
        self._album = _clean_text(value)

    @property
    def year(self) -> OptInt:
        return self._year

    @year.setter
    def year(self, value: OptInt):
        self._year = None if value is None else int(value)

    @property
    def lyrics_text(self) -> OptStr:
        """The raw lyrics text"""
        return self._lyrics

    @lyrics_text.setter
    def lyrics_text(self, value: OptStr):
        self._lyrics = value or None

    @property
    def lyrics(self) -> Optional[Lyrics]:
        if self._lyrics is None:
            return None
        return Lyrics(self._lyrics)

    # endregion

    # region Artists

    @property
    def artists(self) -> list[str]:
        return self._artists

    @artists.setter
    def artists(self, value: Union[str, StrIter, None]):
        self._artists = _clean_names(value)

    @property
    def artist(self) -> OptStr:
        return self._artists[0] if self._artists else None

    @property
    def album_artists(self) -> list[str]:
        return self._album_artists

    @album_artists.setter
    def album_artists(self, value: Union[str, StrIter, None]):
        self._album_artists = _clean_names(value)

    @property
    def album_artist(self) -> OptStr:
        return self._album_artists[0] if self._album_artists else None

    # endregion

    # region Artwork

    @property
    def artworks(self) -> list[Artwork]:
        return self._artworks

    @property
    def artwork(self) -> Optional[Artwork]:
        return self._artworks[0] if self._artworks else None

    def add_artwork(self, artwork: Artwork):
        self._artworks.append(artwork)

    def set_artworks(self, images: Iterable[tuple[bytes, ImageFormat]]):
        """
        Replace all artwork with the given images.  If the size of any image cannot be determined, then the current
        artwork is left unchanged.

        :param images: Tuples of (raw image data, image format)
        :raises: :class:`ImageSizeError` if the header of any of the given images could not be read
        """
        artworks = [Artwork.from_bytes(data, ImageFormat(fmt)) for data, fmt in images]
        self._artworks = artworks

    # endregion

    # region Read / Write

    @classmethod
    def read_from_path(cls, path: PathLike) -> MusicTag:
        return read_from_path(path)

    @classmethod
    def read_from_bytes(cls, data: bytes, fmt: Union[MusicFormat, str]) -> MusicTag:
        return read_from_bytes(data, fmt)

    def write_to_path(self, path: PathLike):
        write_to_path(self, path)

    def save(self):
        """Write this tag to the file that it was read from"""
        if self._path is None:
            raise NotSupported(f'Unable to save {self} - it was not read from a file')
        write_to_path(self, self._path)

    # endregion


def read_from_path(path: PathLike) -> MusicTag:
    """
    :param path: Path to an mp3, flac, m4a, or ogg file.  The format is determined by the file extension only.
    :return: The tag read from the given file
    :raises: :class:`UnsupportedFormat` if the file extension is not supported (before the file is accessed)
    """
    if (fmt := MusicFormat.for_path(path)) is None:
        raise UnsupportedFormat(f'Unsupported file extension: {Path(path).name!r}')
    path = Path(path)
    log.debug(f'Reading {fmt.name} tags from {path.as_posix()}')
    return TagFormat.for_format(fmt).read(path, path)


def read_from_bytes(data: bytes, fmt: Union[MusicFormat, str]) -> MusicTag:
    """Only MP3 / ID3 tags may be read from a bytes buffer"""
    if (fmt := MusicFormat.get(fmt)) != MusicFormat.MP3:
        raise NotSupported(f'Reading {fmt.name} tags from bytes is not supported')
    return TagFormat.for_format(fmt).read(BytesSource(data))


def write_to_path(music_tag: MusicTag, path: PathLike):
    TagFormat.for_format(music_tag.fmt).write(music_tag, path)
