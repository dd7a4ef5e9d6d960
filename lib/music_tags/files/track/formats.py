"""
Format-specific tag handlers that translate between mutagen's native tag structures and :class:`MusicTag`.

Each container format has one :class:`TagFormat` subclass, registered by :class:`MusicFormat`.  Decoders never
mutate the native tag that they read; encoders re-open the tag that already exists at the destination path, replace
only the fields that :class:`MusicTag` represents, and save it back to the same path.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable, Iterator, Optional, Type, Union

from mutagen import File, MutagenError
from mutagen.flac import FLAC, Picture
from mutagen.id3 import ID3, TIT2, TALB, TPE1, TPE2, TDRC, USLT, PictureType, Encoding
from mutagen.mp4 import MP4, MP4Tags
from mutagen.oggflac import OggFLAC
from mutagen.oggopus import OggOpus
from mutagen.oggvorbis import OggVorbis

from ...common.enums import MusicFormat
from ...constants import TYPED_TAG_MAP, LYRICS_LANG
from ..cover import Artwork, artworks_from_pictures, artworks_from_mp4_covers, artwork_from_picture_block
from ..cover import apic_for_artwork, picture_for_artwork, mp4_cover_for_artwork
from ..exceptions import MusicException, TagFormatError, Id3TagError, FlacTagError, Mp4TagError, ProbeError
from ..exceptions import FileAccessError, NotSupported, PictureDecodeError
from .parsing import split_artist, split_artists, join_artists

if TYPE_CHECKING:
    from mutagen._vorbis import VComment
    from ...typing import OptInt, OptStr, PathLike
    from ..stream import BytesSource
    from .tag import MusicTag

__all__ = ['TagFormat', 'Mp3Format', 'FlacFormat', 'Mp4Format', 'OggFormat', 'parse_year']
log = logging.getLogger(__name__)

DATE_FORMATS = ('%Y%m%d', '%Y-%m-%d', '%Y-%m', '%Y', '%Y-%m-%dT%H:%M:%SZ')
OGG_FILE_TYPES = (OggVorbis, OggOpus, OggFLAC)

Source = Union[Path, 'BytesSource']


def parse_year(value: Any) -> OptInt:
    """
    :param value: An int, or a date string in one of the forms ``YYYY``, ``YYYY-MM``, ``YYYY-MM-DD``, ``YYYYMMDD``, an
      iTunes-style ``YYYY-MM-DDTHH:MM:SSZ`` timestamp, or any other integer string
    :return: The year, or None if it could not be determined
    """
    if value is None or isinstance(value, int):
        return value
    value = str(value).strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).year
        except ValueError:
            pass
    try:
        return int(value)
    except ValueError:
        log.debug(f'Unable to parse year from date={value!r}')
        return None


def _os_error_cause(e: MutagenError) -> Optional[OSError]:
    # mutagen wraps OSErrors either via `raise MutagenError(e) from e` or by passing the original as the only arg
    if isinstance(e.__cause__, OSError):
        return e.__cause__
    elif e.args and isinstance(e.args[0], OSError):
        return e.args[0]
    return None


class TagFormat(ABC):
    __fmt_cls_map = {}
    fmt: MusicFormat
    tag_type: str
    error_cls: Type[TagFormatError] = TagFormatError

    def __init_subclass__(cls, fmt: MusicFormat, tag_type: str, **kwargs):
        super().__init_subclass__(**kwargs)
        cls.fmt = fmt
        cls.tag_type = tag_type
        TagFormat.__fmt_cls_map[fmt] = cls

    @classmethod
    def for_format(cls, fmt: Union[MusicFormat, str]) -> Type[TagFormat]:
        return cls.__fmt_cls_map[MusicFormat.get(fmt)]

    @classmethod
    def tag_id(cls, name: str) -> str:
        """The native tag ID for the given canonical field name"""
        return TYPED_TAG_MAP[name][cls.tag_type]

    # region Load / Save

    @classmethod
    def _error(cls, message: str, path: Optional[PathLike]) -> MusicException:
        return cls.error_cls(message, path)

    @classmethod
    @contextmanager
    def _handle_errors(cls, path: Optional[PathLike], action: str):
        try:
            yield
        except MusicException:
            raise
        except MutagenError as e:
            if (os_error := _os_error_cause(e)) is not None:
                raise FileAccessError(f'Error {action} {path}: {os_error}') from e
            raise cls._error(f'Error {action} tags: {e}', path) from e
        except OSError as e:
            raise FileAccessError(f'Error {action} {path}: {e}') from e

    @classmethod
    @abstractmethod
    def load(cls, source: Source):
        """Load the mutagen object for the given path or byte source"""
        raise NotImplementedError

    @classmethod
    def native_tags(cls, loaded):
        """The object that :meth:`.decode` and :meth:`.encode` operate on, given the result of :meth:`.load`"""
        return loaded

    @classmethod
    def writable_tags(cls, loaded, path: Path):
        """The native tags to be updated by :meth:`.encode`, created first if the file does not have any yet"""
        return cls.native_tags(loaded)

    @classmethod
    def save(cls, loaded, path: Path):
        loaded.save()

    # endregion

    @classmethod
    def read(cls, source: Source, path: Optional[Path] = None) -> MusicTag:
        return cls.decode(cls.native_tags(cls.load(source)), path)

    @classmethod
    @abstractmethod
    def decode(cls, tags, path: Optional[Path] = None) -> MusicTag:
        raise NotImplementedError

    @classmethod
    @abstractmethod
    def encode(cls, music_tag: MusicTag, tags):
        """Replace the fields represented by the given MusicTag in the given native tags, in place"""
        raise NotImplementedError

    @classmethod
    def write(cls, music_tag: MusicTag, path: PathLike):
        path = Path(path)
        loaded = cls.load(path)
        cls.encode(music_tag, cls.writable_tags(loaded, path))
        log.log(19, f'Saving {cls.fmt.name} tags to {path.as_posix()}')
        try:
            with cls._handle_errors(path, 'saving'):
                cls.save(loaded, path)
        except MusicException as e:
            log.error(f'Error saving tags to {path.as_posix()}: {e}')
            raise

    @classmethod
    def _new_tag(cls, path: Optional[Path], **kwargs) -> MusicTag:
        from .tag import MusicTag

        return MusicTag(cls.fmt, path, **kwargs)


class Mp3Format(TagFormat, fmt=MusicFormat.MP3, tag_type='id3'):
    error_cls = Id3TagError

    @classmethod
    def load(cls, source: Source) -> ID3:
        with cls._handle_errors(source if isinstance(source, Path) else None, 'reading'):
            return ID3(source)

    @classmethod
    def save(cls, tags: ID3, path: Path):
        if tags.version[:2] == (2, 3):
            # Loaded frames are translated to v2.4 in memory; save(v2_version=3) does not convert them back
            tags.update_to_v23()
            tags.save(path, v2_version=3)
        else:
            tags.save(path, v2_version=4)

    @classmethod
    def _text(cls, tags: ID3, name: str) -> OptStr:
        for frame in tags.getall(cls.tag_id(name)):
            if frame.text:
                return str(frame.text[0])
        return None

    @classmethod
    def _texts(cls, tags: ID3, name: str) -> Iterator[str]:
        for frame in tags.getall(cls.tag_id(name)):
            yield from map(str, frame.text)

    @classmethod
    def _year(cls, tags: ID3) -> OptInt:
        for frame in tags.getall(cls.tag_id('date')):
            if frame.text:
                return frame.text[0].year
        return None

    @classmethod
    def decode(cls, tags: ID3, path: Optional[Path] = None) -> MusicTag:
        lyrics = next((frame.text for frame in tags.getall(cls.tag_id('lyrics'))), None)
        return cls._new_tag(
            path,
            title=cls._text(tags, 'title'),
            artists=split_artists(cls._texts(tags, 'artist')),
            album=cls._text(tags, 'album'),
            album_artists=split_artists(cls._texts(tags, 'album_artist')),
            year=cls._year(tags),
            lyrics=lyrics,
            artworks=artworks_from_pictures(tags.getall(cls.tag_id('cover'))),
        )

    @classmethod
    def encode(cls, music_tag: MusicTag, tags: ID3):
        text_frames = (
            (TIT2, music_tag.title),
            (TALB, music_tag.album),
            (TPE1, join_artists(music_tag.artists)),
            (TPE2, join_artists(music_tag.album_artists)),
            (TDRC, None if music_tag.year is None else str(music_tag.year)),
        )
        for frame_cls, value in text_frames:
            tags.delall(frame_cls.__name__)
            if value:
                log.debug(f'Setting {frame_cls.__name__}={value!r}')
                tags.add(frame_cls(encoding=Encoding.UTF8, text=[value]))

        tags.delall(cls.tag_id('lyrics'))
        if music_tag.lyrics_text:
            tags.add(USLT(encoding=Encoding.UTF8, lang=LYRICS_LANG, desc='', text=music_tag.lyrics_text))

        cls._replace_covers(tags, music_tag.artworks)

    @classmethod
    def _replace_covers(cls, tags: ID3, artworks: Iterable[Artwork]):
        for frame in tags.getall(cls.tag_id('cover')):
            if frame.type == PictureType.COVER_FRONT:
                del tags[frame.HashKey]
        for artwork in artworks:
            frame = apic_for_artwork(artwork)
            while frame.HashKey in tags:
                frame.salt += ' '
            log.debug(f'Adding cover {frame.HashKey!r}: {artwork}')
            tags[frame.HashKey] = frame


def _first(tags: Optional[VComment], key: str) -> OptStr:
    if tags is not None and (values := tags.get(key)):
        return values[0]
    return None


def _all(tags: Optional[VComment], key: str) -> list[str]:
    if tags is None:
        return []
    return tags.get(key) or []


class FlacFormat(TagFormat, fmt=MusicFormat.FLAC, tag_type='vorbis'):
    error_cls = FlacTagError

    @classmethod
    def load(cls, source: Source) -> FLAC:
        with cls._handle_errors(source if isinstance(source, Path) else None, 'reading'):
            return FLAC(source)

    @classmethod
    def decode(cls, flac: FLAC, path: Optional[Path] = None) -> MusicTag:
        tags = flac.tags
        return cls._new_tag(
            path,
            title=_first(tags, cls.tag_id('title')),
            artists=split_artists(_all(tags, cls.tag_id('artist'))),
            album=_first(tags, cls.tag_id('album')),
            album_artists=split_artists(_all(tags, cls.tag_id('album_artist'))),
            year=parse_year(_first(tags, cls.tag_id('date'))),
            lyrics=_first(tags, cls.tag_id('lyrics')),
            artworks=artworks_from_pictures(flac.pictures),
        )

    @classmethod
    def encode(cls, music_tag: MusicTag, flac: FLAC):
        if flac.tags is None:
            log.debug(f'Adding a Vorbis comment block to {flac.filename}')
            flac.add_tags()

        tags = flac.tags
        fields = (
            ('title', music_tag.title),
            ('album', music_tag.album),
            ('artist', join_artists(music_tag.artists)),
            ('album_artist', join_artists(music_tag.album_artists)),
            ('date', None if music_tag.year is None else str(music_tag.year)),
            ('lyrics', music_tag.lyrics_text),
        )
        for name, value in fields:
            key = cls.tag_id(name)
            if key in tags:  # VCFLACDict is a list, so pop would be list.pop
                del tags[key]
            if value:
                log.debug(f'Setting {key}={value!r}')
                tags[key] = value

        flac.metadata_blocks = [
            block for block in flac.metadata_blocks
            if not (block.code == Picture.code and block.type == PictureType.COVER_FRONT)
        ]
        for artwork in music_tag.artworks:
            log.debug(f'Adding cover picture block: {artwork}')
            flac.add_picture(picture_for_artwork(artwork))


class Mp4Format(TagFormat, fmt=MusicFormat.M4A, tag_type='mp4'):
    error_cls = Mp4TagError

    @classmethod
    def load(cls, source: Source) -> MP4:
        with cls._handle_errors(source if isinstance(source, Path) else None, 'reading'):
            return MP4(source)

    @classmethod
    def native_tags(cls, mp4: MP4) -> Optional[MP4Tags]:
        return mp4.tags

    @classmethod
    def writable_tags(cls, mp4: MP4, path: Path) -> MP4Tags:
        if mp4.tags is None:
            log.debug(f'Adding an ilst atom to {path.as_posix()}')
            mp4.add_tags()
        return mp4.tags

    @classmethod
    def decode(cls, tags: Optional[MP4Tags], path: Optional[Path] = None) -> MusicTag:
        return cls._new_tag(
            path,
            title=_first(tags, cls.tag_id('title')),
            artists=split_artists(_all(tags, cls.tag_id('artist'))),
            album=_first(tags, cls.tag_id('album')),
            album_artists=split_artists(_all(tags, cls.tag_id('album_artist'))),
            year=parse_year(_first(tags, cls.tag_id('date'))),
            lyrics=_first(tags, cls.tag_id('lyrics')),
            artworks=artworks_from_mp4_covers(_all(tags, cls.tag_id('cover'))),
        )

    @classmethod
    def encode(cls, music_tag: MusicTag, tags: MP4Tags):
        fields = (
            ('title', [music_tag.title] if music_tag.title else []),
            ('album', [music_tag.album] if music_tag.album else []),
            ('artist', music_tag.artists),
            ('album_artist', music_tag.album_artists),
            ('date', [] if music_tag.year is None else [str(music_tag.year)]),
            ('lyrics', [music_tag.lyrics_text] if music_tag.lyrics_text else []),
            ('cover', [mp4_cover_for_artwork(artwork) for artwork in music_tag.artworks]),
        )
        for name, values in fields:
            key = cls.tag_id(name)
            tags.pop(key, None)
            if values:
                log.debug(f'Setting {key} with {len(values)} value(s)')
                tags[key] = values


class OggFormat(TagFormat, fmt=MusicFormat.OGG, tag_type='vorbis'):
    """Ogg containers are probed for Vorbis, Opus, or FLAC streams.  Writing is not supported."""

    @classmethod
    def _error(cls, message: str, path: Optional[PathLike]) -> MusicException:
        return ProbeError(f'{message} ({path})' if path is not None else message)

    @classmethod
    def load(cls, source: Source):
        path = source if isinstance(source, Path) else None
        with cls._handle_errors(path, 'probing'):
            ogg_file = File(source, options=OGG_FILE_TYPES)
        if ogg_file is None:
            raise cls._error('No Ogg Vorbis, Opus, or FLAC stream was found', path)
        return ogg_file

    @classmethod
    def native_tags(cls, ogg_file) -> Optional[VComment]:
        return ogg_file.tags

    @classmethod
    def decode(cls, tags: Optional[VComment], path: Optional[Path] = None) -> MusicTag:
        title = album = date = lyrics = None
        artists, album_artists, artworks = [], [], []
        for key, value in tags or ():
            match key.upper():
                case 'TITLE':
                    title = value
                case 'ALBUM':
                    album = value
                case 'ARTIST':
                    artists.extend(split_artist(value))
                case 'ALBUMARTIST':
                    album_artists.extend(split_artist(value))
                case 'DATE':
                    date = value
                case 'LYRICS':
                    lyrics = value
                case 'METADATA_BLOCK_PICTURE':
                    try:
                        artwork = artwork_from_picture_block(value)
                    except PictureDecodeError as e:
                        log.debug(f'Skipping picture: {e}')
                    else:
                        if artwork is not None:
                            artworks.append(artwork)

        return cls._new_tag(
            path,
            title=title,
            artists=artists,
            album=album,
            album_artists=album_artists,
            year=parse_year(date),
            lyrics=lyrics,
            artworks=artworks,
        )

    @classmethod
    def encode(cls, music_tag: MusicTag, tags):
        raise NotSupported(f'Writing {cls.fmt.name} tags is not supported')

    @classmethod
    def write(cls, music_tag: MusicTag, path: PathLike):
        # Rejected before the file is opened, so a missing or unreadable path still raises NotSupported
        cls.encode(music_tag, None)
