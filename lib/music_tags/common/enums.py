"""
Enums for the supported container and image formats
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from ..constants import EXT_FORMAT_MAP

if TYPE_CHECKING:
    from ..typing import PathLike

__all__ = ['MusicFormat', 'ImageFormat']


class MusicFormat(Enum):
    MP3 = 'mp3'
    FLAC = 'flac'
    M4A = 'm4a'
    OGG = 'ogg'

    @classmethod
    def get(cls, fmt) -> MusicFormat:
        return fmt if isinstance(fmt, cls) else cls(fmt)

    @classmethod
    def for_path(cls, path: PathLike) -> MusicFormat | None:
        """The format matching the given path's extension exactly (case-sensitive), or None"""
        if not (ext := Path(path).suffix[1:]):
            return None
        try:
            return cls(EXT_FORMAT_MAP[ext])
        except KeyError:
            return None


class ImageFormat(Enum):
    JPEG = 'image/jpeg'
    PNG = 'image/png'

    @classmethod
    def from_mime(cls, mime: str) -> ImageFormat:
        # Anything other than PNG is treated as JPEG
        return cls.PNG if mime == 'image/png' else cls.JPEG

    @property
    def mime_type(self) -> str:
        return self.value
