"""
Typing helpers.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Union, Optional

if TYPE_CHECKING:
    from mutagen.flac import Picture
    from mutagen.id3 import APIC
    from mutagen.mp4 import MP4Cover

StrIter = Iterable[str]
OptStr = Optional[str]
OptInt = Optional[int]

PathLike = Union[Path, str]

ImageTag = Union['APIC', 'MP4Cover', 'Picture']
