"""
Splitting of multi-artist tag values
"""

from __future__ import annotations

import logging
from itertools import chain
from typing import TYPE_CHECKING

from ...constants import ARTIST_DELIMITERS, ARTIST_JOIN

if TYPE_CHECKING:
    from ...typing import StrIter

__all__ = ['split_artist', 'split_artists', 'join_artists']
log = logging.getLogger(__name__)


def split_artist(value: str) -> list[str]:
    """
    Split a single tag value into the artist names that it contains.  Co-artists may be separated by ``/``, ``&``,
    or a mix of both (``A & B / C``).

    :param value: A raw artist / album artist tag value
    :return: The non-empty, trimmed names in the order they were found
    """
    outer, inner = ARTIST_DELIMITERS
    return [name for segment in value.split(outer) for part in segment.split(inner) if (name := part.strip())]


def split_artists(values: StrIter) -> list[str]:
    """Split each of the given raw tag values, in order, and concatenate the results"""
    return list(chain.from_iterable(map(split_artist, values)))


def join_artists(artists: StrIter) -> str:
    return ARTIST_JOIN.join(artists)
