"""
Lyrics line splitting and ``[MM:SS.CC]`` timestamp parsing

Example::

    >>> lyrics = Lyrics('[00:12.50]first line\\r\\n[00:15.00]second line\\n')
    >>> [(str(time), text) for time, text in lyrics.lines_with_time()]
    [('00:12.50', 'first line'), ('00:15.00', 'second line')]
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterator, Optional, Union

__all__ = ['Lyrics', 'LyricsDuration', 'split_lyrics', 'parse_timestamp']

LINE_BREAK_PAT = re.compile(r'\r\n|\r|\n')
SECONDS_PAT = re.compile(r'\d+(?:\.\d+)?')
TIMESTAMP_LEN = 10

Seconds = Union[Decimal, float, int]


@dataclass(frozen=True)
class LyricsDuration:
    minute: int = 0
    second: int = 0
    hundredths: int = 0

    def __str__(self) -> str:
        return f'{self.minute:02d}:{self.second:02d}.{self.hundredths:02d}'

    @classmethod
    def from_min_secs(cls, minute: int, seconds: Seconds) -> LyricsDuration:
        """
        :param minute: The whole minutes
        :param seconds: Seconds with a fractional part; anything past hundredths is truncated
        """
        if not isinstance(seconds, Decimal):
            seconds = Decimal(str(seconds))
        value = int(seconds * 100)
        return cls(minute, value // 100 % 60, value % 100)

    @property
    def total_seconds(self) -> float:
        return self.minute * 60 + self.second + self.hundredths / 100


def split_lyrics(lyrics: str) -> list[str]:
    """
    Split the given text on ``\\r\\n``, ``\\r``, or ``\\n``, stripping surrounding whitespace from each line.  A
    trailing line break does not produce an empty last line.
    """
    if not lyrics:
        return []
    lines = [line.strip() for line in LINE_BREAK_PAT.split(lyrics)]
    if LINE_BREAK_PAT.match(lyrics[-1]):
        lines.pop()
    return lines


def _parse_time(time: str) -> Optional[LyricsDuration]:
    minute, seconds = time[:2], time[3:]
    if not minute.isdecimal() or not SECONDS_PAT.fullmatch(seconds):
        return None
    return LyricsDuration.from_min_secs(int(minute), Decimal(seconds))


def parse_timestamp(line: str) -> tuple[Optional[LyricsDuration], str]:
    """
    :param line: A single line of lyrics, optionally starting with a ``[MM:SS.CC]`` timestamp
    :return: Tuple of (timestamp or None, remaining text).  If the line does not start with a valid timestamp,
      the full line is returned as the text.
    """
    if len(line) >= TIMESTAMP_LEN and line[0] == '[' and line[TIMESTAMP_LEN - 1] == ']':
        if (duration := _parse_time(line[1:TIMESTAMP_LEN - 1])) is not None:
            return duration, line[TIMESTAMP_LEN:]
    return None, line


class Lyrics:
    """Read-only, line-based view of a raw lyrics string"""
    __slots__ = ('lines',)

    def __init__(self, lyrics: str = ''):
        self.lines = split_lyrics(lyrics)

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}[lines={len(self.lines)}]>'

    def __str__(self) -> str:
        return '\n'.join(self.lines)

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self) -> Iterator[str]:
        return iter(self.lines)

    def __eq__(self, other: Lyrics) -> bool:
        if not isinstance(other, Lyrics):
            return NotImplemented
        return self.lines == other.lines

    def lines_with_time(self) -> Iterator[tuple[Optional[LyricsDuration], str]]:
        for line in self.lines:
            yield parse_timestamp(line)
