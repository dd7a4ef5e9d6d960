"""
Seekable in-memory byte source for tag data that arrives without a file path
"""

from __future__ import annotations

import errno
from io import RawIOBase, SEEK_SET, SEEK_CUR, SEEK_END

__all__ = ['BytesSource']


class BytesSource(RawIOBase):
    """
    Read-only file-like object over a bytes buffer.

    Unlike :class:`io.BytesIO`, seeking outside of the buffer is an error, which matches what mutagen expects
    from a real file when it probes for tags at the end of a stream.  Reading at or past the end returns ``b''``.
    """

    def __init__(self, data: bytes):
        super().__init__()
        self._buf = bytes(data)
        self._pos = 0

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}[{self._pos}/{len(self._buf)}]>'

    @property
    def byte_len(self) -> int:
        return len(self._buf)

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def read(self, size: int | None = -1) -> bytes:
        start = self._pos
        if size is None or size < 0:
            end = len(self._buf)
        else:
            end = min(start + size, len(self._buf))
        self._pos = end
        return self._buf[start:end]

    def readall(self) -> bytes:
        return self.read()

    def readinto(self, buffer) -> int:
        data = self.read(len(buffer))
        size = len(data)
        buffer[:size] = data
        return size

    def seek(self, offset: int, whence: int = SEEK_SET) -> int:
        if whence == SEEK_SET:
            pos = offset
        elif whence == SEEK_CUR:
            pos = self._pos + offset
        elif whence == SEEK_END:
            pos = len(self._buf) + offset
        else:
            raise ValueError(f'Invalid {whence=}')

        if not 0 <= pos <= len(self._buf):
            raise OSError(errno.EINVAL, 'Invalid position')
        self._pos = pos
        return pos

    def tell(self) -> int:
        return self._pos
