"""
The binformat module :mod:`binformat` contains functionality for handling binary formats, \
essentially expanding on :external:mod:`struct`'s functionality.

All reads here are lenient. Running off the end of the buffer never raises, instead fewer
bytes are returned and structure reads produce ``None``.
"""
from typing import Any, Optional, Tuple, Union
from struct import Struct
import functools


__all__ = ['Buffer', 'ByteCursor', 'read_struct', 'read_name']

Buffer = Union[bytes, bytearray, memoryview]
_cached_struct = functools.lru_cache()(Struct)


class ByteCursor:
    """A read-only view over a fixed buffer, with a position that can be moved around.

    The position is always kept inside ``[0, len(buffer)]``. Seeking outside that range
    clamps to the nearest end, and reads past the end return whatever bytes remain.
    Callers detect truncation by checking the length of the returned data.
    """
    __slots__ = ['_data', '_pos']
    _data: bytes
    _pos: int

    def __init__(self, data: Buffer) -> None:
        self._data = bytes(data)
        self._pos = 0

    def __repr__(self) -> str:
        return f'<ByteCursor {self._pos}/{len(self._data)}>'

    def __len__(self) -> int:
        return len(self._data)

    @property
    def position(self) -> int:
        """The current offset into the buffer."""
        return self._pos

    @position.setter
    def position(self, value: int) -> None:
        self._pos = min(max(value, 0), len(self._data))

    @property
    def remaining(self) -> int:
        """The number of bytes left after the current position."""
        return len(self._data) - self._pos

    def seek(self, pos: int) -> int:
        """Move to the specified offset, clamping to the buffer bounds.

        :returns: The position actually moved to.
        """
        self.position = pos
        return self._pos

    def tell(self) -> int:
        """Return the current position, like a file would."""
        return self._pos

    def read(self, count: int) -> bytes:
        """Read up to ``count`` bytes, advancing past the data actually returned."""
        if count <= 0:
            return b''
        data = self._data[self._pos:self._pos + count]
        self._pos += len(data)
        return data


def read_struct(fmt: Union[Struct, str], cursor: ByteCursor) -> Optional[Tuple[Any, ...]]:
    """Read a structure from the cursor, automatically computing the required number of bytes.

    If the buffer runs out before the whole structure is available, ``None`` is returned
    instead. The cursor is still advanced past any partial data.
    """
    if not isinstance(fmt, Struct):
        fmt = _cached_struct(fmt)
    data = cursor.read(fmt.size)
    if len(data) != fmt.size:
        return None
    return fmt.unpack(data)


def read_name(data: bytes) -> str:
    """Decode a fixed-width ASCII name, dropping the trailing null padding.

    Bytes which aren't ASCII are preserved via ``surrogateescape``.
    """
    return data.rstrip(b'\x00').decode('ascii', 'surrogateescape')
