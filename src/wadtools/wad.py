"""Read DOOM-engine WAD archives from an in-memory buffer.

A WAD starts with a 12-byte header: the ``IWAD``/``PWAD`` magic, the number of lumps and
the offset of the lump directory. The directory is a list of 16-byte entries giving the
offset, size and name of each lump. Maps don't have a structure of their own, instead a
zero-size marker lump (``E1M1``, ``MAP01``) is followed by the lumps making up that map.

Decoding is lenient - truncated data produces fewer results instead of raising. The only
error is a buffer which doesn't start with a recognised magic.
"""
from typing import Callable, Iterable, Iterator, List, Optional, TypeVar
from typing_extensions import Final, Self
from enum import Enum
import re
import struct

import attrs

from wadtools import logger
from wadtools.binformat import Buffer, ByteCursor, read_name, read_struct
from wadtools.const import WADFormat, WADType
from wadtools.mapdata import LineDef, Thing, Vertex


__all__ = [
    'InvalidFormat', 'LumpInfo', 'MapConvention', 'MapSelector', 'WAD',
    'read_directory', 'group_map_lumps', 'read_records',
]

MAGIC_SIZE: Final = 4  # The IWAD/PWAD identification.
ST_HEADER: Final = struct.Struct('<ii')  # Lump count, directory offset.
ST_DIR_ENTRY: Final = struct.Struct('<ii8s')  # Offset, size, name.

LUMP_VERTEXES: Final = 'VERTEXES'
LUMP_LINEDEFS: Final = 'LINEDEFS'
LUMP_THINGS: Final = 'THINGS'

_EPISODE_MARKER = re.compile('^E[0-9]')
_MAP_NAME = re.compile(r'^(?:E([0-9]+)M([0-9]+)|MAP([0-9]+))$')

LOGGER = logger.get_logger(__name__)
RecordT = TypeVar('RecordT')


class InvalidFormat(ValueError):
    """Raised when the buffer does not start with a recognised WAD magic."""
    magic: bytes  #: The first bytes of the buffer.

    def __init__(self, magic: bytes) -> None:
        super().__init__(f'Invalid WAD file format, identification is {magic!r}!')
        self.magic = magic


@attrs.frozen
class LumpInfo:
    """An entry in the lump directory, giving the location of a lump in the archive.

    The range is not validated, reading past the end of the archive just truncates.
    """
    name: str
    offset: int
    size: int

    @property
    def end(self) -> int:
        """The offset just past the end of this lump."""
        return self.offset + self.size

    def is_named(self, name: str) -> bool:
        """Check if this lump has the specified name, ignoring case and surrounding spaces."""
        return self.name.strip().upper() == name.upper()


def read_directory(data: Buffer) -> Iterator[LumpInfo]:
    """Decode the lump directory, yielding each entry in order.

    If the buffer runs out before the declared number of lumps is reached, this stops early.
    """
    cursor = ByteCursor(data)
    cursor.seek(MAGIC_SIZE)
    header = read_struct(ST_HEADER, cursor)
    if header is None:
        LOGGER.debug('Header truncated, no lump directory present.')
        return
    lump_count, dir_offset = header

    cursor.seek(dir_offset)
    for i in range(lump_count):
        entry = read_struct(ST_DIR_ENTRY, cursor)
        if entry is None:
            LOGGER.debug('Directory truncated, read {}/{} lumps.', i, lump_count)
            return
        offset, size, name = entry
        yield LumpInfo(read_name(name), offset, size)


def _episodic_marker(episode: Optional[int], map_num: int) -> str:
    if episode is None:
        return ''
    return f'E{episode}M{map_num}'


def _episodic_terminator(name: str) -> bool:
    return _EPISODE_MARKER.match(name.upper().strip()) is not None


def _sequential_marker(episode: Optional[int], map_num: int) -> str:
    return f'MAP{map_num:02}'


def _sequential_terminator(name: str) -> bool:
    return name.upper().strip().startswith('MAP')


class MapConvention(Enum):
    """The naming scheme used for map marker lumps."""
    EPISODIC = 'episodic'  #: DOOM and Heretic, ``E1M1``.
    SEQUENTIAL = 'sequential'  #: DOOM II and later, ``MAP01``.

    def marker_name(self, episode: Optional[int], map_num: int) -> str:
        """Compute the name of the marker lump for this map.

        Episodic maps without an episode produce a blank name, which never matches.
        """
        return _MARKER_FUNCS[self](episode, map_num)

    def is_terminator(self, name: str) -> bool:
        """Check if this lump name begins another map, ending the current one."""
        return _TERMINATOR_FUNCS[self](name)


_MARKER_FUNCS: Final = {
    MapConvention.EPISODIC: _episodic_marker,
    MapConvention.SEQUENTIAL: _sequential_marker,
}
_TERMINATOR_FUNCS: Final = {
    MapConvention.EPISODIC: _episodic_terminator,
    MapConvention.SEQUENTIAL: _sequential_terminator,
}


@attrs.frozen
class MapSelector:
    """Identifies a map to decode from a WAD."""
    convention: MapConvention
    map: int
    episode: Optional[int] = None

    @classmethod
    def episodic(cls, episode: int, map_num: int) -> Self:
        """Select an ``ExMy`` map."""
        return cls(MapConvention.EPISODIC, map_num, episode)

    @classmethod
    def sequential(cls, map_num: int) -> Self:
        """Select a ``MAPxx`` map."""
        return cls(MapConvention.SEQUENTIAL, map_num)

    @classmethod
    def parse(cls, text: str) -> Self:
        """Parse a map name like ``E1M1`` or ``MAP01``."""
        match = _MAP_NAME.match(text.strip().upper())
        if match is None:
            raise ValueError(f'Unknown map name "{text}"!')
        episode, map_num, seq_num = match.groups()
        if seq_num is not None:
            return cls.sequential(int(seq_num))
        return cls.episodic(int(episode), int(map_num))

    @property
    def marker_name(self) -> str:
        """The name of the marker lump for this map."""
        return self.convention.marker_name(self.episode, self.map)

    def __str__(self) -> str:
        return self.marker_name


def group_map_lumps(lumps: Iterable[LumpInfo], selector: MapSelector) -> List[LumpInfo]:
    """Find the lumps belonging to a map.

    This locates the map's marker lump, then collects each following lump until the
    next map marker. If the marker isn't present, no lumps are returned.
    """
    marker = selector.marker_name
    if not marker:
        return []
    is_terminator = selector.convention.is_terminator

    found: List[LumpInfo] = []
    lump_iter = iter(lumps)
    for lump in lump_iter:
        if lump.name == marker:
            break
    else:
        return found

    for lump in lump_iter:
        if is_terminator(lump.name):
            break
        found.append(lump)
    return found


def _find_named(lumps: Iterable[LumpInfo], name: str) -> Optional[LumpInfo]:
    """Return the first lump with this name."""
    for lump in lumps:
        if lump.is_named(name):
            return lump
    return None


def read_records(
    cursor: ByteCursor,
    lump: LumpInfo,
    decoder: Callable[[ByteCursor], Optional[RecordT]],
) -> Iterator[RecordT]:
    """Decode each record in a lump.

    The cursor is moved to the start of the lump, then records are decoded while the
    position is still before the lump's end. The last record may run past that point,
    since the bounds are only checked between records. Decoding also stops as soon as
    a record fails to decode, which includes hitting the end of the buffer.
    """
    cursor.seek(lump.offset)
    end = lump.offset + lump.size
    while cursor.position < end:
        record = decoder(cursor)
        if record is None:
            return
        yield record


class WAD:
    """A WAD archive, held in memory.

    Each decoding operation uses its own cursor, so this is not modified after construction.
    """
    type: WADType  #: Whether this is an IWAD or PWAD.
    format: WADFormat  #: The game dialect, currently only informational.

    def __init__(self, data: Buffer, format: WADFormat = WADFormat.DEFAULT) -> None:
        self._data = bytes(data)
        self.type = self.identify(self._data)
        self.format = format

    @classmethod
    def from_buffer(cls, data: Buffer, format: WADFormat = WADFormat.DEFAULT) -> Self:
        """Identify and load a WAD from a buffer.

        :raises InvalidFormat: If the data is not a WAD.
        """
        return cls(data, format)

    @staticmethod
    def identify(data: Buffer) -> WADType:
        """Check the magic at the start of the buffer, determining the kind of WAD.

        :raises InvalidFormat: If the magic is not ``IWAD`` or ``PWAD``.
        """
        magic = bytes(data[:MAGIC_SIZE])
        try:
            return WADType(magic.decode('ascii'))
        except (UnicodeDecodeError, ValueError):
            raise InvalidFormat(magic) from None

    def __repr__(self) -> str:
        return f'<{self.type.value} {self.format.name}, {len(self._data)} bytes>'

    @property
    def data(self) -> bytes:
        """The raw bytes of the archive."""
        return self._data

    def lumps(self) -> Iterator[LumpInfo]:
        """Iterate over the lump directory, in order."""
        return read_directory(self._data)

    def find_lump(self, name: str) -> Optional[LumpInfo]:
        """Return the first lump with the specified name, or None if not present."""
        return _find_named(self.lumps(), name)

    def read_lump(self, lump: LumpInfo) -> bytes:
        """Return the contents of a lump, truncated if it extends past the end of the archive."""
        cursor = ByteCursor(self._data)
        cursor.seek(lump.offset)
        return cursor.read(lump.size)

    def map_lumps(self, selector: MapSelector) -> List[LumpInfo]:
        """Return the lumps belonging to the specified map, excluding the marker."""
        return group_map_lumps(self.lumps(), selector)

    def _read_vertexes(self, cursor: ByteCursor, map_lumps: List[LumpInfo]) -> Optional[List[Vertex]]:
        """Decode the vertex table for a map, or return None if not present."""
        lump = _find_named(map_lumps, LUMP_VERTEXES)
        if lump is None:
            LOGGER.debug('No {} lump.', LUMP_VERTEXES)
            return None
        return list(read_records(cursor, lump, Vertex.decode))

    def vertexes(self, selector: MapSelector) -> List[Vertex]:
        """Decode the vertexes in a map."""
        with logger.context(selector.marker_name):
            vertexes = self._read_vertexes(ByteCursor(self._data), self.map_lumps(selector)) or []
            LOGGER.debug('Decoded {} vertexes.', len(vertexes))
            return vertexes

    def linedefs(self, selector: MapSelector) -> List[LineDef]:
        """Decode the lines in a map.

        If either the ``VERTEXES`` or ``LINEDEFS`` lumps are missing, nothing is produced.
        """
        with logger.context(selector.marker_name):
            cursor = ByteCursor(self._data)
            map_lumps = self.map_lumps(selector)
            vertexes = self._read_vertexes(cursor, map_lumps)
            if vertexes is None:
                return []
            lump = _find_named(map_lumps, LUMP_LINEDEFS)
            if lump is None:
                LOGGER.debug('No {} lump.', LUMP_LINEDEFS)
                return []
            lines = list(read_records(
                cursor, lump,
                lambda cur: LineDef.decode(cur, vertexes),
            ))
            LOGGER.debug('Decoded {} lines, {} vertexes.', len(lines), len(vertexes))
            return lines

    def things(self, selector: MapSelector) -> List[Thing]:
        """Decode the things placed in a map.

        If the ``THINGS`` lump is missing, nothing is produced.
        """
        with logger.context(selector.marker_name):
            lump = _find_named(self.map_lumps(selector), LUMP_THINGS)
            if lump is None:
                LOGGER.debug('No {} lump.', LUMP_THINGS)
                return []
            things = list(read_records(ByteCursor(self._data), lump, Thing.decode))
            LOGGER.debug('Decoded {} things.', len(things))
            return things

    def linedefs_episodic(self, episode: int, map_num: int) -> List[LineDef]:
        """Decode the lines in an ``ExMy`` map."""
        return self.linedefs(MapSelector.episodic(episode, map_num))

    def linedefs_sequential(self, map_num: int) -> List[LineDef]:
        """Decode the lines in a ``MAPxx`` map."""
        return self.linedefs(MapSelector.sequential(map_num))

    def things_episodic(self, episode: int, map_num: int) -> List[Thing]:
        """Decode the things in an ``ExMy`` map."""
        return self.things(MapSelector.episodic(episode, map_num))

    def things_sequential(self, map_num: int) -> List[Thing]:
        """Decode the things in a ``MAPxx`` map."""
        return self.things(MapSelector.sequential(map_num))
