"""Records decoded from the lumps making up a map: vertexes, linedefs and things.

Each record has a ``decode()`` classmethod which reads a single entry from a
:py:class:`~wadtools.binformat.ByteCursor`, returning ``None`` if the data runs out.
"""
from typing import Any, Dict, List, Optional, Sequence
from typing_extensions import Final, Self
import math
import struct

import attrs

from wadtools.binformat import ByteCursor, read_struct
from wadtools.const import ThingFlags, flag_names, flag_values, thing_type_name


__all__ = ['Vertex', 'LineDef', 'Thing']

ST_VERTEX: Final = struct.Struct('<hh')
ST_LINEDEF: Final = struct.Struct('<7h')
ST_THING: Final = struct.Struct('<hhhHH')


@attrs.frozen
class Vertex:
    """A point in the map, referred to by index from linedefs."""
    x: int
    y: int

    @classmethod
    def decode(cls, cursor: ByteCursor) -> Optional[Self]:
        """Read a vertex, or return None if the data is truncated."""
        data = read_struct(ST_VERTEX, cursor)
        if data is None:
            return None
        x, y = data
        return cls(x, y)

    def as_dict(self) -> Dict[str, int]:
        """Return the JSON form of this vertex."""
        return {'x': self.x, 'y': self.y}


@attrs.frozen
class LineDef:
    """A line between two vertexes, forming a wall or boundary.

    The vertexes are resolved when decoding, so this doesn't refer back to the vertex table.
    """
    start: Vertex
    end: Vertex
    flags: int = 0
    #: The line special, triggering an action when activated.
    special: int = 0
    #: Sectors with this tag are affected by the special.
    tag: int = 0
    #: Sidedef indexes. The left side is -1 for one-sided lines.
    right_side: int = -1
    left_side: int = -1

    @classmethod
    def decode(cls, cursor: ByteCursor, vertexes: Sequence[Vertex]) -> Optional[Self]:
        """Read a linedef, looking up its vertexes in the provided table.

        This returns None if the data is truncated, or if either vertex index is
        outside the table.
        """
        data = read_struct(ST_LINEDEF, cursor)
        if data is None:
            return None
        start_ind, end_ind, flags, special, tag, right_side, left_side = data
        if not (0 <= start_ind < len(vertexes) and 0 <= end_ind < len(vertexes)):
            return None
        return cls(
            vertexes[start_ind], vertexes[end_ind],
            flags, special, tag,
            right_side, left_side,
        )

    @property
    def length(self) -> float:
        """The length of the line."""
        return math.hypot(self.end.x - self.start.x, self.end.y - self.start.y)

    def as_dict(self) -> Dict[str, Dict[str, int]]:
        """Return the JSON form of this line, which only includes the geometry."""
        return {
            'start': self.start.as_dict(),
            'end': self.end.as_dict(),
        }


@attrs.frozen
class Thing:
    """An object placed in the map: a monster, item, decoration, player start, etc."""
    x: int
    y: int
    #: Facing direction in degrees, 0 is east and 90 is north.
    angle: int
    type: int
    flags: int

    @classmethod
    def decode(cls, cursor: ByteCursor) -> Optional[Self]:
        """Read a thing, or return None if the data is truncated."""
        data = read_struct(ST_THING, cursor)
        if data is None:
            return None
        x, y, angle, typ, flags = data
        return cls(x, y, angle, typ, flags)

    @property
    def type_name(self) -> Optional[str]:
        """The canonical name for this thing type, if it is known."""
        return thing_type_name(self.type)

    @property
    def doom_flags(self) -> ThingFlags:
        """The flags as an enum, including any unknown bits."""
        return ThingFlags(self.flags)

    @property
    def flag_values(self) -> List[int]:
        """Each known flag bit which is set."""
        return flag_values(self.flags)

    @property
    def flag_names(self) -> List[str]:
        """The canonical names of each known flag which is set."""
        return flag_names(self.flags)

    def as_dict(self) -> Dict[str, Any]:
        """Return the JSON form of this thing.

        The ``doomType`` and ``doomTypeName`` keys are only present if the type is known.
        """
        result: Dict[str, Any] = {
            'x': self.x,
            'y': self.y,
            'angle': self.angle,
            'type': self.type,
            'flags': self.flags,
        }
        name = self.type_name
        if name is not None:
            result['doomType'] = self.type
            result['doomTypeName'] = name
        result['doomFlags'] = self.flag_values
        result['doomFlagNames'] = self.flag_names
        return result
