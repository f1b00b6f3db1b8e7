"""Helpers for performing tests."""
from typing import Iterable, List, Sequence, Tuple
import struct


__all__ = [
    'build_wad', 'pack_vertexes', 'pack_linedefs', 'pack_things',
    'SAMPLE_VERTEXES', 'SAMPLE_LINES', 'SAMPLE_THINGS', 'sample_wad',
]


def build_wad(lumps: Iterable[Tuple[str, bytes]], magic: bytes = b'IWAD') -> bytes:
    """Build a WAD, with the lump data first and then the directory at the end."""
    data = bytearray()
    directory: List[Tuple[int, int, bytes]] = []
    pos = 12
    for name, lump_data in lumps:
        directory.append((pos, len(lump_data), name.encode('ascii')))
        data += lump_data
        pos += len(lump_data)
    header = struct.pack('<4sii', magic, len(directory), pos)
    return header + bytes(data) + b''.join([
        struct.pack('<ii8s', offset, size, name)
        for offset, size, name in directory
    ])


def pack_vertexes(points: Sequence[Tuple[int, int]]) -> bytes:
    """Build a VERTEXES lump."""
    return b''.join([struct.pack('<hh', x, y) for x, y in points])


def pack_linedefs(lines: Sequence[Tuple[int, int]], flags: int = 1, special: int = 0, tag: int = 0) -> bytes:
    """Build a LINEDEFS lump, with one-sided lines."""
    return b''.join([
        struct.pack('<7h', start, end, flags, special, tag, i, -1)
        for i, (start, end) in enumerate(lines)
    ])


def pack_things(things: Sequence[Tuple[int, int, int, int, int]]) -> bytes:
    """Build a THINGS lump."""
    return b''.join([struct.pack('<hhhHH', *thing) for thing in things])


SAMPLE_VERTEXES = [(0, 0), (64, 0), (64, 64), (0, 64)]
SAMPLE_LINES = [(0, 1), (1, 2), (2, 3), (3, 0)]
SAMPLE_THINGS = [
    (32, 32, 90, 1, 0x07),  # Player 1 start.
    (48, 16, 180, 3004, 0x0C),  # Deaf zombieman on UV.
    (16, 48, 0, 2001, 0x01),  # Shotgun.
]


def sample_wad(magic: bytes = b'IWAD') -> bytes:
    """Build a WAD with two episodic maps, with different data in each."""
    return build_wad([
        ('E1M1', b''),
        ('THINGS', pack_things(SAMPLE_THINGS)),
        ('LINEDEFS', pack_linedefs(SAMPLE_LINES)),
        ('VERTEXES', pack_vertexes(SAMPLE_VERTEXES)),
        ('E1M2', b''),
        ('THINGS', pack_things([(0, 0, 0, 2, 0x07)])),
        ('LINEDEFS', pack_linedefs([(0, 1)])),
        ('VERTEXES', pack_vertexes([(-10, -10), (10, 10)])),
        ('ENDOOM', b'\x00' * 16),
    ], magic)
