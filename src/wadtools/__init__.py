"""Decode DOOM-engine WAD archives, extracting map geometry and placed things."""
from typing import TYPE_CHECKING
import sys as _sys


__version__: str
if not TYPE_CHECKING:
    try:
        from ._version import __version__
    except ImportError:
        __version__ = '<unknown>'
    else:
        # Discard the now-useless module. Use globals so static analysis ignores this.
        del _sys.modules[globals().pop('_version').__name__]

__all__ = [
    '__version__',

    'ByteCursor',
    'WAD', 'WADType', 'WADFormat', 'InvalidFormat',
    'LumpInfo', 'MapConvention', 'MapSelector',
    'Vertex', 'LineDef', 'Thing', 'ThingFlags',

    # Submodules:
    'binformat', 'const', 'logger', 'mapdata', 'wad',  # pyright: ignore
]

# Import these, so people can reference 'wadtools.WAD' instead of 'wadtools.wad.WAD'.
# Should be done after other code, so everything's initialised.
# This shouldn't be used in our modules, to ensure the order here doesn't matter.
# isort: off
from wadtools.binformat import ByteCursor
from wadtools.const import WADType, WADFormat, ThingFlags
from wadtools.mapdata import Vertex, LineDef, Thing
from wadtools.wad import WAD, InvalidFormat, LumpInfo, MapConvention, MapSelector
