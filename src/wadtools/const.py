"""Various useful constants and enums."""
from typing import Any, Final, List, Mapping, MutableMapping, Optional
from enum import Enum, Flag
import functools
import operator
import sys


__all__ = [
    'add_unknown',
    'WADType', 'WADFormat', 'ThingFlags',
    'FLAG_NAMES', 'THING_TYPES',
    'thing_type_name', 'flag_values', 'flag_names',
]


def add_unknown(ns: MutableMapping[str, Any], bits: int = 32) -> None:
    """Add dummy members for :external:class:`enum.Flag` to allow all bits to be set.

    It should be called at the end of the class body. This ensures values read from a
    file with bits we don't know about can still be converted into the enum.
    All existing bits will be skipped.

    :param ns: The class namespace to add members to. This should be set to \
        :external:func:`locals()` or :external:func:`vars()`.
    :param bits: The width of the field, so the number of bits to fill in.
    """

    # Don't alias bits we already have.
    used_bits = functools.reduce(
        operator.or_,
        # Skip dunder names etc added to the namespace.
        [
            value for name, value in ns.items()
            if isinstance(value, int) and not name.startswith('_')
        ],
        0,
    )
    for i in range(bits):
        bit = 1 << i
        if not bit & used_bits:
            # We don't have to stick to var naming rules, so just name it
            # after the number. Intern so repeated calls share strings.
            ns[sys.intern(str(i))] = bit


class WADType(Enum):
    """The kind of WAD file, given by the first four bytes."""
    IWAD = 'IWAD'  #: An internal WAD, containing a complete game.
    PWAD = 'PWAD'  #: A patch WAD, replacing or adding to the lumps of an IWAD.


class WADFormat(Enum):
    """The game dialect a WAD is for.

    This is recorded, but currently all formats are decoded with the DOOM layouts.
    """
    DEFAULT = 0  #: DOOM and DOOM II.
    HEXEN = 1
    STRIFE = 2


class ThingFlags(Flag):
    """Bitflags specified for things placed in a map."""
    NONE = 0

    SKILL_1_AND_2 = 0x0001  #: Present on "I'm too young to die" and "Hey, not too rough".
    SKILL_3 = 0x0002  #: Present on "Hurt me plenty".
    SKILL_4_AND_5 = 0x0004  #: Present on "Ultra-Violence" and "Nightmare!".
    DEAF = 0x0008  #: Monsters wait until they see the player, ignoring sound.
    NOT_IN_SINGLE_PLAYER = 0x0010  #: Only spawned in multiplayer.
    # Boom extensions.
    NOT_IN_DEATHMATCH = 0x0020
    NOT_IN_COOP = 0x0040
    # MBF extension.
    FRIENDLY = 0x0080

    # Add bits up to the field size, so any flags value can be converted.
    add_unknown(locals(), bits=16)


#: Canonical names for each flag bit, in bit order.
FLAG_NAMES: Final[Mapping[ThingFlags, str]] = {
    ThingFlags.SKILL_1_AND_2: 'Skill_1_and_2',
    ThingFlags.SKILL_3: 'Skill_3',
    ThingFlags.SKILL_4_AND_5: 'Skill_4_and_5',
    ThingFlags.DEAF: 'Deaf',
    ThingFlags.NOT_IN_SINGLE_PLAYER: 'Not_in_single_player',
    ThingFlags.NOT_IN_DEATHMATCH: 'Not_in_deathmatch',
    ThingFlags.NOT_IN_COOP: 'Not_in_coop',
    ThingFlags.FRIENDLY: 'Friendly',
}

#: DOOM and DOOM II thing type codes, mapped to their canonical names.
THING_TYPES: Final[Mapping[int, str]] = {
    # Player starts and other markers.
    1: 'Player1Start',
    2: 'Player2Start',
    3: 'Player3Start',
    4: 'Player4Start',
    11: 'DeathmatchStart',
    14: 'TeleportDest',

    # Weapons.
    2005: 'Chainsaw',
    2001: 'Shotgun',
    82: 'SuperShotgun',
    2002: 'Chaingun',
    2003: 'RocketLauncher',
    2004: 'PlasmaRifle',
    2006: 'BFG9000',

    # Ammunition.
    2007: 'Clip',
    2048: 'ClipBox',
    2008: 'Shell',
    2049: 'ShellBox',
    2010: 'RocketAmmo',
    2046: 'RocketBox',
    2047: 'Cell',
    17: 'CellPack',
    8: 'Backpack',

    # Health and armor.
    2011: 'Stimpack',
    2012: 'Medikit',
    2014: 'HealthBonus',
    2015: 'ArmorBonus',
    2018: 'GreenArmor',
    2019: 'BlueArmor',

    # Powerups.
    2013: 'Soulsphere',
    83: 'Megasphere',
    2022: 'InvulnerabilitySphere',
    2023: 'Berserk',
    2024: 'BlurSphere',
    2025: 'RadSuit',
    2026: 'Allmap',
    2045: 'Infrared',

    # Keys.
    5: 'BlueCard',
    6: 'YellowCard',
    13: 'RedCard',
    40: 'BlueSkull',
    39: 'YellowSkull',
    38: 'RedSkull',

    # Monsters.
    3004: 'ZombieMan',
    9: 'ShotgunGuy',
    65: 'ChaingunGuy',
    84: 'WolfensteinSS',
    3001: 'DoomImp',
    3002: 'Demon',
    58: 'Spectre',
    3006: 'LostSoul',
    3005: 'Cacodemon',
    69: 'HellKnight',
    3003: 'BaronOfHell',
    68: 'Arachnotron',
    71: 'PainElemental',
    66: 'Revenant',
    67: 'Fatso',
    64: 'Archvile',
    16: 'Cyberdemon',
    7: 'SpiderMastermind',
    72: 'CommanderKeen',
    88: 'BossBrain',
    89: 'BossEye',
    87: 'BossTarget',

    # Obstacles.
    2035: 'ExplosiveBarrel',
    70: 'BurningBarrel',
    43: 'TorchTree',
    54: 'BigTree',
    2028: 'Column',
    30: 'TallGreenColumn',
    31: 'ShortGreenColumn',
    32: 'TallRedColumn',
    33: 'ShortRedColumn',
    36: 'HeartColumn',
    37: 'SkullColumn',
    41: 'EvilEye',
    42: 'FloatingSkull',
    47: 'Stalagtite',
    48: 'TechPillar',
    85: 'TechLamp',
    86: 'TechLamp2',
    35: 'Candelabra',
    44: 'BlueTorch',
    45: 'GreenTorch',
    46: 'RedTorch',
    55: 'ShortBlueTorch',
    56: 'ShortGreenTorch',
    57: 'ShortRedTorch',
    25: 'DeadStick',
    26: 'LiveStick',
    27: 'HeadOnAStick',
    28: 'HeadsOnAStick',
    29: 'HeadCandles',
    49: 'BloodyTwitch',
    50: 'Meat2',
    51: 'Meat3',
    52: 'Meat4',
    53: 'Meat5',
    73: 'HangNoGuts',
    74: 'HangBNoBrain',
    75: 'HangTLookingDown',
    76: 'HangTSkull',
    77: 'HangTLookingUp',
    78: 'HangTNoBrain',

    # Decorations, which can be walked through.
    34: 'Candlestick',
    59: 'NonsolidMeat2',
    60: 'NonsolidMeat4',
    61: 'NonsolidMeat3',
    62: 'NonsolidMeat5',
    63: 'NonsolidTwitch',
    10: 'GibbedMarine',
    12: 'GibbedMarineExtra',
    15: 'DeadMarine',
    18: 'DeadZombieMan',
    19: 'DeadShotgunGuy',
    20: 'DeadDoomImp',
    21: 'DeadDemon',
    22: 'DeadCacodemon',
    23: 'DeadLostSoul',
    24: 'Gibs',
    79: 'ColonGibs',
    80: 'SmallBloodPool',
    81: 'BrainStem',
}


def thing_type_name(code: int) -> Optional[str]:
    """Return the canonical name for a thing type code, or ``None`` if it isn't known."""
    return THING_TYPES.get(code)


def flag_values(flags: int) -> List[int]:
    """Return each known flag bit which is set in the value."""
    return [
        flag.value for flag in FLAG_NAMES
        if flags & flag.value
    ]


def flag_names(flags: int) -> List[str]:
    """Return the canonical names of each known flag bit which is set in the value."""
    return [
        name for flag, name in FLAG_NAMES.items()
        if flags & flag.value
    ]
