"""Test the consts module, specifically add_unknown and the thing tables."""
from dirty_equals import IsList
import pytest

from wadtools.const import (
    FLAG_NAMES, THING_TYPES, ThingFlags, add_unknown, flag_names, flag_values, thing_type_name,
)


def test_add_unknown_16() -> None:
    ns = {
        'a': 0x1,
        'b': 0x4,
        'c': 0x10,
        'non_member': [1, 2, 3],
        # Python adds this, we need to ignore dunders.
        '__firstlineno__': 0x2938,
    }
    orig = ns.copy()
    add_unknown(ns, bits=16)
    expect = {
        str(i): 1 << i
        for i in range(16)
        if i not in [0, 2, 4]  # These are already defined.
    }
    assert ns == {**orig, **expect}


def test_add_unknown_empty() -> None:
    """With no existing members, every bit is added."""
    ns = {'NONE': 0}
    add_unknown(ns, bits=8)
    assert ns == {'NONE': 0, **{str(i): 1 << i for i in range(8)}}


def test_thing_flags_unknown_bits() -> None:
    """Any 16-bit value can be converted."""
    assert ThingFlags(0) is ThingFlags.NONE
    flags = ThingFlags(0x8009)
    assert ThingFlags.SKILL_1_AND_2 in flags
    assert ThingFlags.DEAF in flags
    assert ThingFlags.SKILL_3 not in flags
    assert flags.value == 0x8009


def test_flag_names() -> None:
    """Each set bit produces its name, once."""
    assert flag_names(0x0009) == IsList('Skill_1_and_2', 'Deaf', check_order=False)
    assert flag_values(0x0009) == IsList(0x01, 0x08, check_order=False)
    assert flag_names(0) == []
    assert flag_values(0) == []
    # Unknown bits are ignored.
    assert flag_names(0x8100) == []
    assert flag_names(0xFF) == list(FLAG_NAMES.values())
    assert flag_values(0xFF) == [1, 2, 4, 8, 16, 32, 64, 128]


@pytest.mark.parametrize('code, name', [
    (1, 'Player1Start'),
    (11, 'DeathmatchStart'),
    (2001, 'Shotgun'),
    (2048, 'ClipBox'),
    (3004, 'ZombieMan'),
    (16, 'Cyberdemon'),
    (13, 'RedCard'),
    (2035, 'ExplosiveBarrel'),
    (2013, 'Soulsphere'),
])
def test_thing_type_names(code: int, name: str) -> None:
    """Check some well-known thing types."""
    assert thing_type_name(code) == name
    assert THING_TYPES[code] == name


def test_thing_type_unknown() -> None:
    assert thing_type_name(0) is None
    assert thing_type_name(31337) is None
