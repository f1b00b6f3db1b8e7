"""Test the map dumping script."""
from logging import getLogger as stdlib_getlogger
from pathlib import Path
from typing import Iterator
import json
import sys

import pytest

from helpers import SAMPLE_THINGS, sample_wad
from wadtools.scripts.dump_map import main


@pytest.fixture
def wad_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Write the sample WAD to a file, and isolate the logging setup."""
    root = stdlib_getlogger()
    old_level = root.level
    monkeypatch.setattr(sys, 'excepthook', sys.excepthook)
    monkeypatch.setattr(root, 'handlers', [])
    monkeypatch.delenv('WADTOOLS_DEBUG', raising=False)
    path = tmp_path / 'sample.wad'
    path.write_bytes(sample_wad())
    yield path
    # Use setLevel(), so cached levels of child loggers are reset too.
    root.setLevel(old_level)


def test_dump_lines(wad_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    main([str(wad_file), 'E1M2'])
    out, err = capsys.readouterr()
    assert json.loads(out) == [
        {'start': {'x': -10, 'y': -10}, 'end': {'x': 10, 'y': 10}},
    ]
    assert err == ''


def test_dump_things(wad_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    main([str(wad_file), 'e1m1', '--things', '--indent', '2'])
    out, err = capsys.readouterr()
    things = json.loads(out)
    assert [(thing['x'], thing['y'], thing['angle'], thing['type'], thing['flags']) for thing in things] == SAMPLE_THINGS
    assert things[1] == {
        'x': 48,
        'y': 16,
        'angle': 180,
        'type': 3004,
        'flags': 0x0C,
        'doomType': 3004,
        'doomTypeName': 'ZombieMan',
        'doomFlags': [4, 8],
        'doomFlagNames': ['Skill_4_and_5', 'Deaf'],
    }


def test_dump_missing_map(wad_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Maps which aren't present produce an empty list, and a warning."""
    main([str(wad_file), 'MAP01'])
    out, err = capsys.readouterr()
    assert json.loads(out) == []
    assert 'No data found for MAP01' in err


def test_dump_invalid_wad(tmp_path: Path, wad_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Files which aren't WADs are an error."""
    path = tmp_path / 'bad.wad'
    path.write_bytes(b'XXXX' + sample_wad()[4:])
    with pytest.raises(SystemExit) as exc:
        main([str(path), 'E1M1'])
    assert exc.value.code == 1
    out, err = capsys.readouterr()
    assert out == ''
    assert 'Invalid WAD file format' in err


def test_dump_invalid_map_name(wad_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc:
        main([str(wad_file), 'LEVEL1'])
    assert exc.value.code == 2
    out, err = capsys.readouterr()
    assert 'Unknown map name "LEVEL1"' in err
