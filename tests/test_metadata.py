import pytest
from pathlib import Path

from mutagen import MutagenError

import music_scanner.metadata.tags as tags_module
from music_scanner.exceptions import TagReadError
from music_scanner.metadata.tags import TagReader, parse_int, split_number


# Mock of the object mutagen.File(..., easy=True) returns
class MockAudio:
    def __init__(self, tags):
        self.tags = tags

def _mock_file(tags):
    def fake_file(path, easy=False):
        assert easy, "the easy interface is what gives format-independent keys"
        return MockAudio(tags)
    return fake_file

def test_reads_easy_tags(monkeypatch):
    monkeypatch.setattr(tags_module, "MutagenFile", _mock_file({
        "title": ["Intro"],
        "artist": ["ArtistA feat. B"],
        "albumartist": ["ArtistA"],
        "album": ["AlbumX"],
        "tracknumber": ["3/12"],
        "discnumber": ["1"],
        "disctotal": ["2"],
        "date": ["2004-05-01"],
    }))

    tags = TagReader().read(Path("/music/a/03.mp3"))

    assert tags.title == "Intro"
    assert tags.artist == "ArtistA feat. B"
    assert tags.album_artist == "ArtistA"
    assert tags.album == "AlbumX"
    assert (tags.track_number, tags.total_tracks) == (3, 12)
    assert (tags.disc_number, tags.total_discs) == (1, 2)
    assert tags.year == 2004

def test_separate_total_tag_wins(monkeypatch):
    monkeypatch.setattr(tags_module, "MutagenFile", _mock_file({
        "tracknumber": ["4/10"],
        "totaltracks": ["11"],
    }))
    tags = TagReader().read(Path("/music/a/04.flac"))
    assert (tags.track_number, tags.total_tracks) == (4, 11)
    assert tags.album_artist == ""

def test_untagged_file_gives_empty_tags(monkeypatch):
    monkeypatch.setattr(tags_module, "MutagenFile", _mock_file(None))
    tags = TagReader().read(Path("/music/a/05.mp3"))
    assert tags.title == ""
    assert tags.year is None

def test_unrecognised_format_raises(monkeypatch):
    monkeypatch.setattr(tags_module, "MutagenFile", lambda path, easy=False: None)
    with pytest.raises(TagReadError):
        TagReader().read(Path("/music/a/06.mp3"))

def test_mutagen_failure_is_wrapped(monkeypatch):
    def broken(path, easy=False):
        raise MutagenError("bad frame header")
    monkeypatch.setattr(tags_module, "MutagenFile", broken)

    with pytest.raises(TagReadError) as excinfo:
        TagReader().read(Path("/music/a/07.mp3"))
    assert isinstance(excinfo.value.__cause__, MutagenError)

def test_reading_a_missing_file_raises(tmp_path):
    with pytest.raises(TagReadError):
        TagReader().read(tmp_path / "missing.mp3")

@pytest.mark.parametrize(
    "value,expected",
    [("3/12", (3, 12)), ("7", (7, None)), ("", (None, None)), ("x/y", (None, None))],
)
def test_split_number(value, expected):
    assert split_number(value) == expected

def test_parse_int():
    assert parse_int("1999") == 1999
    assert parse_int(" 2001-01-01") == 2001
    assert parse_int("unknown") is None
    assert parse_int(None) is None
