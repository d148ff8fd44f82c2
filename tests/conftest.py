import json
import sqlite3
from pathlib import Path

import pytest

from music_scanner.database.ops import CatalogOperations
from music_scanner.database.schema import init_schema
from music_scanner.models import TrackTags


class FakeTagReader:
    """
    Stands in for the mutagen-backed TagReader: fixture "audio" files hold
    their tags as JSON. Every read is recorded.
    """
    def __init__(self):
        self.reads = []

    def read(self, path: Path) -> TrackTags:
        self.reads.append(path)
        return TrackTags(**json.loads(path.read_text()))


@pytest.fixture
def conn():
    """Returns an in-memory SQLite connection with the schema initialized."""
    c = sqlite3.connect(":memory:")
    c.execute("PRAGMA foreign_keys=ON;")
    init_schema(c)
    try:
        yield c
    finally:
        c.close()

@pytest.fixture
def ops(conn):
    """Returns a CatalogOperations instance attached to the in-memory DB."""
    return CatalogOperations(conn)

@pytest.fixture
def tag_reader():
    return FakeTagReader()

@pytest.fixture
def music_root(tmp_path):
    root = tmp_path.resolve() / "music"
    root.mkdir()
    return root

@pytest.fixture
def make_track():
    """Writes a fake audio file whose content is its tags."""
    def _make(path: Path, **tags) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(tags))
        return path
    return _make

@pytest.fixture
def make_cover():
    def _make(path: Path, data: bytes = b"\xff\xd8\xff\xe0fake-jpeg") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path
    return _make
