import threading

import pytest

from music_scanner.core import Scanner
from music_scanner.exceptions import AlreadyScanningError, DatabaseError
from music_scanner.guard import ScanGuard


def test_try_begin_is_exclusive():
    guard = ScanGuard()
    assert not guard.is_scanning()
    assert guard.try_begin()
    assert guard.is_scanning()
    assert not guard.try_begin()
    guard.end()
    assert not guard.is_scanning()
    assert guard.try_begin()

def test_hold_releases_on_error():
    guard = ScanGuard()
    with pytest.raises(ValueError):
        with guard.hold():
            assert guard.is_scanning()
            raise ValueError("walk failed")
    assert not guard.is_scanning()

def test_hold_fails_fast_when_busy():
    guard = ScanGuard()
    with guard.hold():
        with pytest.raises(AlreadyScanningError, match="already scanning"):
            with guard.hold():
                pass
    assert not guard.is_scanning()

def test_only_one_thread_wins():
    guard = ScanGuard()
    barrier = threading.Barrier(8)
    wins = []

    def contender():
        barrier.wait()
        if guard.try_begin():
            wins.append(threading.current_thread().name)

    threads = [threading.Thread(target=contender) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(wins) == 1


class BlockingTagReader:
    """Holds the scan inside its first tag read until released."""
    def __init__(self, inner):
        self.inner = inner
        self.started = threading.Event()
        self.release = threading.Event()

    def read(self, path):
        self.started.set()
        self.release.wait(10)
        return self.inner.read(path)

def test_status_while_scan_runs_in_background(tmp_path, music_root, make_track, tag_reader):
    make_track(music_root / "AlbumX" / "01.mp3", title="One", artist="A", album="AlbumX")
    reader = BlockingTagReader(tag_reader)
    scanner = Scanner(tmp_path / "catalog.db", music_root, tag_reader=reader)
    scanner.migrate_db()

    worker = scanner.start_in_background()
    try:
        assert reader.started.wait(10)
        assert scanner.is_scanning()
        # Nothing is visible until the scan commits
        assert scanner.track_count() == 0
        with pytest.raises(AlreadyScanningError):
            scanner.start()
    finally:
        reader.release.set()
        worker.join(10)

    assert not worker.is_alive()
    assert not scanner.is_scanning()
    assert scanner.track_count() == 1

def test_background_failure_is_logged(tmp_path, music_root, caplog):
    (music_root / "dangling.mp3").symlink_to(tmp_path / "gone.mp3")
    scanner = Scanner(tmp_path / "catalog.db", music_root)
    scanner.migrate_db()

    worker = scanner.start_in_background()
    worker.join(10)

    assert "Error while scanning." in caplog.text
    assert not scanner.is_scanning()

def test_unopenable_catalog_is_a_database_error(tmp_path, music_root):
    db_dir = tmp_path / "not-a-db"
    db_dir.mkdir()
    scanner = Scanner(db_dir, music_root)

    with pytest.raises(DatabaseError):
        scanner.start()
    assert not scanner.is_scanning()

def test_unexpected_background_failure_is_logged(tmp_path, music_root, caplog):
    class BrokenTagReader:
        def read(self, path):
            raise RuntimeError("decoder exploded")

    (music_root / "01.mp3").write_text("{}")
    scanner = Scanner(tmp_path / "catalog.db", music_root, tag_reader=BrokenTagReader())
    scanner.migrate_db()

    worker = scanner.start_in_background()
    worker.join(10)

    assert "Unexpected error while scanning." in caplog.text
    assert "decoder exploded" in caplog.text
    assert not scanner.is_scanning()
    assert scanner.track_count() == 0
