import pytest
from pathlib import Path

from music_scanner.exceptions import EntryStatError
from music_scanner.models import Folder
from music_scanner.scanning.classify import Classifier, EntryKind, cover_rank
from music_scanner.scanning.scope import ScopeStack
from music_scanner.scanning.walker import DirectoryWalker


@pytest.mark.parametrize(
    "name,expected",
    [
        ("cover.jpg", EntryKind.COVER),
        ("Folder.JPG", EntryKind.COVER),
        ("front.png", EntryKind.COVER),
        ("booklet.jpg", EntryKind.OTHER),
        ("cover.txt", EntryKind.OTHER),
        ("01 - Intro.mp3", EntryKind.AUDIO),
        ("02.FLAC", EntryKind.AUDIO),
        ("03.m4a", EntryKind.AUDIO),
        ("._01.mp3", EntryKind.OTHER),
        ("notes.nfo", EntryKind.OTHER),
    ],
)
def test_classify_file(name, expected):
    assert Classifier().classify(Path("/music/a") / name, is_dir=False).kind == expected

def test_classify_audio_sets_suffix_and_mime():
    c = Classifier().classify(Path("/music/a/01.FLAC"), is_dir=False)
    assert c.suffix == "flac"
    assert c.content_type == "audio/x-flac"

def test_classify_directory_wins_over_name():
    assert Classifier().classify(Path("/music/cover.jpg"), is_dir=True).kind == EntryKind.DIRECTORY

def test_cover_rank_prefers_stem_then_path():
    paths = ["/a/front.jpg", "/a/Folder.jpg", "/a/cover.png", "/a/cover.jpg"]
    assert sorted(paths, key=cover_rank) == ["/a/cover.jpg", "/a/cover.png", "/a/Folder.jpg", "/a/front.jpg"]


def test_scope_stack_peek_and_frames():
    scope = ScopeStack()
    assert scope.peek() is None
    assert scope.peek_id() is None

    root = scope.push(Folder(path="/music", name="music", id=1))
    child = scope.push(Folder(path="/music/a", name="a", id=2))
    assert scope.peek_id() == 2
    assert len(scope) == 2

    # Each frame carries its own pending slots
    child.pending.album = object()
    assert root.pending.album is None

    assert scope.pop() is child
    assert scope.peek() is root
    scope.pop()
    with pytest.raises(IndexError):
        scope.pop()
    with pytest.raises(RuntimeError):
        scope.current()


class RecordingVisitor:
    def __init__(self):
        self.events = []

    def enter_directory(self, path, stat):
        self.events.append(("enter", path.name))

    def visit_file(self, path, stat):
        self.events.append(("file", path.name))

    def leave_directory(self, path):
        self.events.append(("leave", path.name))


def _by_name(reverse=False):
    return lambda entries: sorted(entries, key=lambda e: e.name, reverse=reverse)

def test_walker_is_post_order_and_records_seen(tmp_path):
    root = tmp_path / "music"
    (root / "a" / "b").mkdir(parents=True)
    (root / "a" / "b" / "x.mp3").write_text("x")
    (root / "a" / "y.mp3").write_text("y")
    (root / "z.txt").write_text("z")

    visitor = RecordingVisitor()
    seen = DirectoryWalker(order=_by_name()).walk(root, visitor)

    assert visitor.events == [
        ("enter", "music"),
        ("enter", "a"),
        ("enter", "b"),
        ("file", "x.mp3"),
        ("leave", "b"),
        ("file", "y.mp3"),
        ("leave", "a"),
        ("file", "z.txt"),
        ("leave", "music"),
    ]
    assert seen == {
        str(root), str(root / "a"), str(root / "a" / "b"),
        str(root / "a" / "b" / "x.mp3"), str(root / "a" / "y.mp3"), str(root / "z.txt"),
    }

def test_walker_order_hook_permutes_siblings(tmp_path):
    root = tmp_path / "music"
    root.mkdir()
    for name in ("1.mp3", "2.mp3", "3.mp3"):
        (root / name).write_text(name)

    visitor = RecordingVisitor()
    DirectoryWalker(order=_by_name(reverse=True)).walk(root, visitor)
    files = [name for kind, name in visitor.events if kind == "file"]
    assert files == ["3.mp3", "2.mp3", "1.mp3"]

def test_walker_missing_root_is_fatal(tmp_path):
    with pytest.raises(EntryStatError):
        DirectoryWalker().walk(tmp_path / "missing", RecordingVisitor())

def test_walker_broken_symlink_is_fatal(tmp_path):
    root = tmp_path / "music"
    root.mkdir()
    (root / "dangling.mp3").symlink_to(tmp_path / "nowhere.mp3")

    with pytest.raises(EntryStatError):
        DirectoryWalker().walk(root, RecordingVisitor())

def test_walker_updates_progress(tmp_path):
    root = tmp_path / "music"
    (root / "a").mkdir(parents=True)
    (root / "a" / "1.mp3").write_text("1")

    class Counter:
        n = 0
        def update(self, k):
            self.n += k

    progress = Counter()
    seen = DirectoryWalker().walk(root, RecordingVisitor(), progress=progress)
    assert progress.n == len(seen) == 3
