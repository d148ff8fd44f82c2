import os
import logging
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Protocol, Set, Tuple

from ..exceptions import DirectoryReadError, EntryStatError

# Hook to permute a directory's entries before they are visited
EntryOrder = Callable[[List[os.DirEntry]], List[os.DirEntry]]


class ScanVisitor(Protocol):
    def enter_directory(self, path: Path, stat: os.stat_result) -> None: ...
    def visit_file(self, path: Path, stat: os.stat_result) -> None: ...
    def leave_directory(self, path: Path) -> None: ...


class DirectoryWalker:
    """
    Single depth-first pass over a tree, in whatever order the filesystem
    hands entries back (no sorting).

    Two phases per directory: enter_directory() before any of its entries,
    leave_directory() after all of its descendants. Any stat or listing
    failure aborts the whole walk.
    """

    def __init__(self, order: Optional[EntryOrder] = None):
        self.order = order

    def walk(self, root: Path, visitor: ScanVisitor, progress=None) -> Set[str]:
        """
        Drives the visitor over root. Returns every path visited (files and
        directories, root included).
        """
        seen: Set[str] = set()

        seen.add(str(root))
        visitor.enter_directory(root, self._stat(root))
        if progress is not None:
            progress.update(1)
        stack: List[Tuple[Path, Iterator[os.DirEntry]]] = [(root, self._entries(root))]

        while stack:
            current, entries = stack[-1]
            entry = next(entries, None)
            if entry is None:
                stack.pop()
                visitor.leave_directory(current)
                continue

            path = Path(entry.path)
            seen.add(str(path))
            stat_result = self._stat(path)

            if self._is_dir(entry):
                visitor.enter_directory(path, stat_result)
                stack.append((path, self._entries(path)))
            else:
                visitor.visit_file(path, stat_result)

            if progress is not None:
                progress.update(1)

        logging.debug(f"Walk of {root} visited {len(seen)} entries")
        return seen

    def _entries(self, directory: Path) -> Iterator[os.DirEntry]:
        try:
            with os.scandir(directory) as it:
                entries = list(it)
        except OSError as e:
            raise DirectoryReadError(f"error listing {directory}: {e}") from e

        if self.order is not None:
            entries = self.order(entries)
        return iter(entries)

    def _stat(self, path: Path) -> os.stat_result:
        try:
            return os.stat(path)
        except OSError as e:
            raise EntryStatError(f"error stating {path}: {e}") from e

    def _is_dir(self, entry: os.DirEntry) -> bool:
        # Symlinked directories are not followed
        try:
            return entry.is_dir(follow_symlinks=False)
        except OSError as e:
            raise EntryStatError(f"error stating {entry.path}: {e}") from e
