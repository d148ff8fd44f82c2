"""
Per-folder scan state.

Every directory being visited owns one FolderFrame on the ScopeStack. The
frame carries the folder's catalog row plus its Accumulator, so discoveries
made in a subfolder can never leak into (or wipe) the parent's pending
cover and album.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from ..models import Album, Cover, Folder


@dataclass
class Accumulator:
    """Forward references collected while visiting one folder's own entries."""
    cover: Optional[Cover] = None
    album: Optional[Album] = None

    def reset(self):
        self.cover = None
        self.album = None


@dataclass
class FolderFrame:
    folder: Folder
    pending: Accumulator = field(default_factory=Accumulator)

    @property
    def folder_id(self) -> Optional[int]:
        return self.folder.id


class ScopeStack:
    def __init__(self):
        self._frames: List[FolderFrame] = []

    def push(self, folder: Folder) -> FolderFrame:
        frame = FolderFrame(folder)
        self._frames.append(frame)
        return frame

    def pop(self) -> FolderFrame:
        if not self._frames:
            raise IndexError("pop from an empty scope stack")
        return self._frames.pop()

    def peek(self) -> Optional[FolderFrame]:
        return self._frames[-1] if self._frames else None

    def peek_id(self) -> Optional[int]:
        """Id of the enclosing folder, or None when visiting the music root."""
        frame = self.peek()
        return frame.folder_id if frame else None

    def current(self) -> FolderFrame:
        """The active frame; files are only ever visited inside a folder."""
        frame = self.peek()
        if frame is None:
            raise RuntimeError("no folder scope is active")
        return frame

    def __len__(self) -> int:
        return len(self._frames)
