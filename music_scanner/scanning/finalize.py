import time
import logging
from pathlib import Path
from typing import Callable

from ..database.ops import CatalogOperations
from ..models import Folder
from .scope import ScopeStack


class FolderFinalizer:
    """
    Runs when a folder's last descendant has been visited. Resolves the
    forward references collected in the folder's frame and pops it.
    """

    def __init__(self, ops: CatalogOperations, scope: ScopeStack, clock: Callable[[], float] = time.time):
        self.ops = ops
        self.scope = scope
        self.clock = clock

    def finalize(self, path: Path) -> Folder:
        frame = self.scope.current()
        folder = frame.folder
        pending = frame.pending
        folder_changed = False

        if pending.album is not None:
            pending.album.cover_id = pending.cover.id if pending.cover is not None else None
            pending.album.updated_at = self.clock()
            self.ops.save_album(pending.album)
            folder.has_tracks = True
            folder_changed = True
        elif pending.cover is not None and pending.cover.newly_inserted:
            # New art next to unchanged tracks still reaches the stored album
            album = self.ops.get_album_by_path(folder.path)
            if album is not None and album.cover_id != pending.cover.id:
                album.cover_id = pending.cover.id
                album.updated_at = self.clock()
                self.ops.save_album(album)

        if pending.cover is not None and pending.cover.newly_inserted:
            folder.cover_id = pending.cover.id
            folder_changed = True

        if folder_changed:
            folder.updated_at = max(folder.updated_at, self.clock())
            self.ops.save_folder(folder)

        pending.reset()
        self.scope.pop()
        logging.info(f"processed folder `{path}`")
        return folder
