import logging
from dataclasses import dataclass
from typing import Set

from .database.ops import CatalogOperations


@dataclass
class ReconcileResult:
    tracks_removed: int = 0
    albums_removed: int = 0
    artists_removed: int = 0


class Reconciler:
    """
    Removes catalog entries whose files were not seen by the last walk.
    Folders and covers are left in place.
    """

    def __init__(self, ops: CatalogOperations):
        self.ops = ops

    def reconcile(self, seen_paths: Set[str]) -> ReconcileResult:
        logging.info("Cleaning database...")
        result = ReconcileResult()

        for track_id, path in self.ops.fetch_track_paths():
            if path in seen_paths:
                continue
            self.ops.delete_track(track_id)
            result.tracks_removed += 1
            logging.info(f"removed {path}")

        # Order matters: an artist only becomes empty once its albums are gone
        result.albums_removed = self.ops.delete_empty_albums()
        result.artists_removed = self.ops.delete_orphan_album_artists()
        cleared = self.ops.clear_stale_track_flags()

        logging.info(
            f"Cleanup removed {result.tracks_removed} tracks, {result.albums_removed} albums, "
            f"{result.artists_removed} album artists; {cleared} folders no longer hold tracks."
        )
        return result
