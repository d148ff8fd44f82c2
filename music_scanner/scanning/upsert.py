import os
import time
import logging
from pathlib import Path
from typing import Callable

from .. import config
from ..database.ops import CatalogOperations
from ..exceptions import CoverReadError
from ..metadata.tags import TagReader
from ..models import Album, AlbumArtist, Cover, Folder, ScanSummary, Track, TrackTags
from .classify import Classification, cover_rank
from .scope import Accumulator, FolderFrame, ScopeStack


class EntityUpserter:
    """
    Find-by-identity, skip-if-unchanged, else (re)write, for every entity kind.

    A row is unchanged when the file's mtime is not newer than the row's
    updated_at. Unchanged files are not read at all.
    """

    def __init__(self,
                 ops: CatalogOperations,
                 tag_reader: TagReader,
                 scope: ScopeStack,
                 summary: ScanSummary,
                 clock: Callable[[], float] = time.time):
        self.ops = ops
        self.tag_reader = tag_reader
        self.scope = scope
        self.summary = summary
        self.clock = clock

    def upsert_folder(self, path: Path, stat: os.stat_result) -> FolderFrame:
        """Always pushes a frame for the folder, even when the row is left alone."""
        folder = self.ops.get_folder_by_path(str(path))
        if folder is not None and self._unchanged(stat, folder.updated_at):
            self.summary.folders_skipped += 1
        else:
            if folder is None:
                folder = Folder(path=str(path), name=path.name)
            folder.path = str(path)
            folder.name = path.name or str(path)
            folder.parent_id = self.scope.peek_id()
            folder.updated_at = self._stamp(stat)
            self.ops.save_folder(folder)
            self.summary.folders_written += 1

        return self.scope.push(folder)

    def upsert_cover(self, path: Path, stat: os.stat_result) -> Cover:
        pending = self.scope.current().pending
        cover = self.ops.get_cover_by_path(str(path))

        if cover is not None and self._unchanged(stat, cover.updated_at):
            self.summary.covers_skipped += 1
            # Keeps the album's cover reference if one of its tracks gets rewritten
            self._offer_cover(pending, cover)
            return cover

        try:
            image = path.read_bytes()
        except OSError as e:
            raise CoverReadError(f"when reading cover {path}: {e}") from e

        if cover is None:
            cover = Cover(path=str(path), image=image)
        cover.image = image
        cover.updated_at = self._stamp(stat)
        cover.newly_inserted = True
        self.ops.save_cover(cover)
        self.summary.covers_written += 1

        self._offer_cover(pending, cover)
        return cover

    def _offer_cover(self, pending: Accumulator, cover: Cover):
        # Best-ranked cover wins regardless of the order siblings are visited in
        if pending.cover is None or cover_rank(cover.path) < cover_rank(pending.cover.path):
            pending.cover = cover

    def upsert_album_artist(self, name: str) -> AlbumArtist:
        artist = self.ops.get_album_artist_by_name(name)
        if artist is None:
            artist = self.ops.insert_album_artist(name)
            self.summary.artists_created += 1
        return artist

    def upsert_album(self, track_path: Path, tags: TrackTags, artist: AlbumArtist) -> Album:
        """
        Resolves the album of the current folder. Only the first track
        rewritten in a folder queries for it; the rest reuse the pending album.
        """
        pending = self.scope.current().pending
        if pending.album is not None:
            return pending.album

        directory = str(track_path.parent)
        album = self.ops.get_album_by_path(directory)
        if album is None:
            album = Album(
                path=directory,
                title=tags.album or config.UNKNOWN_ALBUM,
                album_artist_id=artist.id,
                year=tags.year,
                updated_at=self.clock(),
            )
            self.ops.save_album(album)
            self.summary.albums_created += 1

        pending.album = album
        return album

    def upsert_track(self, path: Path, stat: os.stat_result, classification: Classification) -> Track:
        frame = self.scope.current()
        track = self.ops.get_track_by_path(str(path))

        if track is not None and self._unchanged(stat, track.updated_at):
            self.summary.tracks_skipped += 1
            logging.debug(f"Unchanged track: {path}")
            return track

        tags = self.tag_reader.read(path)

        artist = self.upsert_album_artist(tags.album_artist or tags.artist or config.UNKNOWN_ARTIST)
        album = self.upsert_album(path, tags, artist)

        if track is None:
            track = Track(
                path=str(path), title="", artist="", suffix="", content_type="",
                size=0, album_id=album.id, folder_id=frame.folder_id,
            )
        track.title = tags.title or path.stem
        track.artist = tags.artist or config.UNKNOWN_ARTIST
        track.track_number = tags.track_number
        track.total_tracks = tags.total_tracks
        track.disc_number = tags.disc_number
        track.total_discs = tags.total_discs
        track.year = tags.year
        track.suffix = classification.suffix
        track.content_type = classification.content_type
        track.size = stat.st_size
        track.folder_id = frame.folder_id
        track.album_id = album.id
        track.updated_at = self._stamp(stat)

        self.ops.save_track(track)
        self.summary.tracks_written += 1
        return track

    def _unchanged(self, stat: os.stat_result, updated_at: float) -> bool:
        return stat.st_mtime <= updated_at

    def _stamp(self, stat: os.stat_result) -> float:
        # Never stamp a row older than its file, or the next scan would rewrite it again
        return max(self.clock(), stat.st_mtime)
