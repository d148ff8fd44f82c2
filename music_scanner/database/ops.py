import sqlite3
from typing import Optional, List, Tuple

from ..models import Folder, Cover, AlbumArtist, Album, Track

FOLDER_COLUMNS = "id, path, name, parent_id, cover_id, has_tracks, updated_at"
COVER_COLUMNS = "id, path, image, updated_at"
ALBUM_COLUMNS = "id, path, title, album_artist_id, year, cover_id, updated_at"
TRACK_COLUMNS = (
    "id, path, title, artist, track_number, total_tracks, disc_number, total_discs, "
    "year, suffix, content_type, size, album_id, folder_id, updated_at"
)


class CatalogOperations:
    """
    All SQL against the catalog lives here.
    Nothing in this class commits: the caller owns the transaction.
    """
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    # --- Folders ---

    def get_folder_by_path(self, path: str) -> Optional[Folder]:
        cur = self.conn.cursor()
        cur.execute(f"SELECT {FOLDER_COLUMNS} FROM folders WHERE path = ?", (path,))
        row = cur.fetchone()
        if row is None:
            return None
        fid, fpath, name, parent_id, cover_id, has_tracks, updated_at = row
        return Folder(
            id=fid, path=fpath, name=name, parent_id=parent_id,
            cover_id=cover_id, has_tracks=bool(has_tracks), updated_at=updated_at,
        )

    def save_folder(self, folder: Folder) -> Folder:
        """Inserts the folder if it has no id yet, otherwise updates it in place."""
        cur = self.conn.cursor()
        if folder.id is None:
            cur.execute("""
                INSERT INTO folders (path, name, parent_id, cover_id, has_tracks, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
            """, (
                folder.path, folder.name, folder.parent_id, folder.cover_id,
                int(folder.has_tracks), folder.updated_at,
            ))
            folder.id = self._last_id(cur)
        else:
            cur.execute("""
                UPDATE folders
                SET path = ?, name = ?, parent_id = ?, cover_id = ?, has_tracks = ?, updated_at = ?
                WHERE id = ?
            """, (
                folder.path, folder.name, folder.parent_id, folder.cover_id,
                int(folder.has_tracks), folder.updated_at, folder.id,
            ))
        return folder

    # --- Covers ---

    def get_cover_by_path(self, path: str) -> Optional[Cover]:
        cur = self.conn.cursor()
        cur.execute(f"SELECT {COVER_COLUMNS} FROM covers WHERE path = ?", (path,))
        row = cur.fetchone()
        if row is None:
            return None
        cid, cpath, image, updated_at = row
        return Cover(id=cid, path=cpath, image=bytes(image), updated_at=updated_at)

    def save_cover(self, cover: Cover) -> Cover:
        cur = self.conn.cursor()
        if cover.id is None:
            cur.execute(
                "INSERT INTO covers (path, image, updated_at) VALUES (?, ?, ?)",
                (cover.path, sqlite3.Binary(cover.image), cover.updated_at),
            )
            cover.id = self._last_id(cur)
        else:
            cur.execute(
                "UPDATE covers SET path = ?, image = ?, updated_at = ? WHERE id = ?",
                (cover.path, sqlite3.Binary(cover.image), cover.updated_at, cover.id),
            )
        return cover

    # --- Album Artists ---

    def get_album_artist_by_name(self, name: str) -> Optional[AlbumArtist]:
        cur = self.conn.cursor()
        cur.execute("SELECT id, name FROM album_artists WHERE name = ?", (name,))
        row = cur.fetchone()
        if row is None:
            return None
        return AlbumArtist(id=row[0], name=row[1])

    def insert_album_artist(self, name: str) -> AlbumArtist:
        cur = self.conn.cursor()
        cur.execute("INSERT INTO album_artists (name) VALUES (?)", (name,))
        return AlbumArtist(id=self._last_id(cur), name=name)

    # --- Albums ---

    def get_album_by_path(self, path: str) -> Optional[Album]:
        cur = self.conn.cursor()
        cur.execute(f"SELECT {ALBUM_COLUMNS} FROM albums WHERE path = ?", (path,))
        row = cur.fetchone()
        if row is None:
            return None
        aid, apath, title, artist_id, year, cover_id, updated_at = row
        return Album(
            id=aid, path=apath, title=title, album_artist_id=artist_id,
            year=year, cover_id=cover_id, updated_at=updated_at,
        )

    def save_album(self, album: Album) -> Album:
        cur = self.conn.cursor()
        if album.id is None:
            cur.execute("""
                INSERT INTO albums (path, title, album_artist_id, year, cover_id, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
            """, (
                album.path, album.title, album.album_artist_id, album.year,
                album.cover_id, album.updated_at,
            ))
            album.id = self._last_id(cur)
        else:
            cur.execute("""
                UPDATE albums
                SET path = ?, title = ?, album_artist_id = ?, year = ?, cover_id = ?, updated_at = ?
                WHERE id = ?
            """, (
                album.path, album.title, album.album_artist_id, album.year,
                album.cover_id, album.updated_at, album.id,
            ))
        return album

    # --- Tracks ---

    def get_track_by_path(self, path: str) -> Optional[Track]:
        cur = self.conn.cursor()
        cur.execute(f"SELECT {TRACK_COLUMNS} FROM tracks WHERE path = ?", (path,))
        row = cur.fetchone()
        if row is None:
            return None
        (tid, tpath, title, artist, track_number, total_tracks, disc_number, total_discs,
         year, suffix, content_type, size, album_id, folder_id, updated_at) = row
        return Track(
            id=tid, path=tpath, title=title, artist=artist,
            track_number=track_number, total_tracks=total_tracks,
            disc_number=disc_number, total_discs=total_discs, year=year,
            suffix=suffix, content_type=content_type, size=size,
            album_id=album_id, folder_id=folder_id, updated_at=updated_at,
        )

    def save_track(self, track: Track) -> Track:
        values = (
            track.path, track.title, track.artist, track.track_number, track.total_tracks,
            track.disc_number, track.total_discs, track.year, track.suffix,
            track.content_type, track.size, track.album_id, track.folder_id, track.updated_at,
        )
        cur = self.conn.cursor()
        if track.id is None:
            cur.execute("""
                INSERT INTO tracks (
                    path, title, artist, track_number, total_tracks, disc_number, total_discs,
                    year, suffix, content_type, size, album_id, folder_id, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """, values)
            track.id = self._last_id(cur)
        else:
            cur.execute("""
                UPDATE tracks
                SET path = ?, title = ?, artist = ?, track_number = ?, total_tracks = ?,
                    disc_number = ?, total_discs = ?, year = ?, suffix = ?, content_type = ?,
                    size = ?, album_id = ?, folder_id = ?, updated_at = ?
                WHERE id = ?
            """, values + (track.id,))
        return track

    # --- Reconciliation ---

    def fetch_track_paths(self) -> List[Tuple[int, str]]:
        """Returns (id, path) for every track in the catalog."""
        cur = self.conn.cursor()
        cur.execute("SELECT id, path FROM tracks")
        return cur.fetchall()

    def delete_track(self, track_id: int):
        self.conn.execute("DELETE FROM tracks WHERE id = ?", (track_id,))

    def delete_empty_albums(self) -> int:
        """Deletes albums with no tracks left. Returns the number removed."""
        cur = self.conn.execute("""
            DELETE FROM albums
            WHERE (SELECT count(id) FROM tracks WHERE album_id = albums.id) = 0
        """)
        return cur.rowcount

    def delete_orphan_album_artists(self) -> int:
        """Deletes album artists with no albums left. Run after delete_empty_albums."""
        cur = self.conn.execute("""
            DELETE FROM album_artists
            WHERE (SELECT count(id) FROM albums WHERE album_artist_id = album_artists.id) = 0
        """)
        return cur.rowcount

    def clear_stale_track_flags(self) -> int:
        """Un-marks folders whose tracks have all been removed."""
        cur = self.conn.execute("""
            UPDATE folders SET has_tracks = 0
            WHERE has_tracks = 1
              AND NOT EXISTS (SELECT 1 FROM tracks WHERE folder_id = folders.id)
        """)
        return cur.rowcount

    # --- Status ---

    def count_tracks(self) -> int:
        cur = self.conn.cursor()
        cur.execute("SELECT COUNT(*) FROM tracks")
        return cur.fetchone()[0]

    def _last_id(self, cur: sqlite3.Cursor) -> int:
        if cur.lastrowid is None:
            raise RuntimeError("Database INSERT failed to return a row ID.")
        return cur.lastrowid
