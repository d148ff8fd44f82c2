from dataclasses import dataclass
from typing import Optional


@dataclass
class Folder:
    """
    A directory of the music tree, used for browsing by folder.
    """
    path: str
    name: str
    parent_id: Optional[int] = None
    cover_id: Optional[int] = None
    has_tracks: bool = False
    updated_at: float = 0.0
    id: Optional[int] = None


@dataclass
class Cover:
    path: str
    image: bytes
    updated_at: float = 0.0
    id: Optional[int] = None
    # Only true for the instance (re)written during the current walk; never stored
    newly_inserted: bool = False


@dataclass
class AlbumArtist:
    name: str
    id: Optional[int] = None


@dataclass
class Album:
    path: str               # directory holding the album's tracks
    title: str
    album_artist_id: int
    year: Optional[int] = None
    cover_id: Optional[int] = None
    updated_at: float = 0.0
    id: Optional[int] = None


@dataclass
class Track:
    path: str
    title: str
    artist: str
    suffix: str             # extension without the dot, e.g. "mp3"
    content_type: str
    size: int
    album_id: int
    folder_id: int
    track_number: Optional[int] = None
    total_tracks: Optional[int] = None
    disc_number: Optional[int] = None
    total_discs: Optional[int] = None
    year: Optional[int] = None
    updated_at: float = 0.0
    id: Optional[int] = None


@dataclass
class TrackTags:
    """
    Audio metadata as read from a file, before any catalog resolution.
    """
    title: str = ""
    artist: str = ""
    album: str = ""
    album_artist: str = ""
    track_number: Optional[int] = None
    total_tracks: Optional[int] = None
    disc_number: Optional[int] = None
    total_discs: Optional[int] = None
    year: Optional[int] = None


@dataclass
class ScanSummary:
    """Counters for one scan; what was written, what the mod-time skip avoided."""
    entries_seen: int = 0
    folders_written: int = 0
    folders_skipped: int = 0
    covers_written: int = 0
    covers_skipped: int = 0
    tracks_written: int = 0
    tracks_skipped: int = 0
    albums_created: int = 0
    artists_created: int = 0
    ignored_files: int = 0
    tracks_removed: int = 0
    albums_removed: int = 0
    artists_removed: int = 0
    elapsed_sec: float = 0.0
