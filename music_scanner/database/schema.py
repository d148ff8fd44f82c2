"""
Database schema definitions.
"""
import sqlite3
import logging

from .. import config

CURRENT_SCHEMA_VERSION = 1

def init_schema(conn: sqlite3.Connection):
    """
    Applies the catalog schema and bootstraps the default admin account.
    Idempotent: safe to run on every startup.
    """
    with conn:
        # 1. Version Tracking (For future migrations)
        conn.execute("""
            CREATE TABLE IF NOT EXISTS schema_version (
                version INTEGER PRIMARY KEY
            );
        """)

        cur = conn.cursor()
        cur.execute("SELECT version FROM schema_version")
        if not cur.fetchone():
            conn.execute("INSERT INTO schema_version (version) VALUES (?)", (CURRENT_SCHEMA_VERSION,))

        # 2. Cover Art
        # Referenced by both folders and albums, never deleted by a scan
        conn.execute("""
        CREATE TABLE IF NOT EXISTS covers (
            id              INTEGER PRIMARY KEY AUTOINCREMENT,
            path            TEXT NOT NULL UNIQUE,
            image           BLOB NOT NULL,
            updated_at      REAL NOT NULL
        );
        """)

        # 3. Folders (Browse-by-folder tree)
        conn.execute("""
        CREATE TABLE IF NOT EXISTS folders (
            id              INTEGER PRIMARY KEY AUTOINCREMENT,
            path            TEXT NOT NULL UNIQUE,
            name            TEXT NOT NULL,
            parent_id       INTEGER,              -- NULL only for the music root
            cover_id        INTEGER,
            has_tracks      INTEGER NOT NULL DEFAULT 0,
            updated_at      REAL NOT NULL,
            FOREIGN KEY(parent_id) REFERENCES folders(id),
            FOREIGN KEY(cover_id) REFERENCES covers(id)
        );
        """)

        # 4. Album Artists / Albums (Browse-by-tags)
        conn.execute("""
        CREATE TABLE IF NOT EXISTS album_artists (
            id              INTEGER PRIMARY KEY AUTOINCREMENT,
            name            TEXT NOT NULL UNIQUE
        );
        """)

        conn.execute("""
        CREATE TABLE IF NOT EXISTS albums (
            id              INTEGER PRIMARY KEY AUTOINCREMENT,
            path            TEXT NOT NULL UNIQUE,  -- Directory the tracks live in
            title           TEXT NOT NULL,
            album_artist_id INTEGER NOT NULL,
            year            INTEGER,
            cover_id        INTEGER,
            updated_at      REAL NOT NULL,
            FOREIGN KEY(album_artist_id) REFERENCES album_artists(id),
            FOREIGN KEY(cover_id) REFERENCES covers(id)
        );
        """)

        # 5. Tracks
        conn.execute("""
        CREATE TABLE IF NOT EXISTS tracks (
            id              INTEGER PRIMARY KEY AUTOINCREMENT,
            path            TEXT NOT NULL UNIQUE,
            title           TEXT NOT NULL,
            artist          TEXT NOT NULL,
            track_number    INTEGER,
            total_tracks    INTEGER,
            disc_number     INTEGER,
            total_discs     INTEGER,
            year            INTEGER,
            suffix          TEXT NOT NULL,
            content_type    TEXT NOT NULL,
            size            INTEGER NOT NULL,
            album_id        INTEGER NOT NULL,
            folder_id       INTEGER NOT NULL,
            updated_at      REAL NOT NULL,
            FOREIGN KEY(album_id) REFERENCES albums(id),
            FOREIGN KEY(folder_id) REFERENCES folders(id)
        );
        """)

        # 6. Indices for Performance
        conn.execute("CREATE INDEX IF NOT EXISTS idx_folders_parent ON folders(parent_id);")
        conn.execute("CREATE INDEX IF NOT EXISTS idx_albums_artist ON albums(album_artist_id);")
        conn.execute("CREATE INDEX IF NOT EXISTS idx_tracks_album ON tracks(album_id);")
        conn.execute("CREATE INDEX IF NOT EXISTS idx_tracks_folder ON tracks(folder_id);")

        # 7. Accounts (the API layer authenticates against this)
        conn.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id              INTEGER PRIMARY KEY AUTOINCREMENT,
            name            TEXT NOT NULL UNIQUE,
            password        TEXT NOT NULL,
            is_admin        INTEGER NOT NULL DEFAULT 0
        );
        """)
        conn.execute(
            "INSERT OR IGNORE INTO users (name, password, is_admin) VALUES (?, ?, 1)",
            (config.DEFAULT_ADMIN_NAME, config.DEFAULT_ADMIN_PASSWORD),
        )

    logging.debug("Database schema initialized.")
