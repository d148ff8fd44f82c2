#!/usr/bin/env python

import argparse
import sqlite3
from pathlib import Path
from typing import Dict, List, Optional, Tuple


def connect_db(db_path: Path) -> sqlite3.Connection:
    if not db_path.exists():
        raise SystemExit(f"DB not found: {db_path}")
    return sqlite3.connect(db_path)


def show_stats(conn: sqlite3.Connection):
    cur = conn.cursor()
    print("Catalog contents:")
    for table in ("folders", "covers", "album_artists", "albums", "tracks"):
        cur.execute(f"SELECT COUNT(*) FROM {table}")
        print(f"  {table.ljust(14)} {cur.fetchone()[0]}")


def list_albums(conn: sqlite3.Connection):
    cur = conn.cursor()
    cur.execute("""
        SELECT a.id, aa.name, a.title, a.year, a.cover_id,
               (SELECT COUNT(*) FROM tracks t WHERE t.album_id = a.id) AS track_count
        FROM albums a
        JOIN album_artists aa ON a.album_artist_id = aa.id
        ORDER BY aa.name, a.year, a.title
    """)
    rows = cur.fetchall()
    if not rows:
        print("No albums in catalog.")
        return

    print("id   | album artist              | year | cover | tracks | title")
    print("-----+---------------------------+------+-------+--------+------")
    for aid, artist, title, year, cover_id, track_count in rows:
        cover = "yes" if cover_id is not None else "no"
        print(f"{aid:4d} | {artist[:25].ljust(25)} | {str(year or '').rjust(4)} | {cover.ljust(5)} | {str(track_count).rjust(6)} | {title}")


def load_folder_tree(conn: sqlite3.Connection) -> Tuple[List[Tuple[int, str, bool]], Dict[Optional[int], List[Tuple[int, str, bool]]]]:
    """Returns (roots, children_by_parent_id) for the folders table."""
    cur = conn.cursor()
    cur.execute("SELECT id, name, parent_id, has_tracks FROM folders ORDER BY name")
    children: Dict[Optional[int], List[Tuple[int, str, bool]]] = {}
    for fid, name, parent_id, has_tracks in cur.fetchall():
        children.setdefault(parent_id, []).append((fid, name, bool(has_tracks)))
    return children.get(None, []), children


def print_tree(conn: sqlite3.Connection):
    roots, children = load_folder_tree(conn)
    if not roots:
        print("No folders in catalog.")
        return

    stack = [(node, 0) for node in reversed(roots)]
    while stack:
        (fid, name, has_tracks), depth = stack.pop()
        marker = " *" if has_tracks else ""
        print(f"{'  ' * depth}{name}{marker}")
        for child in reversed(children.get(fid, [])):
            stack.append((child, depth + 1))


def parse_args():
    p = argparse.ArgumentParser(description="Query helper for the music catalog SQLite DB.")
    p.add_argument("--db", required=True, help="Path to music_catalog.db")
    group = p.add_mutually_exclusive_group(required=True)
    group.add_argument("--stats", action="store_true", help="Row counts per table")
    group.add_argument("--albums", action="store_true", help="List albums with artist, year and track count")
    group.add_argument("--tree", action="store_true", help="Print the folder tree (* = holds tracks)")
    return p.parse_args()


def main():
    args = parse_args()
    db_path = Path(args.db).resolve()
    conn = connect_db(db_path)

    try:
        if args.stats:
            show_stats(conn)
        elif args.albums:
            list_albums(conn)
        elif args.tree:
            print_tree(conn)
    finally:
        conn.close()


if __name__ == "__main__":
    main()
