import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from . import config
from .core import Scanner
from .exceptions import AlreadyScanningError, MusicScannerError

def setup_logging(verbose: bool, log_file: Optional[Path] = None):
    """Sets up logging to the console and, optionally, to a file."""
    log_level = logging.DEBUG if verbose else logging.INFO

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers,
    )

    # Silence chatty libraries
    logging.getLogger("mutagen").setLevel(logging.WARNING)

def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Music Scanner: index a music tree into a catalog")

    p.add_argument("command", choices=["scan", "status", "migrate"], help="What to do")
    p.add_argument("music", type=Path, help="Root of the music tree")

    p.add_argument("--db", type=Path, default=None, help=f"Path to the SQLite catalog (default: ./{config.DEFAULT_DB_NAME})")
    p.add_argument("--progress", action="store_true", help="Show a progress bar while scanning")
    p.add_argument("--log-file", type=Path, default=None, help="Also write the log to this file")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    return p.parse_args(argv)

def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose, args.log_file)

    music_root = args.music.resolve()
    db_path = args.db if args.db else Path.cwd() / config.DEFAULT_DB_NAME

    if not music_root.is_dir():
        logging.error(f"Music directory not found: {music_root}")
        return 1

    scanner = Scanner(db_path, music_root, show_progress=args.progress)
    scanner.migrate_db()

    if args.command == "migrate":
        return 0

    if args.command == "status":
        print(f"scanning: {scanner.is_scanning()}")
        print(f"tracks:   {scanner.track_count()}")
        return 0

    logging.info("=== Music Scanner Started ===")
    logging.info(f"Music: {music_root}")
    logging.info(f"DB:    {db_path}")

    try:
        summary = scanner.start()
    except AlreadyScanningError:
        logging.error("A scan is already running.")
        return 1
    except KeyboardInterrupt:
        logging.warning("Scan cancelled by user; nothing was committed.")
        return 1
    except MusicScannerError:
        logging.exception("Fatal error during scan.")
        return 1

    logging.info(
        f"Tracks removed: {summary.tracks_removed}, albums removed: {summary.albums_removed}, "
        f"album artists removed: {summary.artists_removed}"
    )
    return 0

if __name__ == "__main__":
    sys.exit(main())
