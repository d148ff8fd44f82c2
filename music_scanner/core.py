import logging
import sqlite3
import threading
import time
from contextlib import closing
from pathlib import Path
from typing import Optional

from tqdm import tqdm

from .database.db import DBManager
from .database.ops import CatalogOperations
from .exceptions import AlreadyScanningError, DatabaseError, MusicScannerError, ScanError
from .guard import ScanGuard
from .metadata.tags import TagReader
from .models import ScanSummary
from .reconcile import Reconciler
from .scanning.visitor import LibraryVisitor
from .scanning.walker import DirectoryWalker


class Scanner:
    """
    Indexes a music tree into the catalog at db_path.

    migrate_db() must have run once before the first scan or status query.
    """

    def __init__(self,
                 db_path: Path,
                 music_path: Path,
                 guard: Optional[ScanGuard] = None,
                 tag_reader: Optional[TagReader] = None,
                 walker: Optional[DirectoryWalker] = None,
                 show_progress: bool = False):
        self.db_path = Path(db_path)
        self.music_path = Path(music_path).resolve()
        self.guard = guard or ScanGuard()
        self.tag_reader = tag_reader or TagReader()
        self.walker = walker or DirectoryWalker()
        self.show_progress = show_progress

    def migrate_db(self):
        """Creates or upgrades the schema and the default admin account."""
        t0 = time.perf_counter()
        with DBManager(self.db_path):
            pass
        logging.info(f"finished migrating database in {time.perf_counter() - t0:.2f}s")

    def start(self) -> ScanSummary:
        """
        Runs one full scan: walk, then reconcile, in a single transaction.
        Raises AlreadyScanningError if a scan is in flight, ScanError if the
        walk had to be aborted (nothing is committed in that case).
        """
        with self.guard.hold():
            return self._scan()

    def start_in_background(self) -> threading.Thread:
        """Starts a scan on a worker thread; failures are logged, not raised."""
        def run():
            try:
                self.start()
            except AlreadyScanningError:
                logging.warning("Scan requested while another one is running.")
            except MusicScannerError:
                logging.exception("Error while scanning.")
            except Exception:
                logging.exception("Unexpected error while scanning.")

        worker = threading.Thread(target=run, name="music-scan", daemon=True)
        worker.start()
        return worker

    def is_scanning(self) -> bool:
        return self.guard.is_scanning()

    def track_count(self) -> int:
        # Separate read-only connection; WAL lets this run alongside a scan
        with closing(sqlite3.connect(self.db_path)) as conn:
            return CatalogOperations(conn).count_tracks()

    def _scan(self) -> ScanSummary:
        t0 = time.perf_counter()
        logging.info(f"Scanning {self.music_path}...")

        try:
            with DBManager(self.db_path) as conn:
                ops = CatalogOperations(conn)
                visitor = LibraryVisitor(ops, self.tag_reader)
                # Commits on success, rolls the whole scan back on any error
                with conn:
                    with tqdm(desc="Scanning", unit="entry", disable=not self.show_progress) as progress:
                        seen = self.walker.walk(self.music_path, visitor, progress=progress)
                    result = Reconciler(ops).reconcile(seen)
        except ScanError as e:
            logging.error(f"Scan aborted, catalog rolled back: {e}")
            raise
        except sqlite3.Error as e:
            raise DatabaseError(f"catalog write failed: {e}") from e

        summary = visitor.summary
        summary.entries_seen = len(seen)
        summary.tracks_removed = result.tracks_removed
        summary.albums_removed = result.albums_removed
        summary.artists_removed = result.artists_removed
        summary.elapsed_sec = time.perf_counter() - t0

        logging.info(
            f"finished scanning in {summary.elapsed_sec:.2f}s: {summary.entries_seen} entries, "
            f"{summary.tracks_written} tracks written, {summary.tracks_skipped} unchanged."
        )
        return summary
