"""
Custom exception hierarchy for the music scanner.

Anything derived from ScanError aborts the walk that raised it; the
transaction for that scan is rolled back and nothing is committed.
"""


class MusicScannerError(Exception):
    """Base exception for all music scanner errors."""
    pass


class AlreadyScanningError(MusicScannerError):
    """Raised when a scan is requested while another one is in flight."""

    def __init__(self, message: str = "already scanning"):
        super().__init__(message)


class ScanError(MusicScannerError):
    """Raised when the directory walk has to be aborted."""
    pass


class EntryStatError(ScanError):
    """Raised when a visited entry cannot be stat'ed."""
    pass


class DirectoryReadError(ScanError):
    """Raised when a directory's entries cannot be listed."""
    pass


class TagReadError(ScanError):
    """Raised when audio tags cannot be read from a track."""
    pass


class CoverReadError(ScanError):
    """Raised when the bytes of a cover image cannot be read."""
    pass


class DatabaseError(MusicScannerError):
    """Raised when catalog operations fail during a scan."""
    pass
