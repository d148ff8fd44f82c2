"""
Configuration constants for the music scanner.
"""

# --- File Type Definitions ---
# Audio extension to MIME type. Anything not listed here is not a track.
AUDIO_MIME_TYPES = {
    '.mp3': 'audio/mpeg',
    '.flac': 'audio/x-flac',
    '.aac': 'audio/x-aac',
    '.m4a': 'audio/m4a',
    '.m4b': 'audio/m4b',
    '.ogg': 'audio/ogg',
    '.oga': 'audio/ogg',
    '.opus': 'audio/ogg',
    '.wav': 'audio/x-wav',
    '.wma': 'audio/x-ms-wma',
    '.wv': 'audio/x-wavpack',
    '.ape': 'audio/x-ape',
}

# A cover is an image whose basename (without extension) is one of these.
# Earlier stems win when a folder holds more than one cover.
COVER_EXTS = {'.jpg', '.jpeg', '.png', '.gif', '.bmp', '.webp'}
COVER_STEMS = ('cover', 'folder', 'front', 'album', 'albumart')

# AppleDouble resource forks and friends
IGNORED_PREFIXES = ('._',)

# --- Tag Fallbacks ---
UNKNOWN_ARTIST = "Unknown Artist"
UNKNOWN_ALBUM = "Unknown Album"

# --- Database ---
DEFAULT_DB_NAME = "music_catalog.db"
DEFAULT_ADMIN_NAME = "admin"
DEFAULT_ADMIN_PASSWORD = "admin"
