from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple

from .. import config


class EntryKind(Enum):
    DIRECTORY = 'directory'
    COVER = 'cover'
    AUDIO = 'audio'
    OTHER = 'other'


@dataclass
class Classification:
    kind: EntryKind
    suffix: Optional[str] = None          # audio only, without the dot
    content_type: Optional[str] = None    # audio only


class Classifier:
    """Decides what a directory entry is purely from its name."""

    def classify(self, path: Path, is_dir: bool) -> Classification:
        if is_dir:
            return Classification(EntryKind.DIRECTORY)

        name = path.name
        if name.startswith(config.IGNORED_PREFIXES):
            return Classification(EntryKind.OTHER)

        ext = path.suffix.lower()
        if self.is_cover(path):
            return Classification(EntryKind.COVER)

        mime = config.AUDIO_MIME_TYPES.get(ext)
        if mime:
            return Classification(EntryKind.AUDIO, suffix=ext.lstrip('.'), content_type=mime)

        return Classification(EntryKind.OTHER)

    def is_cover(self, path: Path) -> bool:
        return (
            path.suffix.lower() in config.COVER_EXTS
            and path.stem.lower() in config.COVER_STEMS
        )


def cover_rank(path: str) -> Tuple[int, str]:
    """Sort key among a folder's covers: stem preference first, then path."""
    stem = Path(path).stem.lower()
    try:
        position = config.COVER_STEMS.index(stem)
    except ValueError:
        position = len(config.COVER_STEMS)
    return position, path
