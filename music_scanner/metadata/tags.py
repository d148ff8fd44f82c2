import logging
import re
from pathlib import Path
from typing import Any, List, Optional, Tuple

from mutagen import File as MutagenFile, MutagenError

from ..exceptions import TagReadError
from ..models import TrackTags

_LEADING_INT = re.compile(r'^\s*(\d+)')


class TagReader:
    """
    Reads the tags the catalog needs from an audio file.

    Uses mutagen's "easy" interface so ID3, MP4 and Vorbis comments all
    answer to the same keys (title, artist, albumartist, tracknumber, ...).
    """

    def read(self, path: Path) -> TrackTags:
        try:
            audio = MutagenFile(str(path), easy=True)
        except (MutagenError, OSError) as e:
            raise TagReadError(f"when reading tags from {path}: {e}") from e

        if audio is None:
            raise TagReadError(f"when reading tags from {path}: unrecognised audio format")

        tags = audio.tags
        if not tags:
            logging.debug(f"No tags found in {path.name}")
            return TrackTags()

        track_number, total_tracks = self._number_pair(tags, 'tracknumber', ('tracktotal', 'totaltracks'))
        disc_number, total_discs = self._number_pair(tags, 'discnumber', ('disctotal', 'totaldiscs'))

        return TrackTags(
            title=self._first(tags, 'title'),
            artist=self._first(tags, 'artist'),
            album=self._first(tags, 'album'),
            album_artist=self._first(tags, 'albumartist') or self._first(tags, 'album artist'),
            track_number=track_number,
            total_tracks=total_tracks,
            disc_number=disc_number,
            total_discs=total_discs,
            year=parse_int(self._first(tags, 'date') or self._first(tags, 'year')),
        )

    def _first(self, tags: Any, key: str) -> str:
        values: Optional[List[Any]] = tags.get(key)
        if not values:
            return ""
        return str(values[0]).strip()

    def _number_pair(self, tags: Any, key: str, total_keys: Tuple[str, ...]) -> Tuple[Optional[int], Optional[int]]:
        """Parses "3/12" style values; a separate total tag wins over the "/12" part."""
        number, total = split_number(self._first(tags, key))
        for total_key in total_keys:
            explicit = parse_int(self._first(tags, total_key))
            if explicit is not None:
                total = explicit
                break
        return number, total


def split_number(value: str) -> Tuple[Optional[int], Optional[int]]:
    if not value:
        return None, None
    number, _, total = value.partition('/')
    return parse_int(number), parse_int(total)


def parse_int(value: Optional[str]) -> Optional[int]:
    """Leading digits of a tag value ("2004-05-01" -> 2004), or None."""
    if not value:
        return None
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None
