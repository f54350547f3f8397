"""
Plain-text lexicon files.

A lexicon file holds one ``word|replacement`` pair per line. Lines starting
with ``#`` are comments; the sync jobs write a small header block there.
Next to each file a ``<name>.sync.json`` sidecar records where the last
incremental sync stopped.
"""

import json
import logging
import os
import tempfile
import threading
from datetime import datetime, timezone
from typing import Dict, Optional

from cachetools import TTLCache

from baakh.text.normalizer import nfc

logger = logging.getLogger(__name__)

DEFAULT_CACHE_SECONDS = 300

# path -> parsed mapping, shared by every LexiconFile pointing at the same path
_lexicon_cache = TTLCache(maxsize=32, ttl=DEFAULT_CACHE_SECONDS)
_cache_lock = threading.Lock()


def parse_lexicon(content: str) -> Dict[str, str]:
    """Parse ``word|replacement`` lines, skipping blanks, comments and malformed lines."""
    entries = {}
    for line in (content or '').split('\n'):
        line = line.strip()
        if not line or line.startswith('#'):
            continue
        parts = line.split('|')
        if len(parts) != 2:
            continue
        word, replacement = parts[0].strip(), parts[1].strip()
        if word and replacement:
            entries[nfc(word)] = replacement
    return entries


def atomic_write(path, content):
    """Write through a unique temp file in the same directory, then rename over ``path``."""
    directory = os.path.dirname(path) or '.'
    os.makedirs(directory, exist_ok=True)
    with tempfile.NamedTemporaryFile('w', encoding='utf-8', dir=directory,
                                     prefix=os.path.basename(path) + '.', suffix='.tmp',
                                     delete=False) as fh:
        fh.write(content)
        tmp_path = fh.name
    try:
        os.replace(tmp_path, path)
    except OSError:
        os.unlink(tmp_path)
        raise


def format_lexicon(entries: Dict[str, str], title: str, columns: str, today: Optional[str] = None) -> str:
    """Render entries sorted by word, preceded by the comment header."""
    today = today or datetime.now(timezone.utc).date().isoformat()
    lines = [
        f"# {title}",
        f"# Format: {columns}",
        "# This file is automatically updated when the database changes",
        f"# Last updated: {today}",
        f"# Total entries: {len(entries)}",
        "",
    ]
    lines.extend(f"{word}|{entries[word]}" for word in sorted(entries))
    return '\n'.join(lines) + '\n'


class LexiconFile:
    """A lexicon file on disk plus its sync metadata sidecar."""

    def __init__(self, path, title, columns, cache_seconds=DEFAULT_CACHE_SECONDS):
        self.path = os.fspath(path)
        self.title = title
        self.columns = columns
        self.cache_seconds = cache_seconds

    @property
    def metadata_path(self):
        root, _ = os.path.splitext(self.path)
        return root + '.sync.json'

    def exists(self):
        return os.path.exists(self.path)

    def load(self) -> Dict[str, str]:
        """Return the parsed mapping, served from the TTL cache when fresh."""
        if self.cache_seconds > 0:
            with _cache_lock:
                cached = _lexicon_cache.get(self.path)
            if cached is not None:
                return cached

        if not self.exists():
            logger.warning(f"Lexicon file not found: {self.path}")
            entries = {}
        else:
            with open(self.path, encoding='utf-8') as fh:
                entries = parse_lexicon(fh.read())
            logger.info(f"Loaded {len(entries)} entries from {self.path}")

        if self.cache_seconds > 0:
            with _cache_lock:
                _lexicon_cache[self.path] = entries
        return entries

    def write(self, entries: Dict[str, str]):
        atomic_write(self.path, format_lexicon(entries, self.title, self.columns))
        self.clear_cache()

    def clear_cache(self):
        with _cache_lock:
            _lexicon_cache.pop(self.path, None)

    def stats(self):
        """File facts reported by the sync status endpoints."""
        if not self.exists():
            return {'fileExists': False}
        stat = os.stat(self.path)
        return {
            'fileExists': True,
            'lastModified': datetime.fromtimestamp(stat.st_mtime, timezone.utc).isoformat(),
            'mappingsCount': len(self.load()),
            'fileSize': stat.st_size,
        }

    def read_metadata(self):
        default = {'lastSyncTime': None, 'lastEntryMarker': None, 'totalEntries': 0}
        if not os.path.exists(self.metadata_path):
            return default
        try:
            with open(self.metadata_path, encoding='utf-8') as fh:
                data = json.load(fh)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read sync metadata {self.metadata_path}: {e}")
            return default
        return {**default, **data}

    def write_metadata(self, last_entry_marker, total_entries):
        metadata = {
            'lastSyncTime': datetime.now(timezone.utc).isoformat(),
            'lastEntryMarker': last_entry_marker,
            'totalEntries': total_entries,
            'version': '1.0',
        }
        atomic_write(self.metadata_path, json.dumps(metadata, ensure_ascii=False, indent=2))
        return metadata
