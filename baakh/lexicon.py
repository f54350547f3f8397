"""
Lexicon service: keeps the romanizer and hesudhar text files in step with
their database tables and builds the engines that read them.

Sync is incremental. Each lexicon file has a sidecar recording the marker
of the newest row it saw (the row's ``updated_at``); a sync reads only
rows changed after that marker, merges them into the file and moves the
marker forward. Soft-deleted rows remove their word from the file.
``full=True`` rebuilds the file from the live rows.
"""

import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

import structlog
from flask import current_app

from baakh.models import HesudharEntry, RomanWord
from baakh.text.hesudhar import HesudharCorrector
from baakh.text.lexicon_file import LexiconFile
from baakh.text.normalizer import nfc
from baakh.text.romanizer import Romanizer

logger = structlog.get_logger(__name__)

SYNC_PAGE_SIZE = 1000

ROMANIZER_FILENAME = 'romanizer.txt'
HESUDHAR_FILENAME = 'hesudhar.txt'


def _lexicon_dir():
    return current_app.config['LEXICON_DIR']


def _cache_seconds():
    return current_app.config.get('LEXICON_CACHE_SECONDS', 300)


def romanizer_file():
    return LexiconFile(
        os.path.join(_lexicon_dir(), ROMANIZER_FILENAME),
        title='Romanizer Mappings File',
        columns='sindhi_word|roman_word',
        cache_seconds=_cache_seconds(),
    )


def hesudhar_file():
    return LexiconFile(
        os.path.join(_lexicon_dir(), HESUDHAR_FILENAME),
        title='Hesudhar Corrections File',
        columns='incorrect_word|correct_word',
        cache_seconds=_cache_seconds(),
    )


def get_romanizer():
    return Romanizer(romanizer_file().load())


def get_corrector():
    return HesudharCorrector(hesudhar_file().load())


@dataclass
class SyncResult:
    count: int
    new_entries: int = 0
    added_count: int = 0
    updated_count: int = 0
    removed_count: int = 0
    last_updated: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    @property
    def message(self):
        if not self.new_entries:
            return "No new entries found. File is up to date!"
        return f"Successfully synced {self.new_entries} new entries"

    def to_dict(self):
        return {
            'success': True,
            'message': self.message,
            'count': self.count,
            'newEntries': self.new_entries,
            'addedCount': self.added_count,
            'updatedCount': self.updated_count,
            'removedCount': self.removed_count,
            'lastUpdated': self.last_updated,
        }


def _fetch_pages(query):
    """Read a query in fixed-size pages so large tables never load at once."""
    offset = 0
    while True:
        rows = query.offset(offset).limit(SYNC_PAGE_SIZE).all()
        if not rows:
            break
        yield from rows
        if len(rows) < SYNC_PAGE_SIZE:
            break
        offset += SYNC_PAGE_SIZE


def _merge(entries, rows, key_of, value_of):
    """Apply changed rows to ``entries``; soft-deleted rows drop their word."""
    added = updated = removed = 0
    for row in rows:
        key = nfc(key_of(row)).strip()
        value = (value_of(row) or '').strip()
        if not key:
            continue
        existing = entries.get(key)
        if row.deleted_at is not None:
            if existing is not None:
                del entries[key]
                removed += 1
            continue
        if not value or existing == value:
            continue
        entries[key] = value
        if existing is None:
            added += 1
        else:
            updated += 1
    return added, updated, removed


def _sync(lexicon, model, key_of, value_of, full):
    metadata = lexicon.read_metadata()
    marker: Optional[str] = None if full else metadata.get('lastEntryMarker')

    query = model.query
    if full:
        query = query.filter(model.deleted_at.is_(None))
    elif marker:
        query = query.filter(model.updated_at > datetime.fromisoformat(marker))
    query = query.order_by(model.updated_at.asc(), model.id.asc())

    rows = list(_fetch_pages(query))
    log = logger.bind(table=model.__tablename__, full=full, marker=marker)
    if not rows and not full:
        log.info("lexicon_up_to_date")
        return SyncResult(
            count=len(lexicon.load()),
            last_updated=metadata.get('lastSyncTime') or datetime.now(timezone.utc).isoformat(),
        )

    entries = {} if full else dict(lexicon.load())
    added, updated, removed = _merge(entries, rows, key_of, value_of)
    lexicon.write(entries)

    last_marker = max(row.updated_at for row in rows).isoformat() if rows else marker
    lexicon.write_metadata(last_marker, len(entries))
    log.info("lexicon_synced", new_entries=len(rows), added=added, updated=updated, removed=removed,
             total=len(entries))
    return SyncResult(count=len(entries), new_entries=len(rows), added_count=added,
                      updated_count=updated, removed_count=removed)


def sync_roman_words(full: bool = False) -> SyncResult:
    """Merge roman words changed since the last sync into romanizer.txt."""
    return _sync(romanizer_file(), RomanWord, lambda r: r.word_sd, lambda r: r.word_roman, full)


def sync_hesudhar(full: bool = False) -> SyncResult:
    """Merge hesudhar entries changed since the last sync into hesudhar.txt."""
    return _sync(hesudhar_file(), HesudharEntry, lambda r: r.word, lambda r: r.correct, full)
