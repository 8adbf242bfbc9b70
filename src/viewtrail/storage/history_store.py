"""
JSON file store for merged watch history.

The store owns the only shared state in the system: the user's history.
Merges into the same file are serialized with a per-path lock; records
loaded from disk are never mutated, a merged copy is written instead.
"""

from __future__ import annotations

import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from viewtrail.exceptions import HistoryStoreError
from viewtrail.models.enums import MergeOrder
from viewtrail.models.import_result import ImportMetadata
from viewtrail.models.watch_record import WatchRecord
from viewtrail.services.history_merger import MergeReport, merge_with_report

logger = logging.getLogger(__name__)

_registry_lock = threading.Lock()
_path_locks: Dict[Path, threading.Lock] = {}


def _lock_for(path: Path) -> threading.Lock:
    key = path.resolve()
    with _registry_lock:
        return _path_locks.setdefault(key, threading.Lock())


class StoredHistory(BaseModel):
    """On-disk document: records plus one metadata entry per import."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    records: List[WatchRecord] = Field(default_factory=list)
    imports: List[ImportMetadata] = Field(default_factory=list)


class HistoryStore:
    """
    File-backed watch history.

    Parameters
    ----------
    path : Path
        Location of the JSON document. Parent directories are created on
        first save.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def exists(self) -> bool:
        """Check if a history document has been written."""
        return self.path.exists()

    def load(self) -> StoredHistory:
        """
        Read the stored history.

        Returns
        -------
        StoredHistory
            The stored document, or an empty one if the file does not exist.

        Raises
        ------
        HistoryStoreError
            If the file cannot be read or is not a valid history document.
        """
        if not self.path.exists():
            return StoredHistory()
        try:
            payload = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise HistoryStoreError(
                f"Cannot read history file {self.path}: {e}", path=self.path
            ) from e
        try:
            return StoredHistory.model_validate_json(payload)
        except ValidationError as e:
            raise HistoryStoreError(
                f"History file {self.path} is corrupt: {e.error_count()} validation errors",
                path=self.path,
            ) from e

    def save(self, history: StoredHistory) -> None:
        """
        Write the history atomically (temporary file, then rename).

        Raises
        ------
        HistoryStoreError
            If the file cannot be written.
        """
        payload = history.model_dump_json(by_alias=True, indent=2)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise HistoryStoreError(
                f"Cannot write history file {self.path}: {e}", path=self.path
            ) from e
        logger.debug(f"Saved {len(history.records)} records to {self.path}")

    def merge_import(
        self,
        records: Sequence[WatchRecord],
        metadata: Optional[ImportMetadata] = None,
        order: MergeOrder = MergeOrder.NEWEST_FIRST,
    ) -> Tuple[StoredHistory, MergeReport]:
        """
        Merge an imported batch into the stored history and save it.

        Parameters
        ----------
        records : Sequence[WatchRecord]
            Newly imported records.
        metadata : ImportMetadata | None, optional
            Import metadata to append; ``records_added`` is filled in from
            the merge.
        order : MergeOrder, optional
            Ordering of the saved history (default: newest first).

        Returns
        -------
        Tuple[StoredHistory, MergeReport]
            The saved document and the merge counters.
        """
        with _lock_for(self.path):
            current = self.load()
            report = merge_with_report(current.records, records, order=order)

            imports = list(current.imports)
            if metadata is not None:
                imports.append(metadata.model_copy(update={"records_added": report.added}))

            merged = StoredHistory(records=report.records, imports=imports)
            self.save(merged)

        logger.info(
            f"💾 History now holds {len(merged.records)} records "
            f"({report.added} added, {report.duplicates} duplicates)"
        )
        return merged, report
