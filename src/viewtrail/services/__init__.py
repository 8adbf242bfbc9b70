"""
Services for viewtrail.

Record assembly, topic classification, history merging and the import
pipeline. Analytics live in the ``analytics`` subpackage.
"""

from __future__ import annotations

from .history_merger import MergeReport, identity_key, merge_histories, merge_with_report
from .import_service import CancellationToken, ImportService, build_import_summary
from .import_worker import ImportWorker
from .record_assembler import assemble_batch, assemble_record, compute_record_id
from .topic_classifier import NO_TOPIC_LABEL, TOPIC_PATTERNS, classify_topics

__all__ = [
    "CancellationToken",
    "ImportService",
    "ImportWorker",
    "MergeReport",
    "NO_TOPIC_LABEL",
    "TOPIC_PATTERNS",
    "assemble_batch",
    "assemble_record",
    "build_import_summary",
    "classify_topics",
    "compute_record_id",
    "identity_key",
    "merge_histories",
    "merge_with_report",
]
