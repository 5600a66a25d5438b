"""Merge of normalized record lists into one time-ordered series."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Iterable, List, Optional, Sequence

from models.records import MetricName, ResolvedEntry, SeriesSet
from services.errors import NoUsableData, NoValidTimestamps
from services.fields import TIMESTAMP_ALIASES, extract_metrics
from services.timestamps import resolve_timestamp

logger = logging.getLogger(__name__)


def record_timestamp(record: Any) -> Optional[datetime]:
    """Resolve the timestamp of ``record`` from the first timestamp key it carries.

    The first present key is used even when its value cannot be parsed.
    """
    if not isinstance(record, Mapping):
        return None
    for alias in TIMESTAMP_ALIASES:
        if alias in record:
            return resolve_timestamp(record[alias])
    return None


def resolve_entry(record: Any) -> Optional[ResolvedEntry]:
    timestamp = record_timestamp(record)
    if timestamp is None:
        return None
    return ResolvedEntry(timestamp=timestamp, metrics=extract_metrics(record))


def build_series(sequences: Iterable[Sequence[Any]]) -> SeriesSet:
    """Concatenate ``sequences`` in order, resolve each record and sort by time.

    Raises ``NoUsableData`` when there are no records at all and
    ``NoValidTimestamps`` when none of them carries a usable timestamp.
    """
    records: List[Any] = []
    for sequence in sequences:
        records.extend(sequence)
    if not records:
        raise NoUsableData()

    entries: SeriesSet = []
    dropped = 0
    for record in records:
        entry = resolve_entry(record)
        if entry is None:
            dropped += 1
            continue
        entries.append(entry)

    if dropped:
        logger.info(
            "Dropped records without a valid timestamp (%d of %d)",
            dropped,
            len(records),
            extra={"record_count": len(records), "reason": "invalid timestamp"},
        )
    if not entries:
        raise NoValidTimestamps()

    # list.sort is stable, so equal timestamps keep their source order.
    entries.sort(key=lambda entry: entry.timestamp)
    return entries


def metric_column(series: SeriesSet, metric: MetricName) -> List[Optional[float]]:
    return [entry.value(metric) for entry in series]
