from typing import Iterable, List

from ..models import DisplayRecord, HighlightSpan, Match


def sort_matches(matches: Iterable[Match]) -> List[Match]:
    """Total order by (filename, byte offset); arrival order from the collector is arbitrary."""
    return sorted(matches, key=lambda m: m.sort_key)


def group_matches(matches: Iterable[Match]) -> List[DisplayRecord]:
    """
    Merges consecutive matches on the same file+line into one record.

    Expects offset-sorted input (see `sort_matches`), which keeps spans
    left-to-right inside each record.
    """
    records: List[DisplayRecord] = []
    current = None

    for m in matches:
        if current is None or current.filename != m.filename or current.line != m.line:
            current = DisplayRecord(filename=m.filename, line=m.line)
            records.append(current)
        current.spans.append(HighlightSpan(start_column=m.column, end_column=m.column + m.length))

    return records
