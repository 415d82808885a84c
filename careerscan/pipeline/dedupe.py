"""Within-run duplicate suppression and relevance filtering."""

from typing import Iterable, List

from careerscan.domain.models import JobRecord


def dedupe(records: Iterable[JobRecord]) -> List[JobRecord]:
    """Drop records whose link was already seen, keeping first occurrences in order.

    Other fields are not compared: the record from the earliest source and
    keyword wins.
    """
    seen = set()
    unique = []
    for record in records:
        if record.link in seen:
            continue
        seen.add(record.link)
        unique.append(record)
    return unique


def filter_relevant(records: Iterable[JobRecord]) -> List[JobRecord]:
    """Keep the records worth reporting.

    Every deduplicated record currently counts as relevant; the search
    keywords already narrow the listings.
    """
    return list(records)
