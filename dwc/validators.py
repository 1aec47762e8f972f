from __future__ import annotations

from collections import Counter
from typing import Iterable, List

from errors import IntegrityError

from .schema import DistributionRecord, TaxonRecord


def validate_taxon_ids_unique(taxa: Iterable[TaxonRecord]) -> List[str]:
    """Return taxon identifiers that occur more than once in ``taxa``."""

    counts = Counter(taxon.taxonID for taxon in taxa)
    return [taxon_id for taxon_id, count in counts.items() if count > 1]


def check_referential_integrity(
    taxa: Iterable[TaxonRecord], distribution: Iterable[DistributionRecord]
) -> List[str]:
    """Return distribution ``taxonID`` values with no matching taxon record."""

    known = {taxon.taxonID for taxon in taxa}
    dangling: List[str] = []
    for record in distribution:
        if record.taxonID not in known and record.taxonID not in dangling:
            dangling.append(record.taxonID)
    return dangling


def validate(taxa: Iterable[TaxonRecord], distribution: Iterable[DistributionRecord]) -> None:
    """Raise :class:`IntegrityError` unless every distribution row has exactly one taxon."""

    taxa = list(taxa)
    duplicates = validate_taxon_ids_unique(taxa)
    if duplicates:
        raise IntegrityError("duplicate_taxon_id", ", ".join(duplicates))
    dangling = check_referential_integrity(taxa, distribution)
    if dangling:
        raise IntegrityError("dangling_taxon_id", ", ".join(dangling))
