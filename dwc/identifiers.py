from __future__ import annotations

import hashlib
from typing import Iterable

from .schema import EnrichedRow


def taxon_id(scientific_name: str, kingdom: str, dataset_shortname: str) -> str:
    """Return the stable taxon identifier for a (name, kingdom) pair.

    The identifier has the form ``<shortname>:taxon:<md5>`` where the MD5
    digest covers ``"<scientific_name> <kingdom>"`` encoded as UTF-8.  The
    same pair always yields the same identifier, so re-publishing a dataset
    does not churn taxon IDs.
    """
    digest = hashlib.md5(f"{scientific_name} {kingdom}".encode("utf-8")).hexdigest()
    return ":".join([dataset_shortname, "taxon", digest])


def assign_taxon_ids(rows: Iterable[EnrichedRow], dataset_shortname: str) -> tuple[EnrichedRow, ...]:
    """Return copies of ``rows`` with ``taxon_id`` set on every row."""
    return tuple(
        row.model_copy(
            update={
                "taxon_id": taxon_id(row.raw_scientific_name, row.raw_kingdom, dataset_shortname)
            }
        )
        for row in rows
    )


__all__ = ["taxon_id", "assign_taxon_ids"]
