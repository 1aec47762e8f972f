from __future__ import annotations

import logging
from typing import Dict, Iterable, Mapping, Optional

from .normalize import derive_locality, recode_rank, recode_threat_status
from .schema import DatasetMetadata, DistributionRecord, EnrichedRow, TaxonRecord

logger = logging.getLogger(__name__)


def map_taxon(row: EnrichedRow, dataset: DatasetMetadata) -> TaxonRecord:
    """Translate one enriched checklist row into a taxon core record."""
    return TaxonRecord(
        language=dataset.language,
        license=dataset.license,
        rightsHolder=dataset.rights_holder,
        datasetID=dataset.dataset_id,
        institutionCode=dataset.institution_code,
        datasetName=dataset.dataset_name,
        taxonID=row.taxon_id,
        scientificName=row.raw_scientific_name,
        kingdom=row.raw_kingdom,
        taxonRank=recode_rank(row.raw_rankmarker),
        nomenclaturalCode=dataset.nomenclatural_code,
    )


def map_distribution(
    row: EnrichedRow, country_names: Optional[Mapping[str, str]] = None
) -> DistributionRecord:
    """Translate one enriched checklist row into a distribution record."""
    return DistributionRecord(
        taxonID=row.taxon_id,
        locality=derive_locality(row.raw_locality, row.raw_country_code, country_names),
        countryCode=row.raw_country_code,
        occurrenceStatus=row.raw_occurrence_status,
        threatStatus=recode_threat_status(row.raw_threat_status),
        source=row.raw_source,
        occurrenceRemarks=row.raw_remarks,
    )


def derive_taxa(
    rows: Iterable[EnrichedRow], dataset: DatasetMetadata
) -> tuple[TaxonRecord, ...]:
    """Return one taxon record per distinct ``taxon_id``.

    The first row carrying an identifier wins and the output keeps the
    order in which identifiers first appear.
    """
    taxa: Dict[str, TaxonRecord] = {}
    for row in rows:
        if row.taxon_id not in taxa:
            taxa[row.taxon_id] = map_taxon(row, dataset)
    logger.info("Derived %d taxa", len(taxa))
    return tuple(taxa.values())


def derive_distribution(
    rows: Iterable[EnrichedRow], country_names: Optional[Mapping[str, str]] = None
) -> tuple[DistributionRecord, ...]:
    """Return one distribution record per checklist row, in input order."""
    records = tuple(map_distribution(row, country_names) for row in rows)
    logger.info("Derived %d distribution records", len(records))
    return records


__all__ = ["map_taxon", "map_distribution", "derive_taxa", "derive_distribution"]
